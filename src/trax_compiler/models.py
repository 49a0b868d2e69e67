from typing import Annotated, Literal

from pydantic import BaseModel, Field

TypeKind = Literal["string", "number", "boolean", "reference", "array", "dictionary"]

PRIMITIVE_KINDS: frozenset[str] = frozenset({"string", "number", "boolean"})


class DataType(BaseModel):
    kind: TypeKind
    identifier: str | None = None  # reference only
    item_type: "DataType | None" = None  # array and dictionary only

    @property
    def is_primitive(self) -> bool:
        return self.kind in PRIMITIVE_KINDS


DataType.model_rebuild()  # necessary for recursive types


class DefaultValue(BaseModel):
    start: int
    end: int
    text: str


class DataProperty(BaseModel):
    name: str = ""
    name_pos: int = 0
    end: int = 0
    shallow_ref: bool = False
    type: DataType | None = None
    default_value: DefaultValue | None = None


class ImportDirective(BaseModel):
    """The ``import { Data, ... }`` statement that brings the marker symbol in.

    ``insert_pos`` is the offset right after the ``Data`` specifier name and
    ``values`` keeps the names of the same import in source order.
    ``remove_start``/``remove_end`` span the ``Data`` specifier plus one
    adjacent comma, so the specifier can be dropped without leaving a dangling
    separator.
    """

    kind: Literal["import"] = "import"
    start: int
    insert_pos: int
    values: list[str]
    remove_start: int
    remove_end: int


class DataObjectDeclaration(BaseModel):
    kind: Literal["data"] = "data"
    start: int
    deco_start: int
    deco_end: int
    class_name: str
    class_name_end: int
    properties: list[DataProperty] = Field(default_factory=list)


Declaration = Annotated[ImportDirective | DataObjectDeclaration, Field(discriminator="kind")]


class CompileResult(BaseModel):
    source_path: str
    output_path: str | None
    language: str
    changed: bool
