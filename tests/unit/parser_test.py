"""Unit tests for the extraction of Data declarations from TypeScript."""

import pytest

from trax_compiler.core.parser import parse
from trax_compiler.errors import TraxClassError, TraxPropertyError
from trax_compiler.models import DataObjectDeclaration, DataType, ImportDirective

IMPORT = 'import { Data } from "./trax";\n'


def _objects(src: str) -> list[DataObjectDeclaration]:
    declarations = parse(src, "test.ts")
    assert declarations is not None
    return [d for d in declarations if isinstance(d, DataObjectDeclaration)]


class TestImportDirective:
    def test_records_insert_position_and_values(self) -> None:
        src = 'import { ref, Data, ΔfStr } from "./trax";\n'
        declarations = parse(src, "test.ts")
        assert declarations is not None
        assert len(declarations) == 1
        directive = declarations[0]
        assert isinstance(directive, ImportDirective)
        assert directive.insert_pos == src.index("Data") + len("Data")
        assert directive.values == ["ref", "Data", "ΔfStr"]

    def test_removal_span_takes_following_comma(self) -> None:
        src = 'import { Data, ref } from "./trax";\n'
        directive = parse(src, "test.ts")[0]  # type: ignore[index]
        assert isinstance(directive, ImportDirective)
        assert src[directive.remove_start : directive.remove_end] == "Data, "

    def test_removal_span_takes_preceding_comma_for_last_specifier(self) -> None:
        src = 'import { ref, Data } from "./trax";\n'
        directive = parse(src, "test.ts")[0]  # type: ignore[index]
        assert isinstance(directive, ImportDirective)
        assert src[directive.remove_start : directive.remove_end] == ", Data"

    def test_ignores_imports_without_marker(self) -> None:
        assert parse('import { ref } from "./trax";\nimport x from "y";\n', "test.ts") == []

    def test_ignores_aliased_marker(self) -> None:
        assert parse('import { Data as D } from "./trax";\n', "test.ts") == []

    def test_values_use_local_binding_names(self) -> None:
        src = 'import { Data, ΔfStr as S, ref } from "./trax";\n'
        directive = parse(src, "test.ts")[0]  # type: ignore[index]
        assert isinstance(directive, ImportDirective)
        assert directive.values == ["Data", "S", "ref"]

    def test_second_marker_import_is_kept_for_duplicate_detection(self) -> None:
        src = IMPORT + 'import { Data } from "./other";\n'
        declarations = parse(src, "test.ts")
        assert declarations is not None
        assert [d.kind for d in declarations] == ["import", "import"]


class TestDataClassDetection:
    def test_collects_data_class(self) -> None:
        src = IMPORT + "@Data class Address {\n    street: string;\n}\n"
        [obj] = _objects(src)
        assert obj.class_name == "Address"
        assert obj.class_name_end == src.index("Address") + len("Address")
        assert src[obj.deco_start : obj.deco_end] == "@Data"

    def test_ignores_classes_without_marker(self) -> None:
        src = IMPORT + "class Plain {\n    constructor() {}\n}\n"
        assert _objects(src) == []

    def test_ignores_called_marker(self) -> None:
        src = IMPORT + "@Data() class Called {\n    value: string;\n}\n"
        assert _objects(src) == []

    def test_detects_exported_class(self) -> None:
        src = IMPORT + "@Data\nexport class Exported {\n    value: string;\n}\n"
        [obj] = _objects(src)
        assert obj.class_name == "Exported"
        assert src[obj.deco_start : obj.deco_end] == "@Data"

    def test_scans_nested_scopes(self) -> None:
        src = IMPORT + "function build() {\n    @Data class Inner {\n        n: number;\n    }\n    return Inner;\n}\n"
        [obj] = _objects(src)
        assert obj.class_name == "Inner"

    def test_keeps_source_order(self) -> None:
        src = IMPORT + "@Data class First {\n    a: string;\n}\n\n@Data class Second {\n    b: number;\n}\n"
        declarations = parse(src, "test.ts")
        assert declarations is not None
        assert [d.kind for d in declarations] == ["import", "data", "data"]
        assert [o.class_name for o in _objects(src)] == ["First", "Second"]


class TestProperties:
    def test_property_positions(self) -> None:
        src = IMPORT + "@Data class Address {\n    street: string;\n}\n"
        [obj] = _objects(src)
        [prop] = obj.properties
        assert prop.name == "street"
        assert prop.name_pos == src.index("street")
        assert prop.end == src.index("street: string;") + len("street: string;")
        assert prop.type == DataType(kind="string")
        assert prop.default_value is None
        assert prop.shallow_ref is False

    def test_property_without_terminator_ends_at_type(self) -> None:
        src = IMPORT + "@Data class Address {\n    street: string\n}\n"
        [prop] = _objects(src)[0].properties
        assert prop.end == src.index("street: string") + len("street: string")

    def test_primitive_types(self) -> None:
        src = IMPORT + "@Data class Mix {\n    s: string;\n    n: number;\n    b: boolean;\n}\n"
        kinds = [p.type.kind for p in _objects(src)[0].properties if p.type]
        assert kinds == ["string", "number", "boolean"]

    def test_type_inferred_from_default_value(self) -> None:
        src = IMPORT + "@Data class Defaults {\n    city = \"Paris\";\n    zip = 75001;\n    active = false;\n}\n"
        props = _objects(src)[0].properties
        assert [p.type.kind for p in props if p.type] == ["string", "number", "boolean"]
        assert [p.default_value.text for p in props if p.default_value] == ['"Paris"', "75001", "false"]

    def test_explicit_type_kept_with_default_value(self) -> None:
        src = IMPORT + "@Data class Counter {\n    count: number = 3;\n}\n"
        [prop] = _objects(src)[0].properties
        assert prop.type == DataType(kind="number")
        assert prop.default_value is not None
        assert src[prop.default_value.start : prop.default_value.end] == "3"

    def test_untyped_property_is_recorded_without_type(self) -> None:
        src = IMPORT + "@Data class Loose {\n    anything;\n}\n"
        [prop] = _objects(src)[0].properties
        assert prop.name == "anything"
        assert prop.type is None

    def test_shallow_reference_marker(self) -> None:
        src = IMPORT + "@Data class Order {\n    @ref customer: Customer;\n    total: number;\n}\n"
        customer, total = _objects(src)[0].properties
        assert customer.shallow_ref is True
        assert customer.type == DataType(kind="reference", identifier="Customer")
        assert total.shallow_ref is False


class TestTypeClassification:
    def _type(self, declaration: str) -> DataType | None:
        src = IMPORT + f"@Data class Holder {{\n    value: {declaration};\n}}\n"
        [prop] = _objects(src)[0].properties
        return prop.type

    def test_reference(self) -> None:
        assert self._type("Address") == DataType(kind="reference", identifier="Address")

    def test_generic_reference(self) -> None:
        assert self._type("Array<string>") == DataType(kind="reference", identifier="Array<string>")

    def test_array(self) -> None:
        assert self._type("Address[]") == DataType(
            kind="array", item_type=DataType(kind="reference", identifier="Address")
        )

    def test_nested_array(self) -> None:
        tp = self._type("number[][]")
        assert tp is not None
        assert tp.kind == "array"
        assert tp.item_type == DataType(kind="array", item_type=DataType(kind="number"))

    def test_dictionary_wraps_index_parameter_type(self) -> None:
        assert self._type("{ [key: string]: Address }") == DataType(
            kind="dictionary", item_type=DataType(kind="string")
        )

    def test_unsupported_array_item(self) -> None:
        with pytest.raises(TraxPropertyError, match="Unsupported type"):
            self._type("(string | number)[]")

    def test_union_type_is_unsupported(self) -> None:
        with pytest.raises(TraxPropertyError, match="Unsupported syntax"):
            self._type("string | undefined")


class TestFatalMembers:
    def test_constructor(self) -> None:
        src = IMPORT + "@Data class Bad {\n    constructor() {}\n}\n"
        with pytest.raises(TraxClassError, match="Constructors are not authorized in Data objects"):
            parse(src, "bad.ts")

    def test_method(self) -> None:
        src = IMPORT + "@Data class Bad {\n    compute() {\n        return 1;\n    }\n}\n"
        with pytest.raises(TraxClassError, match=r"Invalid Data object member \[kind: method_definition\]"):
            parse(src, "bad.ts")

    def test_optional_marker_is_unsupported(self) -> None:
        src = IMPORT + "@Data class Bad {\n    street?: string;\n}\n"
        with pytest.raises(TraxPropertyError, match="Unsupported syntax"):
            parse(src, "bad.ts")

    @pytest.mark.parametrize(
        "member",
        ['"label": number;', "0: number;", "#secret: string;", "[key]: string;"],
        ids=["quoted", "numeric", "private", "computed"],
    )
    def test_non_identifier_name_is_unsupported(self, member: str) -> None:
        src = IMPORT + f"@Data class Bad {{\n    {member}\n}}\n"
        with pytest.raises(TraxPropertyError, match="Unsupported syntax") as excinfo:
            parse(src, "bad.ts")
        assert excinfo.value.pos == src.index(member)

    def test_anonymous_class(self) -> None:
        src = IMPORT + "const Anonymous = @Data class {\n    street: string;\n};\n"
        with pytest.raises(TraxClassError, match="Data class name must be defined"):
            parse(src, "anonymous.ts")

    def test_error_carries_position_and_file(self) -> None:
        src = IMPORT + "@Data class Bad {\n    constructor() {}\n}\n"
        with pytest.raises(TraxClassError) as excinfo:
            parse(src, "bad.ts")
        assert excinfo.value.pos == src.index("constructor")
        assert excinfo.value.file_path == "bad.ts"
        assert str(excinfo.value).startswith("Trax: Constructors are not authorized")


def test_syntax_error_returns_none() -> None:
    assert parse(IMPORT + "@Data class Broken {\n    street: string;\n", "broken.ts") is None


def test_offsets_are_character_based() -> None:
    src = IMPORT + "// propriétés: données\n@Data class Café {\n    crème: string;\n}\n"
    [obj] = _objects(src)
    [prop] = obj.properties
    assert obj.class_name == "Café"
    assert prop.name_pos == src.index("crème")
    assert src[obj.deco_start : obj.deco_end] == "@Data"
