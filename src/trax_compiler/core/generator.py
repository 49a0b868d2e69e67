"""Code generation: splice the Data wiring into the original unit text."""

import logging
from collections.abc import Iterable, Iterator, Sequence

from trax_compiler.core.parser import DATA, parse
from trax_compiler.core.splicer import TextSplicer
from trax_compiler.errors import TraxImportError, TraxPropertyError, TraxSyntaxError
from trax_compiler.models import DataObjectDeclaration, DataProperty, Declaration, ImportDirective

logger = logging.getLogger(__name__)

DATA_DECORATOR = "@" + DATA
DATA_OBJECT_DECORATOR = "@ΔD()"
PROPERTY_PREFIX = "ΔΔ"
PROPERTY_DECORATOR = "Δp"

FACTORIES = {
    "string": "ΔfStr",
    "number": "ΔfNbr",
    "boolean": "ΔfBool",
}


class RequiredSymbols:
    """Insertion-ordered set of the symbols the generated code imports.

    Symbols already imported by the unit are known from the start and are never
    reported as required.
    """

    def __init__(self, existing: Iterable[str] = ()) -> None:
        # symbol -> already imported
        self._symbols: dict[str, bool] = dict.fromkeys(existing, True)

    def add(self, symbol: str) -> None:
        self._symbols.setdefault(symbol, False)

    def __iter__(self) -> Iterator[str]:
        return (symbol for symbol, imported in self._symbols.items() if not imported)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def joined(self) -> str:
        return ", ".join(self)


class Generator:
    def __init__(self, src: str, file_path: str, declarations: Sequence[Declaration]) -> None:
        self.src = src
        self.file_path = file_path
        self.declarations = declarations
        self.splicer = TextSplicer(src)
        self.symbols = RequiredSymbols()

    def run(self) -> str:
        header = self._header()
        self.symbols = RequiredSymbols(header.values)

        # body pass: edits in increasing position order, all after the import
        for declaration in self.declarations[1:]:
            if isinstance(declaration, ImportDirective):
                raise TraxImportError("Duplicate Data import", declaration.start, self.file_path)
            self.process_data_object(declaration)

        # header pass: the import precedes every body edit, so it starts from a zero shift
        self.splicer.reset()
        self.update_import(header)
        return self.splicer.text

    def _header(self) -> ImportDirective:
        first = self.declarations[0]
        if not isinstance(first, ImportDirective):
            raise TraxImportError("@Data import not found", None, self.file_path)
        return first

    def update_import(self, header: ImportDirective) -> None:
        if self.symbols:
            self.splicer.replace(DATA, self.symbols.joined(), header.insert_pos - len(DATA))
        else:
            removed = self.src[header.remove_start : header.remove_end]
            self.splicer.replace(removed, "", header.remove_start)

    def process_data_object(self, obj: DataObjectDeclaration) -> None:
        self.splicer.replace(DATA_DECORATOR, DATA_OBJECT_DECORATOR, obj.deco_start)
        for prop in obj.properties:
            self.process_property(prop)

    def process_property(self, prop: DataProperty) -> None:
        if prop.type is None:
            raise TraxPropertyError("Untyped property are not supported", prop.name_pos, self.file_path)

        if not prop.type.is_primitive:
            # reference, array and dictionary properties are left as written
            return
        factory = FACTORIES[prop.type.kind]

        self.splicer.insert(PROPERTY_PREFIX, prop.name_pos)
        self.symbols.add(factory)

        separator = "" if self.splicer.ends_with_terminator(prop.end) else ";"
        # e.g. @Δp(ΔfStr) street: string;
        self.symbols.add(PROPERTY_DECORATOR)
        self.splicer.insert(
            f"{separator} @{PROPERTY_DECORATOR}({factory}) {prop.name}: {prop.type.kind};",
            prop.end,
        )


def generate(src: str, file_path: str, language: str = "typescript") -> str:
    """Transform the Data classes of a unit and return the new unit text.

    A unit that neither imports ``Data`` nor declares a Data class is returned
    unchanged. Raises a ``TraxError`` subclass on any unsupported construct.
    """
    declarations = parse(src, file_path, language)
    if declarations is None:
        raise TraxSyntaxError("TypeScript parsing error", None, file_path)
    if not declarations:
        return src
    output = Generator(src, file_path, declarations).run()
    logger.debug(
        "Generated %s: %d Data class(es)",
        file_path,
        sum(1 for d in declarations if isinstance(d, DataObjectDeclaration)),
    )
    return output
