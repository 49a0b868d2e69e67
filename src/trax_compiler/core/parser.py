"""Structural extraction: distill a TypeScript syntax tree into Data declarations."""

import logging

from tree_sitter import Node

from trax_compiler.core.ast import SourceUnit, parse_source
from trax_compiler.errors import TraxClassError, TraxPropertyError
from trax_compiler.models import (
    DataObjectDeclaration,
    DataProperty,
    DataType,
    Declaration,
    DefaultValue,
    ImportDirective,
)

logger = logging.getLogger(__name__)

DATA = "Data"
REF = "ref"

_CLASS_NODES = frozenset({"class_declaration", "abstract_class_declaration", "class"})
_REFERENCE_NODES = frozenset({"type_identifier", "nested_type_identifier", "generic_type"})
_LITERAL_KINDS = {
    "string": "string",
    "number": "number",
    "true": "boolean",
    "false": "boolean",
}


def _named(node: Node) -> list[Node]:
    return [c for c in node.named_children if c.type != "comment"]


class DeclarationExtractor:
    """Walk a parsed unit top-down and collect the marker import and the Data classes.

    ``process_node`` returns whether the walk should descend into the node: import
    clauses and Data classes are consumed entirely and never re-visited.
    """

    def __init__(self, unit: SourceUnit) -> None:
        self.unit = unit
        self.declarations: list[Declaration] = []
        self.import_found = False

    def extract(self) -> list[Declaration]:
        self.scan(self.unit.root)
        return self.declarations

    def scan(self, node: Node) -> None:
        if self.process_node(node):
            for child in node.children:
                self.scan(child)

    def process_node(self, node: Node) -> bool:
        if node.type == "import_clause":
            self.process_import(node)
            return False
        if node.is_named and node.type in _CLASS_NODES:
            return not self.process_class(node)
        return True

    # ------------------------------------------------------------------
    # errors
    # ------------------------------------------------------------------

    def _class_error(self, message: str, node: Node) -> TraxClassError:
        return TraxClassError(message, self.unit.start(node), self.unit.file_path)

    def _property_error(self, message: str, node: Node) -> TraxPropertyError:
        return TraxPropertyError(message, self.unit.start(node), self.unit.file_path)

    # ------------------------------------------------------------------
    # imports
    # ------------------------------------------------------------------

    def process_import(self, node: Node) -> None:
        named_imports = next((c for c in node.named_children if c.type == "named_imports"), None)
        if named_imports is None:
            return
        specifiers = [c for c in named_imports.named_children if c.type == "import_specifier"]
        marker = next((s for s in specifiers if self._is_marker_specifier(s)), None)
        if marker is None:
            return

        marker_name = marker.child_by_field_name("name")
        assert marker_name is not None
        remove_start, remove_end = self._specifier_removal_span(marker)
        directive = ImportDirective(
            start=self.unit.start(node),
            insert_pos=self.unit.end(marker_name),
            values=[self._local_name(s) for s in specifiers],
            remove_start=remove_start,
            remove_end=remove_end,
        )
        if self.import_found:
            logger.debug("Second %s import found at %d", DATA, directive.start)
        self.import_found = True
        self.declarations.append(directive)

    def _specifier_name(self, specifier: Node) -> str:
        name = specifier.child_by_field_name("name")
        return self.unit.text(name) if name is not None else ""

    def _local_name(self, specifier: Node) -> str:
        # `ΔfStr as S` binds `S` in the unit
        alias = specifier.child_by_field_name("alias")
        return self.unit.text(alias) if alias is not None else self._specifier_name(specifier)

    def _is_marker_specifier(self, specifier: Node) -> bool:
        # `import { Data as D }` does not bring the bare marker name into scope
        if specifier.child_by_field_name("alias") is not None:
            return False
        return self._specifier_name(specifier) == DATA

    def _specifier_removal_span(self, specifier: Node) -> tuple[int, int]:
        start, end = self.unit.start(specifier), self.unit.end(specifier)
        following, preceding = specifier.next_sibling, specifier.prev_sibling
        if following is not None and following.type == ",":
            after = following.next_sibling
            if after is not None and after.type == "import_specifier":
                return start, self.unit.start(after)
            return start, self.unit.end(following)
        if preceding is not None and preceding.type == ",":
            before = preceding.prev_sibling
            if before is not None and before.type == "import_specifier":
                return self.unit.end(before), end
            return self.unit.start(preceding), end
        return start, end

    # ------------------------------------------------------------------
    # classes
    # ------------------------------------------------------------------

    def _decorators(self, node: Node) -> list[Node]:
        decorators = [c for c in node.children if c.type == "decorator"]
        # `@Data export class X {}` attaches the decorator to the export statement
        parent = node.parent
        if parent is not None and parent.type == "export_statement":
            decorators = [c for c in parent.children if c.type == "decorator"] + decorators
        return decorators

    def _decorator_expression(self, decorator: Node) -> Node | None:
        named = _named(decorator)
        return named[0] if named else None

    def find_data_decorator(self, node: Node) -> Node | None:
        for decorator in self._decorators(node):
            expression = self._decorator_expression(decorator)
            if expression is not None and expression.type == "identifier" and self.unit.text(expression) == DATA:
                return decorator
        return None

    def process_class(self, node: Node) -> bool:
        """Record ``node`` if it is a Data class. Returns whether it was consumed."""
        decorator = self.find_data_decorator(node)
        if decorator is None:
            return False

        name = node.child_by_field_name("name")
        if name is None:
            raise self._class_error("Data class name must be defined", node)

        obj = DataObjectDeclaration(
            start=self.unit.start(node),
            deco_start=self.unit.start(decorator),
            deco_end=self.unit.end(decorator),
            class_name=self.unit.text(name),
            class_name_end=self.unit.end(name),
        )
        logger.debug("Data class %s found at %d", obj.class_name, obj.start)

        body = node.child_by_field_name("body")
        if body is not None:
            for member in _named(body):
                if member.type == "decorator":
                    # belongs to the method that follows it
                    continue
                obj.properties.append(self.process_member(member))

        self.declarations.append(obj)
        return True

    def process_member(self, member: Node) -> DataProperty:
        if member.type == "method_definition":
            name = member.child_by_field_name("name")
            if name is not None and self.unit.text(name) == "constructor":
                raise self._class_error("Constructors are not authorized in Data objects", member)
        if member.type != "public_field_definition":
            raise self._class_error(f"Invalid Data object member [kind: {member.type}]", member)

        name = member.child_by_field_name("name")
        if name is None or name.type != "property_identifier":
            # quoted, numeric, computed and private names
            raise self._property_error("Unsupported syntax", name or member)

        prop = DataProperty(name=self.unit.text(name), name_pos=self.unit.start(name), end=self.unit.end(member))
        terminator = member.next_sibling
        if terminator is not None and terminator.type == ";":
            prop.end = self.unit.end(terminator)

        for child in member.children:
            if child.type in ("comment", "=") or child == name:
                continue
            if child.type == "decorator":
                expression = self._decorator_expression(child)
                if expression is not None and self.unit.text(expression) == REF:
                    prop.shallow_ref = True
            elif child.type == "type_annotation":
                type_nodes = _named(child)
                tp = self.classify_type(type_nodes[0]) if type_nodes else None
                if tp is None:
                    raise self._property_error("Unsupported syntax", child)
                prop.type = tp
            elif not self.handle_default_value(child, prop):
                raise self._property_error("Unsupported syntax", child)
        return prop

    # ------------------------------------------------------------------
    # types and default values
    # ------------------------------------------------------------------

    def classify_type(self, node: Node, must_succeed: bool = False) -> DataType | None:
        if node.type == "predefined_type":
            text = self.unit.text(node)
            if text in ("string", "number", "boolean"):
                return DataType(kind=text)
        elif node.type in _REFERENCE_NODES:
            return DataType(kind="reference", identifier=self.unit.text(node))
        elif node.type == "array_type":
            element = _named(node)[0]
            return DataType(kind="array", item_type=self.classify_type(element, must_succeed=True))
        elif node.type == "object_type":
            # expected to be something like { [key: string]: Address }
            members = _named(node)
            if len(members) == 1 and members[0].type == "index_signature":
                index_type = members[0].child_by_field_name("index_type")
                if index_type is not None:
                    return DataType(kind="dictionary", item_type=self.classify_type(index_type))

        if must_succeed and node.type != "decorator":
            raise self._property_error("Unsupported type", node)
        return None

    def handle_default_value(self, node: Node, prop: DataProperty) -> bool:
        kind = _LITERAL_KINDS.get(node.type)
        if kind is None:
            return False
        prop.default_value = DefaultValue(
            start=self.unit.start(node),
            end=self.unit.end(node),
            text=self.unit.text(node),
        )
        if prop.type is None:
            prop.type = DataType(kind=kind)
        return True


def parse(src: str, file_path: str, language: str = "typescript") -> list[Declaration] | None:
    """Extract the marker import and the Data classes of a unit.

    Returns ``None`` when the unit has syntax errors; no partial extraction is
    attempted. Raises a ``TraxError`` subclass on unsupported Data class content.
    """
    unit = parse_source(src, file_path, language)
    if unit.has_error:
        error_node = unit.first_error()
        logger.debug(
            "Syntax error in %s at pos %s",
            file_path,
            unit.start(error_node) if error_node is not None else "?",
        )
        return None
    return DeclarationExtractor(unit).extract()
