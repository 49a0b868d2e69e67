from collections.abc import Iterator
from typing import cast

from tree_sitter import Node, Tree
from tree_sitter_language_pack import SupportedLanguage, get_parser


def _byte_to_char_table(src: str) -> list[int]:
    table: list[int] = []
    for index, char in enumerate(src):
        table.extend([index] * len(char.encode("utf-8")))
    table.append(len(src))
    return table


class SourceUnit:
    """A parsed unit: the tree-sitter tree plus character-offset helpers.

    tree-sitter reports byte offsets; the compiler edits ``str`` buffers, so every
    offset handed out by this class is a character offset into ``src``.
    """

    def __init__(self, src: str, file_path: str, tree: Tree) -> None:
        self.src = src
        self.file_path = file_path
        self.tree = tree
        source_bytes = src.encode("utf-8")
        self._table = None if len(source_bytes) == len(src) else _byte_to_char_table(src)

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def offset(self, byte_offset: int) -> int:
        if self._table is None:
            return byte_offset
        return self._table[byte_offset]

    def start(self, node: Node) -> int:
        return self.offset(node.start_byte)

    def end(self, node: Node) -> int:
        return self.offset(node.end_byte)

    def text(self, node: Node) -> str:
        return self.src[self.start(node) : self.end(node)]

    @property
    def has_error(self) -> bool:
        return self.root.has_error

    def first_error(self) -> Node | None:
        for node in walk(self.root):
            if node.is_error or node.is_missing:
                return node
        return None


def walk(node: Node) -> Iterator[Node]:
    """Yield ``node`` and its descendants in source order."""
    yield node
    for child in node.children:
        yield from walk(child)


def parse_source(src: str, file_path: str, language: str = "typescript") -> SourceUnit:
    parser = get_parser(cast(SupportedLanguage, language))
    tree = parser.parse(src.encode("utf-8"))
    return SourceUnit(src, file_path, tree)
