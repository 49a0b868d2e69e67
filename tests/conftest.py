"""Shared fixtures and helpers for tests."""

from pathlib import Path

import pytest
from tree_sitter import Parser
from tree_sitter_language_pack import get_parser

# ---------------------------------------------------------------------------
# Auto-marker: every test here runs without external services
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def typescript_parser() -> Parser:
    """Return a tree-sitter parser for TypeScript."""
    return get_parser("typescript")


@pytest.fixture
def address_source() -> str:
    """A unit with one Data class holding a single string property."""
    return 'import { Data } from "./trax";\n\n@Data class Address {\n    street: string;\n}\n'


@pytest.fixture
def address_file(tmp_path: Path, address_source: str) -> Path:
    path = tmp_path / "address.ts"
    path.write_text(address_source, encoding="utf-8")
    return path
