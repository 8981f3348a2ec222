"""Shared test fixtures for fumadocs-migrate."""

from pathlib import Path

import pytest

from fumadocs_migrate.models import Document
from fumadocs_migrate.stats import TransformStats


@pytest.fixture
def stats():
    return TransformStats()


@pytest.fixture
def make_doc():
    """Build a Document for a path relative to the docs project root."""

    def _make(text: str = "", rel_path: str = "content/docs/page.mdx") -> Document:
        return Document.from_text(Path(rel_path), text)

    return _make


@pytest.fixture
def write_tree():
    """Write {relative path: text} files under a root directory."""

    def _write(root: Path, files: dict[str, str]) -> Path:
        for rel, text in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        return root

    return _write
