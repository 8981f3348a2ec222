"""Data models for documents flowing through the migration and the run report."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel

from fumadocs_migrate.transform.frontmatter import parse_frontmatter

_CHANGELOG_CATEGORY = "Changelog"


class Document(BaseModel):
    """A documentation file as seen by the transforms.

    ``metadata`` is parsed from the original text before any pass runs, so
    every transform sees the same view of the frontmatter.
    """

    path: Path
    rel_path: str
    is_guide: bool = False
    metadata: dict[str, Any] = {}
    frontmatter_valid: bool = True
    raw_frontmatter: str = ""

    @classmethod
    def from_text(
        cls,
        path: Path,
        text: str,
        *,
        project_root: Path | None = None,
        guide_marker: str = "/guides/",
    ) -> Document:
        if project_root is not None:
            try:
                rel = path.resolve().relative_to(project_root.resolve()).as_posix()
            except ValueError:
                rel = path.as_posix()
        else:
            rel = path.as_posix()
        parsed = parse_frontmatter(text)
        return cls(
            path=path,
            rel_path=rel,
            is_guide=guide_marker in f"/{rel}",
            metadata=parsed.metadata,
            frontmatter_valid=parsed.valid,
            raw_frontmatter=parsed.raw,
        )

    @property
    def is_changelog(self) -> bool:
        """True for changelog blog entries, whose version numbers are historical."""
        if self.frontmatter_valid:
            return self.metadata.get("category") == _CHANGELOG_CATEGORY
        return f"category: {_CHANGELOG_CATEGORY}" in self.raw_frontmatter


class FileError(BaseModel):
    file: str
    error: str


class MigrationReport(BaseModel):
    processed: int = 0
    modified: int = 0
    errors: list[FileError] = []
    duration: float = 0.0
    transformations: dict[str, int] = {}
    warnings: list[str] = []
    modified_files: list[str] = []
    dry_run: bool = False
