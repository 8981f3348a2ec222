"""Whole-text normalization passes: line endings, blank lines, version tokens."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Callable

from .pipeline import Transform

if TYPE_CHECKING:
    from fumadocs_migrate.models import Document
    from fumadocs_migrate.stats import TransformStats

DEFAULT_VERSION_PLACEHOLDER = "$BUN_LATEST_VERSION"

_EXCESS_BLANK_LINES_RE = re.compile(r"\n{3,}")


class LineEndingNormalizer(Transform):
    name = "line-endings"

    def apply(self, content: str, doc: Document, stats: TransformStats) -> str:
        if "\r\n" not in content:
            return content
        stats.increment("crlf-normalized")
        return content.replace("\r\n", "\n")


class BlankLineCollapser(Transform):
    """Three or more newlines in a row → one blank line."""

    name = "blank-lines"

    def apply(self, content: str, doc: Document, stats: TransformStats) -> str:
        content, n = _EXCESS_BLANK_LINES_RE.subn("\n\n", content)
        stats.increment("blank-lines-collapsed", n)
        return content


class VersionSubstituter(Transform):
    """Replaces the current release number with a placeholder token.

    Changelog entries are skipped: their version numbers are historical.
    """

    name = "version"

    def __init__(self, version: str | None, placeholder: str = DEFAULT_VERSION_PLACEHOLDER):
        self.version = version
        self.placeholder = placeholder
        self.rules: list[tuple[str, re.Pattern, Callable[[re.Match], str]]] = []
        if version:
            v = re.escape(version)
            ph = placeholder
            self.rules = [
                ("version-replaced-bun-v", re.compile(rf"bun-v{v}(?!\d)"), lambda m: f"bun-v{ph}"),
                (
                    "version-replaced-version",
                    re.compile(rf"(-Version\s+|Version\s+){v}(?!\d)"),
                    lambda m: f"{m.group(1)}{ph}",
                ),
                ("version-replaced-v", re.compile(rf"\bv{v}\b"), lambda m: f"v{ph}"),
                ("version-replaced-range", re.compile(rf'"([\^~]){v}"'), lambda m: f'"{m.group(1)}{ph}"'),
                (
                    "version-replaced-package-at",
                    re.compile(rf"(@[\w/-]+)@{v}\b"),
                    lambda m: f"{m.group(1)}@{ph}",
                ),
            ]

    def apply(self, content: str, doc: Document, stats: TransformStats) -> str:
        if not self.rules or doc.is_changelog:
            return content

        for stat, pattern, render in self.rules:
            content, n = pattern.subn(render, content)
            stats.increment(stat, n)
        return content

