"""Frontmatter parsing, key remapping and leading-import removal."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import yaml

from .pipeline import Transform

if TYPE_CHECKING:
    from fumadocs_migrate.models import Document
    from fumadocs_migrate.stats import TransformStats

_FRONTMATTER_RE = re.compile(r"\A---\r?\n(.*?)\r?\n---", re.DOTALL)
_FRONTMATTER_BLOCK_RE = re.compile(r"\A---\r?\n.*?\r?\n---\r?\n", re.DOTALL)
_BLANKS_AFTER_FRONTMATTER_RE = re.compile(r"\A(---\r?\n.*?\r?\n---\r?\n)(?:[ \t]*\r?\n)+", re.DOTALL)

_NAME_KEY_RE = re.compile(r"^name:", re.MULTILINE)
_TITLE_LINE_RE = re.compile(r"^title:[ \t]*(.+)$", re.MULTILINE)
_SIDEBAR_TITLE_LINE_RE = re.compile(r"^sidebarTitle:[ \t]*(.+)$", re.MULTILINE)

_IMPORT_SECTION_RE = re.compile(r"\A((?:import[ \t]+.+?\r?\n|[ \t]*\r?\n)*)")
_COMPONENT_IMPORT_RE = re.compile(
    r"""^import\s+\w+\s+from\s+["'][^"']+["'];[ \t]*\r?\n""", re.MULTILINE
)


@dataclass
class ParsedFrontmatter:
    present: bool = False
    valid: bool = True
    raw: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)


def parse_frontmatter(content: str) -> ParsedFrontmatter:
    """Extract the YAML frontmatter block, tolerating CRLF line endings.

    A block whose body is not a YAML mapping is reported as present but
    invalid; it is never raised as an error.
    """
    m = _FRONTMATTER_RE.match(content)
    if not m:
        return ParsedFrontmatter()
    raw = m.group(1)
    try:
        loaded = yaml.safe_load(raw)
    except yaml.YAMLError:
        return ParsedFrontmatter(present=True, valid=False, raw=raw)
    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        return ParsedFrontmatter(present=True, valid=False, raw=raw)
    return ParsedFrontmatter(present=True, valid=True, raw=raw, metadata=loaded)


class FrontmatterRemapper(Transform):
    """Renames ``name`` to ``title`` and, for guides, swaps in ``fullTitle``.

    Guides use ``title`` for the short navigation label and ``fullTitle`` for
    the page heading. A block that already has ``fullTitle`` is never swapped
    again.

    Keys are rewritten line by line, so a block PyYAML rejects (an unquoted
    ``: `` or a leading backtick in a value) is still remapped.
    """

    name = "frontmatter"

    def apply(self, content: str, doc: Document, stats: TransformStats) -> str:
        m = _FRONTMATTER_RE.match(content)
        if not m:
            return content
        if not doc.frontmatter_valid:
            stats.warn(doc.rel_path, "frontmatter is not valid YAML")

        fm = m.group(1)
        changed = False

        if _NAME_KEY_RE.search(fm):
            fm = _NAME_KEY_RE.sub("title:", fm, count=1)
            changed = True
            stats.increment("frontmatter-name-to-title")

        if doc.is_guide and "sidebarTitle:" in fm and "fullTitle:" not in fm:
            title_m = _TITLE_LINE_RE.search(fm)
            sidebar_m = _SIDEBAR_TITLE_LINE_RE.search(fm)
            if title_m and sidebar_m:
                title = title_m.group(1).strip()
                sidebar_title = sidebar_m.group(1).strip()
                fm = _TITLE_LINE_RE.sub(lambda _: f"title: {sidebar_title}", fm, count=1)
                fm = _SIDEBAR_TITLE_LINE_RE.sub(lambda _: f"fullTitle: {title}", fm, count=1)
                changed = True
                stats.increment("frontmatter-guide-title-swap")

        if not changed:
            return content
        return f"---\n{fm}\n---" + content[m.end():]


class ImportStripper(Transform):
    """Drops ``import X from "..."`` lines sitting directly under the frontmatter.

    Imports further down the body are left alone; MDX snippets are pulled in
    with ``<include>`` instead.
    """

    name = "imports"

    def apply(self, content: str, doc: Document, stats: TransformStats) -> str:
        fm = _FRONTMATTER_BLOCK_RE.match(content)
        if not fm:
            return content

        head = fm.group(0)
        after = content[fm.end():]
        section = _IMPORT_SECTION_RE.match(after).group(1)

        removed = 0

        def _drop(_m: re.Match) -> str:
            nonlocal removed
            removed += 1
            return ""

        cleaned = _COMPONENT_IMPORT_RE.sub(_drop, section)
        stats.increment("import-removed", removed)

        result = head + cleaned + after[len(section):]
        return _BLANKS_AFTER_FRONTMATTER_RE.sub(lambda m: m.group(1) + "\n", result, count=1)
