"""Escapes bare HTML-like tags in prose by wrapping them in inline code."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from .pipeline import Transform

if TYPE_CHECKING:
    from fumadocs_migrate.models import Document
    from fumadocs_migrate.stats import TransformStats

MDX_COMPONENTS = frozenset({
    "include", "callout", "tab", "tabs", "accordion", "accordions", "card", "cards",
    "step", "steps", "paramfield", "codegroup", "section",
})

_FENCE_SPLIT_RE = re.compile(r"(```.*?```)", re.DOTALL)
_INLINE_CODE_SPLIT_RE = re.compile(r"(`[^`]+`)")
_HTML_STRUCTURE_RE = re.compile(r"<([a-z][a-z0-9-]*?)[\s>].*?</\1>", re.IGNORECASE | re.DOTALL)
_BARE_TAG_RE = re.compile(r"</?([a-z][a-z0-9-]*?)>", re.IGNORECASE)


def split_code(content: str) -> list[tuple[str, bool]]:
    """Split text into (segment, is_code) pairs on fences and inline code spans."""
    parts: list[tuple[str, bool]] = []
    for fence_part in _FENCE_SPLIT_RE.split(content):
        if fence_part.startswith("```"):
            parts.append((fence_part, True))
            continue
        for inline in _INLINE_CODE_SPLIT_RE.split(fence_part):
            is_code = len(inline) > 1 and inline.startswith("`") and inline.endswith("`")
            parts.append((inline, is_code))
    return parts


def _inside_quoted_value(text: str, offset: int) -> bool:
    line_start = text.rfind("\n", 0, offset) + 1
    return text.count('"', line_start, offset) % 2 == 1


class HtmlTagEscaper(Transform):
    """``<div>`` in prose → ```<div>```.

    Skips code, segments containing real paired HTML, capitalised or known
    MDX components, and tags sitting inside a quoted attribute value.
    """

    name = "html"

    def apply(self, content: str, doc: Document, stats: TransformStats) -> str:
        out = []
        for text, is_code in split_code(content):
            if is_code or "<" not in text or _HTML_STRUCTURE_RE.search(text):
                out.append(text)
                continue

            def _wrap(m: re.Match, text: str = text) -> str:
                tag = m.group(1)
                if tag.lower() in MDX_COMPONENTS or tag[0].isupper():
                    return m.group(0)
                if _inside_quoted_value(text, m.start()):
                    return m.group(0)
                stats.increment("html-tag-wrapped")
                return f"`{m.group(0)}`"

            out.append(_BARE_TAG_RE.sub(_wrap, text))
        return "".join(out)
