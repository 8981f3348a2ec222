"""MDX component renames and structural fixes."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from .pipeline import Transform

if TYPE_CHECKING:
    from fumadocs_migrate.models import Document
    from fumadocs_migrate.stats import TransformStats

ACCORDIONS_OPEN = '<Accordions type="single">'

# (mintlify tag, callout type, stat)
_CALLOUTS = (
    ("Note", "info", "revert-note-to-callout"),
    ("Tip", "info", "revert-tip-to-callout"),
    ("Warning", "warning", "revert-warning-to-callout"),
    ("Info", "info", "revert-info-to-callout"),
)
_CALLOUT_RES = tuple(
    (re.compile(rf"<{tag}>(.*?)</{tag}>", re.DOTALL), kind, stat) for tag, kind, stat in _CALLOUTS
)

_TAB_TITLE_RE = re.compile(r"<Tab title=")
_ACCORDION_GROUP_OPEN_RE = re.compile(r"<AccordionGroup>")
_ACCORDION_GROUP_CLOSE_RE = re.compile(r"</AccordionGroup>")
_ACCORDION_RE = re.compile(r"<Accordion(?=[\s>]).*?</Accordion>", re.DOTALL)
_ACCORDIONS_RE = re.compile(r"<Accordions[^>]*>.*?</Accordions>", re.DOTALL)
_CARD_GROUP_OPEN_RE = re.compile(r"<CardGroup")
_CARD_GROUP_CLOSE_RE = re.compile(r"</CardGroup>")
_STEP_TITLE_RE = re.compile(r'^([ \t]*)<Step title="([^"]+)">', re.MULTILINE)

_ADJACENT_ACCORDIONS_RE = re.compile(r'</Accordions>\s*<Accordions(?:\s+type="single")?>')
_STEP_BLOCK_RE = re.compile(r"^([ \t]*)<Step>\n(.*?)\n[ \t]*</Step>", re.DOTALL | re.MULTILINE)


def wrap_lone_accordions(content: str) -> tuple[str, int]:
    """Wrap every ``<Accordion>`` that is not already inside ``<Accordions>``."""
    wrapped_spans = [(m.start(), m.end()) for m in _ACCORDIONS_RE.finditer(content)]

    pieces = []
    cursor = 0
    count = 0
    for m in _ACCORDION_RE.finditer(content):
        start, end = m.span()
        if any(lo <= start and end <= hi for lo, hi in wrapped_spans):
            continue
        pieces.append(content[cursor:start])
        pieces.append(f"{ACCORDIONS_OPEN}\n{m.group(0)}\n</Accordions>")
        cursor = end
        count += 1
    if not count:
        return content, 0
    pieces.append(content[cursor:])
    return "".join(pieces), count


class ComponentRenamer(Transform):
    """Renames Mintlify components to their Fumadocs counterparts.

    Note/Tip/Info/Warning become ``<Callout>``, AccordionGroup becomes
    ``<Accordions>``, CardGroup becomes ``<Cards>`` and a titled ``<Step>``
    gets its title as a nested heading.
    """

    name = "components"

    def apply(self, content: str, doc: Document, stats: TransformStats) -> str:
        for pattern, kind, stat in _CALLOUT_RES:
            content, n = pattern.subn(lambda m, k=kind: f'<Callout type="{k}">{m.group(1)}</Callout>', content)
            stats.increment(stat, n)

        content, n = _TAB_TITLE_RE.subn("<Tab value=", content)
        stats.increment("revert-tab-title-to-value", n)

        content, n = _ACCORDION_GROUP_OPEN_RE.subn(ACCORDIONS_OPEN, content)
        stats.increment("revert-accordiongroup-to-accordions", n)
        content = _ACCORDION_GROUP_CLOSE_RE.sub("</Accordions>", content)

        content, n = wrap_lone_accordions(content)
        stats.increment("wrap-accordion-in-accordions", n)

        content, n = _CARD_GROUP_OPEN_RE.subn("<Cards", content)
        stats.increment("revert-cardgroup-to-cards", n)
        content = _CARD_GROUP_CLOSE_RE.sub("</Cards>", content)

        content, n = _STEP_TITLE_RE.subn(
            lambda m: f"{m.group(1)}<Step>\n{m.group(1)}  ### {m.group(2)}", content
        )
        stats.increment("revert-step-title", n)
        return content


class AccordionWrapperFixer(Transform):
    """Merges back-to-back ``<Accordions>`` wrappers into one."""

    name = "accordion-wrapping"

    def apply(self, content: str, doc: Document, stats: TransformStats) -> str:
        content, n = _ADJACENT_ACCORDIONS_RE.subn("", content)
        stats.increment("accordion-wrappers-merged", n)
        return content


class StepIndentationFixer(Transform):
    name = "step-indentation"

    def apply(self, content: str, doc: Document, stats: TransformStats) -> str:
        def _fix(m: re.Match) -> str:
            indent, inner = m.group(1), m.group(2)
            content_indent = indent + "  "
            lines = inner.split("\n")

            first = next((line for line in lines if line.strip()), None)
            if first is None or first.startswith(content_indent):
                return m.group(0)

            fixed = []
            for line in lines:
                if not line.strip():
                    fixed.append("")
                elif line.startswith(content_indent):
                    fixed.append(line)
                else:
                    fixed.append(content_indent + line.strip())

            stats.increment("step-indentation-fixed")
            return f"{indent}<Step>\n" + "\n".join(fixed) + f"\n{indent}</Step>"

        return _STEP_BLOCK_RE.sub(_fix, content)
