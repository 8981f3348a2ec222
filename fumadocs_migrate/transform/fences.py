"""Code-fence attribute rewriting: highlight markers and icon/title reversion."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Callable, NamedTuple

from .pipeline import Transform

if TYPE_CHECKING:
    from fumadocs_migrate.models import Document
    from fumadocs_migrate.stats import TransformStats

HIGHLIGHT_MARKER = "// [!code highlight]"

_HIGHLIGHT_BLOCK_RE = re.compile(
    r"```(\w+)([^\r\n]*?)highlight=\{([^}]+)\}\r?\n(.*?)```", re.DOTALL
)
_HIGHLIGHT_ATTR_RE = re.compile(r"\s*highlight=\{[^}]+\}")
_LINE_SPLIT_RE = re.compile(r"\r?\n")
_LINE_RANGE_RE = re.compile(r"(\d+)\s*-\s*(\d+)")


def _parse_line_numbers(ranges: str) -> set[int]:
    """``"1,3-5"`` → ``{1, 3, 4, 5}``. Unrecognised parts are ignored."""
    numbers = set()
    for part in ranges.split(","):
        part = part.strip()
        if part.isdigit():
            numbers.add(int(part))
            continue
        m = _LINE_RANGE_RE.fullmatch(part)
        if m:
            numbers.update(range(int(m.group(1)), int(m.group(2)) + 1))
    return numbers


class HighlightAnnotator(Transform):
    """``highlight={1,3}`` on a fence → ``// [!code highlight]`` on lines 1 and 3."""

    name = "highlights"

    def apply(self, content: str, doc: Document, stats: TransformStats) -> str:
        def _annotate(m: re.Match) -> str:
            lang, attrs, ranges, code = m.groups()
            wanted = _parse_line_numbers(ranges)

            lines = _LINE_SPLIT_RE.split(code)
            last = len(lines) - 1
            for i, line in enumerate(lines):
                # the empty tail after the final newline is not a source line
                if i == last and not line:
                    continue
                if i + 1 in wanted:
                    lines[i] = f"{line} {HIGHLIGHT_MARKER}"
                    stats.increment("highlight-inline-comment-added")

            clean = _HIGHLIGHT_ATTR_RE.sub("", attrs, count=1).strip()
            return f"```{lang}{' ' + clean if clean else ''}\n" + "\n".join(lines) + "```"

        return _HIGHLIGHT_BLOCK_RE.sub(_annotate, content)


# -- Fence attribute reversion ----------------------------------------------


class FenceRule(NamedTuple):
    stat: str
    pattern: re.Pattern
    replace: Callable[[re.Match], str]


def _title(m: re.Match) -> str:
    return f'```{m.group(1)} title="{m.group(2)}"'


def _bare(m: re.Match) -> str:
    return f"```{m.group(1)}"


def _hash_shorthand(m: re.Match) -> str:
    lang, filename, metadata = m.groups()
    if metadata:
        return f'```{lang} title="{filename}"\n// {metadata}\n'
    return f'```{lang} title="{filename}"\n'


def _word_label(m: re.Match) -> str:
    if m.group(2) == "terminal":
        return f'```{m.group(1)} title="terminal"'
    return f"```{m.group(1)}"


_ICON = r'icon="[^"]+"'

# Order matters: the icon+title combinations must run before the catch-all,
# which would otherwise fold the title attribute into the label.
FENCE_RULES: tuple[FenceRule, ...] = (
    FenceRule(
        "revert-icon-before-title",
        re.compile(rf'```(\w+)[ \t]+{_ICON}[ \t]+title="([^"]+)"'),
        _title,
    ),
    FenceRule(
        "revert-expandable-icon-removed",
        re.compile(rf"```(\w+)[ \t]+expandable[ \t]+{_ICON}"),
        _bare,
    ),
    FenceRule(
        "revert-remove-icon-from-title",
        re.compile(rf'```(\w+)[ \t]+title="([^"]+)"[ \t]+{_ICON}'),
        _title,
    ),
    FenceRule(
        "revert-filename-attr-icon-to-title",
        re.compile(rf'```(\w+)[ \t]+filename="([^"]+)"[ \t]+{_ICON}'),
        _title,
    ),
    FenceRule(
        "revert-filename-icon-to-title",
        re.compile(rf"```(\w+)[ \t]+(\S+\.\w+)[ \t]+{_ICON}"),
        _title,
    ),
    FenceRule(
        "revert-catchall-icon-to-title",
        re.compile(rf"```(\w+)[ \t]+(.+?)[ \t]+{_ICON}"),
        lambda m: f'```{m.group(1)} title="{m.group(2).strip()}"',
    ),
    FenceRule(
        "revert-hash-syntax-to-title",
        re.compile(r"```(\w+)#(\S+)(?:[ \t]+(.+?))?\n"),
        _hash_shorthand,
    ),
    FenceRule(
        "revert-plain-filename-to-title",
        re.compile(r'```(\w+)[ \t]+([^\s"]+\.\w+)\n'),
        lambda m: f'```{m.group(1)} title="{m.group(2)}"\n',
    ),
    FenceRule(
        "revert-terminal-fence",
        re.compile(rf"```(bash|sh|zsh)[ \t]+terminal[ \t]+{_ICON}"),
        lambda m: f'```{m.group(1)} title="terminal"',
    ),
    FenceRule(
        "revert-terminal-fence-reversed",
        re.compile(r'```(bash|sh|zsh)[ \t]+icon="terminal"[ \t]+terminal'),
        lambda m: f'```{m.group(1)} title="terminal"',
    ),
    FenceRule(
        "revert-powershell-fence",
        re.compile(rf"```powershell[ \t]+PowerShell[ \t]+{_ICON}"),
        lambda m: '```powershell title="PowerShell"',
    ),
    FenceRule(
        "revert-docker-fence",
        re.compile(rf"```docker[ \t]+Dockerfile[ \t]+{_ICON}"),
        lambda m: '```docker title="Dockerfile"',
    ),
    FenceRule(
        "revert-no-label-icon",
        re.compile(rf"```(\w+)[ \t]+(\w+)[ \t]+{_ICON}"),
        _word_label,
    ),
    FenceRule(
        "revert-icon-only",
        re.compile(rf"```(\w+)[ \t]+{_ICON}"),
        _bare,
    ),
    FenceRule(
        "revert-expandable-removed",
        re.compile(r"```(\w+)([^\n]*?)[ \t]+expandable\b"),
        lambda m: f"```{m.group(1)}{m.group(2)}".strip(),
    ),
    FenceRule(
        "revert-highlight-fixed",
        re.compile(r"```(\w+)([^\n]*?)highlight=(\d+)\}"),
        lambda m: f"```{m.group(1)}{m.group(2)}".rstrip(),
    ),
)


class FenceAttributeReverter(Transform):
    """Strips Mintlify ``icon=`` fence attributes, folding labels into ``title=``.

    Rules are applied one after another over the whole text, in the order of
    ``FENCE_RULES``.
    """

    name = "fences"

    def __init__(self, rules: tuple[FenceRule, ...] = FENCE_RULES):
        self.rules = rules

    def apply(self, content: str, doc: Document, stats: TransformStats) -> str:
        for rule in self.rules:
            content, n = rule.pattern.subn(rule.replace, content)
            stats.increment(rule.stat, n)
        return content
