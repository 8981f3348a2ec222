"""Collapses Mintlify ``<CodeGroup>`` containers.

The outcome depends only on the fences inside the group:

- no fence: the group is removed
- one fence: unwrapped to a bare fence
- a JavaScript fence plus a shell/terminal fence: a synchronized
  ``<Tabs>`` container labelled ``JavaScript`` / ``CLI``
- anything else: a run of bare fences, each labelled with ``tab="..."``
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .pipeline import Transform
from .tabs import JS_CLI_GROUP_ID, items_attr

if TYPE_CHECKING:
    from fumadocs_migrate.models import Document
    from fumadocs_migrate.stats import TransformStats

JS_LANGS = frozenset({"ts", "tsx", "js", "jsx"})
SHELL_LANGS = frozenset({"bash", "sh"})
FALLBACK_LABEL = "Example"

_CODEGROUP_RE = re.compile(r"\n*<CodeGroup>\n*(.*?)\n*</CodeGroup>\n*", re.DOTALL)
_FENCE_RE = re.compile(r"```(\w+)([^\n]*)\n(.*?)```", re.DOTALL)
_TITLE_ATTR_RE = re.compile(r'title="([^"]+)"')
_ICON_ATTR_RE = re.compile(r'icon="([^"]+)"')
_ICON_STRIP_RE = re.compile(r'icon="[^"]*"\s*')
_ICON_SPLIT_RE = re.compile(r"\s+icon=")
_BARE_TERMINAL_RE = re.compile(r"^\s*terminal\s*$")


@dataclass
class CodeBlock:
    lang: str
    attrs: str
    code: str
    label: str

    @property
    def is_js(self) -> bool:
        return self.lang in JS_LANGS

    @property
    def is_cli(self) -> bool:
        return self.lang in SHELL_LANGS or self.label == "terminal"

    @property
    def clean_attrs(self) -> str:
        return _ICON_STRIP_RE.sub("", self.attrs).strip()


def derive_label(attrs: str) -> str:
    """Pick a tab label: title, then icon name, then text before the icon, then raw attrs."""
    title = _TITLE_ATTR_RE.search(attrs)
    if title:
        return title.group(1)

    label = ""
    if "icon=" in attrs:
        icon = _ICON_ATTR_RE.search(attrs)
        if icon:
            name = icon.group(1)
            label = "terminal" if name == "terminal" else re.sub(r"\.svg$", "", re.sub(r"^.*/", "", name))
        before_icon = _ICON_SPLIT_RE.split(attrs)[0].strip()
        if before_icon:
            label = before_icon
    elif attrs.strip():
        label = attrs.strip()

    return label or FALLBACK_LABEL


def parse_blocks(inner: str) -> list[CodeBlock]:
    blocks = []
    for m in _FENCE_RE.finditer(inner):
        lang, attrs, code = m.groups()
        blocks.append(CodeBlock(lang=lang, attrs=attrs.strip(), code=code.strip(), label=derive_label(attrs)))
    return blocks


def _indent_code(code: str) -> str:
    return "\n".join(f"    {line}" if line.strip() else "" for line in code.split("\n"))


def _render_js_cli_tabs(blocks: list[CodeBlock]) -> str:
    tabs = []
    for block in blocks:
        label = "JavaScript" if block.is_js else "CLI"
        attrs = block.clean_attrs
        if label == "CLI" and "title=" not in attrs:
            attrs = _BARE_TERMINAL_RE.sub("", attrs).strip()
            attrs = 'title="terminal"' + (f" {attrs}" if attrs else "")
        open_fence = f"    ```{block.lang}{' ' + attrs if attrs else ''}"
        tabs.append(
            f'  <Tab value="{label}">\n{open_fence}\n{_indent_code(block.code)}\n   ```\n  </Tab>'
        )
    body = "\n".join(tabs)
    return f'\n\n<Tabs {items_attr(["JavaScript", "CLI"])} groupId="{JS_CLI_GROUP_ID}">\n{body}\n</Tabs>\n\n'


def _render_labelled_fence(block: CodeBlock) -> str:
    attrs = block.clean_attrs
    if "title=" in attrs:
        return f"```{block.lang} {attrs}\n{block.code}\n```"
    if attrs == block.label:
        return f'```{block.lang} tab="{block.label}"\n{block.code}\n```'
    attrs = f'tab="{block.label}"' + (f" {attrs}" if attrs else "")
    return f"```{block.lang} {attrs}\n{block.code}\n```"


class CodeGroupCollapser(Transform):
    name = "codegroups"

    def apply(self, content: str, doc: Document, stats: TransformStats) -> str:
        def _collapse(m: re.Match) -> str:
            blocks = parse_blocks(m.group(1))

            if not blocks:
                stats.increment("codegroup-empty")
                stats.warn(doc.rel_path, "removed a CodeGroup with no code fences")
                return "\n\n"

            if len(blocks) == 1:
                stats.increment("codegroup-single-unwrapped")
                block = blocks[0]
                attrs = block.clean_attrs
                return f"\n\n```{block.lang}{' ' + attrs if attrs else ''}\n{block.code}\n```\n\n"

            if len(blocks) == 2 and any(b.is_js for b in blocks) and any(b.is_cli for b in blocks):
                stats.increment("codegroup-to-tabs-jsvcli")
                return _render_js_cli_tabs(blocks)

            stats.increment("codegroup-unwrapped")
            fences = "\n\n".join(_render_labelled_fence(b) for b in blocks)
            return f"\n\n{fences}\n\n"

        return _CODEGROUP_RE.sub(_collapse, content)
