"""Tab container conversion between the Mintlify and Fumadocs dialects."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from .pipeline import Transform

if TYPE_CHECKING:
    from fumadocs_migrate.models import Document
    from fumadocs_migrate.stats import TransformStats

JS_CLI_GROUP_ID = "js/cli"

_TABS_BLOCK_RE = re.compile(r"<Tabs([^>]*)>(.*?)</Tabs>", re.DOTALL)
_TABS_WITHOUT_ITEMS_RE = re.compile(r"<Tabs(?!\s+items=)([^>]*)>(.*?)</Tabs>", re.DOTALL)
_TAB_TITLE_RE = re.compile(r'<Tab\s+title="([^"]+)"')
_TAB_VALUE_RE = re.compile(r'<Tab value="([^"]+)"')
_JS_LABEL_RE = re.compile(r"^(JavaScript|TypeScript|JS|TS)$", re.IGNORECASE)
_CLI_LABEL_RE = re.compile(r"^(CLI|Terminal|Bash)$", re.IGNORECASE)
# Fumadocs wants the closing fence of a tab body at three spaces
_DEEP_CLOSING_FENCE_RE = re.compile(r"\n {4,}```(\s*\n)")

_TABS_OPEN_RE = re.compile(r"<Tabs[^>]*>\s*")
_TABS_CLOSE_RE = re.compile(r"\s*</Tabs>")
_TAB_WITH_FENCE_RE = re.compile(
    r'<Tab\s+(?:value|title)="([^"]+)">\s*\n*(````?)(\w+)'
    r'(?:\s+title="([^"]+)")?(?:\s+icon="[^"]+")?(.*?)\2\s*\n*</Tab>',
    re.DOTALL,
)
_TAB_OPEN_LEFTOVER_RE = re.compile(r'<Tab\s+(?:value|title)="[^"]+"\s*>\s*')
_TAB_CLOSE_LEFTOVER_RE = re.compile(r"\s*</Tab>")


def items_attr(labels: list[str]) -> str:
    """Render the ``items`` declaration Fumadocs expects on a ``<Tabs>`` container."""
    return "items={[" + ", ".join(f"'{label}'" for label in labels) + "]}"


def is_js_cli_pair(labels: list[str]) -> bool:
    has_js = any(_JS_LABEL_RE.match(label) for label in labels)
    has_cli = any(_CLI_LABEL_RE.match(label) for label in labels)
    return has_js and has_cli


class MintlifyTabsConverter(Transform):
    """``<Tabs><Tab title="A">`` → ``<Tabs items={['A']}><Tab value="A">``.

    A container holding no titled tab is not a Mintlify tab group and is
    returned untouched.
    """

    name = "tabs"

    def apply(self, content: str, doc: Document, stats: TransformStats) -> str:
        def _convert(m: re.Match) -> str:
            inner = m.group(2)
            titles = _TAB_TITLE_RE.findall(inner)
            if not titles:
                return m.group(0)

            group_id = f' groupId="{JS_CLI_GROUP_ID}"' if is_js_cli_pair(titles) else ""
            inner = _TAB_TITLE_RE.sub(lambda t: f'<Tab value="{t.group(1)}"', inner)
            inner = _DEEP_CLOSING_FENCE_RE.sub(lambda f: f"\n   ```{f.group(1)}", inner)

            stats.increment("mintlify-tabs-converted")
            return f"<Tabs {items_attr(titles)}{group_id}>{inner}</Tabs>"

        return _TABS_BLOCK_RE.sub(_convert, content)


class TabsItemsAdder(Transform):
    """Declares ``items`` on Fumadocs ``<Tabs>`` containers that lack it."""

    name = "tabs-items"

    def apply(self, content: str, doc: Document, stats: TransformStats) -> str:
        def _add(m: re.Match) -> str:
            values = _TAB_VALUE_RE.findall(m.group(2))
            if not values:
                return m.group(0)
            stats.increment("tabs-items-added")
            return f"<Tabs {items_attr(values)}{m.group(1)}>{m.group(2)}</Tabs>"

        return _TABS_WITHOUT_ITEMS_RE.sub(_add, content)


class TabsUnwrapper(Transform):
    """Flattens tab containers into bare fences carrying ``tab="..."``.

    Handles both three- and four-backtick fences. Tabs whose body is not a
    single fence lose their wrapper tags and keep their content.
    """

    name = "tabs-unwrap"

    def apply(self, content: str, doc: Document, stats: TransformStats) -> str:
        if "<Tab" not in content:
            return content

        content = _TABS_OPEN_RE.sub("", content)
        content = _TABS_CLOSE_RE.sub("\n", content)

        def _unwrap(m: re.Match) -> str:
            label, backticks, lang, _title, code = m.groups()
            stats.increment("tab-unwrapped")
            return f'{backticks}{lang} tab="{label}"{code}{backticks}\n'

        content = _TAB_WITH_FENCE_RE.sub(_unwrap, content)
        content = _TAB_OPEN_LEFTOVER_RE.sub("", content)
        return _TAB_CLOSE_LEFTOVER_RE.sub("\n", content)
