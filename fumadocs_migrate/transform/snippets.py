"""Replaces reusable snippet components with ``<include>`` directives."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, NamedTuple

from .pipeline import Transform

if TYPE_CHECKING:
    from fumadocs_migrate.models import Document
    from fumadocs_migrate.stats import TransformStats


class Snippet(NamedTuple):
    file: str
    category: str


SNIPPETS: dict[str, Snippet] = {
    "Add": Snippet("add", "cli"),
    "Build": Snippet("build", "cli"),
    "Feedback": Snippet("feedback", "cli"),
    "Init": Snippet("init", "cli"),
    "Install": Snippet("install", "cli"),
    "Link": Snippet("link", "cli"),
    "Outdated": Snippet("outdated", "cli"),
    "Patch": Snippet("patch", "cli"),
    "Publish": Snippet("publish", "cli"),
    "Remove": Snippet("remove", "cli"),
    "Run": Snippet("run", "cli"),
    "Test": Snippet("test", "cli"),
    "Update": Snippet("update", "cli"),
    "InstallBun": Snippet("install-bun", "blog"),
}

_SELF_CLOSING_RE = re.compile(r"<([A-Z][a-zA-Z]+)\s*/>")


def include_path(rel_path: str, snippet: Snippet) -> str:
    """Relative path from a file under ``content/<section>/...`` to its snippet.

    ``content/docs/pm/cli/add.mdx`` → ``../../../_snippets/cli/add.mdx``
    """
    depth = max(len(rel_path.split("/")) - 2, 0)
    return f"{'../' * depth}_snippets/{snippet.category}/{snippet.file}.mdx"


class SnippetInliner(Transform):
    name = "snippets"

    def apply(self, content: str, doc: Document, stats: TransformStats) -> str:
        def _include(m: re.Match) -> str:
            snippet = SNIPPETS.get(m.group(1))
            if snippet is None:
                return m.group(0)
            stats.increment(f"snippet-replaced-{snippet.file}")
            return f"<include>{include_path(doc.rel_path, snippet)}</include>"

        return _SELF_CLOSING_RE.sub(_include, content)
