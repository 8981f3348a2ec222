"""Rewrites image sources and internal links for the split /docs + /guides layout."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from .pipeline import Transform

if TYPE_CHECKING:
    from fumadocs_migrate.models import Document
    from fumadocs_migrate.stats import TransformStats

DEFAULT_IMAGE_BASE_URL = "https://bun.com/docs/images"

DOCS_ONLY_DIRS = ("bundler", "runtime", "pm", "project")
GUIDE_ONLY_DIRS = (
    "install", "util", "binary", "websocket", "streams", "ecosystem", "deployment",
    "process", "read-file", "write-file", "html-rewriter",
)
_UNTOUCHED_PREFIXES = ("docs/", "guides/", "http", "images/", "icons/")

_MD_IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(/images/([^)]+)\)")
# (stat, pattern) for tag attributes pointing at /images/
_SRC_ATTR_RES = (
    ("image-src-fixed", re.compile(r'(<img[^>]+src=")/images/([^"]+)(")')),
    ("image-component-src-fixed", re.compile(r'(<Image[^>]+src=")/images/([^"]+)(")')),
    ("video-src-fixed", re.compile(r'(<source[^>]+src=")/images/([^"]+)(")')),
)

_DOCS_GUIDES_LINK_RE = re.compile(r"\[([^\]]+)\]\(/docs/guides/([^)]+)\)")
_ROOT_LINK_RE = re.compile(r"(?<!!)\[([^\]]+)\]\(/([^/)][^)]*)\)")


def _dir_re(dirs: tuple[str, ...]) -> re.Pattern:
    return re.compile(r"^(" + "|".join(re.escape(d) for d in dirs) + r")(?=[/#?]|$)")


_DOCS_ONLY_RE = _dir_re(DOCS_ONLY_DIRS)
_GUIDE_ONLY_RE = _dir_re(GUIDE_ONLY_DIRS)


class ImageLinkFixer(Transform):
    """Points root-relative ``/images/...`` sources at the hosted image base URL."""

    name = "images"

    def __init__(self, base_url: str = DEFAULT_IMAGE_BASE_URL):
        self.base_url = base_url.rstrip("/")

    def apply(self, content: str, doc: Document, stats: TransformStats) -> str:
        content, n = _MD_IMAGE_RE.subn(
            lambda m: f"![{m.group(1)}]({self.base_url}/{m.group(2)})", content
        )
        stats.increment("image-link-fixed", n)

        for stat, pattern in _SRC_ATTR_RES:
            content, n = pattern.subn(
                lambda m: f"{m.group(1)}{self.base_url}/{m.group(2)}{m.group(3)}", content
            )
            stats.increment(stat, n)
        return content


def prefix_for(path: str) -> str:
    """Section prefix for a root-relative link path (without its leading slash)."""
    if _DOCS_ONLY_RE.match(path):
        return "docs"
    if _GUIDE_ONLY_RE.match(path):
        return "guides"
    return "docs"


class DocsPrefixRewriter(Transform):
    """Adds ``/docs/`` or ``/guides/`` to internal markdown links.

    Links under neither known section default to ``/docs/``.
    """

    name = "links"

    def apply(self, content: str, doc: Document, stats: TransformStats) -> str:
        content, n = _DOCS_GUIDES_LINK_RE.subn(lambda m: f"[{m.group(1)}](/guides/{m.group(2)})", content)
        stats.increment("docs-guides-to-guides", n)

        def _prefix(m: re.Match) -> str:
            text, path = m.groups()
            if path.startswith(_UNTOUCHED_PREFIXES):
                return m.group(0)
            section = prefix_for(path)
            stats.increment(f"{section}-prefix-added")
            return f"[{text}](/{section}/{path})"

        return _ROOT_LINK_RE.sub(_prefix, content)
