"""The fixed pass order of the migration pipeline.

Ordering constraints the list below encodes:

- ``codegroups`` and ``terminal-merge`` run before ``fences``: they produce,
  and look for, fence attributes in their un-reverted Mintlify shape.
- ``tabs`` runs before ``codegroups`` so only Mintlify tab groups are rewritten.
- ``version`` runs last so it sees the final text.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .cleanup import BlankLineCollapser, LineEndingNormalizer, VersionSubstituter
from .codegroup import CodeGroupCollapser
from .components import AccordionWrapperFixer, ComponentRenamer, StepIndentationFixer
from .fences import FenceAttributeReverter, HighlightAnnotator
from .frontmatter import FrontmatterRemapper, ImportStripper
from .html import HtmlTagEscaper
from .links import DocsPrefixRewriter, ImageLinkFixer
from .pipeline import Transform, TransformPipeline
from .snippets import SnippetInliner
from .tabs import MintlifyTabsConverter, TabsItemsAdder, TabsUnwrapper
from .terminal import TerminalOutputMerger, TerminalPromptAnnotator

if TYPE_CHECKING:
    from fumadocs_migrate.config.models import MigrateConfig

logger = logging.getLogger(__name__)

DEFAULT_PASSES: tuple[type[Transform], ...] = (
    LineEndingNormalizer,
    SnippetInliner,
    ImportStripper,
    FrontmatterRemapper,
    MintlifyTabsConverter,
    CodeGroupCollapser,
    HighlightAnnotator,
    TerminalOutputMerger,
    FenceAttributeReverter,
    TerminalPromptAnnotator,
    ComponentRenamer,
    AccordionWrapperFixer,
    ImageLinkFixer,
    DocsPrefixRewriter,
    HtmlTagEscaper,
    BlankLineCollapser,
    VersionSubstituter,
)

# Opt-in passes and the default pass each one follows
EXTRA_PASSES: dict[str, tuple[type[Transform], str]] = {
    StepIndentationFixer.name: (StepIndentationFixer, ComponentRenamer.name),
    TabsItemsAdder.name: (TabsItemsAdder, AccordionWrapperFixer.name),
    TabsUnwrapper.name: (TabsUnwrapper, TabsItemsAdder.name),
}

PASS_NAMES: tuple[str, ...] = tuple(p.name for p in DEFAULT_PASSES)


def _instantiate(cls: type[Transform], config: MigrateConfig | None, version: str | None) -> Transform:
    if cls is VersionSubstituter:
        placeholder = config.version.placeholder if config else "$BUN_LATEST_VERSION"
        return VersionSubstituter(version, placeholder)
    if cls is ImageLinkFixer and config is not None:
        return ImageLinkFixer(config.links.image_base_url)
    return cls()


def resolve_pass_order(extra: list[str] | None = None, disabled: list[str] | None = None) -> list[type[Transform]]:
    """Default order with enabled extras spliced in and disabled passes removed."""
    extra = list(extra or [])
    disabled = set(disabled or [])

    known = set(PASS_NAMES) | set(EXTRA_PASSES)
    unknown = sorted((set(extra) | disabled) - known)
    if unknown:
        raise ValueError(f"Unknown pass name(s): {', '.join(unknown)}")

    order: list[type[Transform]] = list(DEFAULT_PASSES)
    # Insert in EXTRA_PASSES order so chained anchors resolve
    for name, (cls, anchor) in EXTRA_PASSES.items():
        if name not in extra:
            continue
        names = [p.name for p in order]
        if anchor in names:
            order.insert(names.index(anchor) + 1, cls)
        else:
            fallback = EXTRA_PASSES[anchor][1] if anchor in EXTRA_PASSES else None
            idx = names.index(fallback) + 1 if fallback in names else len(order) - 1
            order.insert(idx, cls)

    return [p for p in order if p.name not in disabled]


def build_pipeline(config: MigrateConfig | None = None, version: str | None = None) -> TransformPipeline:
    extra = config.pipeline.extra_passes if config else []
    disabled = config.pipeline.disabled_passes if config else []
    transforms = [_instantiate(cls, config, version) for cls in resolve_pass_order(extra, disabled)]
    pipeline = TransformPipeline(transforms)
    logger.debug("pipeline: %s", " -> ".join(pipeline.names))
    return pipeline
