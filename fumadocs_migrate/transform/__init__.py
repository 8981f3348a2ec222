"""Transform pipeline for converting Mintlify MDX to Fumadocs MDX."""

from .pipeline import Transform, TransformPipeline
from .cleanup import BlankLineCollapser, LineEndingNormalizer, VersionSubstituter
from .codegroup import CodeGroupCollapser
from .components import AccordionWrapperFixer, ComponentRenamer, StepIndentationFixer
from .fences import FENCE_RULES, FenceAttributeReverter, HighlightAnnotator
from .frontmatter import FrontmatterRemapper, ImportStripper, parse_frontmatter
from .html import HtmlTagEscaper
from .links import DocsPrefixRewriter, ImageLinkFixer
from .snippets import SnippetInliner
from .tabs import MintlifyTabsConverter, TabsItemsAdder, TabsUnwrapper
from .terminal import LineState, TerminalOutputMerger, TerminalPromptAnnotator
from .passes import DEFAULT_PASSES, EXTRA_PASSES, PASS_NAMES, build_pipeline, resolve_pass_order

__all__ = [
    "Transform",
    "TransformPipeline",
    "DEFAULT_PASSES",
    "EXTRA_PASSES",
    "PASS_NAMES",
    "build_pipeline",
    "resolve_pass_order",
    "parse_frontmatter",
    "FENCE_RULES",
    "LineState",
    "LineEndingNormalizer",
    "SnippetInliner",
    "ImportStripper",
    "FrontmatterRemapper",
    "MintlifyTabsConverter",
    "CodeGroupCollapser",
    "HighlightAnnotator",
    "TerminalOutputMerger",
    "FenceAttributeReverter",
    "TerminalPromptAnnotator",
    "ComponentRenamer",
    "AccordionWrapperFixer",
    "ImageLinkFixer",
    "DocsPrefixRewriter",
    "HtmlTagEscaper",
    "BlankLineCollapser",
    "VersionSubstituter",
    "StepIndentationFixer",
    "TabsItemsAdder",
    "TabsUnwrapper",
]
