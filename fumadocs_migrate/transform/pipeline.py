"""TransformPipeline: runs ordered transforms on one document's text."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fumadocs_migrate.models import Document
    from fumadocs_migrate.stats import TransformStats


class Transform(ABC):
    name: str = ""

    @abstractmethod
    def apply(self, content: str, doc: Document, stats: TransformStats) -> str:
        """Rewrite ``content``. Counters go to ``stats`` only when a rewrite fires."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class TransformPipeline:
    def __init__(self, transforms: list[Transform]):
        self.transforms = transforms

    @property
    def names(self) -> list[str]:
        return [t.name for t in self.transforms]

    def apply(self, content: str, doc: Document, stats: TransformStats) -> str:
        for t in self.transforms:
            content = t.apply(content, doc, stats)
        return content
