"""TransformStats: counts which transformations fired during a migration run."""

from __future__ import annotations

from collections import Counter


class TransformStats:
    """Accumulates per-transformation counters and free-text warnings.

    One instance is created per run and handed to every transform. It is not
    thread-safe; the driver processes files sequentially.
    """

    def __init__(self) -> None:
        self.counts: Counter[str] = Counter()
        self.warnings: list[str] = []

    def increment(self, name: str, n: int = 1) -> None:
        if n > 0:
            self.counts[name] += n

    def warn(self, file: str, message: str) -> None:
        self.warnings.append(f"{file}: {message}")

    def get(self, name: str) -> int:
        return self.counts.get(name, 0)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def most_common(self) -> list[tuple[str, int]]:
        """Counters sorted by frequency (descending), ties broken by name."""
        return sorted(self.counts.items(), key=lambda kv: (-kv[1], kv[0]))

    def merge(self, other: TransformStats) -> None:
        self.counts.update(other.counts)
        self.warnings.extend(other.warnings)

    def __bool__(self) -> bool:
        return bool(self.counts) or bool(self.warnings)

    def __repr__(self) -> str:
        return f"TransformStats(total={self.total}, warnings={len(self.warnings)})"
