"""MigrationDriver: rewrite every documentation file under the content roots in place."""

import logging
import time
from pathlib import Path

from fumadocs_migrate.config import MigrateConfig
from fumadocs_migrate.config.models import VersionConfig
from fumadocs_migrate.models import Document, FileError, MigrationReport
from fumadocs_migrate.stats import TransformStats
from fumadocs_migrate.transform import TransformPipeline

logger = logging.getLogger(__name__)


def load_version(project_root: Path, config: VersionConfig) -> str | None:
    """Return the release version for placeholder substitution, or None.

    An explicit ``version.value`` wins over the version file. A missing or
    empty file only disables the version pass.
    """
    if config.value:
        return config.value.strip()
    version_path = project_root / config.file
    try:
        version = version_path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        logger.warning("Could not read version from %s (%s); skipping version replacement", version_path, exc)
        return None
    if not version:
        logger.warning("Version file %s is empty; skipping version replacement", version_path)
        return None
    logger.info("Version: %s", version)
    return version


class MigrationDriver:
    def __init__(
        self,
        project_root: str | Path,
        config: MigrateConfig,
        pipeline: TransformPipeline,
        stats: TransformStats | None = None,
        *,
        dry_run: bool = False,
    ):
        """
        Args:
            project_root: Directory the content roots are relative to
            config: MigrateConfig with content and report settings
            pipeline: TransformPipeline to run on every file
            stats: Collector shared by all transforms for this run
            dry_run: Run the pipeline but never write files
        """
        self.project_root = Path(project_root)
        self.config = config
        self.pipeline = pipeline
        self.stats = stats if stats is not None else TransformStats()
        self.dry_run = dry_run

    # -- Public API ----------------------------------------------------------

    def discover(self) -> list[Path]:
        """All eligible files, root by root, in sorted depth-first order."""
        files: list[Path] = []
        for root in self.config.content.roots:
            root_dir = self.project_root / root
            if not root_dir.is_dir():
                logger.warning("Content root not found: %s", root_dir)
                continue
            files.extend(self._walk(root_dir))
        return files

    def process_file(self, path: Path) -> bool:
        """Run the pipeline over one file. Returns True when its text changed."""
        # decoded from bytes so CRLF reaches the line-endings pass
        content = path.read_bytes().decode("utf-8")
        doc = Document.from_text(
            path,
            content,
            project_root=self.project_root,
            guide_marker=self.config.content.guide_marker,
        )
        transformed = self.pipeline.apply(content, doc, self.stats)
        if transformed == content:
            return False

        if self.dry_run:
            logger.debug("dry-run: would rewrite %s", doc.rel_path)
        else:
            path.write_text(transformed, encoding="utf-8", newline="")
            logger.debug("rewrote %s", doc.rel_path)
        return True

    def run(self) -> MigrationReport:
        """Process every discovered file sequentially and report what changed."""
        start = time.monotonic()
        report = MigrationReport(dry_run=self.dry_run)

        files = self.discover()
        logger.info("Found %d %s files", len(files), self.config.content.extension)

        every = self.config.report.progress_every
        for i, path in enumerate(files, start=1):
            rel = self._rel(path)
            report.processed += 1
            try:
                if self.process_file(path):
                    report.modified += 1
                    report.modified_files.append(rel)
            except Exception as exc:
                report.errors.append(FileError(file=rel, error=str(exc)))
                self.stats.warn(rel, f"{type(exc).__name__}: {exc}")
                logger.error("Error processing %s: %s", rel, exc)

            if i % every == 0:
                logger.info("Processed %d/%d files...", i, len(files))

        report.duration = time.monotonic() - start
        report.transformations = dict(self.stats.most_common())
        report.warnings = list(self.stats.warnings)
        return report

    # -- Internals -----------------------------------------------------------

    def _walk(self, directory: Path) -> list[Path]:
        found: list[Path] = []
        excluded = set(self.config.content.exclude_dirs)
        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as exc:
            logger.error("Error reading directory %s: %s", directory, exc)
            return found

        for entry in entries:
            if entry.is_dir():
                if entry.name in excluded or entry.name.startswith("."):
                    continue
                found.extend(self._walk(entry))
            elif entry.is_file() and entry.name.endswith(self.config.content.extension):
                found.append(entry)
        return found

    def _rel(self, path: Path) -> str:
        try:
            return path.relative_to(self.project_root).as_posix()
        except ValueError:
            return str(path)
