"""Tests for MigrationDriver: discovery, in-place rewriting and error isolation."""

import logging

import pytest

from fumadocs_migrate.config import MigrateConfig
from fumadocs_migrate.config.models import ReportConfig, VersionConfig
from fumadocs_migrate.driver import MigrationDriver, load_version
from fumadocs_migrate.models import Document, MigrationReport
from fumadocs_migrate.stats import TransformStats
from fumadocs_migrate.transform import build_pipeline

GUIDE = """\
---
title: Set up a project
sidebarTitle: Setup
---

<Tabs>
  <Tab title="macOS">
    Use Homebrew.
  </Tab>
  <Tab title="Linux">
    Use the install script.
  </Tab>
</Tabs>

<CodeGroup>
```ts index.ts icon="/icons/typescript.svg"
console.log(1);
```
```bash icon="terminal"
bun run index.ts
```
</CodeGroup>
"""

IMAGES = "---\ntitle: Images\n---\n\n![Arch](/images/arch.png)\n"

DONE = "---\ntitle: Done\n---\n\nNothing to do.\n"

CORPUS = {
    "content/guides/install/setup.mdx": GUIDE,
    "content/docs/runtime/images.mdx": IMAGES,
    "content/docs/runtime/done.mdx": DONE,
    "content/docs/node_modules/pkg/readme.mdx": IMAGES,
    "content/docs/.cache/old.mdx": IMAGES,
    "content/docs/runtime/notes.md": IMAGES,
}


@pytest.fixture
def project(tmp_path, write_tree):
    return write_tree(tmp_path, CORPUS)


def _driver(root, config=None, **kwargs):
    config = config or MigrateConfig()
    return MigrationDriver(root, config, build_pipeline(config), TransformStats(), **kwargs)


class TestDiscover:
    def test_finds_mdx_in_root_order(self, project):
        files = _driver(project).discover()
        assert [f.relative_to(project).as_posix() for f in files] == [
            "content/docs/runtime/done.mdx",
            "content/docs/runtime/images.mdx",
            "content/guides/install/setup.mdx",
        ]

    def test_missing_root_skipped_with_warning(self, project, caplog):
        with caplog.at_level(logging.WARNING, logger="fumadocs_migrate.driver"):
            _driver(project).discover()
        assert "content/_snippets" in caplog.text

    def test_custom_extension(self, project):
        config = MigrateConfig(content={"roots": ["content/docs"], "extension": "md"})
        files = _driver(project, config).discover()
        assert [f.name for f in files] == ["notes.md"]


class TestRun:
    def test_end_to_end(self, project):
        report = _driver(project).run()

        assert isinstance(report, MigrationReport)
        assert report.processed == 3
        assert report.modified == 2
        assert report.errors == []
        assert report.modified_files == [
            "content/docs/runtime/images.mdx",
            "content/guides/install/setup.mdx",
        ]
        assert report.transformations["frontmatter-guide-title-swap"] == 1
        assert report.transformations["codegroup-to-tabs-jsvcli"] == 1
        assert report.transformations["image-link-fixed"] == 1
        assert report.transformations["mintlify-tabs-converted"] == 1

        guide = (project / "content/guides/install/setup.mdx").read_text()
        assert guide.startswith("---\ntitle: Setup\nfullTitle: Set up a project\n---\n")
        assert "<Tabs items={['macOS', 'Linux']}>" in guide
        assert "<Tabs items={['JavaScript', 'CLI']} groupId=\"js/cli\">" in guide
        assert "<CodeGroup>" not in guide

        images = (project / "content/docs/runtime/images.mdx").read_text()
        assert "![Arch](https://bun.com/docs/images/arch.png)" in images

        assert (project / "content/docs/runtime/done.mdx").read_text() == DONE
        assert (project / "content/docs/node_modules/pkg/readme.mdx").read_text() == IMAGES
        assert (project / "content/docs/.cache/old.mdx").read_text() == IMAGES

    def test_second_run_changes_nothing(self, project):
        _driver(project).run()
        report = _driver(project).run()
        assert report.processed == 3
        assert report.modified == 0
        assert report.transformations == {}

    def test_dry_run_writes_nothing(self, project):
        report = _driver(project, dry_run=True).run()
        assert report.dry_run
        assert report.modified == 2
        assert (project / "content/guides/install/setup.mdx").read_text() == GUIDE
        assert (project / "content/docs/runtime/images.mdx").read_text() == IMAGES

    def test_unreadable_file_does_not_stop_run(self, project):
        bad = project / "content/docs/runtime/broken.mdx"
        bad.write_bytes(b"\xff\xfe\xfa not utf-8")

        report = _driver(project).run()
        assert report.processed == 4
        assert report.modified == 2
        assert len(report.errors) == 1
        assert report.errors[0].file == "content/docs/runtime/broken.mdx"
        assert any(w.startswith("content/docs/runtime/broken.mdx: UnicodeDecodeError") for w in report.warnings)

    def test_crlf_file_is_normalized(self, project):
        crlf = project / "content/docs/runtime/windows.mdx"
        crlf.write_bytes(b"---\r\ntitle: A\r\n---\r\n\r\nHello.\r\n")

        report = _driver(project).run()
        assert "content/docs/runtime/windows.mdx" in report.modified_files
        assert report.transformations["crlf-normalized"] == 1
        assert crlf.read_bytes() == b"---\ntitle: A\n---\n\nHello.\n"

    def test_progress_logged(self, project, caplog):
        config = MigrateConfig(report=ReportConfig(progress_every=1))
        with caplog.at_level(logging.INFO, logger="fumadocs_migrate.driver"):
            _driver(project, config).run()
        assert "Processed 3/3 files" in caplog.text

    def test_version_substituted(self, project, write_tree):
        write_tree(project, {"content/docs/runtime/upgrade.mdx": "Run `bun upgrade` to get v1.1.0.\n"})
        config = MigrateConfig()
        driver = MigrationDriver(project, config, build_pipeline(config, "1.1.0"))
        driver.run()
        text = (project / "content/docs/runtime/upgrade.mdx").read_text()
        assert text == "Run `bun upgrade` to get v$BUN_LATEST_VERSION.\n"


class TestDocument:
    def test_rel_path_and_guide_flag(self, project):
        path = project / "content/guides/install/setup.mdx"
        doc = Document.from_text(path, GUIDE, project_root=project)
        assert doc.rel_path == "content/guides/install/setup.mdx"
        assert doc.is_guide
        assert doc.metadata["sidebarTitle"] == "Setup"
        assert not doc.is_changelog

    def test_docs_are_not_guides(self, project):
        path = project / "content/docs/runtime/images.mdx"
        assert not Document.from_text(path, IMAGES, project_root=project).is_guide


class TestLoadVersion:
    def test_explicit_value_wins(self, tmp_path):
        (tmp_path / "LATEST").write_text("9.9.9\n")
        assert load_version(tmp_path, VersionConfig(file="LATEST", value="1.2.3")) == "1.2.3"

    def test_reads_file(self, tmp_path):
        (tmp_path / "LATEST").write_text("1.1.0\n")
        assert load_version(tmp_path, VersionConfig(file="LATEST")) == "1.1.0"

    def test_missing_file(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING, logger="fumadocs_migrate.driver"):
            assert load_version(tmp_path, VersionConfig(file="LATEST")) is None
        assert "skipping version replacement" in caplog.text

    def test_empty_file(self, tmp_path):
        (tmp_path / "LATEST").write_text("  \n")
        assert load_version(tmp_path, VersionConfig(file="LATEST")) is None
