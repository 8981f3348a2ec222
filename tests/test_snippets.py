"""Tests for snippet component inlining."""

from fumadocs_migrate.transform import SnippetInliner
from fumadocs_migrate.transform.snippets import SNIPPETS, include_path


def test_include_path_depth():
    assert include_path("content/docs/pm/cli/add.mdx", SNIPPETS["Add"]) == "../../../_snippets/cli/add.mdx"
    assert include_path("content/guides/intro.mdx", SNIPPETS["InstallBun"]) == "../_snippets/blog/install-bun.mdx"


class TestSnippetInliner:
    def setup_method(self):
        self.t = SnippetInliner()

    def test_known_snippet_replaced(self, make_doc, stats):
        text = "## Usage\n\n<Install />\n"
        out = self.t.apply(text, make_doc(text, "content/docs/pm/cli/install.mdx"), stats)
        assert out == "## Usage\n\n<include>../../../_snippets/cli/install.mdx</include>\n"
        assert stats.get("snippet-replaced-install") == 1

    def test_no_space_before_slash(self, make_doc, stats):
        text = "<Run/>"
        out = self.t.apply(text, make_doc(text, "content/docs/cli.mdx"), stats)
        assert out == "<include>../_snippets/cli/run.mdx</include>"

    def test_unknown_component_kept(self, make_doc, stats):
        text = "<Callout />\n<Card title=\"x\" />\n"
        assert self.t.apply(text, make_doc(text), stats) == text
        assert stats.total == 0
