"""Tests for CodeGroup collapsing."""

import re

from fumadocs_migrate.transform import CodeGroupCollapser
from fumadocs_migrate.transform.codegroup import derive_label, parse_blocks


class TestDeriveLabel:
    def test_title_wins(self):
        assert derive_label(' title="index.ts" icon="file"') == "index.ts"

    def test_text_before_icon(self):
        assert derive_label(' index.ts icon="/icons/typescript.svg"') == "index.ts"

    def test_icon_path_name(self):
        assert derive_label(' icon="/icons/typescript.svg"') == "typescript"

    def test_terminal_icon(self):
        assert derive_label(' icon="terminal"') == "terminal"

    def test_plain_attrs(self):
        assert derive_label(" npm") == "npm"

    def test_fallback(self):
        assert derive_label("") == "Example"


class TestParseBlocks:
    def test_blocks(self):
        inner = '```ts index.ts icon="file"\nconst a = 1;\n```\n```bash\nbun run index.ts\n```'
        blocks = parse_blocks(inner)
        assert [b.lang for b in blocks] == ["ts", "bash"]
        assert blocks[0].is_js
        assert blocks[0].clean_attrs == "index.ts"
        assert blocks[1].is_cli
        assert blocks[1].code == "bun run index.ts"


class TestCodeGroupCollapser:
    def setup_method(self):
        self.t = CodeGroupCollapser()

    def test_js_and_cli_become_synced_tabs(self, make_doc, stats):
        text = (
            "Intro\n\n<CodeGroup>\n"
            '```ts index.ts icon="/icons/typescript.svg"\nconsole.log(1);\n```\n'
            '```bash icon="terminal"\nbun run index.ts\n```\n'
            "</CodeGroup>\n\nOutro\n"
        )
        out = self.t.apply(text, make_doc(text), stats)
        assert out == (
            "Intro\n\n"
            "<Tabs items={['JavaScript', 'CLI']} groupId=\"js/cli\">\n"
            '  <Tab value="JavaScript">\n'
            "    ```ts index.ts\n"
            "    console.log(1);\n"
            "   ```\n"
            "  </Tab>\n"
            '  <Tab value="CLI">\n'
            '    ```bash title="terminal"\n'
            "    bun run index.ts\n"
            "   ```\n"
            "  </Tab>\n"
            "</Tabs>\n\n"
            "Outro\n"
        )
        assert stats.get("codegroup-to-tabs-jsvcli") == 1

    def test_single_fence_unwrapped(self, make_doc, stats):
        text = '<CodeGroup>\n```bash npm icon="npm"\nnpm i\n```\n</CodeGroup>\n'
        out = self.t.apply(text, make_doc(text), stats)
        assert out == "\n\n```bash npm\nnpm i\n```\n\n"
        assert stats.get("codegroup-single-unwrapped") == 1

    def test_empty_group_removed_with_warning(self, make_doc, stats):
        text = "A\n<CodeGroup>\n</CodeGroup>\nB"
        out = self.t.apply(text, make_doc(text), stats)
        assert out == "A\n\nB"
        assert stats.get("codegroup-empty") == 1
        assert len(stats.warnings) == 1

    def test_other_groups_become_labelled_fences(self, make_doc, stats):
        text = "<CodeGroup>\n```bash npm\nnpm i x\n```\n```bash yarn\nyarn add x\n```\n</CodeGroup>"
        out = self.t.apply(text, make_doc(text), stats)
        assert out == '\n\n```bash tab="npm"\nnpm i x\n```\n\n```bash tab="yarn"\nyarn add x\n```\n\n'
        assert stats.get("codegroup-unwrapped") == 1

    def test_three_labelled_fences_get_distinct_tabs(self, make_doc, stats):
        text = (
            "<CodeGroup>\n"
            "```bash npm\nnpm i x\n```\n"
            "```bash yarn\nyarn add x\n```\n"
            "```bash pnpm\npnpm add x\n```\n"
            "</CodeGroup>"
        )
        out = self.t.apply(text, make_doc(text), stats)
        assert out == (
            '\n\n```bash tab="npm"\nnpm i x\n```\n\n'
            '```bash tab="yarn"\nyarn add x\n```\n\n'
            '```bash tab="pnpm"\npnpm add x\n```\n\n'
        )
        assert re.findall(r'tab="([^"]+)"', out) == ["npm", "yarn", "pnpm"]
        assert "<CodeGroup>" not in out
        assert stats.get("codegroup-unwrapped") == 1

    def test_titled_fence_keeps_title(self, make_doc, stats):
        text = (
            '<CodeGroup>\n```ts title="a.ts"\na\n```\n```ts title="b.ts"\nb\n```\n</CodeGroup>'
        )
        out = self.t.apply(text, make_doc(text), stats)
        assert '```ts title="a.ts"\na\n```' in out
        assert '```ts title="b.ts"\nb\n```' in out
        assert "tab=" not in out
