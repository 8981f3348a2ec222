"""Tests for MDX component renames and structural fixes."""

from fumadocs_migrate.transform import AccordionWrapperFixer, ComponentRenamer, StepIndentationFixer
from fumadocs_migrate.transform.components import wrap_lone_accordions


class TestComponentRenamer:
    def setup_method(self):
        self.t = ComponentRenamer()

    def test_callouts(self, make_doc, stats):
        text = "<Note>Careful</Note>\n<Warning>Danger</Warning>\n<Tip>Hint</Tip>\n"
        out = self.t.apply(text, make_doc(text), stats)
        assert out == (
            '<Callout type="info">Careful</Callout>\n'
            '<Callout type="warning">Danger</Callout>\n'
            '<Callout type="info">Hint</Callout>\n'
        )
        assert stats.get("revert-note-to-callout") == 1
        assert stats.get("revert-warning-to-callout") == 1
        assert stats.get("revert-tip-to-callout") == 1

    def test_multiline_callout(self, make_doc, stats):
        text = "<Info>\nLine one.\n\nLine two.\n</Info>"
        out = self.t.apply(text, make_doc(text), stats)
        assert out == '<Callout type="info">\nLine one.\n\nLine two.\n</Callout>'

    def test_tab_title(self, make_doc, stats):
        text = '<Tab title="macOS">x</Tab>'
        assert self.t.apply(text, make_doc(text), stats) == '<Tab value="macOS">x</Tab>'
        assert stats.get("revert-tab-title-to-value") == 1

    def test_accordion_group(self, make_doc, stats):
        text = (
            "<AccordionGroup>\n"
            '<Accordion title="A">a</Accordion>\n'
            '<Accordion title="B">b</Accordion>\n'
            "</AccordionGroup>"
        )
        out = self.t.apply(text, make_doc(text), stats)
        assert out == (
            '<Accordions type="single">\n'
            '<Accordion title="A">a</Accordion>\n'
            '<Accordion title="B">b</Accordion>\n'
            "</Accordions>"
        )
        assert stats.get("revert-accordiongroup-to-accordions") == 1
        assert stats.get("wrap-accordion-in-accordions") == 0

    def test_lone_accordion_wrapped(self, make_doc, stats):
        text = 'Intro\n\n<Accordion title="FAQ">\nAnswer\n</Accordion>\n'
        out = self.t.apply(text, make_doc(text), stats)
        assert out == (
            'Intro\n\n<Accordions type="single">\n<Accordion title="FAQ">\nAnswer\n</Accordion>\n</Accordions>\n'
        )
        assert stats.get("wrap-accordion-in-accordions") == 1

    def test_card_group(self, make_doc, stats):
        text = '<CardGroup cols={2}>\n<Card title="A" />\n</CardGroup>'
        out = self.t.apply(text, make_doc(text), stats)
        assert out == '<Cards cols={2}>\n<Card title="A" />\n</Cards>'
        assert stats.get("revert-cardgroup-to-cards") == 1

    def test_step_title_becomes_heading(self, make_doc, stats):
        text = '<Steps>\n  <Step title="Install">\n    Run it.\n  </Step>\n</Steps>'
        out = self.t.apply(text, make_doc(text), stats)
        assert out == "<Steps>\n  <Step>\n    ### Install\n    Run it.\n  </Step>\n</Steps>"
        assert stats.get("revert-step-title") == 1

    def test_converted_components_untouched(self, make_doc, stats):
        text = '<Callout type="info">x</Callout>\n<Accordions type="single">\n<Accordion title="A">a</Accordion>\n</Accordions>\n'
        assert self.t.apply(text, make_doc(text), stats) == text
        assert stats.total == 0


class TestWrapLoneAccordions:
    def test_wrapped_ones_skipped(self):
        text = '<Accordions>\n<Accordion title="A">a</Accordion>\n</Accordions>'
        assert wrap_lone_accordions(text) == (text, 0)

    def test_mixed(self):
        text = (
            '<Accordions>\n<Accordion title="A">a</Accordion>\n</Accordions>\n'
            '<Accordion title="B">b</Accordion>'
        )
        out, n = wrap_lone_accordions(text)
        assert n == 1
        assert out.endswith('<Accordions type="single">\n<Accordion title="B">b</Accordion>\n</Accordions>')


class TestAccordionWrapperFixer:
    def test_adjacent_wrappers_merged(self, make_doc, stats):
        text = '<Accordion title="A">a</Accordion>\n\n<Accordion title="B">b</Accordion>'
        doc = make_doc(text)
        out = ComponentRenamer().apply(text, doc, stats)
        out = AccordionWrapperFixer().apply(out, doc, stats)
        assert out == (
            '<Accordions type="single">\n'
            '<Accordion title="A">a</Accordion>\n\n'
            '<Accordion title="B">b</Accordion>\n'
            "</Accordions>"
        )
        assert stats.get("accordion-wrappers-merged") == 1

    def test_single_wrapper_untouched(self, make_doc, stats):
        text = '<Accordions type="single">\n<Accordion title="A">a</Accordion>\n</Accordions>\n\nText\n'
        assert AccordionWrapperFixer().apply(text, make_doc(text), stats) == text


class TestStepIndentationFixer:
    def setup_method(self):
        self.t = StepIndentationFixer()

    def test_indents_step_body(self, make_doc, stats):
        text = "<Step>\n### Install\nRun it.\n</Step>"
        out = self.t.apply(text, make_doc(text), stats)
        assert out == "<Step>\n  ### Install\n  Run it.\n</Step>"
        assert stats.get("step-indentation-fixed") == 1

    def test_indented_body_untouched(self, make_doc, stats):
        text = "  <Step>\n    ### Install\n    Run it.\n  </Step>"
        assert self.t.apply(text, make_doc(text), stats) == text
        assert stats.total == 0
