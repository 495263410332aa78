"""Tests for ADF to text conversion."""

import logging

from jira_pm.adf_converter import adf_to_text
from jira_pm.formatter import format_text


def _doc(*content):
    return {"type": "doc", "version": 1, "content": list(content)}


def _para(*inline):
    return {"type": "paragraph", "content": list(inline)}


def _text(text, *marks):
    node = {"type": "text", "text": text}
    if marks:
        node["marks"] = list(marks)
    return node


class TestAdfToText:
    """Tests for block rendering."""

    def test_none_and_empty(self):
        assert adf_to_text(None) == ""
        assert adf_to_text({}) == ""
        assert adf_to_text(_doc()) == ""

    def test_paragraphs_are_separated_by_blank_lines(self):
        assert adf_to_text(_doc(_para(_text("A")), _para(_text("B")))) == "A\n\nB"

    def test_empty_paragraphs_are_skipped(self):
        assert adf_to_text(_doc(_para(_text("A")), _para(), _para(_text("B")))) == "A\n\nB"

    def test_heading(self):
        heading = {"type": "heading", "attrs": {"level": 2}, "content": [_text("Plan")]}
        assert adf_to_text(_doc(heading)) == "## Plan"

    def test_lists(self):
        adf = format_text("- a\n- b\n1. c").to_adf()
        assert adf_to_text(adf) == "- a\n- b\n\n1. c"

    def test_nested_list_is_indented(self):
        nested = {
            "type": "bulletList",
            "content": [
                {
                    "type": "listItem",
                    "content": [
                        _para(_text("outer")),
                        {
                            "type": "orderedList",
                            "content": [{"type": "listItem", "content": [_para(_text("inner"))]}],
                        },
                    ],
                }
            ],
        }
        assert adf_to_text(_doc(nested)) == "- outer\n  1. inner"

    def test_rule_and_code_block(self):
        code = {"type": "codeBlock", "attrs": {"language": "sh"}, "content": [_text("ls -la")]}
        assert adf_to_text(_doc({"type": "rule"}, code)) == "---\n\n```sh\nls -la\n```"

    def test_blockquote(self):
        quote = {"type": "blockquote", "content": [_para(_text("quoted"))]}
        assert adf_to_text(_doc(quote)) == "> quoted"

    def test_unknown_node_renders_children_and_warns(self, caplog, monkeypatch):
        unknown = {"type": "expand", "content": [_para(_text("hidden"))]}
        monkeypatch.setattr(logging.getLogger("jira_pm"), "propagate", True)
        with caplog.at_level(logging.WARNING, logger="jira_pm.adf"):
            assert adf_to_text(_doc(unknown)) == "hidden"
        assert "adf_unknown_node_type" in caplog.text


class TestInline:
    """Tests for inline marks and nodes."""

    def test_marks(self):
        adf = _doc(_para(
            _text("b", {"type": "strong"}),
            _text(" "),
            _text("i", {"type": "em"}),
            _text(" "),
            _text("c", {"type": "code"}),
            _text(" "),
            _text("s", {"type": "strike"}),
        ))
        assert adf_to_text(adf) == "**b** *i* `c` ~~s~~"

    def test_link(self):
        link = {"type": "link", "attrs": {"href": "https://example.com"}}
        assert adf_to_text(_doc(_para(_text("site", link)))) == "[site](https://example.com)"

    def test_hard_break_mention_and_emoji(self):
        adf = _doc(_para(
            _text("hi"),
            {"type": "hardBreak"},
            {"type": "mention", "attrs": {"text": "@Ana"}},
            _text(" "),
            {"type": "emoji", "attrs": {"shortName": ":tada:"}},
        ))
        assert adf_to_text(adf) == "hi\n@Ana :tada:"

    def test_round_trip_of_formatter_output(self):
        text = "# Title\n\n**Bold**\n\nBody"
        assert adf_to_text(format_text(text).to_adf()) == text
