"""Tests for the text to ADF formatter."""

from jira_pm.formatter import (
    BulletList,
    Document,
    Heading,
    OrderedList,
    Paragraph,
    Rule,
    append_text,
    current_desired_document,
    format_text,
)


class TestFormatText:
    """Tests for format_text line classification."""

    def test_heading_and_paragraph(self):
        doc = format_text("# Title\nBody text")
        assert doc.nodes == (Heading(1, "Title"), Paragraph("Body text"))

    def test_heading_levels(self):
        doc = format_text("### Third\n###### Sixth")
        assert [n.level for n in doc.nodes] == [3, 6]

    def test_seven_hashes_is_a_paragraph(self):
        doc = format_text("####### Too deep")
        assert doc.nodes == (Paragraph("####### Too deep"),)

    def test_hash_without_space_is_a_paragraph(self):
        assert format_text("#tag").nodes == (Paragraph("#tag"),)

    def test_bullets_then_numbers_make_two_lists(self):
        doc = format_text("- a\n- b\n1. c")
        assert doc.nodes == (BulletList(("a", "b")), OrderedList(("c",)))

    def test_star_bullets(self):
        doc = format_text("* one\n- two")
        assert doc.nodes == (BulletList(("one", "two")),)

    def test_numbered_list_ignores_the_numbers(self):
        doc = format_text("1. first\n7. second\n3. third")
        assert doc.nodes == (OrderedList(("first", "second", "third")),)

    def test_blank_line_splits_lists(self):
        doc = format_text("- a\n\n- b")
        assert doc.nodes == (BulletList(("a",)), BulletList(("b",)))

    def test_whole_line_bold(self):
        doc = format_text("**Bold**")
        assert doc.nodes == (Paragraph("Bold", bold=True),)

    def test_blank_lines_are_dropped(self):
        doc = format_text("A\n\nB")
        assert doc.nodes == (Paragraph("A"), Paragraph("B"))

    def test_empty_text_is_an_empty_document(self):
        assert len(format_text("")) == 0
        assert format_text("\n\n  \n").to_adf()["content"] == []

    def test_partial_bold_stays_literal(self):
        doc = format_text("some **bold** words")
        assert doc.nodes == (Paragraph("some **bold** words"),)


class TestToAdf:
    """Tests for ADF serialisation of nodes."""

    def test_document_envelope(self):
        adf = Document((Paragraph("x"),)).to_adf()
        assert adf["type"] == "doc"
        assert adf["version"] == 1
        assert adf["content"] == [
            {"type": "paragraph", "content": [{"type": "text", "text": "x"}]}
        ]

    def test_heading(self):
        assert Heading(2, "Plan").to_adf() == {
            "type": "heading",
            "attrs": {"level": 2},
            "content": [{"type": "text", "text": "Plan"}],
        }

    def test_bold_paragraph_has_strong_mark(self):
        node = Paragraph("Current", bold=True).to_adf()
        assert node["content"][0]["marks"] == [{"type": "strong"}]

    def test_list_items_wrap_paragraphs(self):
        adf = BulletList(("a", "b")).to_adf()
        assert adf["type"] == "bulletList"
        assert adf["content"][1] == {
            "type": "listItem",
            "content": [{"type": "paragraph", "content": [{"type": "text", "text": "b"}]}],
        }

    def test_rule(self):
        assert Rule().to_adf() == {"type": "rule"}


class TestCurrentDesiredDocument:
    def test_template(self):
        adf = current_desired_document("broken", "fixed").to_adf()
        texts = [block["content"][0]["text"] for block in adf["content"]]
        assert texts == ["Current", "broken", "", "Desired", "fixed"]
        assert "marks" in adf["content"][0]["content"][0]
        assert "marks" in adf["content"][3]["content"][0]
        assert "marks" not in adf["content"][1]["content"][0]


class TestAppendText:
    """Tests for appending text to an existing description."""

    def test_appends_after_separator(self):
        existing = format_text("Old").to_adf()
        result = append_text(existing, "New")

        types = [block["type"] for block in result["content"]]
        assert types == ["paragraph", "paragraph", "rule", "paragraph", "paragraph"]
        assert result["content"][0]["content"][0]["text"] == "Old"
        assert result["content"][-1]["content"][0]["text"] == "New"

    def test_existing_document_is_not_mutated(self):
        existing = format_text("Old").to_adf()
        before = repr(existing)

        append_text(existing, "- more")

        assert repr(existing) == before

    def test_none_description(self):
        result = append_text(None, "# Notes")
        assert [block["type"] for block in result["content"]] == [
            "paragraph", "rule", "paragraph", "heading",
        ]

    def test_unknown_node_types_are_kept(self):
        existing = {
            "type": "doc",
            "version": 1,
            "content": [{"type": "mediaSingle", "content": [{"type": "media"}]}],
        }
        result = append_text(existing, "x")
        assert result["content"][0] == {"type": "mediaSingle", "content": [{"type": "media"}]}
