"""Tests for output formatting."""

import json

from jira_pm.errors import ValidationError
from jira_pm.models import TicketList, TicketSummary, UpdatedTicket
from jira_pm.output import format_response, render_cli
from jira_pm.output.render import describe_filters, render_error, render_list


class TestFormatResponse:
    def test_json_uses_to_dict(self):
        updated = UpdatedTicket(key="FRON-1", url="u", updated_fields=["summary"])
        response = format_response(updated, "json")
        assert response == {
            "format": "json",
            "content": {"key": "FRON-1", "url": "u", "updated_fields": ["summary"]},
        }
        assert json.loads(render_cli(response))["key"] == "FRON-1"

    def test_text_uses_renderer(self):
        response = format_response("x", "TEXT", text_renderer=lambda p: f"<{p}>")
        assert render_cli(response) == "<x>"

    def test_text_without_renderer_dumps_records(self):
        updated = UpdatedTicket(key="FRON-1", url="u", updated_fields=[])
        assert '"key": "FRON-1"' in format_response(updated)["content"]


class TestRender:
    def test_describe_filters(self):
        assert describe_filters("FRON", "all", None, "rank") == "Project: FRON | Order: rank"
        assert describe_filters("FRON", "unassigned", None, "created") == (
            "Project: FRON | Assignee: Unassigned | Order: created"
        )

    def test_list_hides_none_priority(self):
        result = TicketList(
            total=3,
            tickets=[TicketSummary("FRON-1", "S", "To Do", "Ana", "None", "Task")],
            query="project = FRON ORDER BY Rank ASC",
        )
        text = render_list(result, "Project: FRON", lambda key: f"https://x/{key}")
        assert "⚡" not in text
        assert "1 of 3 tickets" in text

    def test_error_deduplicates_hints(self):
        error = ValidationError("bad", suggestions=["Check key", "Other"])
        text = render_error("reading JIRA ticket", error, ["Check key"])
        assert text.count("- Check key") == 1
        assert text.startswith("❌ **Error reading JIRA ticket:** bad")
