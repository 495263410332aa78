"""Tests for the create, read and update ticket operations."""

from unittest.mock import Mock

import pytest

from jira_pm.config import JiraConfig
from jira_pm.errors import NotFoundError, ValidationError
from jira_pm.formatter import format_text
from jira_pm.jira_client import JiraClient
from jira_pm.models import TicketRequest, UpdateSpec
from jira_pm.services.tickets import (
    build_update_payload,
    create_ticket,
    merge_labels,
    read_ticket,
    update_ticket,
)


@pytest.fixture
def config():
    return JiraConfig(email="me@example.com", api_token="t", max_comments=2)


@pytest.fixture
def client(config):
    mock_client = Mock(spec=JiraClient)
    mock_client.config = config
    mock_client.browse_url.side_effect = config.browse_url
    return mock_client


def _issue(**fields):
    return {"key": "FRON-7", "fields": fields}


class TestCreateTicket:
    """Tests for create_ticket."""

    def test_sends_template_and_resolves_alias(self, client):
        client.create_issue.return_value = {"id": "10001", "key": "FRON-1600", "self": "api/10001"}
        request = TicketRequest(
            title="[DTMI] Fix login",
            current_state="Login is broken",
            desired_state="Login works",
            project="mobile install",
            labels=["DTMI"],
        )

        created = create_ticket(client, request)

        fields = client.create_issue.call_args.args[0]
        assert fields["project"] == {"key": "FRON"}
        assert fields["summary"] == "[DTMI] Fix login"
        assert fields["issuetype"] == {"name": "Task"}
        assert fields["labels"] == ["DTMI"]
        texts = [b["content"][0]["text"] for b in fields["description"]["content"]]
        assert texts == ["Current", "Login is broken", "", "Desired", "Login works"]

        assert created.key == "FRON-1600"
        assert created.id == "10001"
        assert created.url == "https://asaptire.atlassian.net/browse/FRON-1600"
        assert created.project == "FRON"

    def test_remote_failure_propagates(self, client):
        client.create_issue.side_effect = NotFoundError("nope", status=404)
        request = TicketRequest("t", "c", "d", "FRON")
        with pytest.raises(NotFoundError):
            create_ticket(client, request)


class TestReadTicket:
    """Tests for read_ticket."""

    def test_maps_fields(self, client):
        client.get_issue.return_value = _issue(
            summary="Broken login",
            status={"name": "In Progress"},
            priority={"name": "High"},
            issuetype={"name": "Bug"},
            project={"key": "FRON"},
            assignee={"displayName": "Ana", "emailAddress": "ana@example.com"},
            reporter={"displayName": "Bo"},
            created="2025-01-31T10:22:01.000+0000",
            updated="2025-02-01T08:00:00.000+0000",
            labels=["Security"],
            components=[{"name": "Portal"}],
            fixVersions=[{"name": "1.2"}],
            description=format_text("# Steps\n- open app").to_adf(),
        )

        ticket = read_ticket(client, "FRON-7")

        client.get_issue.assert_called_once_with("FRON-7")
        assert ticket.summary == "Broken login"
        assert ticket.status == "In Progress"
        assert ticket.priority == "High"
        assert ticket.issue_type == "Bug"
        assert ticket.assignee == "Ana"
        assert ticket.assignee_email == "ana@example.com"
        assert ticket.reporter == "Bo"
        assert ticket.labels == ["Security"]
        assert ticket.components == ["Portal"]
        assert ticket.fix_versions == ["1.2"]
        assert ticket.description == "# Steps\n\n- open app"
        assert ticket.url == "https://asaptire.atlassian.net/browse/FRON-7"

    def test_missing_fields_use_fallbacks(self, client):
        client.get_issue.return_value = _issue(summary="Bare")

        ticket = read_ticket(client, "FRON-7")

        assert ticket.status == "Unknown"
        assert ticket.priority == "None"
        assert ticket.assignee is None
        assert ticket.description == ""
        assert ticket.comments == []

    def test_keeps_most_recent_comments(self, client):
        comments = [
            {
                "author": {"displayName": f"User {n}"},
                "created": f"2025-01-0{n}T09:00:00.000+0000",
                "body": format_text(f"comment {n}").to_adf(),
            }
            for n in range(1, 5)
        ]
        client.get_issue.return_value = _issue(summary="x", comment={"comments": comments})

        ticket = read_ticket(client, "FRON-7")

        assert [c.author for c in ticket.comments] == ["User 3", "User 4"]
        assert ticket.comments[-1].body == "comment 4"

    def test_invalid_key_makes_no_call(self, client):
        with pytest.raises(ValidationError):
            read_ticket(client, "fron-7")
        client.get_issue.assert_not_called()


class TestMergeLabels:
    def test_add_and_remove(self):
        assert merge_labels(["a", "b"], ["c", "a"], ["b"]) == ["a", "c"]

    def test_remove_wins_over_add(self):
        assert merge_labels([], ["x"], ["x"]) == []

    def test_remove_missing_label_is_noop(self):
        assert merge_labels(["a"], [], ["zzz"]) == ["a"]


class TestBuildUpdatePayload:
    """Tests for the PUT body."""

    def test_summary_only(self):
        spec = UpdateSpec(ticket_key="FRON-1", summary="New")
        assert build_update_payload(spec) == {"fields": {"summary": "New"}}

    def test_replace_wins_over_append(self):
        spec = UpdateSpec(
            ticket_key="FRON-1", append_description="more", replace_description="# Fresh"
        )

        payload = build_update_payload(spec)

        assert "fields" not in payload
        assert payload["update"]["description"] == [
            {"set": format_text("# Fresh").to_adf()}
        ]

    def test_append_keeps_existing_description(self):
        current = {"fields": {"description": format_text("Old").to_adf(), "labels": []}}
        spec = UpdateSpec(ticket_key="FRON-1", append_description="New")

        doc = build_update_payload(spec, current)["update"]["description"][0]["set"]

        assert doc["content"][0]["content"][0]["text"] == "Old"
        assert {"type": "rule"} in doc["content"]
        assert doc["content"][-1]["content"][0]["text"] == "New"

    def test_labels_merge_with_current(self):
        current = {"fields": {"labels": ["keep", "drop"]}}
        spec = UpdateSpec(ticket_key="FRON-1", add_labels=["new"], remove_labels=["drop"])

        assert build_update_payload(spec, current) == {"fields": {"labels": ["keep", "new"]}}


class TestUpdateTicket:
    """Tests for update_ticket."""

    def test_summary_only_is_a_single_write(self, client):
        spec = UpdateSpec(ticket_key="FRON-7", summary="Renamed")

        updated = update_ticket(client, spec)

        client.get_issue.assert_not_called()
        client.update_issue.assert_called_once_with("FRON-7", {"fields": {"summary": "Renamed"}})
        assert updated.updated_fields == ["summary"]
        assert updated.url == "https://asaptire.atlassian.net/browse/FRON-7"

    def test_append_reads_once_then_writes(self, client):
        client.get_issue.return_value = _issue(description=format_text("Old").to_adf(), labels=[])
        spec = UpdateSpec(ticket_key="FRON-7", append_description="New", add_labels=["x"])

        updated = update_ticket(client, spec)

        client.get_issue.assert_called_once_with("FRON-7", fields="description,labels")
        payload = client.update_issue.call_args.args[1]
        assert payload["fields"]["labels"] == ["x"]
        assert updated.updated_fields == ["labels", "description"]

    def test_replace_does_not_read(self, client):
        spec = UpdateSpec(ticket_key="FRON-7", replace_description="All new")

        update_ticket(client, spec)

        client.get_issue.assert_not_called()
        client.update_issue.assert_called_once()

    def test_no_changes_makes_no_calls(self, client):
        with pytest.raises(ValidationError, match="No updates specified"):
            update_ticket(client, UpdateSpec(ticket_key="FRON-7", summary=""))
        client.get_issue.assert_not_called()
        client.update_issue.assert_not_called()

    def test_bad_key_makes_no_calls(self, client):
        with pytest.raises(ValidationError, match="Invalid ticket key"):
            update_ticket(client, UpdateSpec(ticket_key="FRON7", summary="x"))
        client.update_issue.assert_not_called()
