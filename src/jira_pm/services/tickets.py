"""Create, read and update operations shared by the CLI and MCP server."""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..adf_converter import adf_to_text
from ..formatter import append_text, current_desired_document, format_text
from ..jira_client import JiraClient
from ..models import (
    Comment,
    CreatedTicket,
    TicketRecord,
    TicketRequest,
    UpdatedTicket,
    UpdateSpec,
    validate_ticket_key,
)

logger = logging.getLogger("jira_pm.tickets")


def _name(value: Optional[dict], key: str = "name") -> Optional[str]:
    return value.get(key) if value else None


def create_ticket(client: JiraClient, request: TicketRequest) -> CreatedTicket:
    """Create a ticket with the Current/Desired description template."""
    project_key = client.config.aliases.resolve(request.project)
    logger.info("ticket_create", extra={"project": project_key, "issue_type": request.issue_type})

    fields = {
        "project": {"key": project_key},
        "summary": request.title,
        "description": current_desired_document(
            request.current_state, request.desired_state
        ).to_adf(),
        "issuetype": {"name": request.issue_type},
        "labels": list(request.labels),
    }
    data = client.create_issue(fields)

    key = data["key"]
    logger.info("ticket_created", extra={"key": key})
    return CreatedTicket(
        key=key,
        id=data.get("id"),
        url=client.browse_url(key),
        self_url=data.get("self"),
    )


def _comments(fields: dict, limit: int) -> list[Comment]:
    comments = (fields.get("comment") or {}).get("comments") or []
    recent = comments[-limit:] if limit > 0 else []
    return [
        Comment(
            author=_name(c.get("author"), "displayName") or "Unknown",
            created_at=c.get("created", ""),
            body=adf_to_text(c.get("body")) if isinstance(c.get("body"), dict) else (c.get("body") or ""),
        )
        for c in recent
    ]


def issue_to_record(issue: dict, url: str, max_comments: int) -> TicketRecord:
    """Map a ``GET /issue/{key}`` response to a TicketRecord."""
    fields = issue.get("fields") or {}
    assignee = fields.get("assignee")
    description = fields.get("description")

    return TicketRecord(
        key=issue["key"],
        summary=fields.get("summary", ""),
        status=_name(fields.get("status")) or "Unknown",
        priority=_name(fields.get("priority")) or "None",
        issue_type=_name(fields.get("issuetype")) or "Unknown",
        created_at=fields.get("created", ""),
        updated_at=fields.get("updated", ""),
        url=url,
        project=_name(fields.get("project"), "key"),
        assignee=_name(assignee, "displayName"),
        assignee_email=_name(assignee, "emailAddress"),
        reporter=_name(fields.get("reporter"), "displayName"),
        labels=list(fields.get("labels") or []),
        components=[c["name"] for c in fields.get("components") or [] if c.get("name")],
        fix_versions=[v["name"] for v in fields.get("fixVersions") or [] if v.get("name")],
        description=adf_to_text(description) if isinstance(description, dict) else (description or ""),
        comments=_comments(fields, max_comments),
    )


def read_ticket(client: JiraClient, ticket_key: str) -> TicketRecord:
    """Fetch a ticket with its most recent comments."""
    validate_ticket_key(ticket_key)
    issue = client.get_issue(ticket_key)
    return issue_to_record(issue, client.browse_url(ticket_key), client.config.max_comments)


def merge_labels(current: list[str], add: list[str], remove: list[str]) -> list[str]:
    """Current labels plus ``add`` (first occurrence kept), minus ``remove``."""
    merged = list(dict.fromkeys([*current, *add]))
    return [label for label in merged if label not in remove]


def build_update_payload(spec: UpdateSpec, current: Optional[dict] = None) -> dict[str, Any]:
    """Build the ``PUT /issue`` body for ``spec``.

    ``current`` is the ticket as fetched when ``spec.needs_current_state()``.
    Empty ``fields``/``update`` sections are left out.
    """
    current_fields = (current or {}).get("fields") or {}
    fields: dict[str, Any] = {}
    update: dict[str, Any] = {}

    if spec.summary:
        fields["summary"] = spec.summary

    # Rich-text fields go through "update"/"set", not "fields"
    if spec.replace_description:
        update["description"] = [{"set": format_text(spec.replace_description).to_adf()}]
    elif spec.append_description:
        update["description"] = [
            {"set": append_text(current_fields.get("description"), spec.append_description)}
        ]

    if spec.add_labels or spec.remove_labels:
        fields["labels"] = merge_labels(
            current_fields.get("labels") or [], spec.add_labels, spec.remove_labels
        )

    payload: dict[str, Any] = {}
    if fields:
        payload["fields"] = fields
    if update:
        payload["update"] = update
    return payload


def update_ticket(client: JiraClient, spec: UpdateSpec) -> UpdatedTicket:
    """Apply ``spec`` to an existing ticket.

    Appending to the description or changing labels reads the ticket first
    and writes the merged result. There is no version check between the two
    calls, so an edit made in Jira in between is overwritten.
    """
    spec.validate()

    current = None
    if spec.needs_current_state():
        current = client.get_issue(spec.ticket_key, fields="description,labels")

    payload = build_update_payload(spec, current)
    logger.info(
        "ticket_update",
        extra={"key": spec.ticket_key, "read_first": current is not None},
    )
    client.update_issue(spec.ticket_key, payload)

    return UpdatedTicket(
        key=spec.ticket_key,
        url=client.browse_url(spec.ticket_key),
        updated_fields=[*payload.get("fields", {}), *payload.get("update", {})],
    )
