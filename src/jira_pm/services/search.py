"""Ticket listing via JQL, shared by the CLI and MCP server."""

from __future__ import annotations

import logging
import re

from ..jira_client import JiraClient
from ..models import ListQuery, TicketList, TicketSummary

logger = logging.getLogger("jira_pm.search")

PROJECT_KEY_RE = re.compile(r"^[A-Z][A-Z0-9_]*$")

ORDER_CLAUSES = {
    "rank": "ORDER BY Rank ASC",
    "created": "ORDER BY created DESC",
    "updated": "ORDER BY updated DESC",
    "priority": "ORDER BY priority DESC, created DESC",
}


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _project_clause(project_key: str) -> str:
    if PROJECT_KEY_RE.match(project_key):
        return f"project = {project_key}"
    return f"project = {_quote(project_key)}"


def order_clause(order_by: str) -> str:
    """JQL ORDER BY for ``order_by``; unknown keys fall back to board rank."""
    clause = ORDER_CLAUSES.get(order_by)
    if clause is None:
        logger.warning("unknown_order_by", extra={"order_by": order_by, "fallback": "rank"})
        return ORDER_CLAUSES["rank"]
    return clause


def build_jql(project_key: str, query: ListQuery) -> str:
    """Build the JQL filter for a listing."""
    parts = [_project_clause(project_key)]

    if query.assignee == "me":
        parts.append("assignee = currentUser()")
    elif query.assignee == "unassigned":
        parts.append("assignee is EMPTY")
    elif query.assignee != "all":
        parts.append(f"assignee = {_quote(query.assignee)}")

    if query.status:
        parts.append(f"status = {_quote(query.status)}")

    return f"{' AND '.join(parts)} {order_clause(query.order_by)}"


def _format_issue_summary(issue: dict) -> TicketSummary:
    fields = issue.get("fields") or {}
    assignee = fields.get("assignee")
    return TicketSummary(
        key=issue["key"],
        summary=fields.get("summary", ""),
        status=(fields.get("status") or {}).get("name", "Unknown"),
        assignee=assignee.get("displayName", "Unassigned") if assignee else "Unassigned",
        assignee_email=assignee.get("emailAddress") if assignee else None,
        priority=(fields.get("priority") or {}).get("name", "None"),
        issue_type=(fields.get("issuetype") or {}).get("name", "Unknown"),
        created_at=fields.get("created"),
        updated_at=fields.get("updated"),
    )


def list_tickets(client: JiraClient, query: ListQuery) -> TicketList:
    """List a project's tickets with assignee/status filters and ordering."""
    project_key = client.config.aliases.resolve(query.project)
    jql = build_jql(project_key, query)
    logger.info("ticket_list", extra={"jql": jql, "max_results": query.max_results})

    data = client.search_issues(jql, query.max_results) or {}
    tickets = [_format_issue_summary(issue) for issue in data.get("issues", [])]

    return TicketList(
        total=data.get("total") or len(tickets),
        tickets=tickets,
        query=jql,
    )
