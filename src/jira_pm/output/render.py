"""Markdown renderers for tool responses.

These produce the text blocks shown to the assistant (and printed by the
CLI in text mode).
"""

from __future__ import annotations

from typing import Optional

from ..errors import JiraError
from ..models import CreatedTicket, TicketList, TicketRecord, TicketRequest, UpdatedTicket


def _date(value: Optional[str]) -> str:
    """``2025-01-31T10:22:01.000+0000`` -> ``2025-01-31 10:22``."""
    if not value:
        return "Unknown"
    return value[:16].replace("T", " ")


def render_preview(request: TicketRequest, project_key: str) -> str:
    """Preview of a ticket that has not been created yet."""
    project = project_key
    if request.project != project_key:
        project = f"{project_key} (from \"{request.project}\")"
    labels = ", ".join(request.labels) if request.labels else "None"
    return f"""📋 **JIRA Ticket Preview**

🎯 **Summary:** {request.title}
📌 **Type:** {request.issue_type}
📂 **Project:** {project}
🏷️ **Labels:** {labels}

📄 **Description:**

**Current**
{request.current_state}

**Desired**
{request.desired_state}

---"""


def render_preview_prompt() -> str:
    return (
        "⚠️ Not created yet. Show this preview to the user and call "
        "create_ticket again with confirm=true once they approve."
    )


def render_created(created: CreatedTicket) -> str:
    return f"""✅ **JIRA Ticket Created Successfully!**

🎫 **Ticket:** {created.key}
🔗 **URL:** {created.url}

The ticket has been created in the {created.project} project with your Current/Desired format."""


def render_ticket(ticket: TicketRecord) -> str:
    lines = [
        f"🎫 **{ticket.key}: {ticket.summary}**",
        "",
        f"📋 **Project:** {ticket.project or ticket.key.split('-')[0]}",
        f"🔗 **URL:** {ticket.url}",
        f"📊 **Status:** {ticket.status}",
        f"🎯 **Type:** {ticket.issue_type}",
        f"⚡ **Priority:** {ticket.priority}",
        f"👤 **Assignee:** {ticket.assignee or 'Unassigned'}",
        f"📝 **Reporter:** {ticket.reporter or 'Unknown'}",
        f"📅 **Created:** {_date(ticket.created_at)}",
        f"🔄 **Updated:** {_date(ticket.updated_at)}",
    ]
    if ticket.labels:
        lines.append(f"🏷️ **Labels:** {', '.join(ticket.labels)}")
    if ticket.components:
        lines.append(f"🧩 **Components:** {', '.join(ticket.components)}")
    if ticket.fix_versions:
        lines.append(f"🚀 **Fix Versions:** {', '.join(ticket.fix_versions)}")

    lines += ["", "📄 **Description:**", ticket.description or "No description provided"]

    if ticket.comments:
        rendered = "\n\n---\n\n".join(
            f"**{c.author}** ({_date(c.created_at)}):\n{c.body}" for c in ticket.comments
        )
        lines += ["", "💬 **Recent Comments:**", rendered]

    return "\n".join(lines)


def render_updated(updated: UpdatedTicket) -> str:
    return f"""✅ **JIRA Ticket Updated Successfully!**

🎫 **Ticket:** {updated.key}
🔗 **URL:** {updated.url}
📝 **Updated Fields:** {', '.join(updated.updated_fields)}

The ticket has been updated with your changes."""


def describe_filters(project: str, assignee: str, status: Optional[str], order_by: str) -> str:
    parts = [f"Project: {project}"]
    if assignee == "me":
        parts.append("Assignee: You")
    elif assignee == "unassigned":
        parts.append("Assignee: Unassigned")
    elif assignee != "all":
        parts.append(f"Assignee: {assignee}")
    if status:
        parts.append(f"Status: {status}")
    parts.append(f"Order: {order_by}")
    return " | ".join(parts)


def render_list(result: TicketList, filters: str, browse_url) -> str:
    """Numbered ticket list. ``browse_url`` maps a key to its issue URL."""
    rows = []
    for idx, ticket in enumerate(result.tickets, start=1):
        meta = f"👤 {ticket.assignee} | 📊 {ticket.status} | 🏷️ {ticket.issue_type}"
        if ticket.priority != "None":
            meta += f" | ⚡ {ticket.priority}"
        rows.append(f"{idx}. **[{ticket.key}]({browse_url(ticket.key)})** {ticket.summary}\n   {meta}")

    body = "\n\n".join(rows) if rows else "_No tickets match these filters._"
    return f"""📋 **JIRA Tickets**

🔍 **Filters:** {filters}
📊 **Results:** {len(result.tickets)} of {result.total} tickets

{body}

---
_JQL Query: `{result.query}`_"""


def render_error(action: str, error: JiraError, hints: list[str]) -> str:
    """Error block: what failed, then error-specific and generic hints."""
    all_hints = list(dict.fromkeys([*error.suggestions, *hints]))
    hint_lines = "\n".join(f"- {hint}" for hint in all_hints)
    text = f"❌ **Error {action}:** {error}"
    if hint_lines:
        text += f"\n\n🔧 **This might help:**\n{hint_lines}"
    return text
