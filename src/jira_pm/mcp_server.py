"""MCP Server for jira-pm - Jira ticket management.

Exposes four tools (create, read, update, list) over stdio so an assistant
can manage Jira tickets. Ticket creation is two-phase: the first call
returns a preview, and only a second call with ``confirm=true`` writes.
"""

import logging
import sys
from typing import Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.types import ToolAnnotations

from .config import get_auth_help_message
from .dispatcher import ToolDispatcher, ToolResponse
from .errors import ConfigurationError
from .logging_config import configure_logging
from .services.context import get_client, get_config

logger = logging.getLogger("jira_pm.mcp")

mcp = FastMCP(
    "jira-pm",
    instructions="""jira-pm - Jira ticket management

## Tools

| Goal | Tool | Notes |
|------|------|-------|
| New ticket | `create_ticket` | Preview first, then `confirm=true` |
| Show ticket | `read_ticket` | Key like FRON-1151 |
| Change ticket | `update_ticket` | Summary, description, labels |
| Browse | `list_tickets` | Filter by assignee/status, board order |

## Creating tickets
1. Turn the user's brain dump into a clean title plus Current/Desired text.
2. Call `create_ticket` WITHOUT `confirm` and show the preview.
3. Only after the user approves, call again with identical fields and `confirm=true`.

## Projects
Project keys accept aliases: FRON = "ASAP Fork" = TRMI = "mobile install";
TRAC = TRACI; INN = "innovation". Unknown names are used upper-cased.

## Descriptions
`appendDescription` / `replaceDescription` understand `# headings`,
`- bullets`, `1. numbered` lists and whole-line `**bold**`.""",
)

_dispatcher: Optional[ToolDispatcher] = None


def _get_dispatcher() -> ToolDispatcher:
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = ToolDispatcher(get_client())
    return _dispatcher


def _run(name: str, arguments: dict) -> str:
    """Dispatch a tool call; error responses are raised as ToolError.

    FastMCP turns a ToolError into a result with the error flag set, so the
    session carries on.
    """
    try:
        dispatcher = _get_dispatcher()
    except ConfigurationError as e:
        raise ToolError(f"{e}\n\n{get_auth_help_message()}") from e

    response: ToolResponse = dispatcher.dispatch(name, arguments)
    if response.is_error:
        raise ToolError(response.text)
    return response.text


def _write_annotations(title: str) -> ToolAnnotations:
    return ToolAnnotations(
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=True,
        title=title,
    )


def _read_annotations(title: str) -> ToolAnnotations:
    return ToolAnnotations(
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=True,
        title=title,
    )


@mcp.tool(annotations=_write_annotations("Create Jira ticket"))
def create_ticket(
    title: str,
    current: str,
    desired: str,
    project: Optional[str] = None,
    labels: Optional[list[str]] = None,
    issueType: str = "Task",  # noqa: N803
    confirm: bool = False,
) -> str:
    """Create JIRA tickets in any project (FRON, TRAC, DTMI, INN).

    Supports project aliases: FRON = ASAP Fork = TRMI = mobile install.
    Parse user brain dumps into clean title/current/desired before calling.
    Shows a preview before creating.

    Args:
        title: Ticket title with [PROJECT] prefix (e.g., "[DTMI] Enable user management in portal")
        current: Current state - what is broken or manual now
        desired: Desired state - what should happen instead
        project: JIRA project key or alias (e.g., "TRAC", "TRACI", "mobile install", "innovation"). Defaults to the configured project (FRON).
        labels: Labels for the ticket (e.g., ["DTMI", "Backend"])
        issueType: "Task" or "Bug". Defaults to "Task".
        confirm: Set to true ONLY after showing the preview and getting user confirmation. NEVER true on the first call.
    """
    return _run("create_ticket", {
        "title": title,
        "current": current,
        "desired": desired,
        "project": project,
        "labels": labels,
        "issueType": issueType,
        "confirm": confirm,
    })


@mcp.tool(annotations=_read_annotations("Read Jira ticket"))
def read_ticket(ticketKey: str) -> str:  # noqa: N803
    """Read a JIRA ticket with description, status, recent comments, and metadata.

    Args:
        ticketKey: JIRA ticket key in format PROJECT-NUMBER (e.g., FRON-1151)
    """
    return _run("read_ticket", {"ticketKey": ticketKey})


@mcp.tool(annotations=_write_annotations("Update Jira ticket"))
def update_ticket(
    ticketKey: str,  # noqa: N803
    summary: Optional[str] = None,
    appendDescription: Optional[str] = None,  # noqa: N803
    replaceDescription: Optional[str] = None,  # noqa: N803
    addLabels: Optional[list[str]] = None,  # noqa: N803
    removeLabels: Optional[list[str]] = None,  # noqa: N803
) -> str:
    """Update an existing JIRA ticket.

    Can change the summary, append to or replace the description, and add or
    remove labels. At least one change is required.

    Args:
        ticketKey: JIRA ticket key in format PROJECT-NUMBER (e.g., FRON-1550)
        summary: New summary/title for the ticket
        appendDescription: Text to append to the existing description, after a horizontal rule
        replaceDescription: Text that completely replaces the description (wins over appendDescription)
        addLabels: Labels to add (e.g., ["LavaMoat", "Security"])
        removeLabels: Labels to remove
    """
    return _run("update_ticket", {
        "ticketKey": ticketKey,
        "summary": summary,
        "appendDescription": appendDescription,
        "replaceDescription": replaceDescription,
        "addLabels": addLabels,
        "removeLabels": removeLabels,
    })


@mcp.tool(annotations=_read_annotations("List Jira tickets"))
def list_tickets(
    project: str,
    assignee: str = "all",
    status: Optional[str] = None,
    orderBy: str = "rank",  # noqa: N803
    maxResults: int = 50,  # noqa: N803
) -> str:
    """Browse JIRA tickets of a project with filtering, in board order by default.

    Args:
        project: Project key or alias (e.g., "TRACI", "FRON", "DTMI")
        assignee: "me" (current user), "unassigned", "all" (no filter), or a specific email address
        status: Filter by status (e.g., "To Do", "In Progress", "Done")
        orderBy: "rank" (board order), "created" (newest first), "updated" (recently updated first), "priority" (highest first)
        maxResults: Maximum number of results to return. Defaults to 50.
    """
    return _run("list_tickets", {
        "project": project,
        "assignee": assignee,
        "status": status,
        "orderBy": orderBy,
        "maxResults": maxResults,
    })


def main():
    """Run the MCP server."""
    configure_logging()
    try:
        get_config()
    except ConfigurationError as e:
        logger.error("startup_failed", extra={"error": str(e)})
        print(get_auth_help_message(), file=sys.stderr)
        sys.exit(1)

    logger.info("server_starting", extra={"transport": "stdio"})
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
