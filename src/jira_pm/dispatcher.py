"""Tool dispatch: argument bag in, rendered text out.

Each call goes Received -> Validated -> (Preview | Executing) -> Rendered.
``create_ticket`` only writes to Jira when the caller passes ``confirm=True``;
without it the would-be ticket is rendered as a preview and nothing is sent.

Failures never escape as exceptions: every ``JiraError`` becomes an error
response so the host session keeps running.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from .errors import JiraError
from .jira_client import JiraClient
from .models import ListQuery, TicketRequest, UpdateSpec, validate_ticket_key
from .output.render import (
    describe_filters,
    render_created,
    render_error,
    render_list,
    render_preview,
    render_preview_prompt,
    render_ticket,
    render_updated,
)
from .services.search import list_tickets
from .services.tickets import create_ticket, read_ticket, update_ticket

logger = logging.getLogger("jira_pm.dispatcher")

TOOL_NAMES = ("create_ticket", "read_ticket", "update_ticket", "list_tickets")

_CONNECTIVITY_HINTS = [
    "Check JIRA credentials in .env file",
    "Verify network connectivity to JIRA",
]

# tool name -> (action for the error headline, generic hints)
ERROR_CONTEXT: dict[str, tuple[str, list[str]]] = {
    "create_ticket": (
        "creating JIRA ticket",
        [*_CONNECTIVITY_HINTS, "Ensure all required fields are provided"],
    ),
    "read_ticket": (
        "reading JIRA ticket",
        [
            "Verify ticket key format (e.g., FRON-1151)",
            *_CONNECTIVITY_HINTS,
            "Ensure you have permission to view this ticket",
        ],
    ),
    "update_ticket": (
        "updating JIRA ticket",
        [
            "Verify ticket key format (e.g., FRON-1550)",
            *_CONNECTIVITY_HINTS,
            "Ensure you have permission to edit this ticket",
        ],
    ),
    "list_tickets": (
        "listing JIRA tickets",
        [
            'Verify project key format (e.g., "TRACI", "FRON")',
            *_CONNECTIVITY_HINTS,
            "Ensure you have permission to view this project",
        ],
    ),
}


@dataclass
class ToolResponse:
    text: str
    is_error: bool = False


def _confirmed(value: Any) -> bool:
    # Only a real affirmative counts; "false" strings and 1s do not.
    return value is True or (isinstance(value, str) and value.lower() == "true")


class ToolDispatcher:
    """Routes tool calls to the ticket operations and renders the result."""

    def __init__(self, client: JiraClient):
        self.client = client
        self.config = client.config
        self._handlers: dict[str, Callable[[Mapping[str, Any]], str]] = {
            "create_ticket": self._create,
            "read_ticket": self._read,
            "update_ticket": self._update,
            "list_tickets": self._list,
        }

    def dispatch(self, name: str, arguments: Mapping[str, Any] | None = None) -> ToolResponse:
        handler = self._handlers.get(name)
        if handler is None:
            logger.warning("unknown_tool", extra={"tool": name})
            return ToolResponse(
                f"❌ **Unknown tool:** {name}. Available: {', '.join(TOOL_NAMES)}",
                is_error=True,
            )

        try:
            return ToolResponse(handler(arguments or {}))
        except JiraError as e:
            logger.warning(
                "tool_failed",
                extra={"tool": name, "error_type": type(e).__name__, "error": str(e)},
            )
            action, hints = ERROR_CONTEXT[name]
            return ToolResponse(render_error(action, e, hints), is_error=True)

    def _create(self, args: Mapping[str, Any]) -> str:
        request = TicketRequest.from_arguments(args, self.config.default_project)
        project_key = self.config.aliases.resolve(request.project)
        preview = render_preview(request, project_key)

        if not _confirmed(args.get("confirm")):
            logger.info("ticket_preview", extra={"project": project_key})
            return f"{preview}\n\n{render_preview_prompt()}"

        created = create_ticket(self.client, request)
        return f"{preview}\n\n{render_created(created)}"

    def _read(self, args: Mapping[str, Any]) -> str:
        ticket_key = validate_ticket_key(args.get("ticketKey"))
        return render_ticket(read_ticket(self.client, ticket_key))

    def _update(self, args: Mapping[str, Any]) -> str:
        spec = UpdateSpec.from_arguments(args)
        return render_updated(update_ticket(self.client, spec))

    def _list(self, args: Mapping[str, Any]) -> str:
        query = ListQuery.from_arguments(args)
        result = list_tickets(self.client, query)
        filters = describe_filters(query.project, query.assignee, query.status, query.order_by)
        return render_list(result, filters, self.client.browse_url)
