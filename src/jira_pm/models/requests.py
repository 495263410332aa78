"""Typed requests built from tool argument bags.

The MCP host (and the CLI) hand over loosely typed dicts using the tool
argument names (``ticketKey``, ``appendDescription``, ...). Each request type
validates its bag once, so the adapters only ever see well-formed values.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ..errors import ValidationError

TICKET_KEY_RE = re.compile(r"^[A-Z]+-\d+$")
ISSUE_TYPES = ("Task", "Bug")
ASSIGNEE_FILTERS = ("me", "unassigned", "all")
ORDER_BY_CHOICES = ("rank", "created", "updated", "priority")
DEFAULT_MAX_RESULTS = 50


def validate_ticket_key(ticket_key: Any) -> str:
    """Return ``ticket_key`` if it looks like ``PROJECT-123``."""
    if not isinstance(ticket_key, str) or not TICKET_KEY_RE.match(ticket_key):
        raise ValidationError(
            f"Invalid ticket key format: {ticket_key!r}. Expected format: PROJECT-123",
            suggestions=["Use the upper-case key shown in Jira, e.g. FRON-1151"],
        )
    return ticket_key


def _required_text(args: Mapping[str, Any], name: str) -> str:
    value = args.get(name)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"'{name}' is required and must be a non-empty string.")
    return value


def _optional_text(args: Mapping[str, Any], name: str) -> Optional[str]:
    value = args.get(name)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError(f"'{name}' must be a string.")
    return value


def _string_list(args: Mapping[str, Any], name: str) -> list[str]:
    value = args.get(name)
    if value is None:
        return []
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise ValidationError(f"'{name}' must be a list of strings.")
    return list(value)


@dataclass
class TicketRequest:
    """Fields for a new ticket. ``project`` may be an alias."""

    title: str
    current_state: str
    desired_state: str
    project: str
    labels: list[str] = field(default_factory=list)
    issue_type: str = "Task"

    @classmethod
    def from_arguments(cls, args: Mapping[str, Any], default_project: str) -> "TicketRequest":
        issue_type = args.get("issueType") or "Task"
        if issue_type not in ISSUE_TYPES:
            raise ValidationError(
                f"Invalid issueType {issue_type!r}. Expected one of: {', '.join(ISSUE_TYPES)}"
            )
        return cls(
            title=_required_text(args, "title"),
            current_state=_required_text(args, "current"),
            desired_state=_required_text(args, "desired"),
            project=_optional_text(args, "project") or default_project,
            labels=_string_list(args, "labels"),
            issue_type=issue_type,
        )


@dataclass
class UpdateSpec:
    """Changes to apply to an existing ticket.

    ``replace_description`` takes precedence over ``append_description``
    when both are given. Empty strings and empty lists count as absent.
    """

    ticket_key: str
    summary: Optional[str] = None
    append_description: Optional[str] = None
    replace_description: Optional[str] = None
    add_labels: list[str] = field(default_factory=list)
    remove_labels: list[str] = field(default_factory=list)

    def has_changes(self) -> bool:
        return any([
            self.summary,
            self.append_description,
            self.replace_description,
            self.add_labels,
            self.remove_labels,
        ])

    def needs_current_state(self) -> bool:
        """Whether the current ticket must be read before writing."""
        appending = bool(self.append_description) and not self.replace_description
        return appending or bool(self.add_labels or self.remove_labels)

    def validate(self) -> "UpdateSpec":
        validate_ticket_key(self.ticket_key)
        if not self.has_changes():
            raise ValidationError(
                "No updates specified. Provide summary, appendDescription, "
                "replaceDescription, addLabels, or removeLabels."
            )
        return self

    @classmethod
    def from_arguments(cls, args: Mapping[str, Any]) -> "UpdateSpec":
        return cls(
            ticket_key=validate_ticket_key(args.get("ticketKey")),
            summary=_optional_text(args, "summary"),
            append_description=_optional_text(args, "appendDescription"),
            replace_description=_optional_text(args, "replaceDescription"),
            add_labels=_string_list(args, "addLabels"),
            remove_labels=_string_list(args, "removeLabels"),
        ).validate()


@dataclass
class ListQuery:
    """Filters for listing a project's tickets.

    ``order_by`` is kept as given; unknown values fall back to board rank
    when the query is built.
    """

    project: str
    assignee: str = "all"
    status: Optional[str] = None
    order_by: str = "rank"
    max_results: int = DEFAULT_MAX_RESULTS

    @classmethod
    def from_arguments(cls, args: Mapping[str, Any]) -> "ListQuery":
        max_results = args.get("maxResults")
        if max_results is None:
            max_results = DEFAULT_MAX_RESULTS
        if isinstance(max_results, float) and max_results.is_integer():
            max_results = int(max_results)
        # bool is an int subclass
        if isinstance(max_results, bool) or not isinstance(max_results, int) or max_results < 1:
            raise ValidationError(f"'maxResults' must be a positive integer, got {max_results!r}.")

        return cls(
            project=_required_text(args, "project"),
            assignee=_optional_text(args, "assignee") or "all",
            status=_optional_text(args, "status"),
            order_by=_optional_text(args, "orderBy") or "rank",
            max_results=max_results,
        )
