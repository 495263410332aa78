"""Data models for jira-pm."""

from .requests import ListQuery, TicketRequest, UpdateSpec, validate_ticket_key
from .ticket import Comment, CreatedTicket, TicketList, TicketRecord, TicketSummary, UpdatedTicket

__all__ = [
    "Comment",
    "CreatedTicket",
    "ListQuery",
    "TicketList",
    "TicketRecord",
    "TicketRequest",
    "TicketSummary",
    "UpdateSpec",
    "UpdatedTicket",
    "validate_ticket_key",
]
