"""Shared service layer for CLI and MCP."""

from .context import get_client, get_config
from .search import build_jql, list_tickets
from .tickets import create_ticket, read_ticket, update_ticket

__all__ = [
    "get_client",
    "get_config",
    "build_jql",
    "list_tickets",
    "create_ticket",
    "read_ticket",
    "update_ticket",
]
