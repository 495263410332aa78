"""Shared output formatting for CLI and MCP."""

from .format import OUTPUT_FORMATS, format_response, render_cli

__all__ = ["OUTPUT_FORMATS", "format_response", "render_cli"]
