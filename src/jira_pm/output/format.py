"""Output formatting utilities for CLI and MCP."""

from __future__ import annotations

import json
from typing import Any, Callable, Optional

OUTPUT_FORMATS = ("text", "json")


def format_response(
    payload: Any,
    output_format: str = "text",
    text_renderer: Optional[Callable[[Any], str]] = None,
) -> dict:
    """Normalize response with format metadata and content.

    Args:
        payload: Data to serialize. Records with ``to_dict()`` are converted.
        output_format: "text" or "json".
        text_renderer: Optional renderer for text output.
    """
    output_format = (output_format or "text").lower()

    if output_format == "json":
        data = payload.to_dict() if hasattr(payload, "to_dict") else payload
        return {"format": "json", "content": data}

    if text_renderer:
        content = text_renderer(payload)
    elif hasattr(payload, "to_dict"):
        content = json.dumps(payload.to_dict(), indent=2)
    else:
        content = str(payload)
    return {"format": "text", "content": content}


def render_cli(response: dict) -> str:
    """Render a formatted response into a CLI string."""
    fmt = response.get("format")
    content = response.get("content")
    if fmt == "json":
        return json.dumps(content, indent=2)
    return str(content)
