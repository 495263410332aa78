"""Atlassian Document Format (ADF) to plain text.

Used to show descriptions and comments of existing tickets. Output mirrors
the markup accepted by ``formatter.format_text`` where one exists, so a
rendered description can be edited and sent back.

Unknown node types are logged and their children rendered, so new ADF
features degrade to plain text instead of disappearing.
"""

import logging
from typing import Any, Optional

logger = logging.getLogger("jira_pm.adf")

_INLINE_MARKS = {
    "strong": "**{}**",
    "em": "*{}*",
    "code": "`{}`",
    "strike": "~~{}~~",
}


def adf_to_text(adf: Optional[dict[str, Any]]) -> str:
    """Convert an ADF document to text; ``""`` for None or empty input.

    Blocks are separated by a blank line.

    Example:
        >>> adf_to_text({"type": "doc", "content": [
        ...     {"type": "paragraph", "content": [{"type": "text", "text": "Hi"}]}]})
        'Hi'
    """
    if not adf or not isinstance(adf, dict):
        return ""
    if adf.get("type") == "doc":
        blocks = _render_blocks(adf.get("content", []))
    else:
        blocks = _render_blocks([adf])
    return "\n\n".join(blocks)


def _render_blocks(nodes: list[Any], indent: int = 0) -> list[str]:
    blocks = []
    for node in nodes:
        rendered = _render_block(node, indent)
        if rendered:
            blocks.append(rendered)
    return blocks


def _render_block(node: Any, indent: int = 0) -> str:
    if not isinstance(node, dict):
        return node if isinstance(node, str) else ""

    node_type = node.get("type")
    content = node.get("content", [])
    attrs = node.get("attrs") or {}

    if node_type == "paragraph":
        return _render_inline(content)

    if node_type == "heading":
        text = _render_inline(content)
        return f"{'#' * attrs.get('level', 1)} {text}" if text else ""

    if node_type in ("bulletList", "orderedList"):
        return "\n".join(_render_list(node, indent))

    if node_type == "rule":
        return "---"

    if node_type == "codeBlock":
        code = _render_inline(content)
        return f"```{attrs.get('language', '')}\n{code}\n```"

    if node_type in ("blockquote", "panel"):
        inner = "\n\n".join(_render_blocks(content, indent))
        return "\n".join(f"> {line}" if line else ">" for line in inner.split("\n"))

    if node_type in ("text", "hardBreak", "mention", "inlineCard", "emoji"):
        return _render_inline([node])

    logger.warning(
        "adf_unknown_node_type",
        extra={"node_type": node_type, "has_content": bool(content)},
    )
    return "\n\n".join(_render_blocks(content, indent))


def _render_list(node: dict[str, Any], indent: int) -> list[str]:
    ordered = node.get("type") == "orderedList"
    start = (node.get("attrs") or {}).get("order", 1)
    pad = "  " * indent
    lines = []

    for number, item in enumerate(node.get("content", []), start=start):
        marker = f"{number}." if ordered else "-"
        first = True
        for child in item.get("content", []):
            if child.get("type") in ("bulletList", "orderedList"):
                lines.extend(_render_list(child, indent + 1))
                continue
            text = _render_block(child, indent + 1)
            if first:
                lines.append(f"{pad}{marker} {text}")
                first = False
            elif text:
                lines.append(f"{pad}  {text}")
    return lines


def _render_inline(nodes: list[Any]) -> str:
    parts = []
    for node in nodes:
        if not isinstance(node, dict):
            continue
        node_type = node.get("type")
        attrs = node.get("attrs") or {}

        if node_type == "text":
            text = node.get("text", "")
            for mark in node.get("marks", []):
                template = _INLINE_MARKS.get(mark.get("type"))
                if template and text:
                    text = template.format(text)
                elif mark.get("type") == "link" and text:
                    href = (mark.get("attrs") or {}).get("href")
                    if href and href != text:
                        text = f"[{text}]({href})"
            parts.append(text)
        elif node_type == "hardBreak":
            parts.append("\n")
        elif node_type == "mention":
            parts.append(attrs.get("text") or f"@{attrs.get('displayName', 'unknown')}")
        elif node_type == "inlineCard":
            parts.append(attrs.get("url", ""))
        elif node_type == "emoji":
            parts.append(attrs.get("text") or attrs.get("shortName", ""))
        else:
            parts.append(_render_inline(node.get("content", [])))
    return "".join(parts)
