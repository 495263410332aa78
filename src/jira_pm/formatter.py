"""Plain text to Atlassian Document Format (ADF).

Jira's v3 API only accepts rich-text fields (descriptions, comments) as ADF
trees. This module turns loosely formatted text into a small set of block
nodes and serialises them:

- ``# Heading`` .. ``###### Heading``
- ``**Whole line bold**``
- ``- item`` / ``* item`` bullet lists
- ``1. item`` numbered lists
- anything else is a paragraph; blank lines are dropped

Lists are flat and there is no inline markup inside a paragraph.

Reference: https://developer.atlassian.com/cloud/jira/platform/apis/document/structure/
"""

import copy
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")
ORDERED_ITEM_RE = re.compile(r"^\d+\.\s")
BULLET_ITEM_RE = re.compile(r"^[-*]\s")
BOLD_LINE_RE = re.compile(r"^\*\*(.*)\*\*$")


def _text_node(text: str, bold: bool = False) -> dict[str, Any]:
    node: dict[str, Any] = {"type": "text", "text": text}
    if bold:
        node["marks"] = [{"type": "strong"}]
    return node


@dataclass(frozen=True)
class Heading:
    level: int
    text: str

    def to_adf(self) -> dict[str, Any]:
        return {
            "type": "heading",
            "attrs": {"level": self.level},
            "content": [_text_node(self.text)],
        }


@dataclass(frozen=True)
class Paragraph:
    text: str
    bold: bool = False

    def to_adf(self) -> dict[str, Any]:
        return {"type": "paragraph", "content": [_text_node(self.text, self.bold)]}


def _list_items(items: tuple[str, ...]) -> list[dict[str, Any]]:
    return [
        {"type": "listItem", "content": [Paragraph(item).to_adf()]}
        for item in items
    ]


@dataclass(frozen=True)
class OrderedList:
    items: tuple[str, ...]

    def to_adf(self) -> dict[str, Any]:
        return {"type": "orderedList", "content": _list_items(self.items)}


@dataclass(frozen=True)
class BulletList:
    items: tuple[str, ...]

    def to_adf(self) -> dict[str, Any]:
        return {"type": "bulletList", "content": _list_items(self.items)}


@dataclass(frozen=True)
class Rule:
    def to_adf(self) -> dict[str, Any]:
        return {"type": "rule"}


DocumentNode = Union[Heading, Paragraph, OrderedList, BulletList, Rule]


@dataclass(frozen=True)
class Document:
    """An ordered sequence of block nodes."""

    nodes: tuple[DocumentNode, ...] = ()

    def to_adf(self) -> dict[str, Any]:
        return {
            "type": "doc",
            "version": 1,
            "content": [node.to_adf() for node in self.nodes],
        }

    def __len__(self) -> int:
        return len(self.nodes)


# A rule inspects lines[i] and, if it applies, returns (node or None, next index).
LineRule = Callable[[list[str], int], Optional[tuple[Optional[DocumentNode], int]]]


def _blank(lines: list[str], i: int):
    if not lines[i].strip():
        return None, i + 1
    return None


def _heading(lines: list[str], i: int):
    match = HEADING_RE.match(lines[i])
    if match:
        return Heading(level=len(match.group(1)), text=match.group(2)), i + 1
    return None


def _grouped(pattern: re.Pattern, node_type: type) -> LineRule:
    def rule(lines: list[str], i: int):
        if not pattern.match(lines[i]):
            return None
        items = []
        while i < len(lines) and pattern.match(lines[i]):
            items.append(pattern.sub("", lines[i], count=1))
            i += 1
        return node_type(tuple(items)), i

    return rule


def _bold_line(lines: list[str], i: int):
    match = BOLD_LINE_RE.match(lines[i])
    if match:
        return Paragraph(match.group(1), bold=True), i + 1
    return None


def _paragraph(lines: list[str], i: int):
    return Paragraph(lines[i]), i + 1


# Order matters: first matching rule wins. "* item" must hit the bullet rule
# before the bold rule sees it.
LINE_RULES: tuple[LineRule, ...] = (
    _blank,
    _heading,
    _grouped(ORDERED_ITEM_RE, OrderedList),
    _grouped(BULLET_ITEM_RE, BulletList),
    _bold_line,
    _paragraph,
)


def format_text(text: str) -> Document:
    """Convert lightly formatted text into a Document.

    Example:
        >>> format_text("# Title\\nBody text").nodes
        (Heading(level=1, text='Title'), Paragraph(text='Body text', bold=False))
    """
    lines = text.split("\n")
    nodes: list[DocumentNode] = []

    i = 0
    while i < len(lines):
        for rule in LINE_RULES:
            result = rule(lines, i)
            if result is None:
                continue
            node, i = result
            if node is not None:
                nodes.append(node)
            break

    return Document(tuple(nodes))


def current_desired_document(current: str, desired: str) -> Document:
    """Fixed Current/Desired description used for new tickets."""
    return Document((
        Paragraph("Current", bold=True),
        Paragraph(current),
        Paragraph(""),
        Paragraph("Desired", bold=True),
        Paragraph(desired),
    ))


APPEND_SEPARATOR: tuple[DocumentNode, ...] = (Paragraph(""), Rule(), Paragraph(""))


def append_text(existing: Optional[dict[str, Any]], text: str) -> dict[str, Any]:
    """Return a new ADF document: existing content, a rule, then ``text``.

    ``existing`` is any ADF doc as returned by Jira (it may hold node types
    this module never produces) and is left untouched.
    """
    content: list[dict[str, Any]] = []
    if existing and existing.get("content"):
        content = copy.deepcopy(existing["content"])

    content.extend(node.to_adf() for node in APPEND_SEPARATOR)
    content.extend(format_text(text).to_adf()["content"])

    return {"type": "doc", "version": 1, "content": content}
