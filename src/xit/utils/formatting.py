"""
Canonical xit! serialization.

This module is the single source of truth for how a Document is written back
to text. The output is normalised rather than byte-identical to the input:

- checkboxes are followed by exactly one space
- groups are separated by exactly one blank line
- titles that never collected an item are gone (the parser already drops them)

Parsing the output again always yields the same Document.
"""

from typing import List

from xit.models.item import Document, Group, Item

CONTINUATION_INDENT = "    "


def format_item(item: Item) -> str:
    """
    Render an item and its continuation lines.

    Tags and due dates are part of the description and are written verbatim.
    """
    line = item.status.checkbox
    if item.priority > 0:
        line += " " + "!" * item.priority
    if item.description:
        line += " " + item.description

    lines = [line]
    lines.extend(CONTINUATION_INDENT + text for text in item.continuation_lines)
    return "\n".join(lines)


def format_group(group: Group) -> str:
    lines: List[str] = []
    if group.title is not None:
        lines.append(group.title)
    lines.extend(format_item(item) for item in group.items)
    return "\n".join(lines)


def format_document(document: Document) -> str:
    return "\n\n".join(format_group(group) for group in document.groups)


def format_file(document: Document) -> str:
    """Document as file content: the serialized text plus a final newline."""
    text = format_document(document)
    return text + "\n" if text else ""
