"""
Parser and serializer for the xit! plain-text task list format.

Main API:
    from xit import parse, serialize

    document = parse(path.read_text(encoding="utf-8"))
    for item in document.overdue():
        item.status = Status.CHECKED
    path.write_text(serialize(document), encoding="utf-8")

Annotation previews for text that is not yet an item:
    extract_tags("call bob #work #due=friday")
    classify_due_date("2024-W12")
"""

from .models import (
    DayDue,
    Document,
    DueDate,
    Granularity,
    Group,
    Item,
    MonthDue,
    QuarterDue,
    Status,
    Tag,
    WeekDue,
    YearDue,
)
from .parsers import classify_due_date, extract_due_date, extract_tags, parse_content
from .utils.formatting import format_document, format_group, format_item

parse = parse_content
serialize = format_document

__all__ = [
    # Main API
    "parse",
    "serialize",
    "extract_tags",
    "extract_due_date",
    "classify_due_date",
    # Models
    "Document",
    "Group",
    "Item",
    "Status",
    "Tag",
    "Granularity",
    "DueDate",
    "DayDue",
    "WeekDue",
    "MonthDue",
    "QuarterDue",
    "YearDue",
    # Formatting
    "format_document",
    "format_group",
    "format_item",
]
