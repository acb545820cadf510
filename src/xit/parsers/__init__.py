from .inline import classify_due_date, extract_due_date, extract_tags
from .xit_parser import (
    DocumentAssembler,
    classify_line,
    parse_checkbox,
    parse_content,
    parse_item,
    parse_priority,
)

__all__ = [
    "parse_content",
    "parse_item",
    "parse_checkbox",
    "parse_priority",
    "classify_line",
    "DocumentAssembler",
    "extract_tags",
    "extract_due_date",
    "classify_due_date",
]
