from .item import (
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

__all__ = [
    "Status",
    "Tag",
    "Granularity",
    "DueDate",
    "DayDue",
    "WeekDue",
    "MonthDue",
    "QuarterDue",
    "YearDue",
    "Item",
    "Group",
    "Document",
]
