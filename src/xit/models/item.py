"""
Core xit! data models.

A Document is an ordered list of Groups; a Group is an optional title plus
an ordered list of Items. Tags and the due date of an Item are derived from
its description on access, so the description stays the single source of
truth and serialization never has to re-render them.

Models are plain value types. Equality is structural; stable identifiers for
selection or diffing belong to whatever application hosts the document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, Iterator, List, Optional, Union

from xit.utils import dates


class Status(str, Enum):
    OPEN = " "
    CHECKED = "x"
    ONGOING = "@"
    OBSOLETE = "~"
    IN_QUESTION = "?"

    @classmethod
    def from_symbol(cls, symbol: str) -> Optional[Status]:
        """Map a checkbox symbol to its status, or None if it is not one of the five."""
        try:
            return cls(symbol)
        except ValueError:
            return None

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def checkbox(self) -> str:
        """Checkbox markup, e.g. "[x]"."""
        return f"[{self.value}]"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    def next(self) -> Status:
        """Status reached by clicking the checkbox once."""
        return _NEXT_STATUS[self]


_DISPLAY_NAMES: Dict[Status, str] = {
    Status.OPEN: "Open",
    Status.CHECKED: "Done",
    Status.ONGOING: "Ongoing",
    Status.OBSOLETE: "Obsolete",
    Status.IN_QUESTION: "In Question",
}

_NEXT_STATUS: Dict[Status, Status] = {
    Status.OPEN: Status.CHECKED,
    Status.CHECKED: Status.OPEN,
    Status.ONGOING: Status.CHECKED,
    Status.OBSOLETE: Status.OPEN,
    Status.IN_QUESTION: Status.OPEN,
}


@dataclass(frozen=True)
class Tag:
    """An inline ``#name`` or ``#name=value`` annotation."""

    name: str
    value: Optional[str] = None

    @property
    def display(self) -> str:
        if self.value is not None:
            return f"#{self.name}={self.value}"
        return f"#{self.name}"


class Granularity(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


# ---------------------------------------------------------------------------
# Due dates
# ---------------------------------------------------------------------------


class _DueDateBase:
    """
    Shared behaviour of the due-date variants.

    Each variant knows the last calendar day it covers; an item is overdue
    once that day lies strictly before today.
    """

    granularity: Granularity
    raw: str

    def last_day(self) -> date:
        raise NotImplementedError

    def is_overdue(self, today: Optional[date] = None) -> bool:
        reference = today if today is not None else dates.today()
        try:
            return self.last_day() < reference
        except (ValueError, OverflowError):
            # Period falls outside the representable calendar
            return False


@dataclass(frozen=True)
class DayDue(_DueDateBase):
    date: date
    raw: str
    granularity = Granularity.DAY

    def last_day(self) -> date:
        return self.date


@dataclass(frozen=True)
class WeekDue(_DueDateBase):
    year: int
    week: int
    raw: str
    granularity = Granularity.WEEK

    def last_day(self) -> date:
        return dates.end_of_iso_week(self.year, self.week)


@dataclass(frozen=True)
class MonthDue(_DueDateBase):
    year: int
    month: int
    raw: str
    granularity = Granularity.MONTH

    def last_day(self) -> date:
        return dates.end_of_month(self.year, self.month)


@dataclass(frozen=True)
class QuarterDue(_DueDateBase):
    year: int
    quarter: int
    raw: str
    granularity = Granularity.QUARTER

    def last_day(self) -> date:
        return dates.end_of_quarter(self.year, self.quarter)


@dataclass(frozen=True)
class YearDue(_DueDateBase):
    year: int
    raw: str
    granularity = Granularity.YEAR

    def last_day(self) -> date:
        return dates.end_of_year(self.year)


DueDate = Union[DayDue, WeekDue, MonthDue, QuarterDue, YearDue]


# ---------------------------------------------------------------------------
# Items, groups, documents
# ---------------------------------------------------------------------------


@dataclass
class Item:
    """
    A single xit! task.

    ``description`` is everything on the first line after the checkbox and
    priority token, tags and due date included. ``continuation_lines`` hold
    the following indented lines with their four-space indent removed.
    """

    status: Status = Status.OPEN
    priority: int = 0
    description: str = ""
    continuation_lines: List[str] = field(default_factory=list)

    @property
    def tags(self) -> List[Tag]:
        from xit.parsers.inline import extract_tags

        return extract_tags(self.description)

    @property
    def due_date(self) -> Optional[DueDate]:
        from xit.parsers.inline import extract_due_date

        return extract_due_date(self.description)

    @property
    def full_description(self) -> str:
        """Description and continuation lines as they appear in the file body."""
        return "\n    ".join([self.description, *self.continuation_lines])

    def is_overdue(self, today: Optional[date] = None) -> bool:
        due = self.due_date
        return due is not None and due.is_overdue(today)


@dataclass
class Group:
    """An optional title and the items beneath it."""

    title: Optional[str] = None
    items: List[Item] = field(default_factory=list)

    def status_counts(self) -> Dict[Status, int]:
        """Number of items per status, every status present (zero if unused)."""
        counts = {status: 0 for status in Status}
        for item in self.items:
            counts[item.status] += 1
        return counts

    def filter(self, status: Optional[Status] = None) -> List[Item]:
        if status is None:
            return list(self.items)
        return [item for item in self.items if item.status == status]


@dataclass
class Document:
    """A parsed xit! file: groups in file order."""

    groups: List[Group] = field(default_factory=list)

    @classmethod
    def new(cls) -> Document:
        """Starter content for a freshly created file."""
        return cls(groups=[Group(title="My Tasks", items=[Item(description="Your first task")])])

    def items(self) -> Iterator[Item]:
        for group in self.groups:
            yield from group.items

    def filter(self, status: Optional[Status] = None) -> List[Item]:
        return [item for group in self.groups for item in group.filter(status)]

    def overdue(self, today: Optional[date] = None) -> List[Item]:
        return [item for item in self.items() if item.is_overdue(today)]
