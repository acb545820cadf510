"""
Tests for models/item.py and utils/dates.py.

Covers:
- Status symbols, display names and click cycling
- Due-date period ends and overdue checks for every granularity
- Derived item properties (tags, due date, full description)
- Group/Document helpers
"""

import sys
from datetime import date, datetime
from pathlib import Path

# Add src to path so imports work without installation
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from xit.models.item import (
    DayDue,
    Document,
    Group,
    Item,
    MonthDue,
    QuarterDue,
    Status,
    Tag,
    WeekDue,
    YearDue,
)
from xit.utils import dates

REFERENCE = date(2024, 6, 1)


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------

class TestStatus:
    def test_from_symbol(self):
        assert Status.from_symbol("@") == Status.ONGOING
        assert Status.from_symbol("X") is None

    def test_checkbox(self):
        assert [s.checkbox for s in Status] == ["[ ]", "[x]", "[@]", "[~]", "[?]"]

    def test_display_name(self):
        assert Status.CHECKED.display_name == "Done"
        assert Status.IN_QUESTION.display_name == "In Question"

    @pytest.mark.parametrize("current,expected", [
        (Status.OPEN, Status.CHECKED),
        (Status.CHECKED, Status.OPEN),
        (Status.ONGOING, Status.CHECKED),
        (Status.OBSOLETE, Status.OPEN),
        (Status.IN_QUESTION, Status.OPEN),
    ])
    def test_next(self, current, expected):
        assert current.next() == expected


# ---------------------------------------------------------------------------
# Calendar helpers
# ---------------------------------------------------------------------------

class TestDates:
    def test_today_uses_clock(self):
        assert dates.today(lambda: datetime(2024, 6, 1, 23, 59)) == REFERENCE

    def test_end_of_month(self):
        assert dates.end_of_month(2024, 2) == date(2024, 2, 29)
        assert dates.end_of_month(2024, 12) == date(2024, 12, 31)

    def test_end_of_month_rolls_over(self):
        assert dates.end_of_month(2024, 13) == date(2025, 1, 31)

    def test_end_of_quarter(self):
        assert dates.end_of_quarter(2024, 2) == date(2024, 6, 30)
        assert dates.end_of_quarter(2024, 4) == date(2024, 12, 31)

    def test_end_of_iso_week_is_saturday(self):
        assert dates.end_of_iso_week(2024, 12) == date(2024, 3, 23)
        assert dates.end_of_iso_week(2024, 12).isoweekday() == 6

    def test_end_of_iso_week_crosses_year(self):
        # ISO 2021 week 1 starts on 2021-01-04
        assert dates.end_of_iso_week(2021, 1) == date(2021, 1, 9)
        assert dates.end_of_iso_week(2024, 53) == date(2025, 1, 4)


# ---------------------------------------------------------------------------
# Overdue
# ---------------------------------------------------------------------------

class TestOverdue:
    def test_day_in_past(self):
        assert DayDue(date(2024, 5, 1), "2024-05-01").is_overdue(REFERENCE)

    def test_day_today_not_overdue(self):
        assert not DayDue(REFERENCE, "2024-06-01").is_overdue(REFERENCE)

    def test_current_month_not_overdue(self):
        assert not MonthDue(2024, 6, "2024-06").is_overdue(REFERENCE)

    def test_previous_month_overdue(self):
        assert MonthDue(2024, 5, "2024-05").is_overdue(REFERENCE)

    def test_past_year_overdue(self):
        assert YearDue(2023, "2023").is_overdue(REFERENCE)

    def test_current_year_not_overdue(self):
        assert not YearDue(2024, "2024").is_overdue(REFERENCE)

    def test_quarter(self):
        assert QuarterDue(2024, 1, "2024-Q1").is_overdue(REFERENCE)
        assert not QuarterDue(2024, 2, "2024-Q2").is_overdue(REFERENCE)

    def test_week(self):
        # 2024-W21 ends Saturday 2024-05-25, W22 ends 2024-06-01
        assert WeekDue(2024, 21, "2024-W21").is_overdue(REFERENCE)
        assert not WeekDue(2024, 22, "2024-W22").is_overdue(REFERENCE)

    def test_unrepresentable_year_never_overdue(self):
        assert not YearDue(0, "0000").is_overdue(REFERENCE)

    def test_defaults_to_today(self):
        assert YearDue(2000, "2000").is_overdue()
        assert not YearDue(9999, "9999").is_overdue()


# ---------------------------------------------------------------------------
# Item / Group / Document
# ---------------------------------------------------------------------------

class TestItem:
    def test_derived_annotations(self):
        item = Item(description="plan #trip #budget='500 EUR' -> 2024-W30")
        assert item.tags == [Tag("trip"), Tag("budget", "500 EUR")]
        assert item.due_date == WeekDue(2024, 30, "2024-W30")

    def test_annotations_follow_description(self):
        item = Item(description="#a")
        item.description = "#b -> 2024"
        assert item.tags == [Tag("b")]
        assert item.due_date == YearDue(2024, "2024")

    def test_full_description(self):
        item = Item(description="first", continuation_lines=["second", "third"])
        assert item.full_description == "first\n    second\n    third"

    def test_is_overdue_without_due_date(self):
        assert not Item(description="whenever").is_overdue(REFERENCE)

    def test_structural_equality(self):
        assert Item(description="a") == Item(description="a")
        assert Item(description="a") != Item(description="a", priority=1)


class TestGroupAndDocument:
    def _document(self):
        return Document(groups=[
            Group(title="A", items=[
                Item(Status.OPEN, description="late -> 2024-01"),
                Item(Status.CHECKED, description="done -> 2023"),
            ]),
            Group(items=[Item(Status.OPEN, description="fine -> 2025")]),
        ])

    def test_status_counts(self):
        counts = self._document().groups[0].status_counts()
        assert counts[Status.OPEN] == 1
        assert counts[Status.CHECKED] == 1
        assert counts[Status.ONGOING] == 0
        assert len(counts) == 5

    def test_filter(self):
        doc = self._document()
        assert [i.description for i in doc.filter(Status.OPEN)] == ["late -> 2024-01", "fine -> 2025"]
        assert len(doc.filter()) == 3

    def test_overdue(self):
        overdue = self._document().overdue(REFERENCE)
        assert [i.description for i in overdue] == ["late -> 2024-01", "done -> 2023"]

    def test_new_document(self):
        doc = Document.new()
        assert doc.groups == [Group(title="My Tasks", items=[Item(description="Your first task")])]
