"""
Inline annotation extractors.

Both extractors scan a description without modifying it:

- Tags:      ``#name``, ``#name=value``, ``#name="quoted value"``, ``#name='quoted'``
- Due dates: ``-> 2024-03-15``, ``-> 2024/03``, ``-> 2024-W12``, ``-> 2024-Q2``, ``-> 2024``

They are exposed separately so an editor can preview the annotations of a
line that is still being typed.
"""

import logging
import re
from datetime import date
from typing import List, Optional

from xit.models.item import DayDue, DueDate, MonthDue, QuarterDue, Tag, WeekDue, YearDue

log = logging.getLogger(__name__)

# Groups: (1)=name, (2)=double-quoted value, (3)=single-quoted value, (4)=bare value
TAG_PATTERN = re.compile(
    r"""#([A-Za-z0-9_-]+)(?:=(?:"([^"]+)"|'([^']+)'|([A-Za-z0-9_-]+)))?"""
)

# Longer forms come first so "2024-W12" is not cut short at "2024"
_DATE_TOKEN = (
    r"[0-9]{4}[-/][WQ][0-9]{1,2}"
    r"|[0-9]{4}[-/][0-9]{2}[-/][0-9]{2}"
    r"|[0-9]{4}[-/][0-9]{2}"
    r"|[0-9]{4}"
)

DUE_DATE_PATTERN = re.compile(rf"->\s*({_DATE_TOKEN})")
DATE_TOKEN_PATTERN = re.compile(_DATE_TOKEN)


def extract_tags(text: str) -> List[Tag]:
    """
    Collect every tag in ``text``, left to right.

    Duplicate names are kept. A value clause that does not match (e.g. an
    unterminated quote) leaves a name-only tag.
    """
    tags: List[Tag] = []
    for m in TAG_PATTERN.finditer(text):
        value = next((v for v in m.group(2, 3, 4) if v is not None), None)
        tags.append(Tag(name=m.group(1), value=value))
    return tags


def classify_due_date(token: str) -> Optional[DueDate]:
    """
    Turn a date token into a DueDate of the matching granularity.

    Args:
        token: Date token such as "2024-03-15" or "2024/W12"; a leading
               "->" marker is tolerated

    Returns:
        DueDate variant, or None if the token is not a due date or names a
        day the calendar rejects
    """
    token = token.strip()
    if token.startswith("->"):
        token = token[2:].lstrip()
    if not DATE_TOKEN_PATTERN.fullmatch(token):
        return None

    normalized = token.replace("/", "-")

    if "-W" in normalized:
        year, week = normalized.split("-W")
        return WeekDue(year=int(year), week=int(week), raw=token)

    if "-Q" in normalized:
        year, quarter = normalized.split("-Q")
        return QuarterDue(year=int(year), quarter=int(quarter), raw=token)

    parts = [int(p) for p in normalized.split("-")]
    if len(parts) == 1:
        return YearDue(year=parts[0], raw=token)
    if len(parts) == 2:
        return MonthDue(year=parts[0], month=parts[1], raw=token)

    try:
        day = date(*parts)
    except ValueError:
        log.debug("Rejected due date %r: not a calendar day", token)
        return None
    return DayDue(date=day, raw=token)


def extract_due_date(text: str) -> Optional[DueDate]:
    """Classify the first ``-> <date>`` annotation in ``text``; later ones are ignored."""
    m = DUE_DATE_PATTERN.search(text)
    if not m:
        return None
    return classify_due_date(m.group(1))
