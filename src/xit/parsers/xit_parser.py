"""
Parser for xit! task lists.

Main API:
    parse_content(content)  → Document

Parsing runs in two layers:

1. classify_line() sorts each physical line into Blank, Continuation,
   ItemCandidate or Title, given whether an item is currently open.
2. DocumentAssembler folds the classified lines into groups of items.

Every input produces a Document. Lines that fail the item grammar become
titles, and titles that never collect an item are dropped.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from xit.models.item import Document, Group, Item, Status

log = logging.getLogger(__name__)

CHECKBOX_PATTERN = re.compile(r"^\[([ x@~?])\]")
PRIORITY_PATTERN = re.compile(r"^\.*!+\.*$")

CONTINUATION_INDENT = "    "


# ---------------------------------------------------------------------------
# Item grammar
# ---------------------------------------------------------------------------

def parse_checkbox(line: str) -> Optional[Tuple[Status, str]]:
    """Return (status, text after the checkbox) or None if the line has no checkbox."""
    m = CHECKBOX_PATTERN.match(line)
    if not m:
        return None
    return Status(m.group(1)), line[m.end():]


def parse_priority(text: str) -> Tuple[int, str]:
    """
    Split a leading priority token off ``text``.

    The first word counts as a priority when it is a run of ``!`` optionally
    wrapped in dots (``!!``, ``..!``, ``!..``). Anything else, e.g. ``!a``,
    leaves the text untouched with priority 0.
    """
    words = text.split(None, 1)
    if words and PRIORITY_PATTERN.match(words[0]):
        return words[0].count("!"), words[1] if len(words) > 1 else ""
    return 0, text


def parse_item(line: str) -> Optional[Item]:
    """Parse the first line of an item, or return None if it is not one."""
    checkbox = parse_checkbox(line)
    if checkbox is None:
        return None
    status, rest = checkbox
    priority, description = parse_priority(rest.strip())
    return Item(status=status, priority=priority, description=description)


# ---------------------------------------------------------------------------
# Line classification
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Blank:
    pass


@dataclass(frozen=True)
class Continuation:
    text: str


@dataclass(frozen=True)
class ItemCandidate:
    line: str
    item: Item


@dataclass(frozen=True)
class Title:
    text: str


ClassifiedLine = Union[Blank, Continuation, ItemCandidate, Title]


def classify_line(line: str, item_open: bool) -> ClassifiedLine:
    """
    Classify one physical line.

    Args:
        line: Line without its terminator
        item_open: True while an item can still take continuation lines

    Returns:
        Blank for empty/whitespace lines, Continuation for four-space indented
        lines under an open item, ItemCandidate for checkbox lines, otherwise
        Title carrying the raw line
    """
    if not line.strip():
        return Blank()

    if item_open and line.startswith(CONTINUATION_INDENT):
        return Continuation(line[len(CONTINUATION_INDENT):])

    item = parse_item(line)
    if item is not None:
        return ItemCandidate(line=line, item=item)

    return Title(line)


# ---------------------------------------------------------------------------
# Document assembly
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Idle:
    """No item open; a title may be waiting for its first item."""

    pending_title: Optional[str] = None


@dataclass(frozen=True)
class InItem:
    """
    An item is open. ``group`` holds the group's title and the items that
    came before ``item``; a group only exists once it has an item.
    """

    group: Group
    item: Item


AssemblerState = Union[Idle, InItem]


@dataclass
class DocumentAssembler:
    """
    Folds classified lines into a Document.

    A blank line always ends the pending group, so a title that is followed
    by a blank line before any item is dropped rather than carried over to
    the next group. Keep it that way: it is what makes a blank line the one
    group separator, even though some xit! editors carry the title across.

    Usage:
        assembler = DocumentAssembler()
        for line in lines:
            assembler.advance(classify_line(line, assembler.item_open))
        document = assembler.finalize()
    """

    state: AssemblerState = field(default_factory=Idle)
    groups: List[Group] = field(default_factory=list)

    @property
    def item_open(self) -> bool:
        return isinstance(self.state, InItem)

    def _close_group(self) -> None:
        if isinstance(self.state, InItem):
            group = self.state.group
            group.items.append(self.state.item)
            self.groups.append(group)

    def advance(self, line: ClassifiedLine) -> None:
        state = self.state

        if isinstance(line, Blank):
            # A title followed by a blank line never gets an item: drop it
            self._close_group()
            self.state = Idle()

        elif isinstance(line, Continuation):
            if not isinstance(state, InItem):
                raise ValueError("continuation line without an open item")
            state.item.continuation_lines.append(line.text)

        elif isinstance(line, ItemCandidate):
            if isinstance(state, InItem):
                state.group.items.append(state.item)
                self.state = InItem(group=state.group, item=line.item)
            else:
                self.state = InItem(group=Group(title=state.pending_title), item=line.item)

        elif isinstance(line, Title):
            self._close_group()
            # Consecutive titles: the most recent one wins
            self.state = Idle(pending_title=line.text)

    def finalize(self) -> Document:
        self._close_group()
        self.state = Idle()
        document = Document(groups=self.groups)
        self.groups = []
        return document


def parse_content(content: str) -> Document:
    """
    Parse xit! text into a Document.

    Accepts ``\\n`` and ``\\r\\n`` line endings. Never raises.
    """
    assembler = DocumentAssembler()
    for line in content.splitlines():
        assembler.advance(classify_line(line, assembler.item_open))
    document = assembler.finalize()

    log.debug(
        "Parsed %d groups, %d items",
        len(document.groups),
        sum(len(g.items) for g in document.groups),
    )
    return document
