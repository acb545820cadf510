"""
xit! tool handlers.

Core logic lives in handle_* functions (return dicts), shared by the MCP
tools and the REST API. MCP wrappers in register_xit_tools() serialize the
results to JSON strings.

File handlers work inside a root directory and address groups and items by
their position in the parsed document. Every write goes through
parse → modify → serialize, so files come back out in canonical form.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import List, Optional, Tuple

from mcp.server.fastmcp import FastMCP

from xit.models.item import Document, DueDate, Group, Item, Status
from xit.parsers.inline import extract_due_date, extract_tags
from xit.parsers.xit_parser import parse_content
from xit.utils.formatting import format_document, format_file

log = logging.getLogger(__name__)

STATUS_NAMES = {
    "open": Status.OPEN,
    "checked": Status.CHECKED,
    "ongoing": Status.ONGOING,
    "obsolete": Status.OBSOLETE,
    "in-question": Status.IN_QUESTION,
}
_STATUS_KEYS = {status: name for name, status in STATUS_NAMES.items()}


# ---------------------------------------------------------------------------
# Conversion helpers
# ---------------------------------------------------------------------------

def parse_status(value: str) -> Status:
    """Accept a status name ("ongoing") or its checkbox symbol ("@")."""
    if value in STATUS_NAMES:
        return STATUS_NAMES[value]
    status = Status.from_symbol(value)
    if status is None:
        raise ValueError(f"Unknown status '{value}'")
    return status


def parse_today(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"Invalid reference date '{value}', expected YYYY-MM-DD")


def _due_to_dict(due: Optional[DueDate], today: Optional[date]) -> Optional[dict]:
    if due is None:
        return None
    try:
        last_day = due.last_day().isoformat()
    except (ValueError, OverflowError):
        last_day = None
    return {
        "granularity": due.granularity.value,
        "raw": due.raw,
        "last_day": last_day,
        "overdue": due.is_overdue(today),
    }


def _item_to_dict(item: Item, today: Optional[date] = None) -> dict:
    """Serialize an Item to a JSON-serializable dict."""
    return {
        "status": _STATUS_KEYS[item.status],
        "symbol": item.status.symbol,
        "priority": item.priority,
        "description": item.description,
        "continuation_lines": list(item.continuation_lines),
        "tags": [{"name": t.name, "value": t.value} for t in item.tags],
        "due_date": _due_to_dict(item.due_date, today),
    }


def _group_to_dict(index: int, group: Group, items: List[dict]) -> dict:
    return {
        "index": index,
        "title": group.title,
        "counts": {_STATUS_KEYS[s]: n for s, n in group.status_counts().items()},
        "items": items,
    }


def _document_to_dict(
    document: Document,
    today: Optional[date] = None,
    status: Optional[Status] = None,
    overdue_only: bool = False,
) -> dict:
    groups = []
    for group_index, group in enumerate(document.groups):
        items = []
        for item_index, item in enumerate(group.items):
            if status is not None and item.status != status:
                continue
            if overdue_only and not item.is_overdue(today):
                continue
            d = _item_to_dict(item, today)
            d["index"] = item_index
            items.append(d)
        groups.append(_group_to_dict(group_index, group, items))
    return {"groups": groups}


def resolve_path(root: Path, path: str) -> Path:
    """Resolve ``path`` under ``root``, rejecting anything that escapes it."""
    root = root.resolve()
    candidate = (root / path).resolve()
    try:
        candidate.relative_to(root)
    except ValueError:
        raise ValueError(f"Path '{path}' is outside {root}")
    return candidate


def _load(root: Path, path: str) -> Tuple[Path, Optional[Document]]:
    file_path = resolve_path(root, path)
    if not file_path.is_file():
        return file_path, None
    return file_path, parse_content(file_path.read_text(encoding="utf-8"))


def _save(file_path: Path, document: Document) -> None:
    file_path.write_text(format_file(document), encoding="utf-8")


def _lookup(sequence: list, index: int):
    """Element at a non-negative index, or None."""
    if 0 <= index < len(sequence):
        return sequence[index]
    return None


def _check_writable(group: Group) -> None:
    """
    Reject edits that would read back differently once written.

    Catches newlines in titles or descriptions, blank continuation lines,
    titles that parse as items and descriptions starting with a priority
    token.
    """
    document = Document(groups=[group])
    if parse_content(format_document(document)) != document:
        raise ValueError("Edit cannot be written as xit! text unchanged")


def _new_item(description: str, status: str = "open", priority: int = 0) -> Item:
    description = description.strip()
    if not description:
        raise ValueError("Item description must not be empty")
    if priority < 0:
        raise ValueError("Priority must not be negative")
    return Item(status=parse_status(status), priority=priority, description=description)


# ---------------------------------------------------------------------------
# Handler functions (return dicts, shared by MCP tools and REST API)
# ---------------------------------------------------------------------------

def handle_parse(*, content: str, today: Optional[str] = None) -> dict:
    return _document_to_dict(parse_content(content), parse_today(today))


def handle_format(*, content: str) -> dict:
    formatted = format_file(parse_content(content))
    return {"content": formatted, "changed": formatted != content}


def handle_preview(*, text: str, today: Optional[str] = None) -> dict:
    """Tags and due date of text that is still being typed."""
    return {
        "tags": [{"name": t.name, "value": t.value} for t in extract_tags(text)],
        "due_date": _due_to_dict(extract_due_date(text), parse_today(today)),
    }


def handle_file_read(
    root: Path,
    *,
    path: str,
    status: Optional[str] = None,
    overdue_only: bool = False,
    today: Optional[str] = None,
) -> dict:
    _, document = _load(root, path)
    if document is None:
        return {"error": f"File '{path}' not found"}

    result = _document_to_dict(
        document,
        today=parse_today(today),
        status=parse_status(status) if status else None,
        overdue_only=overdue_only,
    )
    result["path"] = path
    return result


def handle_file_new(root: Path, *, path: str) -> dict:
    """Create a file holding the starter document. Existing files are left alone."""
    file_path = resolve_path(root, path)
    if file_path.exists():
        raise ValueError(f"File '{path}' already exists")

    file_path.parent.mkdir(parents=True, exist_ok=True)
    content = format_file(Document.new())
    file_path.write_text(content, encoding="utf-8")
    log.info("Created %s", file_path)
    return {"path": path, "content": content}


# --- items ---

def handle_item_update(
    root: Path,
    *,
    path: str,
    group: int,
    item: int,
    status: Optional[str] = None,
    cycle: bool = False,
) -> dict:
    """
    Change the status of one item and write the file back.

    Either ``status`` sets it directly or ``cycle`` advances it the way a
    checkbox click does.
    """
    if status is None and not cycle:
        raise ValueError("Pass a status or cycle=True")

    file_path, document = _load(root, path)
    if document is None:
        return {"error": f"File '{path}' not found"}
    target_group = _lookup(document.groups, group)
    target = _lookup(target_group.items, item) if target_group else None
    if target is None:
        return {"error": f"No item {item} in group {group} of '{path}'"}

    previous = target.status
    target.status = parse_status(status) if status is not None else previous.next()
    _save(file_path, document)
    log.info("%s: group %d item %d %s -> %s", path, group, item,
             _STATUS_KEYS[previous], _STATUS_KEYS[target.status])

    result = _item_to_dict(target)
    result.update({"path": path, "group": group, "index": item})
    return result


def handle_item_add(
    root: Path,
    *,
    path: str,
    group: int,
    description: str,
    status: str = "open",
    priority: int = 0,
    position: Optional[int] = None,
) -> dict:
    """Insert a new item into a group (appended unless ``position`` is given)."""
    new = _new_item(description, status, priority)

    file_path, document = _load(root, path)
    if document is None:
        return {"error": f"File '{path}' not found"}
    target_group = _lookup(document.groups, group)
    if target_group is None:
        return {"error": f"No group {group} in '{path}'"}

    size = len(target_group.items)
    index = size if position is None else max(0, min(position, size))
    target_group.items.insert(index, new)
    _check_writable(target_group)
    _save(file_path, document)
    log.info("%s: added item %d to group %d", path, index, group)

    result = _item_to_dict(new)
    result.update({"path": path, "group": group, "index": index})
    return result


def handle_item_edit(
    root: Path,
    *,
    path: str,
    group: int,
    item: int,
    description: Optional[str] = None,
    priority: Optional[int] = None,
    continuation_lines: Optional[List[str]] = None,
) -> dict:
    """
    Replace the text of one item.

    Fields left as None keep their current value. Tags and due dates follow
    the new description automatically.
    """
    if description is None and priority is None and continuation_lines is None:
        raise ValueError("Pass a description, priority or continuation_lines")
    if description is not None and not description.strip():
        raise ValueError("Item description must not be empty")
    if priority is not None and priority < 0:
        raise ValueError("Priority must not be negative")

    file_path, document = _load(root, path)
    if document is None:
        return {"error": f"File '{path}' not found"}
    target_group = _lookup(document.groups, group)
    target = _lookup(target_group.items, item) if target_group else None
    if target is None:
        return {"error": f"No item {item} in group {group} of '{path}'"}

    if description is not None:
        target.description = description.strip()
    if priority is not None:
        target.priority = priority
    if continuation_lines is not None:
        target.continuation_lines = list(continuation_lines)
    _check_writable(target_group)
    _save(file_path, document)
    log.info("%s: edited group %d item %d", path, group, item)

    result = _item_to_dict(target)
    result.update({"path": path, "group": group, "index": item})
    return result


def handle_item_delete(root: Path, *, path: str, group: int, item: int) -> dict:
    """
    Remove one item.

    A group left without items is removed too, since an empty group does not
    survive being written out.
    """
    file_path, document = _load(root, path)
    if document is None:
        return {"error": f"File '{path}' not found"}
    target_group = _lookup(document.groups, group)
    target = _lookup(target_group.items, item) if target_group else None
    if target is None:
        return {"error": f"No item {item} in group {group} of '{path}'"}

    del target_group.items[item]
    group_removed = not target_group.items
    if group_removed:
        del document.groups[group]
    _save(file_path, document)
    log.info("%s: deleted group %d item %d", path, group, item)

    return {
        "path": path,
        "group": group,
        "index": item,
        "deleted": _item_to_dict(target),
        "group_removed": group_removed,
    }


# --- groups ---

def _normalize_title(title: Optional[str]) -> Optional[str]:
    if title is None or not title.strip():
        return None
    return title


def handle_group_add(
    root: Path,
    *,
    path: str,
    title: Optional[str] = "New Group",
    description: str = "New task",
) -> dict:
    """
    Append a group to the end of the file.

    The group starts with one open item: a group without items would vanish
    the next time the file is read.
    """
    new = Group(title=_normalize_title(title), items=[_new_item(description)])
    _check_writable(new)

    file_path, document = _load(root, path)
    if document is None:
        return {"error": f"File '{path}' not found"}

    document.groups.append(new)
    _save(file_path, document)
    index = len(document.groups) - 1
    log.info("%s: added group %d %r", path, index, new.title)

    result = _group_to_dict(index, new, [dict(_item_to_dict(new.items[0]), index=0)])
    result["path"] = path
    return result


def handle_group_rename(root: Path, *, path: str, group: int, title: Optional[str]) -> dict:
    """Set a group's title; an empty or missing title makes the group untitled."""
    file_path, document = _load(root, path)
    if document is None:
        return {"error": f"File '{path}' not found"}
    target_group = _lookup(document.groups, group)
    if target_group is None:
        return {"error": f"No group {group} in '{path}'"}

    previous = target_group.title
    target_group.title = _normalize_title(title)
    _check_writable(target_group)
    _save(file_path, document)
    log.info("%s: group %d renamed %r -> %r", path, group, previous, target_group.title)

    return {"path": path, "index": group, "title": target_group.title, "previous": previous}


def handle_group_delete(root: Path, *, path: str, group: int) -> dict:
    file_path, document = _load(root, path)
    if document is None:
        return {"error": f"File '{path}' not found"}
    target_group = _lookup(document.groups, group)
    if target_group is None:
        return {"error": f"No group {group} in '{path}'"}

    del document.groups[group]
    _save(file_path, document)
    log.info("%s: deleted group %d %r", path, group, target_group.title)

    return {
        "path": path,
        "index": group,
        "title": target_group.title,
        "deleted_items": len(target_group.items),
    }



# ---------------------------------------------------------------------------
# MCP registration
# ---------------------------------------------------------------------------

def register_xit_tools(mcp: FastMCP, root: Path) -> None:
    """Register all xit! tools on the MCP server."""

    @mcp.tool()
    def xit_parse(content: str, today: Optional[str] = None) -> str:
        """
        Parse xit! text into groups and items.

        Args:
            content: Raw xit! file content
            today: Reference date for overdue flags (YYYY-MM-DD, default: today)

        Returns:
            JSON object with groups, per-status counts and items
        """
        try:
            return json.dumps(handle_parse(content=content, today=today), indent=2)
        except Exception as e:
            return json.dumps({"error": str(e)})

    @mcp.tool()
    def xit_format(content: str) -> str:
        """
        Rewrite xit! text in canonical form.

        Args:
            content: Raw xit! file content

        Returns:
            JSON object with the formatted "content" and whether it "changed"
        """
        return json.dumps(handle_format(content=content), indent=2)

    @mcp.tool()
    def xit_preview(text: str, today: Optional[str] = None) -> str:
        """
        Show the tags and due date found in a piece of item text.

        Args:
            text: Item description, e.g. "call bob #work -> 2024-W12"
            today: Reference date for the overdue flag (YYYY-MM-DD)

        Returns:
            JSON object with "tags" and "due_date"
        """
        try:
            return json.dumps(handle_preview(text=text, today=today), indent=2)
        except Exception as e:
            return json.dumps({"error": str(e)})

    @mcp.tool()
    def xit_read(
        path: str,
        status: Optional[str] = None,
        overdue_only: bool = False,
        today: Optional[str] = None,
    ) -> str:
        """
        Read a xit! file.

        Args:
            path: File path relative to the xit root
            status: Only include items with this status
                    ("open", "checked", "ongoing", "obsolete", "in-question")
            overdue_only: Only include items whose due date has passed
            today: Reference date for overdue checks (YYYY-MM-DD)

        Returns:
            JSON object with groups and items, or error message
        """
        try:
            return json.dumps(
                handle_file_read(root, path=path, status=status, overdue_only=overdue_only, today=today),
                indent=2,
            )
        except Exception as e:
            return json.dumps({"error": str(e)})

    @mcp.tool()
    def xit_item_update(
        path: str,
        group: int,
        item: int,
        status: Optional[str] = None,
        cycle: bool = False,
    ) -> str:
        """
        Change an item's status and save the file.

        Args:
            path: File path relative to the xit root
            group: Group index (as returned by xit_read)
            item: Item index within the group
            status: New status name or checkbox symbol
            cycle: Advance the status like a checkbox click instead

        Returns:
            Updated item JSON or error message
        """
        try:
            return json.dumps(
                handle_item_update(root, path=path, group=group, item=item, status=status, cycle=cycle),
                indent=2,
            )
        except Exception as e:
            return json.dumps({"error": str(e)})

    @mcp.tool()
    def xit_new(path: str) -> str:
        """
        Create a new xit! file with starter content.

        Args:
            path: File path relative to the xit root

        Returns:
            JSON object with the written content, or error message
        """
        try:
            return json.dumps(handle_file_new(root, path=path), indent=2)
        except Exception as e:
            return json.dumps({"error": str(e)})

    @mcp.tool()
    def xit_item_add(
        path: str,
        group: int,
        description: str,
        status: str = "open",
        priority: int = 0,
        position: Optional[int] = None,
    ) -> str:
        """
        Add an item to a group and save the file.

        Args:
            path: File path relative to the xit root
            group: Group index (as returned by xit_read)
            description: Item text; tags and "-> date" annotations go inline
            status: Status name or checkbox symbol (default: open)
            priority: Number of "!" marks (default: 0)
            position: Insert before this item index (default: append)

        Returns:
            New item JSON or error message
        """
        try:
            return json.dumps(
                handle_item_add(
                    root, path=path, group=group, description=description,
                    status=status, priority=priority, position=position,
                ),
                indent=2,
            )
        except Exception as e:
            return json.dumps({"error": str(e)})

    @mcp.tool()
    def xit_item_edit(
        path: str,
        group: int,
        item: int,
        description: Optional[str] = None,
        priority: Optional[int] = None,
        continuation_lines: Optional[List[str]] = None,
    ) -> str:
        """
        Change an item's text and save the file.

        Args:
            path: File path relative to the xit root
            group: Group index
            item: Item index within the group
            description: New first-line text
            priority: New number of "!" marks
            continuation_lines: Replacement continuation lines (without indent)

        Returns:
            Updated item JSON or error message
        """
        try:
            return json.dumps(
                handle_item_edit(
                    root, path=path, group=group, item=item, description=description,
                    priority=priority, continuation_lines=continuation_lines,
                ),
                indent=2,
            )
        except Exception as e:
            return json.dumps({"error": str(e)})

    @mcp.tool()
    def xit_item_delete(path: str, group: int, item: int) -> str:
        """
        Delete an item and save the file. A group left empty is deleted too.

        Returns:
            JSON with the deleted item and "group_removed", or error message
        """
        try:
            return json.dumps(handle_item_delete(root, path=path, group=group, item=item), indent=2)
        except Exception as e:
            return json.dumps({"error": str(e)})

    @mcp.tool()
    def xit_group_add(path: str, title: Optional[str] = "New Group", description: str = "New task") -> str:
        """
        Append a group holding one open item.

        Args:
            path: File path relative to the xit root
            title: Group title; empty for an untitled group
            description: Text of the group's first item

        Returns:
            New group JSON or error message
        """
        try:
            return json.dumps(
                handle_group_add(root, path=path, title=title, description=description), indent=2
            )
        except Exception as e:
            return json.dumps({"error": str(e)})

    @mcp.tool()
    def xit_group_rename(path: str, group: int, title: Optional[str] = None) -> str:
        """Rename a group; an empty title makes it untitled."""
        try:
            return json.dumps(handle_group_rename(root, path=path, group=group, title=title), indent=2)
        except Exception as e:
            return json.dumps({"error": str(e)})

    @mcp.tool()
    def xit_group_delete(path: str, group: int) -> str:
        """Delete a group with all of its items."""
        try:
            return json.dumps(handle_group_delete(root, path=path, group=group), indent=2)
        except Exception as e:
            return json.dumps({"error": str(e)})
