"""
xit - command line tool for xit! task lists

Usage:
    xit fmt <file> [--check | --write]
    xit list <file> [--status S] [--overdue] [--today YYYY-MM-DD] [--json]
    xit preview <text> [--today YYYY-MM-DD]
    xit new <file> [--force]

Examples:
    xit fmt todo.xit --write
    xit list todo.xit --status open --overdue
    xit preview "call bob #work -> 2024-W12"
    xit new ~/notes/todo.xit
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from xit.models.item import Document
from xit.parsers.inline import extract_due_date, extract_tags
from xit.parsers.xit_parser import parse_content
from xit.tools.xit_tools import STATUS_NAMES, parse_today
from xit.utils.formatting import format_file

log = logging.getLogger(__name__)


# --- helpers ---

def _read(path: Path) -> str:
    if not path.is_file():
        print(f"Error: {path} not found.")
        sys.exit(1)
    return path.read_text(encoding='utf-8')


def _reference_date(args):
    try:
        return parse_today(args.today)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)


# --- fmt ---

def fmt_cmd(args):
    """Rewrite a file in canonical form."""
    path = Path(args.file)
    content = _read(path)
    formatted = format_file(parse_content(content))

    if args.check:
        if formatted != content:
            print(f"{path} would be reformatted.")
            sys.exit(1)
        print(f"{path} is already formatted.")
        return

    if args.write:
        if formatted != content:
            path.write_text(formatted, encoding='utf-8')
            log.info("Reformatted %s", path)
            print(f"Reformatted: {path}")
        else:
            print(f"Unchanged: {path}")
        return

    print(formatted, end="")


# --- list ---

def list_cmd(args):
    """List the items of a file, optionally filtered."""
    path = Path(args.file)
    document = parse_content(_read(path))
    today = _reference_date(args)
    status = STATUS_NAMES[args.status] if args.status else None

    rows = []
    for group in document.groups:
        for item in group.filter(status):
            if args.overdue and not item.is_overdue(today):
                continue
            rows.append((group, item))

    if args.json:
        print(json.dumps([
            {
                "group": group.title,
                "status": item.status.display_name,
                "priority": item.priority,
                "description": item.description,
                "tags": [tag.display for tag in item.tags],
                "due": item.due_date.raw if item.due_date else None,
                "overdue": item.is_overdue(today),
            }
            for group, item in rows
        ], indent=2))
        return

    if not rows:
        print("No matching items.")
        return

    current_group = None
    for group, item in rows:
        if group is not current_group:
            current_group = group
            print(f"\n{group.title}" if group.title else "\n(untitled)")
        line = f"  {item.status.checkbox} "
        if item.priority:
            line += "!" * item.priority + " "
        line += item.description
        if item.is_overdue(today):
            line += "  (overdue)"
        print(line)


# --- preview ---

def preview_cmd(args):
    """Show the tags and due date found in a piece of text."""
    today = _reference_date(args)
    tags = extract_tags(args.text)
    due = extract_due_date(args.text)

    if tags:
        print("Tags: " + " ".join(tag.display for tag in tags))
    else:
        print("Tags: (none)")

    if due is None:
        print("Due: (none)")
    else:
        suffix = " (overdue)" if due.is_overdue(today) else ""
        print(f"Due: {due.raw} [{due.granularity.value}]{suffix}")


# --- new ---

def new_cmd(args):
    """Create a file with starter content."""
    target = Path(args.file)
    if target.exists() and not args.force:
        print(f"Error: {target} already exists. Use --force to overwrite.")
        sys.exit(1)

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(format_file(Document.new()), encoding='utf-8')
    print(f"Created: {target}")


# --- main ---

def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Format, inspect and create xit! task lists",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging verbosity (default: WARNING)')
    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    # --- fmt ---
    fmt_p = subparsers.add_parser('fmt', help='Rewrite a file in canonical form')
    fmt_p.add_argument('file', help='Path to the .xit file')
    mode = fmt_p.add_mutually_exclusive_group()
    mode.add_argument('--check', action='store_true', help='Exit 1 if the file is not formatted')
    mode.add_argument('--write', action='store_true', help='Rewrite the file in place')
    fmt_p.set_defaults(func=fmt_cmd)

    # --- list ---
    list_p = subparsers.add_parser('list', help='List items')
    list_p.add_argument('file', help='Path to the .xit file')
    list_p.add_argument('--status', choices=list(STATUS_NAMES), help='Filter by status')
    list_p.add_argument('--overdue', action='store_true', help='Show only overdue items')
    list_p.add_argument('--today', help='Reference date for overdue checks (YYYY-MM-DD)')
    list_p.add_argument('--json', action='store_true', help='Print JSON instead of text')
    list_p.set_defaults(func=list_cmd)

    # --- preview ---
    preview_p = subparsers.add_parser('preview', help='Show tags and due date of some text')
    preview_p.add_argument('text', help='Item text')
    preview_p.add_argument('--today', help='Reference date for the overdue flag (YYYY-MM-DD)')
    preview_p.set_defaults(func=preview_cmd)

    # --- new ---
    new_p = subparsers.add_parser('new', help='Create a new .xit file')
    new_p.add_argument('file', help='Target path')
    new_p.add_argument('--force', action='store_true', help='Overwrite existing file')
    new_p.set_defaults(func=new_cmd)

    args = parser.parse_args(argv)
    if not hasattr(args, 'func'):
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    args.func(args)


if __name__ == '__main__':
    main()
