import json
import os
from typing import Any, Dict, List

from rich.console import Console
from rich.table import Table

from book_catalogue.book import format_date
from book_catalogue.client_state import BookViewModel

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "BOOK_CLI_OUTPUT"

_console = Console()


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()


def row_fields(vm: BookViewModel) -> Dict[str, Any]:
    """Field values a row shows: the edit buffer while editing, the record otherwise."""
    if vm.is_edited:
        s = vm.session
        return {
            "id": vm.key,
            "title": s.title.get(),
            "author": s.author.get(),
            "publishDate": s.publish_date.get(),
            "isbn": s.isbn.get(),
        }
    b = vm.book
    return {
        "id": vm.key,
        "title": b.title,
        "author": b.author,
        "publishDate": format_date(b.publish_date),
        "isbn": b.isbn,
    }


def render_row(vm: BookViewModel) -> str:
    """Plain text rendering of one row; edited rows render as an edit form."""
    f = row_fields(vm)
    if vm.is_edited:
        return (
            f"[{f['id']}] * editing * title={f['title']!r} author={f['author']!r} "
            f"date={f['publishDate']!r} isbn={f['isbn']!r}"
        )
    return f"[{f['id']}] {f['title']} by {f['author']} ({f['publishDate']}) ISBN: {f['isbn']}"


def print_list_result(rows: List[BookViewModel]) -> None:
    """Print the rows according to the current output mode.
    - plain: one render_row line per book, or 'No books in catalogue.'
    - json: JSON array in wire shape
    - rich: Rich table
    """
    mode = get_output_mode()

    if not rows:
        print("No books in catalogue.")
        return

    if mode == "json":
        print(json.dumps([row_fields(vm) for vm in rows], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📚 Books", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Published", style="white", no_wrap=True)
        table.add_column("ISBN", style="white", no_wrap=True)
        for vm in rows:
            f = row_fields(vm)
            table.add_row(str(f["id"]), f["title"], f["author"], f["publishDate"], f["isbn"])
        _console.print(table)
    else:
        for vm in rows:
            print(render_row(vm))
