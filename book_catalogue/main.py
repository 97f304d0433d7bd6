import asyncio
import logging
import subprocess
import sys
import webbrowser
from typing import Optional

import typer
from rich.console import Console

from book_catalogue.book import BookValidationError
from book_catalogue.client_state import ClientListState
from book_catalogue.config import settings
from book_catalogue.services.http_client import RemoteBookAPI, TransportError
from book_catalogue.ui_helpers import print_list_result, render_row, set_output_mode

console = Console()

app = typer.Typer(help="Book Catalogue CLI")


def _make_api() -> RemoteBookAPI:
    return RemoteBookAPI(settings.base_url)


def _run(action):
    """Run ``action(state)`` against a fresh client state and report failures."""

    async def runner():
        async with _make_api() as api:
            state = ClientListState(api)
            return await action(state)

    try:
        return asyncio.run(runner())
    except TransportError as e:
        print(f"Server unreachable: {e}")
        raise typer.Exit(code=1)
    except BookValidationError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    )
):
    """Global options for the CLI (e.g. output mode)."""
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
    if output:
        set_output_mode(output)


@app.command("list")
def cli_list():
    """List every book in the catalogue."""

    async def action(state: ClientListState):
        await state.refresh()
        print_list_result(state.snapshot())

    _run(action)


@app.command("add")
def cli_add(
    title: str,
    author: str,
    isbn: str,
    publish_date: Optional[str] = typer.Option(None, "--date", "-d", help="Publish date as YYYY-MM-DD (default: today)"),
):
    """Add a new book."""

    async def action(state: ClientListState):
        state.draft.title.set(title)
        state.draft.author.set(author)
        state.draft.isbn.set(isbn)
        if publish_date:
            state.draft.publish_date.set(publish_date)
        vm = await state.submit_new()
        print(state.message.get())
        print(render_row(vm))

    _run(action)


@app.command("edit")
def cli_edit(
    book_id: int,
    title: Optional[str] = typer.Option(None, "--title", help="New title"),
    author: Optional[str] = typer.Option(None, "--author", help="New author"),
    publish_date: Optional[str] = typer.Option(None, "--date", "-d", help="New publish date as YYYY-MM-DD"),
    isbn: Optional[str] = typer.Option(None, "--isbn", help="New ISBN"),
):
    """Update fields of an existing book; unspecified fields keep their value."""

    async def action(state: ClientListState):
        await state.refresh()
        vm = state.get(book_id)
        if vm is None:
            print(f"Book with id {book_id} not found.")
            return
        session = state.begin_edit(vm)
        if title is not None:
            session.title.set(title)
        if author is not None:
            session.author.set(author)
        if publish_date is not None:
            session.publish_date.set(publish_date)
        if isbn is not None:
            session.isbn.set(isbn)
        await state.submit_update(vm)
        print(state.message.get())

    _run(action)


@app.command("remove")
def cli_remove(book_id: int):
    """Remove a book by id."""

    async def action(state: ClientListState):
        await state.refresh()
        vm = state.get(book_id)
        if vm is None:
            print(f"Book with id {book_id} not found.")
            return
        await state.submit_remove(vm)
        print(state.message.get())

    _run(action)


@app.command("serve")
def cli_serve(
    host: Optional[str] = typer.Option(None, "--host", help="Interface to bind"),
    port: Optional[int] = typer.Option(None, "--port", help="Port to listen on"),
    open_browser: bool = typer.Option(True, "--open/--no-open", help="Open the API docs in a browser"),
):
    """Start the catalogue server with Uvicorn."""
    host = host or settings.api_host
    port = int(port or settings.api_port)
    url = f"http://{host}:{port}/docs"
    print(f"Starting catalogue server on {url}")
    if open_browser:
        try:
            webbrowser.open(url)
        except webbrowser.Error:
            console.print("[yellow]Could not open a web browser automatically.[/]")
    args = [
        sys.executable,
        "-m", "uvicorn",
        "book_catalogue.api:app",
        "--host", host,
        "--port", str(port),
    ]
    try:
        subprocess.run(args)
    except KeyboardInterrupt:
        console.print("[green]Server stopped.[/]")


if __name__ == "__main__":
    app()
