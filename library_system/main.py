import json
import logging
import subprocess
import sys
from functools import wraps
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from library_system.config import settings
from library_system.http_client import LibraryAPIError, LibraryClient
from library_system.ui_helpers import (
    get_output_mode,
    print_books,
    print_loans,
    print_member,
    print_members,
    print_stats,
    set_output_mode,
)

logging.basicConfig(level=settings.log_level)

console = Console()

app = typer.Typer(help="Library CLI. Talks to a running library API (see `serve`).")


def _get_client() -> LibraryClient:
    return LibraryClient()


# Turns API errors into a red message and exit code 1
def handle_api_errors(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except LibraryAPIError as e:
            console.print(f"[red]{escape(e.detail)}[/]")
            raise typer.Exit(code=1)
    return wrapper


def _print_record(record: dict, message: str) -> None:
    if get_output_mode() == "json":
        print(json.dumps(record, ensure_ascii=False))
    else:
        print(message)


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json (default: plain)",
    )
):
    """Global options for the CLI (e.g. output mode)."""
    if output:
        set_output_mode(output)


@app.command("serve")
def cli_serve(
    host: str = typer.Option(settings.api_host, "--host", help="Interface to bind"),
    port: int = typer.Option(settings.api_port, "--port", help="Port to listen on"),
):
    """Start the library API with uvicorn. All data lives in that process."""
    print(f"Starting library API on http://{host}:{port}/")
    args = [
        sys.executable,
        "-m", "uvicorn",
        "library_system.api:app",
        "--host", host,
        "--port", str(port),
        "--log-level", settings.log_level.lower(),
    ]
    try:
        subprocess.run(args, check=False)
    except KeyboardInterrupt:
        pass


# --- Books ---
@app.command("add-book")
@handle_api_errors
def cli_add_book(isbn: str, title: str, author: str):
    """Add a new book to the catalog."""
    with _get_client() as client:
        book = client.add_book(isbn, title, author)
    _print_record(book, f"Book added successfully: {book['title']} by {book['author']}")


@app.command("search")
@handle_api_errors
def cli_search(term: str = typer.Argument(..., help="Title, author or ISBN fragment")):
    """Search books by title, author or ISBN."""
    with _get_client() as client:
        books = client.search_books(term)
    print_books(books, empty_message="No books found matching your search.")


@app.command("books")
@handle_api_errors
def cli_books():
    """List all books."""
    with _get_client() as client:
        books = client.list_books()
    print_books(books)


# --- Members ---
@app.command("add-member")
@handle_api_errors
def cli_add_member(member_id: str, name: str, email: str, phone: str):
    """Register a new member."""
    with _get_client() as client:
        member = client.add_member(member_id, name, email, phone)
    _print_record(member, f"Member added successfully: {member['member_id']} - {member['name']}")


@app.command("find-member")
@handle_api_errors
def cli_find_member(term: str = typer.Argument(..., help="Member ID or part of the name")):
    """Find a member by ID, or by name when no ID matches."""
    with _get_client() as client:
        member = client.search_members(term)
    print_member(member)


@app.command("members")
@handle_api_errors
def cli_members():
    """List all members."""
    with _get_client() as client:
        members = client.list_members()
    print_members(members)


# --- Loans ---
@app.command("checkout")
@handle_api_errors
def cli_checkout(member_id: str, title: str):
    """Check out the book with this title to a member."""
    with _get_client() as client:
        loan = client.checkout(member_id, title)
    if get_output_mode() == "json":
        print_loans([loan])
    else:
        print("Book checked out successfully!")
        print(f"Due Date: {loan['due_date']}")


@app.command("return")
@handle_api_errors
def cli_return(title: str):
    """Return the book with this title."""
    with _get_client() as client:
        book = client.return_book(title)
    _print_record(book, "Book returned successfully!")


@app.command("loans")
@handle_api_errors
def cli_loans():
    """Show the whole loan history."""
    with _get_client() as client:
        loans = client.list_loans()
    print_loans(loans, empty_message="No loans recorded.")


@app.command("current-loans")
@handle_api_errors
def cli_current_loans():
    """Show books that are currently checked out."""
    with _get_client() as client:
        loans = client.current_loans()
    print_loans(loans)


@app.command("overdue")
@handle_api_errors
def cli_overdue():
    """Show overdue loans with days late and fines."""
    with _get_client() as client:
        loans = client.overdue_loans()
    print_loans(loans, empty_message="No overdue books.")


@app.command("stats")
@handle_api_errors
def cli_stats():
    """Show library statistics."""
    with _get_client() as client:
        stats = client.get_statistics()
    print_stats(stats)


if __name__ == "__main__":
    app()
