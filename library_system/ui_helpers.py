import os
import json
from typing import Any, Dict, List, Optional

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json"}:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()

def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False))

def print_books(books: List[Dict[str, Any]], empty_message: str = "No books in the library.") -> None:
    """Print books in the current output mode.
    - plain: 'ISBN - Title by Author [Available|Checked out]' lines, or the empty message
    - json: JSON array of the book records
    """
    if get_output_mode() == "json":
        _print_json(books)
        return
    if not books:
        print(empty_message)
        return
    for b in books:
        state = "Available" if b.get("available") else "Checked out"
        print(f"{b['isbn']} - {b['title']} by {b['author']} [{state}]")

def print_member(member: Optional[Dict[str, Any]], empty_message: str = "No members found matching your search.") -> None:
    if get_output_mode() == "json":
        _print_json(member)
        return
    if not member:
        print(empty_message)
        return
    print(f"{member['member_id']} - {member['name']} <{member['email']}> {member['phone']}")

def print_members(members: List[Dict[str, Any]]) -> None:
    if get_output_mode() == "json":
        _print_json(members)
        return
    if not members:
        print("No members registered.")
        return
    for m in members:
        print_member(m)

def print_loans(loans: List[Dict[str, Any]], empty_message: str = "No books currently checked out.") -> None:
    """Print loans in the current output mode.
    - plain: one line per loan with dates and status; overdue loans also show days late and fine
    - json: JSON array of the loan records
    """
    if get_output_mode() == "json":
        _print_json(loans)
        return
    if not loans:
        print(empty_message)
        return
    for loan in loans:
        line = (f"{loan['book']['title']} - {loan['member']['name']} "
                f"(checkout {loan['checkout_date']}, due {loan['due_date']}) {loan['status']}")
        if loan.get("return_date"):
            line += f" on {loan['return_date']}"
        if loan.get("days_overdue"):
            line += f", {loan['days_overdue']} days late, fine ${loan['fine']:.2f}"
        print(line)

def print_stats(stats: Dict[str, Any]) -> None:
    if get_output_mode() == "json":
        _print_json(stats)
        return
    print(f"Total Books: {stats.get('total_books', 0)}")
    print(f"Available Books: {stats.get('available_books', 0)}")
    print(f"Members: {stats.get('total_members', 0)}")
    print(f"Current Loans: {stats.get('current_loans', 0)}")
    print(f"Overdue Loans: {stats.get('overdue_loans', 0)}")
    print(f"Outstanding Fines: ${stats.get('outstanding_fines', 0.0):.2f}")
