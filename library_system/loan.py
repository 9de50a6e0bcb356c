from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from library_system.book import Book
from library_system.member import Member

LOAN_PERIOD_DAYS = 14
FINE_PER_DAY = 0.50


class Loan:
    """A single checkout of a book by a member.

    The loan keeps references to the catalog's own Book and Member objects.
    It is open until ``return_date`` is set. Overdue status and fines are
    always derived from the date passed in (today by default) and are never
    stored on the loan.
    """

    def __init__(self, book: Book, member: Member, checkout_date: date,
                 due_date: Optional[date] = None, return_date: Optional[date] = None) -> None:
        self.book = book
        self.member = member
        self.checkout_date = checkout_date
        self.due_date = due_date or checkout_date + timedelta(days=LOAN_PERIOD_DAYS)
        self.return_date = return_date

    @property
    def is_open(self) -> bool:
        return self.return_date is None

    def is_overdue(self, on_date: Optional[date] = None) -> bool:
        """Return True if the loan is still open and ``on_date`` is past the due date."""
        on_date = on_date or date.today()
        return self.is_open and on_date > self.due_date

    def days_overdue(self, on_date: Optional[date] = None) -> int:
        on_date = on_date or date.today()
        if not self.is_overdue(on_date):
            return 0
        return (on_date - self.due_date).days

    def calculate_fine(self, on_date: Optional[date] = None) -> float:
        """Flat per-day fine for open overdue loans, 0.0 otherwise."""
        return self.days_overdue(on_date) * FINE_PER_DAY

    def status(self, on_date: Optional[date] = None) -> str:
        if not self.is_open:
            return "Returned"
        return "OVERDUE" if self.is_overdue(on_date) else "On time"

    def describe(self, on_date: Optional[date] = None) -> str:
        """One-line summary with the fine as of ``on_date``."""
        returned = self.return_date.isoformat() if self.return_date else "Not returned"
        return (f"Book: {self.book.title:<25} Member: {self.member.name:<20} "
                f"Checkout: {self.checkout_date} Due: {self.due_date} "
                f"Returned: {returned} Fine: ${self.calculate_fine(on_date):.2f}")

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return self.describe()

    def to_dict(self, on_date: Optional[date] = None) -> dict:
        return {
            "book": self.book.to_dict(),
            "member": self.member.to_dict(),
            "checkout_date": self.checkout_date.isoformat(),
            "due_date": self.due_date.isoformat(),
            "return_date": self.return_date.isoformat() if self.return_date else None,
            "status": self.status(on_date),
            "days_overdue": self.days_overdue(on_date),
            "fine": self.calculate_fine(on_date),
        }
