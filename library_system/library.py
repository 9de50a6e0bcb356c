import logging
from datetime import date, timedelta
from threading import RLock
from typing import Any, Callable, Dict, List, Optional

from library_system.book import Book
from library_system.loan import FINE_PER_DAY, LOAN_PERIOD_DAYS, Loan
from library_system.member import Member

logger = logging.getLogger(__name__)


class Library:
    """Manages the book catalog, the member list and the loan history in memory.

    Lookups return None when nothing matches and checkout/return report
    refusal with False; none of the operations raise for those outcomes.
    Every operation runs under one lock so that a book's availability flag
    and its open loan always change together.
    """

    LOAN_DAYS = LOAN_PERIOD_DAYS
    FINE_PER_DAY = FINE_PER_DAY

    def __init__(self, today: Callable[[], date] = date.today) -> None:
        self._today = today
        self._lock = RLock()
        self.books: List[Book] = []
        self.members: List[Member] = []
        self.loans: List[Loan] = []

    def today(self) -> date:
        return self._today()

    # ------------------------- Books ------------------------- #
    def add_book(self, isbn: str, title: str, author: str) -> Book:
        """Add a new available book. Duplicate ISBNs are accepted."""
        book = Book(isbn=isbn, title=title, author=author)
        with self._lock:
            self.books.append(book)
        logger.info(f"Book added: isbn={isbn} title={title!r}")
        return book

    def find_book_by_title(self, title: str) -> Optional[Book]:
        wanted = title.strip().lower()
        with self._lock:
            for book in self.books:
                if book.title.lower() == wanted:
                    return book
        logger.debug(f"No book titled {title!r}")
        return None

    def search_books(self, term: str) -> List[Book]:
        """Books whose title or author contains ``term`` (any case) or whose ISBN contains it exactly."""
        needle = term.lower()
        with self._lock:
            return [
                book for book in self.books
                if needle in book.title.lower() or needle in book.author.lower() or term in book.isbn
            ]

    def list_books(self) -> List[Book]:
        with self._lock:
            return list(self.books)

    # ------------------------- Members ------------------------- #
    def add_member(self, member_id: str, name: str, email: str, phone: str) -> Member:
        """Register a new member. Duplicate member IDs are accepted."""
        member = Member(member_id=member_id, name=name, email=email, phone=phone)
        with self._lock:
            self.members.append(member)
        logger.info(f"Member added: member_id={member_id} name={name!r}")
        return member

    def find_member_by_id(self, member_id: str) -> Optional[Member]:
        wanted = member_id.strip().lower()
        with self._lock:
            for member in self.members:
                if member.member_id.lower() == wanted:
                    return member
        logger.debug(f"No member with id {member_id!r}")
        return None

    def search_members(self, term: str) -> Optional[Member]:
        """Find a member by ID, falling back to the first name containing ``term``."""
        member = self.find_member_by_id(term)
        if member:
            return member
        needle = term.lower()
        with self._lock:
            for candidate in self.members:
                if needle in candidate.name.lower():
                    return candidate
        return None

    def list_members(self) -> List[Member]:
        with self._lock:
            return list(self.members)

    # ------------------------- Loans ------------------------- #
    def checkout_book(self, book: Optional[Book], member: Optional[Member]) -> bool:
        """Lend ``book`` to ``member`` for LOAN_DAYS days.

        Returns False without changing anything when either argument is
        missing or the book is already out.
        """
        return self.lend(book, member) is not None

    def lend(self, book: Optional[Book], member: Optional[Member]) -> Optional[Loan]:
        """Same as checkout_book, but hands back the new Loan (None when refused)."""
        if book is None or member is None:
            return None
        with self._lock:
            if not book.available:
                logger.info(f"Checkout refused, book not available: isbn={book.isbn}")
                return None
            checkout_date = self.today()
            loan = Loan(book, member, checkout_date, checkout_date + timedelta(days=self.LOAN_DAYS))
            book.available = False
            self.loans.append(loan)
        logger.info(f"Checkout: isbn={book.isbn} member_id={member.member_id}")
        return loan

    def return_book(self, book: Optional[Book]) -> bool:
        """Close the first open loan for this exact book object.

        Returns False when the book has no open loan, whether it was never
        checked out or was already returned. The returning member is not
        checked against the borrower.
        """
        if book is None:
            return False
        with self._lock:
            for loan in self.loans:
                if loan.book is book and loan.is_open:
                    loan.return_date = self.today()
                    book.available = True
                    break
            else:
                logger.info(f"Return refused, no open loan: isbn={book.isbn}")
                return False
        logger.info(f"Return: isbn={book.isbn} member_id={loan.member.member_id}")
        return True

    def current_loans(self) -> List[Loan]:
        with self._lock:
            return [loan for loan in self.loans if loan.is_open]

    def overdue_loans(self) -> List[Loan]:
        today = self.today()
        with self._lock:
            return [loan for loan in self.loans if loan.is_overdue(today)]

    def list_loans(self) -> List[Loan]:
        with self._lock:
            return list(self.loans)

    # ------------------------- Reporting ------------------------- #
    def get_statistics(self) -> Dict[str, Any]:
        """Get library statistics."""
        today = self.today()
        with self._lock:
            overdue = [loan for loan in self.loans if loan.is_overdue(today)]
            return {
                "total_books": len(self.books),
                "available_books": sum(1 for b in self.books if b.available),
                "total_members": len(self.members),
                "current_loans": sum(1 for loan in self.loans if loan.is_open),
                "overdue_loans": len(overdue),
                "outstanding_fines": sum(loan.calculate_fine(today) for loan in overdue),
            }
