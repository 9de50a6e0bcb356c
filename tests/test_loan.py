from datetime import date, timedelta

from library_system.book import Book
from library_system.loan import Loan
from library_system.member import Member


def make_loan(checkout_date, return_date=None):
    book = Book("978-0451524935", "1984", "George Orwell")
    member = Member("M001", "John Doe", "john@example.com", "555-0101")
    return Loan(book, member, checkout_date, return_date=return_date)

def test_due_date_is_fourteen_days_after_checkout():
    loan = make_loan(date(2024, 2, 20))
    assert loan.due_date == date(2024, 3, 5)
    assert loan.is_open

def test_loan_due_five_days_ago_is_overdue_with_fine():
    today = date.today()
    loan = make_loan(today - timedelta(days=19))
    assert loan.due_date == today - timedelta(days=5)
    assert loan.is_overdue(today) is True
    assert loan.days_overdue(today) == 5
    assert loan.calculate_fine(today) == 2.50

def test_describe_uses_the_given_date():
    loan = make_loan(date(2024, 3, 1))
    text = loan.describe(date(2024, 3, 20))
    assert "Book: 1984" in text
    assert "Member: John Doe" in text
    assert "Due: 2024-03-15" in text
    assert "Returned: Not returned" in text
    assert text.endswith("Fine: $2.50")
    assert loan.describe(date(2024, 3, 10)).endswith("Fine: $0.00")

def test_not_overdue_on_due_date():
    loan = make_loan(date(2024, 3, 1))
    assert loan.is_overdue(date(2024, 3, 15)) is False
    assert loan.calculate_fine(date(2024, 3, 15)) == 0.0
    assert loan.is_overdue(date(2024, 3, 16)) is True
    assert loan.calculate_fine(date(2024, 3, 16)) == 0.50

def test_fine_has_no_cap():
    loan = make_loan(date(2023, 1, 1))
    due = loan.due_date
    assert loan.calculate_fine(due + timedelta(days=400)) == 200.0

def test_returned_loan_is_never_overdue():
    loan = make_loan(date(2024, 1, 1), return_date=date(2024, 2, 1))
    assert loan.is_open is False
    assert loan.is_overdue(date(2024, 3, 1)) is False
    assert loan.calculate_fine(date(2024, 3, 1)) == 0.0
    assert loan.status(date(2024, 3, 1)) == "Returned"

def test_status_for_open_loans():
    loan = make_loan(date(2024, 3, 1))
    assert loan.status(date(2024, 3, 2)) == "On time"
    assert loan.status(date(2024, 4, 1)) == "OVERDUE"

def test_to_dict():
    loan = make_loan(date(2024, 3, 1))
    data = loan.to_dict(date(2024, 3, 20))
    assert data["book"]["title"] == "1984"
    assert data["member"]["member_id"] == "M001"
    assert data["checkout_date"] == "2024-03-01"
    assert data["due_date"] == "2024-03-15"
    assert data["return_date"] is None
    assert data["status"] == "OVERDUE"
    assert data["days_overdue"] == 5
    assert data["fine"] == 2.5

def test_book_and_member_dict_round_trip():
    book = Book("123", "Title", "Author", available=False)
    assert Book.from_dict(book.to_dict()).to_dict() == book.to_dict()
    member = Member("M9", "Name", "n@example.com", "555")
    assert Member.from_dict(member.to_dict()).to_dict() == member.to_dict()

def test_new_book_is_available():
    assert Book("1", "T", "A").available is True
