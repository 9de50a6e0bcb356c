from datetime import date, timedelta

import pytest

from library_system.library import Library
from library_system.ui_helpers import OUTPUT_MODE_ENV


class FakeClock:
    """Callable stand-in for date.today that tests can move forward."""

    def __init__(self, today: date) -> None:
        self.today = today

    def __call__(self) -> date:
        return self.today

    def advance(self, days: int) -> None:
        self.today += timedelta(days=days)


@pytest.fixture
def clock():
    return FakeClock(date(2024, 3, 1))


@pytest.fixture
def lib(clock):
    return Library(today=clock)


@pytest.fixture
def seeded_lib(lib):
    lib.add_book("978-0061120084", "To Kill a Mockingbird", "Harper Lee")
    lib.add_book("978-0451524935", "1984", "George Orwell")
    lib.add_book("978-0743273565", "The Great Gatsby", "F. Scott Fitzgerald")
    lib.add_member("M001", "John Doe", "john@example.com", "555-0101")
    lib.add_member("M002", "Jane Smith", "jane@example.com", "555-0102")
    return lib


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    # CLI --output writes to os.environ; monkeypatch undoes it after each test
    monkeypatch.setenv(OUTPUT_MODE_ENV, "plain")
