import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Security
from fastapi.security import APIKeyHeader
from pydantic import BaseModel, Field

from library_system.config import settings
from library_system.library import Library

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


# --- Models ---
class BookModel(BaseModel):
    isbn: str
    title: str
    author: str
    available: bool = True

class BookCreateModel(BaseModel):
    isbn: str = Field(min_length=1)
    title: str = Field(min_length=1)
    author: str = Field(min_length=1)

class MemberModel(BaseModel):
    member_id: str
    name: str
    email: str
    phone: str

class MemberCreateModel(BaseModel):
    member_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    phone: str = Field(min_length=1)

class LoanModel(BaseModel):
    book: BookModel
    member: MemberModel
    checkout_date: str
    due_date: str
    return_date: str | None = None
    status: str
    days_overdue: int
    fine: float

class CheckoutRequest(BaseModel):
    member_id: str = Field(min_length=1)
    title: str = Field(min_length=1, description="Exact book title, case-insensitive")

class ReturnRequest(BaseModel):
    title: str = Field(min_length=1, description="Exact book title, case-insensitive")

class StatsModel(BaseModel):
    total_books: int
    available_books: int
    total_members: int
    current_loans: int
    overdue_loans: int
    outstanding_fines: float


# --- Security ---
api_key_header = APIKeyHeader(name="X-API-Key")

def get_api_key(api_key: str = Security(api_key_header)):
    """Dependency that checks the API key on mutating routes."""
    if api_key == settings.api_key:
        return api_key
    else:
        raise HTTPException(
            status_code=403,
            detail="Could not validate credentials",
        )

def get_library(request: Request) -> Library:
    return request.app.state.library


def _loan_models(library: Library, loans) -> List[LoanModel]:
    today = library.today()
    return [LoanModel(**loan.to_dict(today)) for loan in loans]


# --- Routes ---
def _register_routes(app: FastAPI) -> None:

    @app.get("/health")
    def health(library: Library = Depends(get_library)):
        """Lightweight health endpoint for container checks."""
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": settings.app_version,
            "total_books": len(library.list_books()),
        }

    @app.get("/stats", response_model=StatsModel)
    def get_library_stats(library: Library = Depends(get_library)):
        """Get basic statistics about the library."""
        return StatsModel(**library.get_statistics())

    # Books
    @app.get("/books", response_model=List[BookModel])
    def get_books(q: Optional[str] = Query(None, description="Matches title, author or ISBN"),
                  library: Library = Depends(get_library)):
        """List every book, or only the ones matching ``q``."""
        books = library.search_books(q) if q else library.list_books()
        return [BookModel(**b.to_dict()) for b in books]

    @app.get("/books/by-title", response_model=BookModel)
    def get_book_by_title(title: str = Query(..., min_length=1), library: Library = Depends(get_library)):
        book = library.find_book_by_title(title)
        if not book:
            raise HTTPException(status_code=404, detail="Book not found.")
        return BookModel(**book.to_dict())

    @app.post("/books", response_model=BookModel, dependencies=[Depends(get_api_key)])
    def add_book(payload: BookCreateModel, library: Library = Depends(get_library)):
        """Add a new book to the catalog."""
        book = library.add_book(payload.isbn, payload.title, payload.author)
        return BookModel(**book.to_dict())

    # Members
    @app.get("/members", response_model=List[MemberModel])
    def get_members(library: Library = Depends(get_library)):
        return [MemberModel(**m.to_dict()) for m in library.list_members()]

    @app.get("/members/search", response_model=MemberModel)
    def search_members(q: str = Query(..., min_length=1), library: Library = Depends(get_library)):
        """Look a member up by ID, then by part of their name."""
        member = library.search_members(q)
        if not member:
            raise HTTPException(status_code=404, detail="No members found matching your search.")
        return MemberModel(**member.to_dict())

    @app.get("/members/by-id", response_model=MemberModel)
    def get_member(member_id: str = Query(..., min_length=1), library: Library = Depends(get_library)):
        """Look a member up by exact ID, case-insensitive."""
        member = library.find_member_by_id(member_id)
        if not member:
            raise HTTPException(status_code=404, detail="Member not found.")
        return MemberModel(**member.to_dict())

    @app.post("/members", response_model=MemberModel, dependencies=[Depends(get_api_key)])
    def add_member(payload: MemberCreateModel, library: Library = Depends(get_library)):
        member = library.add_member(payload.member_id, payload.name, payload.email, payload.phone)
        return MemberModel(**member.to_dict())

    # Loans
    @app.get("/loans", response_model=List[LoanModel])
    def get_loans(library: Library = Depends(get_library)):
        """Full loan history, returned loans included."""
        return _loan_models(library, library.list_loans())

    @app.get("/loans/current", response_model=List[LoanModel])
    def get_current_loans(library: Library = Depends(get_library)):
        return _loan_models(library, library.current_loans())

    @app.get("/loans/overdue", response_model=List[LoanModel])
    def get_overdue_loans(library: Library = Depends(get_library)):
        return _loan_models(library, library.overdue_loans())

    @app.post("/loans/checkout", response_model=LoanModel, dependencies=[Depends(get_api_key)])
    def checkout_book(payload: CheckoutRequest, library: Library = Depends(get_library)):
        """Check a book out to a member, looked up by member ID and book title."""
        member = library.find_member_by_id(payload.member_id)
        if not member:
            raise HTTPException(status_code=404, detail="Member not found!")
        book = library.find_book_by_title(payload.title)
        if not book:
            raise HTTPException(status_code=404, detail="Book not found!")
        loan = library.lend(book, member)
        if loan is None:
            raise HTTPException(status_code=409, detail="Book is not available for checkout!")
        return LoanModel(**loan.to_dict(library.today()))

    @app.post("/loans/return", response_model=BookModel, dependencies=[Depends(get_api_key)])
    def return_book(payload: ReturnRequest, library: Library = Depends(get_library)):
        book = library.find_book_by_title(payload.title)
        if not book:
            raise HTTPException(status_code=404, detail="Book not found!")
        if not library.return_book(book):
            raise HTTPException(status_code=409, detail="This book wasn't checked out or already returned!")
        return BookModel(**book.to_dict())


def create_app(library: Optional[Library] = None) -> FastAPI:
    """Build the API around ``library``, or around a new empty Library."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"{settings.app_name} {settings.app_version} started")
        try:
            yield
        finally:
            logger.info(f"{settings.app_name} shutting down")

    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)
    app.state.library = library if library is not None else Library()
    _register_routes(app)
    return app


app = create_app()
