import logging
from typing import Any, Dict, List, Optional

import httpx

from library_system.config import settings

logger = logging.getLogger(__name__)


class LibraryAPIError(Exception):
    """Raised when the library API answers with an error or cannot be reached."""

    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


class LibraryClient:
    """Synchronous HTTP client for the library API.

    Lookup methods return None on 404; every other error response raises
    LibraryAPIError. An existing ``httpx.Client`` (for example FastAPI's
    TestClient) can be passed in instead of opening a new connection pool.
    """

    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None,
                 timeout: Optional[float] = None, client: Optional[httpx.Client] = None) -> None:
        self.api_key = api_key or settings.api_key
        if client is not None:
            self._client = client
        else:
            self._client = httpx.Client(
                base_url=base_url or settings.api_url,
                timeout=httpx.Timeout(timeout or settings.request_timeout, connect=5.0),
                limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
            )

    # ------------------------- Transport ------------------------- #
    def _request(self, method: str, path: str, *, allow_404: bool = False, **kwargs) -> Any:
        if method != "GET":
            kwargs.setdefault("headers", {})["X-API-Key"] = self.api_key
        try:
            resp = self._client.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            logger.error(f"Library API unreachable: {exc}")
            raise LibraryAPIError(0, f"Library API unreachable: {exc}") from exc

        if resp.status_code == 404 and allow_404:
            return None
        if resp.status_code >= 400:
            raise LibraryAPIError(resp.status_code, self._error_detail(resp))
        return resp.json()

    @staticmethod
    def _error_detail(resp: httpx.Response) -> str:
        try:
            detail = resp.json().get("detail")
        except ValueError:
            detail = None
        if isinstance(detail, str):
            return detail
        return f"Request failed with status {resp.status_code}"

    # ------------------------- Books ------------------------- #
    def add_book(self, isbn: str, title: str, author: str) -> Dict[str, Any]:
        return self._request("POST", "/books", json={"isbn": isbn, "title": title, "author": author})

    def list_books(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/books")

    def search_books(self, term: str) -> List[Dict[str, Any]]:
        return self._request("GET", "/books", params={"q": term})

    def find_book_by_title(self, title: str) -> Optional[Dict[str, Any]]:
        return self._request("GET", "/books/by-title", params={"title": title}, allow_404=True)

    # ------------------------- Members ------------------------- #
    def add_member(self, member_id: str, name: str, email: str, phone: str) -> Dict[str, Any]:
        payload = {"member_id": member_id, "name": name, "email": email, "phone": phone}
        return self._request("POST", "/members", json=payload)

    def list_members(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/members")

    def find_member_by_id(self, member_id: str) -> Optional[Dict[str, Any]]:
        return self._request("GET", "/members/by-id", params={"member_id": member_id}, allow_404=True)

    def search_members(self, term: str) -> Optional[Dict[str, Any]]:
        return self._request("GET", "/members/search", params={"q": term}, allow_404=True)

    # ------------------------- Loans ------------------------- #
    def checkout(self, member_id: str, title: str) -> Dict[str, Any]:
        return self._request("POST", "/loans/checkout", json={"member_id": member_id, "title": title})

    def return_book(self, title: str) -> Dict[str, Any]:
        return self._request("POST", "/loans/return", json={"title": title})

    def list_loans(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/loans")

    def current_loans(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/loans/current")

    def overdue_loans(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/loans/overdue")

    def get_statistics(self) -> Dict[str, Any]:
        return self._request("GET", "/stats")

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "LibraryClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
