"""
Pytest configuration and shared fixtures.
"""

import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")

import itertools
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from books_api.core.dependencies import get_auth_service, get_book_service
from books_api.core.errors import IdentityProviderError, InvalidCredentialsError
from books_api.main import app
from books_api.modules.auth.schemas import CallerIdentity, CredentialRequest, LoginResponse
from books_api.modules.books.schemas import BookCreate, BookOwnership, BookResponse


class FakeAuthService:
    """In-memory stand-in for Supabase Auth."""

    def __init__(self):
        self.users: Dict[str, dict] = {}
        self.tokens: Dict[str, CallerIdentity] = {}
        self.resolve_error: Optional[Exception] = None

    async def register(self, credential: CredentialRequest) -> None:
        if credential.email in self.users:
            raise IdentityProviderError("User already registered")
        self.users[credential.email] = {"id": str(uuid.uuid4()), "password": credential.password}

    async def login(self, credential: CredentialRequest) -> LoginResponse:
        user = self.users.get(credential.email)
        if user is None or user["password"] != credential.password:
            raise InvalidCredentialsError()
        identity = CallerIdentity(id=user["id"], email=credential.email)
        return LoginResponse(access_token=self.issue_token(identity), user=identity)

    async def resolve_token(self, token: str) -> Optional[CallerIdentity]:
        if self.resolve_error is not None:
            raise self.resolve_error
        return self.tokens.get(token)

    def issue_token(self, identity: CallerIdentity) -> str:
        token = f"token-{uuid.uuid4().hex}"
        self.tokens[token] = identity
        return token


class FakeBookService:
    """In-memory stand-in for the books table."""

    def __init__(self):
        self.books: Dict[str, dict] = {}
        self._clock = itertools.count()
        self._epoch = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _newest_first(self, rows: List[dict]) -> List[BookResponse]:
        rows = sorted(rows, key=lambda b: b["created_at"], reverse=True)
        return [BookResponse(**b) for b in rows]

    async def list_owned(self, owner_id: str) -> List[BookResponse]:
        return self._newest_first([b for b in self.books.values() if b["owner_id"] == owner_id])

    async def list_all(self) -> List[BookResponse]:
        return self._newest_first(list(self.books.values()))

    async def create_book(self, book_data: BookCreate, owner_id: str) -> BookResponse:
        book = {
            **book_data.model_dump(),
            "id": str(uuid.uuid4()),
            "owner_id": owner_id,
            "created_at": self._epoch + timedelta(seconds=next(self._clock)),
        }
        self.books[book["id"]] = book
        return BookResponse(**book)

    async def get_ownership(self, book_id) -> Optional[BookOwnership]:
        book = self.books.get(book_id)
        if book is None:
            return None
        return BookOwnership(id=book["id"], owner_id=book["owner_id"])

    async def get_book(self, book_id) -> Optional[BookResponse]:
        book = self.books.get(book_id)
        return BookResponse(**book) if book else None

    async def update_book(self, book_id, owner_id: str, changes: dict) -> Optional[BookResponse]:
        book = self.books.get(book_id)
        if book is None or book["owner_id"] != owner_id:
            return None
        book.update(changes)
        return BookResponse(**book)

    async def delete_book(self, book_id, owner_id: str) -> bool:
        book = self.books.get(book_id)
        if book is None or book["owner_id"] != owner_id:
            return False
        del self.books[book_id]
        return True


@pytest.fixture
def auth_service():
    return FakeAuthService()


@pytest.fixture
def book_service():
    return FakeBookService()


@pytest.fixture
def client(auth_service, book_service):
    """Test client with both Supabase gateways replaced by fakes."""
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    app.dependency_overrides[get_book_service] = lambda: book_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def alice():
    return CallerIdentity(id=str(uuid.uuid4()), email="alice@example.com")


@pytest.fixture
def bob():
    return CallerIdentity(id=str(uuid.uuid4()), email="bob@example.com")


@pytest.fixture
def alice_headers(auth_service, alice):
    return {"Authorization": f"Bearer {auth_service.issue_token(alice)}"}


@pytest.fixture
def bob_headers(auth_service, bob):
    return {"Authorization": f"Bearer {auth_service.issue_token(bob)}"}


@pytest.fixture
def dune():
    return {"title": "Dune", "author": "Herbert", "pages": 412, "year": 1965}
