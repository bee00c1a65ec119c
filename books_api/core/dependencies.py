"""
Core dependencies for route protection, body validation and ownership checks
"""

import logging
from dataclasses import dataclass
from typing import Optional, Type

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from supabase import AsyncClient

from books_api.core.validation import ModelT, validate_payload
from books_api.database.supabase_client import get_auth_client, get_store_client
from books_api.modules.auth.schemas import CallerIdentity
from books_api.modules.auth.service import AuthService
from books_api.modules.books.schemas import BookId, BookOwnership
from books_api.modules.books.service import BookService

logger = logging.getLogger(__name__)

# Missing or non-Bearer headers are reported by get_current_user, not by HTTPBearer
security = HTTPBearer(auto_error=False)

TOKEN_MISSING = "Token missing"
TOKEN_INVALID = "Invalid token"
AUTH_FAILED = "Authentication failed"


def get_auth_service(supabase: AsyncClient = Depends(get_auth_client)) -> AuthService:
    return AuthService(supabase)


def get_book_service(supabase: AsyncClient = Depends(get_store_client)) -> BookService:
    return BookService(supabase)


@dataclass(frozen=True)
class AuthOutcome:
    identity: Optional[CallerIdentity] = None
    reason: Optional[str] = None

    @property
    def authenticated(self) -> bool:
        return self.identity is not None


async def authenticate(token: Optional[str], auth_service: AuthService) -> AuthOutcome:
    """Resolve a bearer token to the caller. Never raises: failures are rejections."""
    if not token:
        return AuthOutcome(reason=TOKEN_MISSING)
    try:
        identity = await auth_service.resolve_token(token)
    except Exception:
        logger.exception("Token resolution failed")
        return AuthOutcome(reason=AUTH_FAILED)
    if identity is None:
        return AuthOutcome(reason=TOKEN_INVALID)
    return AuthOutcome(identity=identity)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> CallerIdentity:
    """Authenticated caller from the Authorization header, or 401"""
    token = credentials.credentials if credentials else None
    outcome = await authenticate(token, auth_service)
    if not outcome.authenticated:
        logger.info("Rejected request: %s", outcome.reason)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=outcome.reason,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return outcome.identity


def validated_body(schema: Type[ModelT], error_message: str):
    """Factory for a dependency that parses the JSON body against ``schema`` or answers 400"""
    async def parse_body(request: Request) -> ModelT:
        # A missing body is an empty object; malformed JSON is not an object at all
        if not (await request.body()).strip():
            raw = {}
        else:
            try:
                raw = await request.json()
            except ValueError:
                raw = None
        result = validate_payload(schema, raw)
        if not result.ok:
            logger.info("Invalid %s payload, fields: %s", schema.__name__, ", ".join(result.invalid_fields))
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error_message)
        return result.value
    return parse_body


async def check_book_ownership(
    book_id: BookId,
    user: CallerIdentity,
    service: BookService
) -> BookOwnership:
    """Existence first, then ownership: unknown ids are 404 for every caller"""
    ownership = await service.get_ownership(book_id)
    if ownership is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Book not found")
    if ownership.owner_id != user.id:
        logger.info("User %s denied access to book %s", user.id, book_id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return ownership
