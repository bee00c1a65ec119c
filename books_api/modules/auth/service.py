"""
Supabase Auth owns users, password hashing and JWT issuing; no custom tables.

Calls used here:
- auth.sign_up() - register (no session is handed to the caller)
- auth.sign_in_with_password() - authenticate and obtain an access token
- auth.get_user(jwt) - resolve a bearer token to its user
"""

import logging
from typing import Optional

from supabase import AsyncClient, AuthError

from books_api.core.errors import IdentityProviderError, InvalidCredentialsError
from books_api.modules.auth.schemas import CallerIdentity, CredentialRequest, LoginResponse

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, supabase: AsyncClient):
        self.supabase = supabase

    async def register(self, credential: CredentialRequest) -> None:
        """Sign the user up with Supabase Auth. The caller still has to log in."""
        try:
            await self.supabase.auth.sign_up({
                "email": credential.email,
                "password": credential.password,
            })
        except AuthError as e:
            logger.warning("Sign-up rejected by provider: %s", e.message)
            raise IdentityProviderError(e.message) from e

    async def login(self, credential: CredentialRequest) -> LoginResponse:
        """Password sign-in. Every provider rejection is reported as invalid credentials."""
        try:
            auth_response = await self.supabase.auth.sign_in_with_password({
                "email": credential.email,
                "password": credential.password,
            })
        except AuthError as e:
            # Provider detail may reveal whether the account exists
            logger.info("Sign-in rejected by provider: %s", e.message)
            raise InvalidCredentialsError() from e

        if not auth_response.user or not auth_response.session:
            raise InvalidCredentialsError()

        user = auth_response.user
        return LoginResponse(
            access_token=auth_response.session.access_token,
            user=CallerIdentity(id=user.id, email=user.email or credential.email),
        )

    async def resolve_token(self, token: str) -> Optional[CallerIdentity]:
        """Resolve a bearer token to its user; None when the token is invalid or expired."""
        try:
            user_response = await self.supabase.auth.get_user(token)
        except AuthError as e:
            logger.info("Token rejected by provider: %s", e.message)
            return None
        if not user_response or not user_response.user:
            return None
        return CallerIdentity(id=user_response.user.id, email=user_response.user.email)
