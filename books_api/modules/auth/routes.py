from fastapi import APIRouter, Depends, HTTPException

from books_api.core.dependencies import get_auth_service, get_current_user, validated_body
from books_api.core.errors import IdentityProviderError, InvalidCredentialsError
from books_api.modules.auth.schemas import CallerIdentity, CredentialRequest, LoginResponse, RegisterResponse
from books_api.modules.auth.service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])

credential_body = validated_body(CredentialRequest, "Invalid data")


@router.post("/register", response_model=RegisterResponse)
async def register(
    credential: CredentialRequest = Depends(credential_body),
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user. Does not log them in."""
    try:
        await service.register(credential)
    except IdentityProviderError as e:
        raise HTTPException(status_code=400, detail=e.message)
    return RegisterResponse(message="Registered successfully. Please log in.")


@router.post("/login", response_model=LoginResponse)
async def login(
    credential: CredentialRequest = Depends(credential_body),
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    try:
        return await service.login(credential)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail=e.message)


@router.get("/me", response_model=CallerIdentity)
async def me(current_user: CallerIdentity = Depends(get_current_user)):
    """Identity behind the presented bearer token"""
    return current_user
