from pydantic import BaseModel, EmailStr, Field
from typing import Optional


class CredentialRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)


class CallerIdentity(BaseModel):
    id: str
    email: Optional[str] = None


class LoginResponse(BaseModel):
    access_token: str
    user: CallerIdentity


class RegisterResponse(BaseModel):
    message: str
