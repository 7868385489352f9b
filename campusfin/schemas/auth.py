"""Authentication schemas."""
from pydantic import BaseModel, EmailStr, Field


class TokenResponse(BaseModel):
    """Response containing JWT token after sign in."""
    token: str
    user_id: str
    email: str


class SignUpRequest(BaseModel):
    """Sign up request body."""
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    name: str | None = None


class SignInRequest(BaseModel):
    """Sign in request body."""
    email: EmailStr
    password: str
