"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    """Request model for user registration."""

    email: EmailStr
    password: str = Field(
        ..., min_length=6, max_length=72, description="User password (6 to 72 characters)"
    )
    username: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=64)
    display_name: str | None = Field(None, max_length=255)


class RegisterResponse(BaseModel):
    """Response model for successful registration."""

    message: str
    email: str


class LoginRequest(BaseModel):
    """Request model for login."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Response model for successful login. Never carries password or token fields."""

    message: str = "Login successful"
    account_id: int
    identity_ref: str
    email: str
    display_name: str | None = None
    username: str | None = None
    session_token: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
