"""Input validation using Pydantic."""

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    """Registration request validation."""
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    """Login request validation."""
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class MessageResponse(BaseModel):
    """Body of every successful auth response."""
    message: str
