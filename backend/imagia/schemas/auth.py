"""
Pydantic schemas for user registration, phone validation, login and quota endpoints.

Required fields are declared optional so a missing field reaches the service
layer, which answers with a ValidationError naming every missing field.
"""
from pydantic import BaseModel, Field
from typing import Optional, Union


class RegisterIn(BaseModel):
    """Request model for user registration."""
    phone: Optional[str] = Field(default=None, max_length=15)  # Phone number the verification SMS is sent to
    nickname: Optional[str] = Field(default=None, max_length=50)  # Public, unique user name
    email: Optional[str] = Field(default=None, max_length=100)  # Unique email address
    type_id: Optional[str] = None  # Plan: FREE or PREMIUM
    password: Optional[str] = None  # Plain text, hashed server-side


class ValidateIn(BaseModel):
    """Request model for SMS code validation."""
    userId: Optional[int] = None
    phone: Optional[str] = None
    code: Optional[Union[str, int]] = None  # Six-digit code received by SMS, string or number


class LoginIn(BaseModel):
    """Request model for administrator login."""
    nickname: Optional[str] = None
    password: Optional[str] = None


class AuthenticatedIn(BaseModel):
    """
    Body of every token-gated call.
    The token normally travels in the Authorization header; ``token`` is a fallback.
    """
    userId: Optional[int] = None
    token: Optional[str] = None

