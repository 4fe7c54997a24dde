"""
Authentication schemas for local (email/password) authentication.
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    """Request model for email/password registration."""
    name: str = Field(..., min_length=1, description="User display name")
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=6, description="User password")


class LoginRequest(BaseModel):
    """Request model for email/password login."""
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")


class AuthResponse(BaseModel):
    """Response model for successful authentication."""
    token: str = Field(..., description="Session token for authenticated requests")
    token_expires_at: datetime = Field(..., description="Token expiration timestamp")


class UserRead(BaseModel):
    """Schema for reading user details."""
    id: UUID
    name: str
    email: EmailStr
    avatar: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
