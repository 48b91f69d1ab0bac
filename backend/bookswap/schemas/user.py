"""
Pydantic schemas for User entity.
"""
from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime
from bookswap.models.user import UserRole


class UserCreate(BaseModel):
    """Schema for registration."""
    name: Optional[str] = None
    email: EmailStr
    password: str


class UserLogin(BaseModel):
    """Schema for user login."""
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """Schema for user response."""
    id: int
    name: str
    email: str
    role: UserRole
    created_at: datetime

    class Config:
        from_attributes = True


class UserSummary(BaseModel):
    """Short user reference embedded in books and swaps."""
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True


class UserEnvelope(BaseModel):
    ok: bool = True
    user: UserResponse


class AuthResponse(UserEnvelope):
    """Schema for login/register response with the JWT."""
    token: str
    token_type: str = "bearer"
