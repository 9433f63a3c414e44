"""User Pydantic schemas."""
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from lending.models.user import UserRole
from lending.schemas.common import BaseSchema


class UserBase(BaseModel):
    """Base user schema."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    username: str = Field(..., min_length=1, max_length=100)
    email: EmailStr


class UserCreate(UserBase):
    """Schema for registering a user."""

    password: str = Field(..., min_length=8, max_length=128)
    role: UserRole = UserRole.CUSTOMER


class UserLogin(BaseModel):
    """Schema for user login."""

    username: str
    password: str


class UserResponse(UserBase, BaseSchema):
    """Schema for user response."""

    id: int
    role: UserRole
    created_at: datetime


class Token(BaseModel):
    """JWT token response."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int


class TokenPayload(BaseModel):
    """JWT token payload."""

    sub: int  # user_id
    username: str
    email: str
    role: UserRole
    exp: datetime
