"""
Pydantic schemas for users and authentication.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional


class UserLoginRequest(BaseModel):
    """Request schema for exchanging credentials for a token."""
    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(..., min_length=1)


class UserRegisterRequest(BaseModel):
    """Request schema for self-registration; never creates an admin."""
    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(..., min_length=5, max_length=72)  # bcrypt limit
    first_name: str = Field(..., min_length=1, max_length=30, alias="firstName")
    last_name: str = Field(..., min_length=1, max_length=30, alias="lastName")
    email: EmailStr

    class Config:
        populate_by_name = True
        extra = "forbid"


class UserCreateRequest(UserRegisterRequest):
    """Request schema for admins adding a user, optionally another admin."""
    is_admin: bool = Field(False, alias="isAdmin")


class UserUpdateRequest(BaseModel):
    """Partial update of a user's own profile. Username and admin flag are fixed."""
    password: Optional[str] = Field(None, min_length=5, max_length=72)
    first_name: Optional[str] = Field(None, min_length=1, max_length=30, alias="firstName")
    last_name: Optional[str] = Field(None, min_length=1, max_length=30, alias="lastName")
    email: Optional[EmailStr] = None

    class Config:
        populate_by_name = True
        extra = "forbid"

    @field_validator('password', 'first_name', 'last_name', 'email')
    @classmethod
    def reject_null(cls, v):
        """Fields may be left out, but none of them can be cleared."""
        if v is None:
            raise ValueError('Field cannot be null')
        return v


class UserResponse(BaseModel):
    """User profile response (no password)."""
    username: str
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    email: str
    is_admin: bool = Field(..., alias="isAdmin")

    class Config:
        from_attributes = True
        populate_by_name = True


class TokenResponse(BaseModel):
    """JWT token response."""
    access_token: str
    token_type: str = "bearer"


class UserCreateResponse(TokenResponse):
    """New user plus a token for them."""
    user: UserResponse
