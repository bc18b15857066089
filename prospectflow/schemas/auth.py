"""
Pydantic schemas for authentication and profile endpoints.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator

from prospectflow.schemas.common import required_text


class SignupRequest(BaseModel):
    """Request schema for user signup."""
    full_name: str = Field(..., min_length=1, max_length=100, description="User's display name")
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., description="User's password (8 characters to 72 bytes)")

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        return required_text(v)

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        """Validate password length in bytes (bcrypt limit is 72 bytes)."""
        password_bytes = v.encode("utf-8")
        if len(password_bytes) > 72:
            raise ValueError("Password must be 72 bytes or fewer")
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "full_name": "Jane Doe",
                "email": "jane.doe@example.com",
                "password": "SecurePass123"
            }
        }


class SignupResponse(BaseModel):
    message: str
    user_id: int


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserProfile(BaseModel):
    """Authenticated user's profile."""
    id: int
    full_name: str
    email: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=100, description="Display name")

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        return required_text(v)
