"""
Pydantic schemas for contact endpoints.
"""
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator

from prospectflow.schemas.common import validate_optional_url, clean_tags, blank_to_none, required_text


class ContactCreate(BaseModel):
    """
    Schema for creating a contact.

    The company is given either as company_id or as a free-text company_name,
    which is matched case-insensitively against existing companies and created
    when missing.
    """
    name: str = Field(..., min_length=1, max_length=255, description="Contact name")
    email: EmailStr = Field(..., description="Contact email")
    role: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    linkedin_url: Optional[str] = None
    company_id: Optional[int] = None
    company_name: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    is_favorite: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return required_text(v)

    @field_validator("linkedin_url")
    @classmethod
    def validate_linkedin(cls, v: Optional[str]) -> Optional[str]:
        return validate_optional_url(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: List[str]) -> List[str]:
        return clean_tags(v)

    @field_validator("role", "phone", "company_name", "notes")
    @classmethod
    def strip_blank(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none(v)


class ContactUpdate(BaseModel):
    """Schema for updating a contact. Only provided fields change."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    role: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    linkedin_url: Optional[str] = None
    company_id: Optional[int] = None
    company_name: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None
    tags: Optional[List[str]] = None
    is_favorite: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return required_text(v)

    @field_validator("linkedin_url")
    @classmethod
    def validate_linkedin(cls, v: Optional[str]) -> Optional[str]:
        return validate_optional_url(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return None if v is None else clean_tags(v)


class ContactResponse(BaseModel):
    id: int
    user_id: int
    name: str
    email: str
    role: Optional[str] = None
    phone: Optional[str] = None
    linkedin_url: Optional[str] = None
    company_id: Optional[int] = None
    company_name_cache: Optional[str] = None
    notes: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    is_favorite: bool
    created_at: datetime

    @field_validator("tags", mode="before")
    @classmethod
    def none_tags(cls, v):
        return v or []

    class Config:
        from_attributes = True


class ContactListResponse(BaseModel):
    contacts: list[ContactResponse]
    total: int
