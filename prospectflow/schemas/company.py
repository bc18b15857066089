"""
Pydantic schemas for company endpoints.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from prospectflow.schemas.common import validate_optional_url, blank_to_none, required_text


class CompanyBase(BaseModel):
    """Base company schema with common fields."""
    name: str = Field(..., description="Company name", min_length=1, max_length=255)
    website: Optional[str] = Field(None, description="Company website")
    linkedin_url: Optional[str] = Field(None, description="Company LinkedIn page")
    notes: Optional[str] = Field(None, description="Free-form notes")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return required_text(v)

    @field_validator("website", "linkedin_url")
    @classmethod
    def validate_urls(cls, v: Optional[str]) -> Optional[str]:
        return validate_optional_url(v)

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none(v)


class CompanyCreate(CompanyBase):
    """Schema for creating a new company."""
    is_favorite: bool = Field(False, description="Mark as favorite")


class CompanyUpdate(BaseModel):
    """Schema for updating an existing company. Only provided fields change."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    website: Optional[str] = None
    linkedin_url: Optional[str] = None
    notes: Optional[str] = None
    is_favorite: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return required_text(v)

    @field_validator("website", "linkedin_url")
    @classmethod
    def validate_urls(cls, v: Optional[str]) -> Optional[str]:
        return validate_optional_url(v)


class CompanyResponse(CompanyBase):
    """Schema for company response."""
    id: int
    user_id: int
    is_favorite: bool
    created_at: datetime

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": 1,
                "user_id": 1,
                "name": "Tech Corp",
                "website": "https://techcorp.example.com",
                "linkedin_url": None,
                "notes": "Met their CTO at a meetup.",
                "is_favorite": True,
                "created_at": "2026-01-15T09:00:00Z"
            }
        }


class CompanyListResponse(BaseModel):
    companies: list[CompanyResponse]
    total: int
