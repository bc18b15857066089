"""
Pydantic schemas for job opening and follow-up endpoints.
"""
from typing import Optional, List
from datetime import date, datetime
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from prospectflow.db.models.job_opening import JobOpeningStatus
from prospectflow.db.models.follow_up import FollowUpStatus
from prospectflow.schemas.common import validate_optional_url, clean_tags, blank_to_none, required_text


class ContactEntry(BaseModel):
    """An existing contact (by id) or a new one (name + email)."""
    contact_id: Optional[int] = None
    name: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None

    @model_validator(mode="after")
    def require_id_or_details(self):
        if self.contact_id is None and (not self.name or not self.name.strip() or not self.email):
            raise ValueError("Each contact needs a contact_id or a name and email")
        return self


class FollowUpContent(BaseModel):
    subject: Optional[str] = Field(None, max_length=255, description="Email subject")
    body: Optional[str] = Field(None, max_length=5000, description="Email body")


class JobOpeningCreate(BaseModel):
    company_id: Optional[int] = Field(None, description="Existing company id")
    company_name: Optional[str] = Field(None, max_length=255, description="Company name (found or created)")
    role_title: str = Field(..., min_length=1, max_length=255)
    contacts: List[ContactEntry] = Field(..., min_length=1, description="At least one contact")
    initial_email_date: date
    job_description_url: Optional[str] = None
    notes: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    status: JobOpeningStatus = JobOpeningStatus.WATCHING
    follow_ups: List[FollowUpContent] = Field(
        default_factory=list,
        max_length=3,
        description="Subject/body overrides for follow-ups 1-3; blanks use the default templates",
    )
    is_favorite: bool = False

    @field_validator("job_description_url")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        return validate_optional_url(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: List[str]) -> List[str]:
        return clean_tags(v)

    @field_validator("role_title")
    @classmethod
    def validate_role_title(cls, v: str) -> str:
        return required_text(v)

    @field_validator("notes", "company_name")
    @classmethod
    def strip_blank(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none(v)

    @model_validator(mode="after")
    def require_company(self):
        if self.company_id is None and not self.company_name:
            raise ValueError("Company name is required")
        return self


class JobOpeningUpdate(BaseModel):
    """Partial update. Supplying contacts replaces the linked contacts."""
    company_id: Optional[int] = None
    company_name: Optional[str] = Field(None, max_length=255)
    role_title: Optional[str] = Field(None, min_length=1, max_length=255)
    contacts: Optional[List[ContactEntry]] = Field(None, min_length=1)
    initial_email_date: Optional[date] = None
    job_description_url: Optional[str] = None
    notes: Optional[str] = None
    tags: Optional[List[str]] = None
    status: Optional[JobOpeningStatus] = None
    follow_ups: Optional[List[FollowUpContent]] = Field(None, max_length=3)

    @field_validator("role_title")
    @classmethod
    def validate_role_title(cls, v: Optional[str]) -> Optional[str]:
        return required_text(v)

    @field_validator("job_description_url")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        return validate_optional_url(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return None if v is None else clean_tags(v)


class AssociatedContact(BaseModel):
    contact_id: int
    name: str
    email: str


class FollowUpResponse(BaseModel):
    id: int
    job_opening_id: int
    follow_up_date: date
    original_due_date: Optional[date] = None
    email_subject: Optional[str] = None
    email_body: Optional[str] = None
    status: FollowUpStatus

    class Config:
        from_attributes = True


class JobOpeningResponse(BaseModel):
    id: int
    user_id: int
    company_id: Optional[int] = None
    company_name_cache: str
    role_title: str
    initial_email_date: date
    status: JobOpeningStatus
    tags: List[str] = Field(default_factory=list)
    job_description_url: Optional[str] = None
    notes: Optional[str] = None
    is_favorite: bool
    favorited_at: Optional[datetime] = None
    created_at: datetime
    associated_contacts: List[AssociatedContact] = Field(default_factory=list)
    follow_ups: List[FollowUpResponse] = Field(default_factory=list)
    next_follow_up: Optional[FollowUpResponse] = None
    is_overdue: bool = False


class JobOpeningListResponse(BaseModel):
    job_openings: list[JobOpeningResponse]
    total: int


class DueFollowUpResponse(FollowUpResponse):
    """A pending follow-up with enough of its opening to act on it."""
    role_title: str
    company_name_cache: str
    is_overdue: bool
