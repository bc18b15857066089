"""
Pydantic schemas for user settings.
"""
from typing import List, Literal
from pydantic import BaseModel, Field, field_validator

UsagePreference = Literal["job_hunt", "sales", "networking", "other"]

DEFAULT_CADENCE: List[int] = [7, 14, 21]


class FollowUpTemplate(BaseModel):
    subject: str = Field("", max_length=200, description="Default subject line")
    opening_line: str = Field("", max_length=500, description="Default opening line of the body")


class DefaultEmailTemplates(BaseModel):
    follow_up_1: FollowUpTemplate = Field(default_factory=FollowUpTemplate)
    follow_up_2: FollowUpTemplate = Field(default_factory=FollowUpTemplate)
    follow_up_3: FollowUpTemplate = Field(default_factory=FollowUpTemplate)
    shared_signature: str = Field("", max_length=500)

    def for_slot(self, index: int) -> FollowUpTemplate:
        """Template for follow-up slot 0, 1 or 2."""
        return (self.follow_up_1, self.follow_up_2, self.follow_up_3)[index]


class UserSettingsUpdate(BaseModel):
    follow_up_cadence_days: List[int] = Field(
        default_factory=lambda: list(DEFAULT_CADENCE),
        min_length=3,
        max_length=3,
        description="Days after the initial email for follow-ups 1-3",
    )
    default_email_templates: DefaultEmailTemplates = Field(default_factory=DefaultEmailTemplates)
    usage_preference: UsagePreference = "job_hunt"

    @field_validator("follow_up_cadence_days")
    @classmethod
    def validate_cadence(cls, v: List[int]) -> List[int]:
        for days in v:
            if days < 1:
                raise ValueError("Days must be at least 1")
            if days > 90:
                raise ValueError("Days cannot exceed 90")
        if not (v[0] < v[1] < v[2]):
            raise ValueError("Follow-up days must be sequential (e.g., FU2 > FU1, FU3 > FU2).")
        return v


class UserSettingsResponse(UserSettingsUpdate):
    user_id: int
