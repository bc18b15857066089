"""
Pydantic schemas for AI endpoints.
"""
from typing import Optional, Literal
from pydantic import BaseModel, Field

Tone = Literal["friendly", "formal", "concise"]


class FollowUpSuggestionRequest(BaseModel):
    """Request model for a follow-up email draft."""
    job_opening_id: int = Field(..., description="Job opening the follow-up belongs to")
    follow_up_number: int = Field(1, ge=1, le=3, description="Which follow-up (1-3)")
    tone: Tone = Field("friendly", description="Writing tone")
    extra_context: Optional[str] = Field(None, max_length=1000, description="Anything the draft should mention")

    class Config:
        json_schema_extra = {
            "example": {
                "job_opening_id": 12,
                "follow_up_number": 2,
                "tone": "friendly",
                "extra_context": "I recently shipped a payments integration."
            }
        }


class FollowUpSuggestionResponse(BaseModel):
    """Response model for a follow-up email draft."""
    subject: str
    body: str
    source: Literal["ai", "template"] = Field(..., description="Whether the draft came from the model or the template")
