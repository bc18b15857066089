"""
FollowUp model for scheduled follow-up emails on a job opening.
"""
import enum
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from prospectflow.db.base import Base


class FollowUpStatus(str, enum.Enum):
    PENDING = "Pending"
    SENT = "Sent"
    SKIPPED = "Skipped"


class FollowUp(Base):
    """
    A single scheduled follow-up.

    When a follow-up is logged as sent, follow_up_date moves to the day it was
    sent and the planned day is kept in original_due_date.
    """
    __tablename__ = "follow_ups"

    id = Column(Integer, primary_key=True, index=True)
    job_opening_id = Column(Integer, ForeignKey("job_openings.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    follow_up_date = Column(Date, nullable=False)
    original_due_date = Column(Date, nullable=True)
    email_subject = Column(String(255), nullable=True)
    email_body = Column(Text, nullable=True)
    status = Column(String, nullable=False, default=FollowUpStatus.PENDING.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    job_opening = relationship("JobOpening", back_populates="follow_ups")

    __table_args__ = (
        Index("idx_follow_ups_user_status_date", "user_id", "status", "follow_up_date"),
    )

    def __repr__(self):
        return f"<FollowUp(id={self.id}, job_opening_id={self.job_opening_id}, status='{self.status}')>"
