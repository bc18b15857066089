"""
JobOpening model for tracking outreach about a role at a company.
"""
import enum
from sqlalchemy import Column, Integer, String, Text, Boolean, Date, DateTime, ForeignKey, JSON, Table, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from prospectflow.db.base import Base


class JobOpeningStatus(str, enum.Enum):
    """Lifecycle of a job opening."""
    WATCHING = "Watching"
    APPLIED = "Applied"
    EMAILED = "Emailed"
    FIRST_FOLLOW_UP = "1st Follow Up"
    SECOND_FOLLOW_UP = "2nd Follow Up"
    THIRD_FOLLOW_UP = "3rd Follow Up"
    NO_RESPONSE = "No Response"
    REPLIED_POSITIVE = "Replied - Positive"
    REPLIED_NEGATIVE = "Replied - Negative"
    INTERVIEWING = "Interviewing"
    OFFER = "Offer"
    REJECTED = "Rejected"
    CLOSED = "Closed"


job_opening_contacts = Table(
    "job_opening_contacts",
    Base.metadata,
    Column("job_opening_id", Integer, ForeignKey("job_openings.id", ondelete="CASCADE"), primary_key=True),
    Column("contact_id", Integer, ForeignKey("contacts.id", ondelete="CASCADE"), primary_key=True),
)


class JobOpening(Base):
    __tablename__ = "job_openings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True, index=True)

    company_name_cache = Column(String, nullable=False)
    role_title = Column(String, nullable=False)
    initial_email_date = Column(Date, nullable=False)
    status = Column(String, nullable=False, default=JobOpeningStatus.WATCHING.value, index=True)
    tags = Column(JSON, nullable=False, default=list)
    job_description_url = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    is_favorite = Column(Boolean, default=False, nullable=False)
    favorited_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    user = relationship("User", backref="job_openings")
    company = relationship("Company", backref="job_openings")
    contacts = relationship("Contact", secondary=job_opening_contacts, backref="job_openings", order_by="Contact.id")
    follow_ups = relationship(
        "FollowUp",
        back_populates="job_opening",
        cascade="all, delete-orphan",
        order_by="FollowUp.id",
    )

    __table_args__ = (
        Index("idx_job_openings_user_created", "user_id", "created_at"),
    )

    def __repr__(self):
        return f"<JobOpening(id={self.id}, role_title='{self.role_title}', company='{self.company_name_cache}')>"
