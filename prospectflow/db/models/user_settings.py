from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from prospectflow.db.base import Base


class UserSettings(Base):
    __tablename__ = "user_settings"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    follow_up_cadence_days = Column(JSON, nullable=False)  # [fu1, fu2, fu3] days after the initial email
    default_email_templates = Column(JSON, nullable=False)  # follow_up_1..3 {subject, opening_line} + shared_signature
    usage_preference = Column(String, nullable=False, default="job_hunt")  # job_hunt | sales | networking | other

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", backref="settings", uselist=False)
