"""
Contact model for people the user emails about openings.
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, JSON, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from prospectflow.db.base import Base


class Contact(Base):
    """
    A person at a company.

    company_name_cache keeps the company's display name so the contact still
    shows it after the company row is deleted.
    """
    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True, index=True)

    name = Column(String, nullable=False, index=True)
    role = Column(String, nullable=True)
    email = Column(String, nullable=False)
    linkedin_url = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    company_name_cache = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    is_favorite = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User", backref="contacts")
    company = relationship("Company", backref="contacts")

    __table_args__ = (
        Index("idx_contacts_user_email", "user_id", "email"),
    )

    def __repr__(self):
        return f"<Contact(id={self.id}, name='{self.name}', email='{self.email}')>"
