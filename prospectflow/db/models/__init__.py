"""
Database models module.

This module imports all database models to ensure they are registered with SQLAlchemy's Base.metadata
before table creation.

All models must be imported here to be included in database migrations and table creation.
"""
from prospectflow.db.models.user import User
from prospectflow.db.models.user_settings import UserSettings
from prospectflow.db.models.subscription import Subscription
from prospectflow.db.models.payment import Payment
from prospectflow.db.models.company import Company
from prospectflow.db.models.contact import Contact
from prospectflow.db.models.job_opening import JobOpening, JobOpeningStatus, job_opening_contacts
from prospectflow.db.models.follow_up import FollowUp, FollowUpStatus
from prospectflow.db.models.post import Post

__all__ = [
    "User",
    "UserSettings",
    "Subscription",
    "Payment",
    "Company",
    "Contact",
    "JobOpening",
    "JobOpeningStatus",
    "job_opening_contacts",
    "FollowUp",
    "FollowUpStatus",
    "Post",
]
