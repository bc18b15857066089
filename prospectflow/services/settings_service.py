"""
User settings: follow-up cadence, default email templates and usage preference.
"""
import logging
from typing import List
from sqlalchemy.orm import Session

from prospectflow.db.models.user_settings import UserSettings
from prospectflow.schemas.settings import (
    DEFAULT_CADENCE,
    DefaultEmailTemplates,
    UserSettingsUpdate,
    UserSettingsResponse,
)

logger = logging.getLogger(__name__)


def _default_settings(user_id: int) -> UserSettings:
    return UserSettings(
        user_id=user_id,
        follow_up_cadence_days=list(DEFAULT_CADENCE),
        default_email_templates=DefaultEmailTemplates().model_dump(),
        usage_preference="job_hunt",
    )


def ensure_default_settings(db: Session, user_id: int) -> UserSettings:
    """Create the default settings row if the user has none. Does not commit."""
    settings = db.query(UserSettings).filter(UserSettings.user_id == user_id).first()
    if settings:
        return settings
    settings = _default_settings(user_id)
    db.add(settings)
    db.flush()
    return settings


def get_settings(db: Session, user_id: int) -> UserSettingsResponse:
    """Settings for a user, falling back to defaults when no row exists."""
    settings = db.query(UserSettings).filter(UserSettings.user_id == user_id).first()
    if not settings:
        return UserSettingsResponse(user_id=user_id)
    return UserSettingsResponse(
        user_id=user_id,
        follow_up_cadence_days=settings.follow_up_cadence_days or list(DEFAULT_CADENCE),
        default_email_templates=DefaultEmailTemplates.model_validate(settings.default_email_templates or {}),
        usage_preference=settings.usage_preference or "job_hunt",
    )


def get_cadence(db: Session, user_id: int) -> List[int]:
    return get_settings(db, user_id).follow_up_cadence_days


def get_templates(db: Session, user_id: int) -> DefaultEmailTemplates:
    return get_settings(db, user_id).default_email_templates


def upsert_settings(db: Session, user_id: int, data: UserSettingsUpdate) -> UserSettingsResponse:
    """Create or replace a user's settings."""
    settings = db.query(UserSettings).filter(UserSettings.user_id == user_id).first()
    if not settings:
        settings = UserSettings(user_id=user_id)
        db.add(settings)

    settings.follow_up_cadence_days = list(data.follow_up_cadence_days)
    settings.default_email_templates = data.default_email_templates.model_dump()
    settings.usage_preference = data.usage_preference

    db.commit()
    logger.info(f"Saved settings for user_id={user_id}, cadence={settings.follow_up_cadence_days}")
    return get_settings(db, user_id)
