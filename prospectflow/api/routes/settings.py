import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from prospectflow.db.models.user import User
from prospectflow.core.auth_dependency import get_db, get_current_user_obj
from prospectflow.schemas.settings import UserSettingsUpdate, UserSettingsResponse
from prospectflow.services import settings_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("", response_model=UserSettingsResponse)
def get_settings(
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Follow-up cadence, email templates and usage preference (defaults when never saved)."""
    return settings_service.get_settings(db, user.id)


@router.put("", response_model=UserSettingsResponse)
def save_settings(
    data: UserSettingsUpdate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    try:
        return settings_service.upsert_settings(db, user.id, data)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to save settings for user_id={user.id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save settings"
        )
