"""
AI endpoints.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from prospectflow.db.models.user import User
from prospectflow.core.auth_dependency import get_db, get_current_user_obj
from prospectflow.core.gating import enforce_premium_feature
from prospectflow.schemas.ai import FollowUpSuggestionRequest, FollowUpSuggestionResponse
from prospectflow.services import ai_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["AI"])


@router.post("/follow-up-suggestion", response_model=FollowUpSuggestionResponse)
def follow_up_suggestion(
    request: FollowUpSuggestionRequest,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """
    Draft a follow-up email for a job opening.

    Premium only. Uses the configured LLM, or a template draft when no API key is set.
    """
    enforce_premium_feature(db, user, "ai_follow_up_suggestion")

    try:
        return ai_service.suggest_follow_up(db, user, request)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ai_service.AISuggestionError as e:
        logger.error(f"AI suggestion failed for user_id={user.id}: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    except Exception as e:
        logger.error(f"Unexpected AI suggestion error: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate suggestion"
        )
