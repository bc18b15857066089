"""
Job opening and follow-up endpoints.

A job opening is created with its contacts and three scheduled follow-ups.
Follow-ups are logged (sent), unlogged or skipped individually; the opening's
status follows the number of follow-ups sent.
"""
import logging
from datetime import date
from typing import Optional, List
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from prospectflow.db.models.user import User
from prospectflow.db.models.job_opening import JobOpeningStatus
from prospectflow.core.auth_dependency import get_db, get_current_user_obj
from prospectflow.schemas.job_opening import (
    JobOpeningCreate,
    JobOpeningUpdate,
    JobOpeningResponse,
    JobOpeningListResponse,
    DueFollowUpResponse,
)
from prospectflow.services import job_opening_service, follow_up_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/job-openings", tags=["Job Openings"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=JobOpeningResponse)
def create_job_opening(
    data: JobOpeningCreate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """
    Create a job opening with its contacts and follow-up schedule.

    Follow-ups are due initial_email_date + the user's cadence (default 7/14/21
    days). Subjects and bodies default to the user's email templates.
    """
    try:
        opening = job_opening_service.create_job_opening(db, user, data)
    except HTTPException:
        db.rollback()
        raise
    except LookupError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create job opening: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create job opening"
        )

    return job_opening_service.to_response(opening)


@router.get("", response_model=JobOpeningListResponse)
def list_job_openings(
    status_filter: Optional[JobOpeningStatus] = Query(None, alias="status", description="Filter by status"),
    search: Optional[str] = Query(None, description="Search in role title, company and notes"),
    tag: Optional[str] = Query(None, description="Only openings with this tag"),
    favorites_only: bool = Query(False, description="Only favorite openings"),
    overdue_only: bool = Query(False, description="Only openings with an overdue follow-up"),
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """
    List job openings: favorites first, then by next follow-up date, then by creation time.
    """
    today = follow_up_service.today_utc()
    openings = job_opening_service.list_job_openings(
        db,
        user.id,
        status=status_filter.value if status_filter else None,
        search=search,
        tag=tag,
        favorites_only=favorites_only,
        overdue_only=overdue_only,
        today=today,
    )
    return JobOpeningListResponse(
        job_openings=[job_opening_service.to_response(o, today) for o in openings],
        total=len(openings),
    )


# ✅ FOLLOW-UPS
@router.get("/follow-ups/due", response_model=List[DueFollowUpResponse])
def list_due_follow_ups(
    on_or_before: Optional[date] = Query(None, description="Cutoff date (defaults to today)"),
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Pending follow-ups due on or before a date, oldest first."""
    return follow_up_service.list_due_follow_ups(db, user.id, on_or_before)


def _follow_up_action(action, db: Session, user: User, follow_up_id: int, *args) -> JobOpeningResponse:
    try:
        follow_up = action(db, user.id, follow_up_id, *args)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Follow-up {action.__name__} failed for {follow_up_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update follow-up"
        )

    return job_opening_service.to_response(follow_up.job_opening)


@router.post("/follow-ups/{follow_up_id}/log", response_model=JobOpeningResponse)
def log_follow_up(
    follow_up_id: int,
    sent_on: Optional[date] = Query(None, description="Day the email was sent (defaults to today)"),
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Mark a pending follow-up as sent. Returns the updated job opening."""
    return _follow_up_action(follow_up_service.log_follow_up, db, user, follow_up_id, sent_on)


@router.post("/follow-ups/{follow_up_id}/unlog", response_model=JobOpeningResponse)
def unlog_follow_up(
    follow_up_id: int,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Undo a logged follow-up. Returns the updated job opening."""
    return _follow_up_action(follow_up_service.unlog_follow_up, db, user, follow_up_id)


@router.post("/follow-ups/{follow_up_id}/skip", response_model=JobOpeningResponse)
def skip_follow_up(
    follow_up_id: int,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    return _follow_up_action(follow_up_service.skip_follow_up, db, user, follow_up_id)


# ✅ SINGLE OPENING
@router.get("/{job_opening_id}", response_model=JobOpeningResponse)
def get_job_opening(
    job_opening_id: int,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    try:
        opening = job_opening_service.get_job_opening(db, user.id, job_opening_id)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return job_opening_service.to_response(opening)


@router.put("/{job_opening_id}", response_model=JobOpeningResponse)
def update_job_opening(
    job_opening_id: int,
    data: JobOpeningUpdate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """
    Update a job opening. Supplying contacts replaces the linked contacts;
    changing the initial email date moves pending follow-ups.
    """
    try:
        opening = job_opening_service.update_job_opening(db, user, job_opening_id, data)
    except HTTPException:
        db.rollback()
        raise
    except LookupError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update job opening {job_opening_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update job opening"
        )

    return job_opening_service.to_response(opening)


@router.delete("/{job_opening_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_job_opening(
    job_opening_id: int,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    try:
        job_opening_service.delete_job_opening(db, user.id, job_opening_id)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to delete job opening {job_opening_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete job opening"
        )


@router.post("/{job_opening_id}/favorite", response_model=JobOpeningResponse)
def toggle_favorite(
    job_opening_id: int,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    try:
        opening = job_opening_service.toggle_favorite(db, user.id, job_opening_id)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return job_opening_service.to_response(opening)
