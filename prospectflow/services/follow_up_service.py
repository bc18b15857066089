"""
Follow-up scheduling and tracking.

Every job opening carries three follow-ups, due a configurable number of days
after the initial email. Logging a follow-up as sent moves the opening through
the outreach statuses (Emailed -> 1st/2nd/3rd Follow Up) as long as it has not
already moved on (replied, interviewing, closed, ...).
"""
import logging
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence, Tuple
from sqlalchemy.orm import Session

from prospectflow.db.models.follow_up import FollowUp, FollowUpStatus
from prospectflow.db.models.job_opening import JobOpening, JobOpeningStatus
from prospectflow.schemas.settings import DEFAULT_CADENCE, DefaultEmailTemplates
from prospectflow.schemas.job_opening import FollowUpContent, DueFollowUpResponse

logger = logging.getLogger(__name__)

FOLLOW_UPS_PER_OPENING = 3

# Statuses that still follow the outreach sequence
OUTREACH_STATUSES = {
    JobOpeningStatus.WATCHING.value,
    JobOpeningStatus.APPLIED.value,
    JobOpeningStatus.EMAILED.value,
    JobOpeningStatus.FIRST_FOLLOW_UP.value,
    JobOpeningStatus.SECOND_FOLLOW_UP.value,
    JobOpeningStatus.THIRD_FOLLOW_UP.value,
}

# Number of sent follow-ups -> outreach status
STATUS_BY_SENT_COUNT = {
    0: JobOpeningStatus.EMAILED.value,
    1: JobOpeningStatus.FIRST_FOLLOW_UP.value,
    2: JobOpeningStatus.SECOND_FOLLOW_UP.value,
    3: JobOpeningStatus.THIRD_FOLLOW_UP.value,
}


def today_utc() -> date:
    return datetime.utcnow().date()


def compute_follow_up_dates(initial_date: date, cadence: Optional[Sequence[int]] = None) -> List[date]:
    """Due dates for each follow-up: initial_date + N days for N in the cadence."""
    cadence = list(cadence) if cadence else list(DEFAULT_CADENCE)
    return [initial_date + timedelta(days=days) for days in cadence]


def default_content(templates: DefaultEmailTemplates, index: int) -> Tuple[str, str]:
    """
    Default subject and body for follow-up slot `index` (0-based).

    The body is the template's opening line, a blank line, then the shared
    signature. Either part may be empty.
    """
    template = templates.for_slot(index)
    opening = (template.opening_line or "").strip()
    signature = (templates.shared_signature or "").strip()
    if opening and signature:
        body = f"{opening}\n\n{signature}"
    else:
        body = opening or signature
    return template.subject or "", body


def build_follow_ups(
    opening: JobOpening,
    cadence: Sequence[int],
    templates: DefaultEmailTemplates,
    overrides: Optional[Sequence[FollowUpContent]] = None,
) -> List[FollowUp]:
    """
    Create the three pending follow-ups for a new opening.

    Blank subject/body overrides fall back to the user's default templates.
    """
    overrides = list(overrides or [])
    follow_ups = []
    for index, due in enumerate(compute_follow_up_dates(opening.initial_email_date, cadence)):
        subject, body = default_content(templates, index)
        if index < len(overrides):
            override = overrides[index]
            if override.subject and override.subject.strip():
                subject = override.subject.strip()
            if override.body and override.body.strip():
                body = override.body.strip()
        follow_ups.append(
            FollowUp(
                user_id=opening.user_id,
                follow_up_date=due,
                email_subject=subject or None,
                email_body=body or None,
                status=FollowUpStatus.PENDING.value,
            )
        )
    opening.follow_ups = follow_ups
    return follow_ups


def apply_content_overrides(opening: JobOpening, overrides: Sequence[FollowUpContent]) -> None:
    """Replace subject/body of the opening's follow-ups where an override is given."""
    for follow_up, override in zip(opening.follow_ups, overrides):
        if override.subject is not None:
            follow_up.email_subject = override.subject.strip() or None
        if override.body is not None:
            follow_up.email_body = override.body.strip() or None


def reschedule_pending(opening: JobOpening, cadence: Sequence[int]) -> int:
    """Move pending follow-ups to match the opening's initial email date. Returns how many moved."""
    moved = 0
    dates = compute_follow_up_dates(opening.initial_email_date, cadence)
    for follow_up, due in zip(opening.follow_ups, dates):
        if follow_up.status == FollowUpStatus.PENDING.value and follow_up.follow_up_date != due:
            follow_up.follow_up_date = due
            moved += 1
    return moved


def sorted_follow_ups(opening: JobOpening) -> List[FollowUp]:
    return sorted(opening.follow_ups, key=lambda f: (f.follow_up_date, f.id or 0))


def next_pending_follow_up(opening: JobOpening) -> Optional[FollowUp]:
    """Earliest pending follow-up, or None when nothing is pending."""
    pending = [f for f in opening.follow_ups if f.status == FollowUpStatus.PENDING.value]
    if not pending:
        return None
    return min(pending, key=lambda f: (f.follow_up_date, f.id or 0))


def is_overdue(opening: JobOpening, today: Optional[date] = None) -> bool:
    """True when the next pending follow-up was due before today."""
    next_follow_up = next_pending_follow_up(opening)
    if next_follow_up is None:
        return False
    return next_follow_up.follow_up_date < (today or today_utc())


def recompute_outreach_status(opening: JobOpening) -> None:
    """Set the status from the number of sent follow-ups while still in the outreach stage."""
    if opening.status not in OUTREACH_STATUSES:
        return
    sent = sum(1 for f in opening.follow_ups if f.status == FollowUpStatus.SENT.value)
    new_status = STATUS_BY_SENT_COUNT[min(sent, FOLLOW_UPS_PER_OPENING)]
    if opening.status != new_status:
        logger.info(f"Job opening {opening.id} status {opening.status!r} -> {new_status!r}")
        opening.status = new_status


def get_follow_up(db: Session, user_id: int, follow_up_id: int) -> FollowUp:
    follow_up = db.query(FollowUp).filter(
        FollowUp.id == follow_up_id,
        FollowUp.user_id == user_id,
    ).first()
    if not follow_up:
        raise LookupError("Follow-up not found")
    return follow_up


def log_follow_up(db: Session, user_id: int, follow_up_id: int, sent_on: Optional[date] = None) -> FollowUp:
    """Mark a pending follow-up as sent today (or on `sent_on`)."""
    follow_up = get_follow_up(db, user_id, follow_up_id)
    if follow_up.status != FollowUpStatus.PENDING.value:
        raise ValueError(f"Only pending follow-ups can be logged (status is {follow_up.status})")

    follow_up.original_due_date = follow_up.follow_up_date
    follow_up.follow_up_date = sent_on or today_utc()
    follow_up.status = FollowUpStatus.SENT.value
    recompute_outreach_status(follow_up.job_opening)

    db.commit()
    db.refresh(follow_up)
    logger.info(f"Logged follow-up {follow_up.id} for job_opening_id={follow_up.job_opening_id}")
    return follow_up


def unlog_follow_up(db: Session, user_id: int, follow_up_id: int) -> FollowUp:
    """Undo a logged follow-up: back to pending on its original due date."""
    follow_up = get_follow_up(db, user_id, follow_up_id)
    if follow_up.status != FollowUpStatus.SENT.value:
        raise ValueError(f"Only sent follow-ups can be unlogged (status is {follow_up.status})")

    if follow_up.original_due_date:
        follow_up.follow_up_date = follow_up.original_due_date
    follow_up.original_due_date = None
    follow_up.status = FollowUpStatus.PENDING.value
    recompute_outreach_status(follow_up.job_opening)

    db.commit()
    db.refresh(follow_up)
    logger.info(f"Unlogged follow-up {follow_up.id} for job_opening_id={follow_up.job_opening_id}")
    return follow_up


def skip_follow_up(db: Session, user_id: int, follow_up_id: int) -> FollowUp:
    follow_up = get_follow_up(db, user_id, follow_up_id)
    if follow_up.status != FollowUpStatus.PENDING.value:
        raise ValueError(f"Only pending follow-ups can be skipped (status is {follow_up.status})")

    follow_up.status = FollowUpStatus.SKIPPED.value
    db.commit()
    db.refresh(follow_up)
    logger.info(f"Skipped follow-up {follow_up.id} for job_opening_id={follow_up.job_opening_id}")
    return follow_up


def list_due_follow_ups(db: Session, user_id: int, on_or_before: Optional[date] = None) -> List[DueFollowUpResponse]:
    """Pending follow-ups due on or before a day (today by default), oldest first."""
    today = today_utc()
    cutoff = on_or_before or today
    rows = (
        db.query(FollowUp, JobOpening)
        .join(JobOpening, FollowUp.job_opening_id == JobOpening.id)
        .filter(
            FollowUp.user_id == user_id,
            FollowUp.status == FollowUpStatus.PENDING.value,
            FollowUp.follow_up_date <= cutoff,
        )
        .order_by(FollowUp.follow_up_date.asc(), FollowUp.id.asc())
        .all()
    )
    return [
        DueFollowUpResponse(
            id=follow_up.id,
            job_opening_id=follow_up.job_opening_id,
            follow_up_date=follow_up.follow_up_date,
            original_due_date=follow_up.original_due_date,
            email_subject=follow_up.email_subject,
            email_body=follow_up.email_body,
            status=follow_up.status,
            role_title=opening.role_title,
            company_name_cache=opening.company_name_cache,
            is_overdue=follow_up.follow_up_date < today,
        )
        for follow_up, opening in rows
    ]
