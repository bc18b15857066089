"""
Job opening service.

An opening ties a role at a company to the contacts that were emailed about
it and the three follow-ups scheduled from the initial email date.
"""
import logging
from datetime import date, datetime
from typing import List, Optional
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from prospectflow.db.models.user import User
from prospectflow.db.models.contact import Contact
from prospectflow.db.models.job_opening import JobOpening
from prospectflow.core.gating import enforce_record_limit
from prospectflow.schemas.contact import ContactCreate
from prospectflow.schemas.job_opening import (
    ContactEntry,
    JobOpeningCreate,
    JobOpeningUpdate,
    JobOpeningResponse,
    AssociatedContact,
    FollowUpResponse,
)
from prospectflow.services import contact_service, follow_up_service, settings_service

logger = logging.getLogger(__name__)


def get_job_opening(db: Session, user_id: int, job_opening_id: int) -> JobOpening:
    opening = db.query(JobOpening).filter(
        JobOpening.id == job_opening_id,
        JobOpening.user_id == user_id,
    ).first()
    if not opening:
        raise LookupError("Job opening not found")
    return opening


def _resolve_contacts(
    db: Session,
    user: User,
    entries: List[ContactEntry],
    company_id: Optional[int],
) -> List[Contact]:
    """
    Contacts for the given entries, in order and without duplicates.

    Entries without an id are matched on email and otherwise created under
    the opening's company.
    """
    contacts: List[Contact] = []
    for entry in entries:
        if entry.contact_id is not None:
            contact = contact_service.get_contact(db, user.id, entry.contact_id)
        else:
            email = str(entry.email).lower()
            contact = db.query(Contact).filter(
                Contact.user_id == user.id,
                func.lower(Contact.email) == email,
            ).first()
            if contact is None:
                contact = contact_service.create_contact(
                    db,
                    user,
                    ContactCreate(name=entry.name.strip(), email=email, company_id=company_id),
                    commit=False,
                )
        if contact not in contacts:
            contacts.append(contact)
    return contacts


def create_job_opening(db: Session, user: User, data: JobOpeningCreate) -> JobOpening:
    enforce_record_limit(db, user, "job_openings")

    company_id, company_name = contact_service.resolve_company(db, user, data.company_id, data.company_name)
    contacts = _resolve_contacts(db, user, data.contacts, company_id)

    opening = JobOpening(
        user_id=user.id,
        company_id=company_id,
        company_name_cache=company_name,
        role_title=data.role_title.strip(),
        initial_email_date=data.initial_email_date,
        status=data.status.value,
        tags=data.tags,
        job_description_url=data.job_description_url,
        notes=data.notes,
        is_favorite=data.is_favorite,
        favorited_at=datetime.utcnow() if data.is_favorite else None,
    )
    opening.contacts = contacts

    follow_up_service.build_follow_ups(
        opening,
        settings_service.get_cadence(db, user.id),
        settings_service.get_templates(db, user.id),
        data.follow_ups,
    )

    db.add(opening)
    db.commit()
    db.refresh(opening)
    logger.info(
        f"Created job opening id={opening.id} for user_id={user.id} "
        f"with {len(contacts)} contact(s) and {len(opening.follow_ups)} follow-up(s)"
    )
    return opening


def update_job_opening(db: Session, user: User, job_opening_id: int, data: JobOpeningUpdate) -> JobOpening:
    opening = get_job_opening(db, user.id, job_opening_id)
    changes = data.model_dump(exclude_unset=True)

    if "company_id" in changes or "company_name" in changes:
        company_id, company_name = contact_service.resolve_company(
            db, user, changes.get("company_id"), changes.get("company_name")
        )
        if company_name is None:
            raise ValueError("Company name is required")
        opening.company_id = company_id
        opening.company_name_cache = company_name

    if data.contacts is not None:
        opening.contacts = _resolve_contacts(db, user, data.contacts, opening.company_id)

    if data.role_title:
        opening.role_title = data.role_title.strip()
    if data.status is not None:
        opening.status = data.status.value
    if data.tags is not None:
        opening.tags = data.tags
    if "job_description_url" in changes:
        opening.job_description_url = data.job_description_url
    if "notes" in changes:
        opening.notes = (data.notes or "").strip() or None

    if data.initial_email_date is not None and data.initial_email_date != opening.initial_email_date:
        opening.initial_email_date = data.initial_email_date
        moved = follow_up_service.reschedule_pending(opening, settings_service.get_cadence(db, user.id))
        logger.info(f"Rescheduled {moved} pending follow-up(s) for job opening id={opening.id}")

    if data.follow_ups is not None:
        follow_up_service.apply_content_overrides(opening, data.follow_ups)

    db.commit()
    db.refresh(opening)
    logger.info(f"Updated job opening id={opening.id} fields={sorted(changes)}")
    return opening


def delete_job_opening(db: Session, user_id: int, job_opening_id: int) -> None:
    """Delete an opening with its follow-ups and contact links."""
    opening = get_job_opening(db, user_id, job_opening_id)
    db.delete(opening)
    db.commit()
    logger.info(f"Deleted job opening id={job_opening_id} for user_id={user_id}")


def toggle_favorite(db: Session, user_id: int, job_opening_id: int) -> JobOpening:
    opening = get_job_opening(db, user_id, job_opening_id)
    opening.is_favorite = not opening.is_favorite
    opening.favorited_at = datetime.utcnow() if opening.is_favorite else None
    db.commit()
    db.refresh(opening)
    logger.info(f"Job opening id={opening.id} favorite={opening.is_favorite}")
    return opening


def _sort_key(opening: JobOpening):
    # Favorites first, most recently favorited first
    if opening.is_favorite:
        favorited = opening.favorited_at.timestamp() if opening.favorited_at else 0.0
        favorite_rank = (0, -favorited)
    else:
        favorite_rank = (1, 0.0)
    next_follow_up = follow_up_service.next_pending_follow_up(opening)
    next_date = next_follow_up.follow_up_date if next_follow_up else date.max
    created = opening.created_at.timestamp() if opening.created_at else 0.0
    return favorite_rank, next_date, created, opening.id


def list_job_openings(
    db: Session,
    user_id: int,
    status: Optional[str] = None,
    search: Optional[str] = None,
    tag: Optional[str] = None,
    favorites_only: bool = False,
    overdue_only: bool = False,
    today: Optional[date] = None,
) -> List[JobOpening]:
    """
    Openings ordered favorites first, then by next pending follow-up date,
    then by creation time.
    """
    query = db.query(JobOpening).filter(JobOpening.user_id == user_id)

    if status:
        query = query.filter(JobOpening.status == status)
    if favorites_only:
        query = query.filter(JobOpening.is_favorite.is_(True))
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(
            JobOpening.role_title.ilike(pattern),
            JobOpening.company_name_cache.ilike(pattern),
            JobOpening.notes.ilike(pattern),
        ))

    openings = query.all()

    if tag and tag.strip():
        wanted = tag.strip().lower()
        openings = [o for o in openings if any(t.lower() == wanted for t in (o.tags or []))]
    if overdue_only:
        today = today or follow_up_service.today_utc()
        openings = [o for o in openings if follow_up_service.is_overdue(o, today)]

    return sorted(openings, key=_sort_key)


def to_response(opening: JobOpening, today: Optional[date] = None) -> JobOpeningResponse:
    """Serialize an opening with its contacts, follow-ups and overdue flag."""
    today = today or follow_up_service.today_utc()
    next_follow_up = follow_up_service.next_pending_follow_up(opening)
    return JobOpeningResponse(
        id=opening.id,
        user_id=opening.user_id,
        company_id=opening.company_id,
        company_name_cache=opening.company_name_cache,
        role_title=opening.role_title,
        initial_email_date=opening.initial_email_date,
        status=opening.status,
        tags=opening.tags or [],
        job_description_url=opening.job_description_url,
        notes=opening.notes,
        is_favorite=opening.is_favorite,
        favorited_at=opening.favorited_at,
        created_at=opening.created_at,
        associated_contacts=[
            AssociatedContact(contact_id=c.id, name=c.name, email=c.email)
            for c in opening.contacts
        ],
        follow_ups=[
            FollowUpResponse.model_validate(f)
            for f in follow_up_service.sorted_follow_ups(opening)
        ],
        next_follow_up=FollowUpResponse.model_validate(next_follow_up) if next_follow_up else None,
        is_overdue=follow_up_service.is_overdue(opening, today),
    )
