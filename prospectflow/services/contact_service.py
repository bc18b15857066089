"""
Contact service: CRUD, filters and company resolution.
"""
import logging
from typing import List, Optional, Tuple
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from prospectflow.db.models.user import User
from prospectflow.db.models.contact import Contact
from prospectflow.core.gating import enforce_record_limit
from prospectflow.schemas.contact import ContactCreate, ContactUpdate
from prospectflow.services import company_service

logger = logging.getLogger(__name__)


def get_contact(db: Session, user_id: int, contact_id: int) -> Contact:
    contact = db.query(Contact).filter(
        Contact.id == contact_id,
        Contact.user_id == user_id,
    ).first()
    if not contact:
        raise LookupError("Contact not found")
    return contact


def resolve_company(
    db: Session,
    user: User,
    company_id: Optional[int],
    company_name: Optional[str],
) -> Tuple[Optional[int], Optional[str]]:
    """
    Company id and display name from either an id or a free-text name.

    A name that matches no existing company creates one.
    """
    if company_id is not None:
        company = company_service.get_company(db, user.id, company_id)
        return company.id, company.name
    if company_name and company_name.strip():
        company = company_service.find_or_create_company(db, user, company_name)
        return company.id, company.name
    return None, None


def list_contacts(
    db: Session,
    user_id: int,
    search: Optional[str] = None,
    tag: Optional[str] = None,
    company_id: Optional[int] = None,
    favorites_only: bool = False,
) -> List[Contact]:
    query = db.query(Contact).filter(Contact.user_id == user_id)

    if favorites_only:
        query = query.filter(Contact.is_favorite.is_(True))
    if company_id is not None:
        query = query.filter(Contact.company_id == company_id)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(
            Contact.name.ilike(pattern),
            Contact.email.ilike(pattern),
            Contact.role.ilike(pattern),
            Contact.company_name_cache.ilike(pattern),
        ))

    contacts = query.order_by(func.lower(Contact.name).asc(), Contact.id.asc()).all()

    # Tags live in a JSON column; filter in Python to stay portable across backends
    if tag and tag.strip():
        wanted = tag.strip().lower()
        contacts = [c for c in contacts if any(t.lower() == wanted for t in (c.tags or []))]
    return contacts


def create_contact(db: Session, user: User, data: ContactCreate, commit: bool = True) -> Contact:
    enforce_record_limit(db, user, "contacts")

    company_id, company_name = resolve_company(db, user, data.company_id, data.company_name)
    contact = Contact(
        user_id=user.id,
        name=data.name.strip(),
        email=str(data.email).lower(),
        role=data.role,
        phone=data.phone,
        linkedin_url=data.linkedin_url,
        company_id=company_id,
        company_name_cache=company_name,
        notes=data.notes,
        tags=data.tags,
        is_favorite=data.is_favorite,
    )
    db.add(contact)
    if commit:
        db.commit()
        db.refresh(contact)
    else:
        db.flush()
    logger.info(f"Created contact id={contact.id} for user_id={user.id}")
    return contact


def update_contact(db: Session, user: User, contact_id: int, data: ContactUpdate) -> Contact:
    contact = get_contact(db, user.id, contact_id)
    changes = data.model_dump(exclude_unset=True)

    if "company_id" in changes or "company_name" in changes:
        company_id, company_name = resolve_company(db, user, changes.get("company_id"), changes.get("company_name"))
        contact.company_id = company_id
        contact.company_name_cache = company_name

    for field in ("role", "phone", "linkedin_url", "notes", "tags"):
        if field in changes:
            value = changes[field]
            if isinstance(value, str):
                value = value.strip() or None
            setattr(contact, field, value if value is not None or field != "tags" else [])
    if changes.get("name"):
        contact.name = changes["name"].strip()
    if changes.get("email"):
        contact.email = str(changes["email"]).lower()
    if changes.get("is_favorite") is not None:
        contact.is_favorite = changes["is_favorite"]

    db.commit()
    db.refresh(contact)
    logger.info(f"Updated contact id={contact.id} fields={sorted(changes)}")
    return contact


def delete_contact(db: Session, user_id: int, contact_id: int) -> None:
    contact = get_contact(db, user_id, contact_id)
    db.delete(contact)
    db.commit()
    logger.info(f"Deleted contact id={contact_id} for user_id={user_id}")


def toggle_favorite(db: Session, user_id: int, contact_id: int) -> Contact:
    contact = get_contact(db, user_id, contact_id)
    contact.is_favorite = not contact.is_favorite
    db.commit()
    db.refresh(contact)
    logger.info(f"Contact id={contact.id} favorite={contact.is_favorite}")
    return contact
