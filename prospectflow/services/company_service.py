"""
Company service: CRUD, search and find-or-create by name.
"""
import logging
from typing import List, Optional
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from prospectflow.db.models.user import User
from prospectflow.db.models.company import Company
from prospectflow.db.models.contact import Contact
from prospectflow.db.models.job_opening import JobOpening
from prospectflow.core.gating import enforce_record_limit
from prospectflow.schemas.company import CompanyCreate, CompanyUpdate

logger = logging.getLogger(__name__)


def get_company(db: Session, user_id: int, company_id: int) -> Company:
    company = db.query(Company).filter(
        Company.id == company_id,
        Company.user_id == user_id,
    ).first()
    if not company:
        raise LookupError("Company not found")
    return company


def list_companies(
    db: Session,
    user_id: int,
    search: Optional[str] = None,
    favorites_only: bool = False,
    search_notes: bool = False,
) -> List[Company]:
    """Companies ordered by name (case-insensitive)."""
    query = db.query(Company).filter(Company.user_id == user_id)

    if favorites_only:
        query = query.filter(Company.is_favorite.is_(True))

    if search and search.strip():
        pattern = f"%{search.strip()}%"
        conditions = [Company.name.ilike(pattern), Company.website.ilike(pattern)]
        if search_notes:
            conditions.append(Company.notes.ilike(pattern))
        query = query.filter(or_(*conditions))

    return query.order_by(func.lower(Company.name).asc(), Company.id.asc()).all()


def find_company_by_name(db: Session, user_id: int, name: str) -> Optional[Company]:
    return db.query(Company).filter(
        Company.user_id == user_id,
        func.lower(Company.name) == name.strip().lower(),
    ).first()


def find_or_create_company(db: Session, user: User, name: str) -> Company:
    """
    Existing company with this name (case-insensitive) or a new one.

    A new company counts toward the company limit. Does not commit.
    """
    company = find_company_by_name(db, user.id, name)
    if company:
        return company

    enforce_record_limit(db, user, "companies")
    company = Company(user_id=user.id, name=name.strip())
    db.add(company)
    db.flush()
    logger.info(f"Created company id={company.id} from name for user_id={user.id}")
    return company


def create_company(db: Session, user: User, data: CompanyCreate) -> Company:
    enforce_record_limit(db, user, "companies")

    if find_company_by_name(db, user.id, data.name):
        raise ValueError(f"A company named '{data.name.strip()}' already exists")

    company = Company(
        user_id=user.id,
        name=data.name.strip(),
        website=data.website,
        linkedin_url=data.linkedin_url,
        notes=data.notes,
        is_favorite=data.is_favorite,
    )
    db.add(company)
    db.commit()
    db.refresh(company)
    logger.info(f"Created company id={company.id} for user_id={user.id}")
    return company


def update_company(db: Session, user_id: int, company_id: int, data: CompanyUpdate) -> Company:
    company = get_company(db, user_id, company_id)
    changes = data.model_dump(exclude_unset=True)

    new_name = (changes.pop("name", None) or "").strip()
    if new_name:
        existing = find_company_by_name(db, user_id, new_name)
        if existing and existing.id != company.id:
            raise ValueError(f"A company named '{new_name}' already exists")
        company.name = new_name
        # Keep the cached display name in sync on linked rows
        db.query(Contact).filter(Contact.company_id == company.id).update(
            {Contact.company_name_cache: new_name}, synchronize_session=False
        )
        db.query(JobOpening).filter(JobOpening.company_id == company.id).update(
            {JobOpening.company_name_cache: new_name}, synchronize_session=False
        )

    for field, value in changes.items():
        if field == "is_favorite" and value is None:
            continue
        setattr(company, field, value)

    db.commit()
    db.refresh(company)
    logger.info(f"Updated company id={company.id} fields={sorted(data.model_dump(exclude_unset=True))}")
    return company


def delete_company(db: Session, user_id: int, company_id: int) -> None:
    """Delete a company. Linked contacts and openings keep their cached name."""
    company = get_company(db, user_id, company_id)

    db.query(Contact).filter(Contact.company_id == company.id).update(
        {Contact.company_id: None}, synchronize_session=False
    )
    db.query(JobOpening).filter(JobOpening.company_id == company.id).update(
        {JobOpening.company_id: None}, synchronize_session=False
    )
    db.expire_all()
    db.delete(company)
    db.commit()
    logger.info(f"Deleted company id={company_id} for user_id={user_id}")


def toggle_favorite(db: Session, user_id: int, company_id: int) -> Company:
    company = get_company(db, user_id, company_id)
    company.is_favorite = not company.is_favorite
    db.commit()
    db.refresh(company)
    logger.info(f"Company id={company.id} favorite={company.is_favorite}")
    return company
