"""
Contact endpoints.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from prospectflow.db.models.user import User
from prospectflow.core.auth_dependency import get_db, get_current_user_obj
from prospectflow.schemas.contact import (
    ContactCreate,
    ContactUpdate,
    ContactResponse,
    ContactListResponse,
)
from prospectflow.services import contact_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contacts", tags=["Contacts"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ContactResponse)
def create_contact(
    data: ContactCreate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """
    Create a contact.

    The company can be given by id or by name; an unknown name creates the company.
    """
    try:
        contact = contact_service.create_contact(db, user, data)
    except HTTPException:
        db.rollback()
        raise
    except LookupError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create contact: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create contact"
        )

    return ContactResponse.model_validate(contact)


@router.get("", response_model=ContactListResponse)
def list_contacts(
    search: Optional[str] = Query(None, description="Search in name, email, role and company"),
    tag: Optional[str] = Query(None, description="Only contacts with this tag"),
    company_id: Optional[int] = Query(None, description="Only contacts at this company"),
    favorites_only: bool = Query(False, description="Only favorite contacts"),
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    contacts = contact_service.list_contacts(
        db, user.id, search=search, tag=tag, company_id=company_id, favorites_only=favorites_only
    )
    return ContactListResponse(
        contacts=[ContactResponse.model_validate(c) for c in contacts],
        total=len(contacts),
    )


@router.get("/{contact_id}", response_model=ContactResponse)
def get_contact(
    contact_id: int,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    try:
        return ContactResponse.model_validate(contact_service.get_contact(db, user.id, contact_id))
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.put("/{contact_id}", response_model=ContactResponse)
def update_contact(
    contact_id: int,
    data: ContactUpdate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    try:
        contact = contact_service.update_contact(db, user, contact_id, data)
    except HTTPException:
        db.rollback()
        raise
    except LookupError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update contact {contact_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update contact"
        )

    return ContactResponse.model_validate(contact)


@router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_contact(
    contact_id: int,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    try:
        contact_service.delete_contact(db, user.id, contact_id)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to delete contact {contact_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete contact"
        )


@router.post("/{contact_id}/favorite", response_model=ContactResponse)
def toggle_favorite(
    contact_id: int,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    try:
        return ContactResponse.model_validate(contact_service.toggle_favorite(db, user.id, contact_id))
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
