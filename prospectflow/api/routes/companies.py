"""
Company endpoints.

CRUD, search and favorites for the companies a user is reaching out to.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from prospectflow.db.models.user import User
from prospectflow.core.auth_dependency import get_db, get_current_user_obj
from prospectflow.schemas.company import (
    CompanyCreate,
    CompanyUpdate,
    CompanyResponse,
    CompanyListResponse,
)
from prospectflow.services import company_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CompanyResponse)
def create_company(
    data: CompanyCreate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """
    Create a company.

    Free accounts are limited in how many companies they can hold (402 when full).
    """
    try:
        company = company_service.create_company(db, user, data)
    except HTTPException:
        raise
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create company: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create company"
        )

    return CompanyResponse.model_validate(company)


@router.get("", response_model=CompanyListResponse)
def list_companies(
    search: Optional[str] = Query(None, description="Search in name and website"),
    search_notes: bool = Query(False, description="Also search in notes"),
    favorites_only: bool = Query(False, description="Only favorite companies"),
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """List the user's companies ordered by name."""
    companies = company_service.list_companies(
        db, user.id, search=search, favorites_only=favorites_only, search_notes=search_notes
    )
    return CompanyListResponse(
        companies=[CompanyResponse.model_validate(c) for c in companies],
        total=len(companies),
    )


@router.get("/{company_id}", response_model=CompanyResponse)
def get_company(
    company_id: int,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    try:
        return CompanyResponse.model_validate(company_service.get_company(db, user.id, company_id))
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.put("/{company_id}", response_model=CompanyResponse)
def update_company(
    company_id: int,
    data: CompanyUpdate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Update a company. Only provided fields change."""
    try:
        company = company_service.update_company(db, user.id, company_id, data)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update company {company_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update company"
        )

    return CompanyResponse.model_validate(company)


@router.delete("/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_company(
    company_id: int,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Delete a company. Its contacts and job openings keep the company name."""
    try:
        company_service.delete_company(db, user.id, company_id)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to delete company {company_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete company"
        )


@router.post("/{company_id}/favorite", response_model=CompanyResponse)
def toggle_favorite(
    company_id: int,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    try:
        return CompanyResponse.model_validate(company_service.toggle_favorite(db, user.id, company_id))
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
