"""
Record limit enforcement.

Free accounts may hold a limited number of companies, contacts and job
openings; premium accounts are unlimited. Limits come from plan_limits.py and
are applied against the effective tier (an expired premium counts as free).
"""
import logging
from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from prospectflow.db.models.user import User
from prospectflow.core.config import FRONTEND_URL
from prospectflow.core.plan_limits import get_tier_limit, SUPPORTED_RESOURCES, TIER_PREMIUM
from prospectflow.services.subscription_service import get_effective_tier, count_records

logger = logging.getLogger(__name__)

RESOURCE_LABELS = {
    "companies": "companies",
    "contacts": "contacts",
    "job_openings": "job openings",
}


def enforce_record_limit(db: Session, user: User, resource: str) -> None:
    """
    Raise 402 with a PAYWALL payload when creating one more `resource` would
    exceed the user's tier limit.
    """
    if resource not in SUPPORTED_RESOURCES:
        raise ValueError(f"Unknown resource: {resource}")

    tier = get_effective_tier(db, user.id)
    limit = get_tier_limit(tier, resource)
    if limit is None:
        return

    used = count_records(db, user.id, resource)
    if used >= limit:
        logger.warning(f"Record limit reached: user_id={user.id}, tier={tier}, resource={resource}, used={used}")
        raise HTTPException(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail={
                "detail": f"You have reached the limit of {limit} {RESOURCE_LABELS[resource]} on the Free Plan. "
                          f"Upgrade to Premium for unlimited {RESOURCE_LABELS[resource]}.",
                "code": "PAYWALL",
                "resource": resource,
                "upgrade_url": f"{FRONTEND_URL}/settings/billing",
                "limit": limit,
                "used": used,
            }
        )


def enforce_premium_feature(db: Session, user: User, feature: str) -> None:
    """Raise 402 with a PAYWALL payload unless the user is on an active premium plan."""
    tier = get_effective_tier(db, user.id)
    if tier == TIER_PREMIUM:
        return

    logger.warning(f"Feature access denied: user_id={user.id}, tier={tier}, feature={feature}")
    raise HTTPException(
        status_code=status.HTTP_402_PAYMENT_REQUIRED,
        detail={
            "detail": "This feature requires the Premium Plan. Upgrade to unlock.",
            "code": "PAYWALL",
            "feature": feature,
            "upgrade_url": f"{FRONTEND_URL}/settings/billing",
            "required_plan": TIER_PREMIUM,
        }
    )
