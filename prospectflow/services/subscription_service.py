"""
Subscription service: effective tier, plan periods and usage summary.

A user's subscription row stores the tier they bought ("free" or "premium").
Premium only counts while the row is active and unexpired; anything else is
treated as free for limits and display.
"""
import calendar
import logging
from datetime import datetime, timezone
from typing import Optional, Tuple
from sqlalchemy.orm import Session

from prospectflow.db.models.subscription import Subscription
from prospectflow.db.models.company import Company
from prospectflow.db.models.contact import Contact
from prospectflow.db.models.job_opening import JobOpening
from prospectflow.core.plan_limits import (
    TIER_FREE,
    TIER_PREMIUM,
    FREE_PLAN_DURATION_MONTHS,
    AvailablePlan,
    get_limits_for_tier,
)
from prospectflow.schemas.billing import SubscriptionSummary, UsageEntry

logger = logging.getLogger(__name__)

STATUS_ACTIVE = "active"

RESOURCE_MODELS = {
    "companies": Company,
    "contacts": Contact,
    "job_openings": JobOpening,
}


def utcnow() -> datetime:
    return datetime.utcnow()


def _naive(value: Optional[datetime]) -> Optional[datetime]:
    """Stored datetimes are UTC; drop tzinfo so they compare with utcnow()."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def add_months(value: datetime, months: int) -> datetime:
    """Calendar month arithmetic, clamping the day to the end of the target month."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def get_subscription(db: Session, user_id: int) -> Optional[Subscription]:
    return db.query(Subscription).filter(Subscription.user_id == user_id).first()


def ensure_free_subscription(db: Session, user_id: int) -> Subscription:
    """Give a new account an active free plan. Does not commit."""
    subscription = get_subscription(db, user_id)
    if subscription:
        return subscription
    now = utcnow()
    subscription = Subscription(
        user_id=user_id,
        tier=TIER_FREE,
        status=STATUS_ACTIVE,
        plan_start_date=now,
        plan_expiry_date=add_months(now, FREE_PLAN_DURATION_MONTHS),
    )
    db.add(subscription)
    db.flush()
    return subscription


def is_active_premium(subscription: Optional[Subscription], now: Optional[datetime] = None) -> bool:
    if subscription is None:
        return False
    expiry = _naive(subscription.plan_expiry_date)
    return (
        subscription.tier == TIER_PREMIUM
        and subscription.status == STATUS_ACTIVE
        and expiry is not None
        and expiry > (now or utcnow())
    )


def effective_tier(subscription: Optional[Subscription], now: Optional[datetime] = None) -> str:
    """Premium only when the tier is premium, the status active and the expiry in the future."""
    return TIER_PREMIUM if is_active_premium(subscription, now) else TIER_FREE


def get_effective_tier(db: Session, user_id: int) -> str:
    return effective_tier(get_subscription(db, user_id))


def compute_new_period(
    subscription: Optional[Subscription],
    plan: AvailablePlan,
    now: Optional[datetime] = None,
) -> Tuple[datetime, datetime]:
    """
    Start and expiry after buying `plan`.

    Extending an active, unexpired premium keeps the start date and adds the
    plan's months to the current expiry. Otherwise the period starts now.
    """
    now = now or utcnow()
    if plan.database_tier == TIER_PREMIUM and is_active_premium(subscription, now):
        start = _naive(subscription.plan_start_date) or now
        return start, add_months(_naive(subscription.plan_expiry_date), plan.duration_months)
    return now, add_months(now, plan.duration_months)


def activate_plan(
    db: Session,
    user_id: int,
    plan: AvailablePlan,
    stripe_session_id: Optional[str] = None,
    stripe_payment_intent_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Subscription:
    """Upsert the user's subscription for a plan. Does not commit."""
    subscription = get_subscription(db, user_id)
    start, expiry = compute_new_period(subscription, plan, now)

    if subscription is None:
        subscription = Subscription(user_id=user_id)
        db.add(subscription)

    subscription.tier = plan.database_tier
    subscription.status = STATUS_ACTIVE
    subscription.plan_start_date = start
    subscription.plan_expiry_date = expiry
    subscription.stripe_session_id = stripe_session_id
    subscription.stripe_payment_intent_id = stripe_payment_intent_id
    db.flush()

    logger.info(
        f"Activated plan {plan.id} for user_id={user_id}: "
        f"tier={plan.database_tier}, start={start.isoformat()}, expiry={expiry.isoformat()}"
    )
    return subscription


def activate_free_plan(db: Session, user_id: int, plan: AvailablePlan) -> Subscription:
    """
    Switch to the free plan.

    Raises ValueError when already active on free or while premium is still active.
    """
    subscription = get_subscription(db, user_id)
    if is_active_premium(subscription):
        raise ValueError("Your Premium Plan is still active. You can switch to the Free Plan after it expires.")
    if subscription and subscription.tier == TIER_FREE and subscription.status == STATUS_ACTIVE:
        raise ValueError(f"You are already on the {plan.name}.")
    subscription = activate_plan(db, user_id, plan)
    db.commit()
    db.refresh(subscription)
    return subscription


def count_records(db: Session, user_id: int, resource: str) -> int:
    model = RESOURCE_MODELS[resource]
    return db.query(model).filter(model.user_id == user_id).count()


def time_left_message(expiry: datetime, now: Optional[datetime] = None) -> Tuple[int, str]:
    """Whole days until expiry and the sidebar message for it."""
    days_left = (_naive(expiry) - (now or utcnow())).days
    if days_left < 0:
        return days_left, "Expired"
    if days_left == 0:
        return days_left, "Expires today"
    return days_left, f"{days_left} day{'s' if days_left != 1 else ''} left"


def subscription_summary(db: Session, user_id: int, now: Optional[datetime] = None) -> SubscriptionSummary:
    """Plan name, time left and usage against the effective tier's limits."""
    now = now or utcnow()
    subscription = get_subscription(db, user_id)
    tier = effective_tier(subscription, now)

    days_left = None
    time_left_text = None
    if tier == TIER_PREMIUM:
        days_left, time_left_text = time_left_message(subscription.plan_expiry_date, now)

    usage = {}
    for resource, limit in get_limits_for_tier(tier).items():
        used = count_records(db, user_id, resource)
        usage[resource] = UsageEntry(used=used, limit=limit, over_limit=limit is not None and used > limit)

    return SubscriptionSummary(
        tier=subscription.tier if subscription else TIER_FREE,
        effective_tier=tier,
        plan_name="Premium Plan" if tier == TIER_PREMIUM else "Free Plan",
        status=subscription.status if subscription else STATUS_ACTIVE,
        is_premium=tier == TIER_PREMIUM,
        plan_expiry_date=subscription.plan_expiry_date if subscription else None,
        days_left=days_left,
        time_left_text=time_left_text,
        usage=usage,
    )
