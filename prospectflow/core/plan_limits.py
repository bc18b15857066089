"""
Subscription plan catalogue and per-tier record limits.

Single source of truth for purchase options and how many companies, contacts
and job openings each tier may hold. None means unlimited.
"""
from dataclasses import dataclass, field
from typing import Dict, Optional, List

TIER_FREE = "free"
TIER_PREMIUM = "premium"

# Tracked resources
SUPPORTED_RESOURCES: List[str] = [
    "companies",
    "contacts",
    "job_openings",
]

# Record limits per tier
TIER_LIMITS: Dict[str, Dict[str, Optional[int]]] = {
    TIER_FREE: {
        "companies": 25,
        "contacts": 50,
        "job_openings": 30,
    },
    TIER_PREMIUM: {
        "companies": None,
        "contacts": None,
        "job_openings": None,
    },
}

# Free plans also get an expiry, 99 years out
FREE_PLAN_DURATION_MONTHS = 99 * 12


@dataclass(frozen=True)
class PlanFeature:
    text: str
    included: bool


@dataclass(frozen=True)
class AvailablePlan:
    """A purchase option. Every paid option maps to the premium tier."""
    id: str
    database_tier: str
    name: str
    price_monthly: int
    duration_months: int
    description: str
    discount_percentage: Optional[int] = None
    features: List[PlanFeature] = field(default_factory=list)
    is_popular: bool = False


_PREMIUM_FEATURES = [
    PlanFeature("Unlimited companies", True),
    PlanFeature("Unlimited contacts", True),
    PlanFeature("Unlimited job openings", True),
    PlanFeature("Custom follow-up cadence and templates", True),
    PlanFeature("AI follow-up suggestions", True),
]

ALL_AVAILABLE_PLANS: List[AvailablePlan] = [
    AvailablePlan(
        id="free",
        database_tier=TIER_FREE,
        name="Free Plan",
        price_monthly=0,
        duration_months=FREE_PLAN_DURATION_MONTHS,
        description="Get started with the essentials for tracking your outreach.",
        features=[
            PlanFeature(f"Up to {TIER_LIMITS[TIER_FREE]['companies']} companies", True),
            PlanFeature(f"Up to {TIER_LIMITS[TIER_FREE]['contacts']} contacts", True),
            PlanFeature(f"Up to {TIER_LIMITS[TIER_FREE]['job_openings']} job openings", True),
            PlanFeature("Custom follow-up cadence and templates", True),
            PlanFeature("AI follow-up suggestions", False),
        ],
    ),
    AvailablePlan(
        id="premium-1m",
        database_tier=TIER_PREMIUM,
        name="Premium - 1 Month",
        price_monthly=199,
        duration_months=1,
        description="All premium features, billed for one month.",
        features=_PREMIUM_FEATURES,
    ),
    AvailablePlan(
        id="premium-6m",
        database_tier=TIER_PREMIUM,
        name="Premium - 6 Months",
        price_monthly=199,
        duration_months=6,
        discount_percentage=15,
        description="Six months of premium at a discount.",
        features=_PREMIUM_FEATURES,
        is_popular=True,
    ),
    AvailablePlan(
        id="premium-12m",
        database_tier=TIER_PREMIUM,
        name="Premium - 12 Months",
        price_monthly=199,
        duration_months=12,
        discount_percentage=25,
        description="A full year of premium at the best price.",
        features=_PREMIUM_FEATURES,
    ),
]


def get_plan(plan_id: str) -> Optional[AvailablePlan]:
    """Look up a purchase option by id."""
    for plan in ALL_AVAILABLE_PLANS:
        if plan.id == plan_id:
            return plan
    return None


def get_limits_for_tier(tier: Optional[str]) -> Dict[str, Optional[int]]:
    """Get all record limits for a tier, falling back to free."""
    tier = tier.lower() if tier else TIER_FREE
    return TIER_LIMITS.get(tier, TIER_LIMITS[TIER_FREE])


def get_tier_limit(tier: Optional[str], resource: str) -> Optional[int]:
    """Get the record limit for a resource in a tier (None for unlimited)."""
    return get_limits_for_tier(tier).get(resource)
