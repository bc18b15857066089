"""
Price display arithmetic for the plan catalogue.
"""
import math
from typing import List

from prospectflow.core.plan_limits import ALL_AVAILABLE_PLANS, AvailablePlan, TIER_FREE
from prospectflow.schemas.billing import PlanDisplayInfo, PlanResponse, PlanFeatureResponse


def round_half_up(value: float) -> int:
    """Round to the nearest whole unit with halves going up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def calculate_plan_display_info(plan: AvailablePlan) -> PlanDisplayInfo:
    """
    Totals shown for a purchase option.

    Free plans cost nothing. Paid plans cost price_monthly * duration_months,
    less discount_percentage when one is set; the per-month figure is the
    discounted total spread over the duration.
    """
    if plan.database_tier == TIER_FREE:
        return PlanDisplayInfo(
            is_free=True,
            is_discounted=False,
            final_total_price=0,
            duration_months=plan.duration_months,
        )

    original_total = plan.price_monthly * plan.duration_months

    if plan.discount_percentage and plan.discount_percentage > 0:
        discount_amount = original_total * (plan.discount_percentage / 100)
        final_total = original_total - discount_amount
        return PlanDisplayInfo(
            is_free=False,
            is_discounted=True,
            original_total_price=round_half_up(original_total),
            discounted_price_per_month=round_half_up(final_total / plan.duration_months),
            final_total_price=round_half_up(final_total),
            duration_months=plan.duration_months,
            discount_percentage=plan.discount_percentage,
        )

    return PlanDisplayInfo(
        is_free=False,
        is_discounted=False,
        price_monthly_direct=plan.price_monthly,
        final_total_price=round_half_up(original_total),
        duration_months=plan.duration_months,
    )


def amount_in_minor_units(plan: AvailablePlan) -> int:
    """Charge for a plan in minor units (paise for INR)."""
    return round_half_up(calculate_plan_display_info(plan).final_total_price * 100)


def plan_to_response(plan: AvailablePlan) -> PlanResponse:
    return PlanResponse(
        id=plan.id,
        database_tier=plan.database_tier,
        name=plan.name,
        price_monthly=plan.price_monthly,
        duration_months=plan.duration_months,
        description=plan.description,
        discount_percentage=plan.discount_percentage,
        is_popular=plan.is_popular,
        features=[PlanFeatureResponse(text=f.text, included=f.included) for f in plan.features],
        display=calculate_plan_display_info(plan),
    )


def list_plans() -> List[PlanResponse]:
    return [plan_to_response(plan) for plan in ALL_AVAILABLE_PLANS]
