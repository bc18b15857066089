"""
Tests for plan price display arithmetic.
"""
import pytest

from prospectflow.core.plan_limits import AvailablePlan, get_plan, TIER_FREE, TIER_PREMIUM
from prospectflow.services.pricing_service import (
    amount_in_minor_units,
    calculate_plan_display_info,
    round_half_up,
)


def _plan(price_monthly, duration_months, discount=None):
    return AvailablePlan(
        id="test",
        database_tier=TIER_PREMIUM,
        name="Test",
        price_monthly=price_monthly,
        duration_months=duration_months,
        description="",
        discount_percentage=discount,
    )


@pytest.mark.parametrize("value,expected", [(2.5, 3), (2.4999, 2), (1014.9, 1015), (0.5, 1), (149.25, 149)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_free_plan_display():
    info = calculate_plan_display_info(get_plan("free"))
    assert info.is_free is True
    assert info.is_discounted is False
    assert info.final_total_price == 0


def test_undiscounted_plan_display():
    info = calculate_plan_display_info(get_plan("premium-1m"))
    assert info.is_free is False
    assert info.is_discounted is False
    assert info.price_monthly_direct == 199
    assert info.final_total_price == 199
    assert info.original_total_price is None


def test_discounted_plan_display():
    # 199 * 6 = 1194, less 15% = 1014.9
    info = calculate_plan_display_info(get_plan("premium-6m"))
    assert info.is_discounted is True
    assert info.original_total_price == 1194
    assert info.final_total_price == 1015
    assert info.discounted_price_per_month == 169
    assert info.discount_percentage == 15

    # 199 * 12 = 2388, less 25% = 1791
    info = calculate_plan_display_info(get_plan("premium-12m"))
    assert info.original_total_price == 2388
    assert info.final_total_price == 1791
    assert info.discounted_price_per_month == 149


def test_zero_discount_is_not_discounted():
    info = calculate_plan_display_info(_plan(100, 3, discount=0))
    assert info.is_discounted is False
    assert info.final_total_price == 300


def test_half_unit_rounds_up():
    # 5 * 3 = 15, less 10% = 13.5
    info = calculate_plan_display_info(_plan(5, 3, discount=10))
    assert info.final_total_price == 14
    # 13.5 / 3 = 4.5
    assert info.discounted_price_per_month == 5


def test_amount_in_minor_units():
    assert amount_in_minor_units(get_plan("premium-1m")) == 19900
    assert amount_in_minor_units(get_plan("premium-6m")) == 101500


def test_plans_endpoint_is_public(client):
    response = client.get("/billing/plans")

    assert response.status_code == 200
    plans = {p["id"]: p for p in response.json()}
    assert set(plans) == {"free", "premium-1m", "premium-6m", "premium-12m"}
    assert plans["free"]["database_tier"] == TIER_FREE
    assert plans["premium-6m"]["is_popular"] is True
    assert plans["premium-6m"]["display"]["final_total_price"] == 1015
    assert any(not f["included"] for f in plans["free"]["features"])
