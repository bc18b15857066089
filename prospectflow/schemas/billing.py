"""
Pydantic schemas for billing endpoints.
"""
from typing import Optional, List, Dict
from datetime import datetime
from pydantic import BaseModel, Field


class PlanFeatureResponse(BaseModel):
    text: str
    included: bool


class PlanDisplayInfo(BaseModel):
    """Price breakdown shown on the pricing page (whole currency units)."""
    is_free: bool
    is_discounted: bool
    original_total_price: Optional[int] = None
    discounted_price_per_month: Optional[int] = None
    final_total_price: int
    price_monthly_direct: Optional[int] = None
    duration_months: int
    discount_percentage: Optional[int] = None


class PlanResponse(BaseModel):
    id: str
    database_tier: str
    name: str
    price_monthly: int
    duration_months: int
    description: str
    discount_percentage: Optional[int] = None
    is_popular: bool = False
    features: List[PlanFeatureResponse] = Field(default_factory=list)
    display: PlanDisplayInfo


class SubscriptionResponse(BaseModel):
    tier: str
    status: str
    plan_start_date: Optional[datetime] = None
    plan_expiry_date: Optional[datetime] = None

    class Config:
        from_attributes = True


class UsageEntry(BaseModel):
    used: int
    limit: Optional[int] = Field(None, description="None means unlimited")
    over_limit: bool = False


class SubscriptionSummary(BaseModel):
    """Effective plan state as shown in the sidebar."""
    tier: str = Field(..., description="Stored tier")
    effective_tier: str = Field(..., description="Tier after expiry is taken into account")
    plan_name: str
    status: str
    is_premium: bool
    plan_expiry_date: Optional[datetime] = None
    days_left: Optional[int] = None
    time_left_text: Optional[str] = None
    usage: Dict[str, UsageEntry] = Field(default_factory=dict)

    class Config:
        json_schema_extra = {
            "example": {
                "tier": "premium",
                "effective_tier": "premium",
                "plan_name": "Premium Plan",
                "status": "active",
                "is_premium": True,
                "plan_expiry_date": "2026-12-01T10:00:00",
                "days_left": 12,
                "time_left_text": "12 days left",
                "usage": {
                    "companies": {"used": 4, "limit": None, "over_limit": False},
                    "contacts": {"used": 9, "limit": None, "over_limit": False},
                    "job_openings": {"used": 3, "limit": None, "over_limit": False}
                }
            }
        }


class CheckoutRequest(BaseModel):
    plan_id: str = Field(..., description="Paid plan id, e.g. 'premium-6m'")
    success_url: Optional[str] = Field(None, description="Redirect after payment; defaults to the frontend billing page")
    cancel_url: Optional[str] = Field(None, description="Redirect on cancel; defaults to the frontend pricing page")

    class Config:
        json_schema_extra = {
            "example": {
                "plan_id": "premium-6m",
            }
        }


class CheckoutResponse(BaseModel):
    checkout_url: str = Field(..., description="Stripe checkout session URL")
    session_id: str = Field(..., description="Stripe checkout session ID")
    amount: int = Field(..., description="Amount in minor units (paise)")
    currency: str
    plan_id: str


class ConfirmPaymentRequest(BaseModel):
    session_id: str = Field(..., min_length=1, description="Stripe checkout session ID")


class PaymentResponse(BaseModel):
    id: int
    plan_id: str
    plan_name: str
    duration_months: int
    amount: int
    currency: str
    status: str
    stripe_session_id: str
    stripe_payment_intent_id: Optional[str] = None
    invoice_number: Optional[str] = None
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ConfirmPaymentResponse(BaseModel):
    payment: PaymentResponse
    subscription: SubscriptionResponse
