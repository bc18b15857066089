"""
Billing endpoints: plans, subscription state, Stripe checkout and invoices.
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request, Header, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from prospectflow.db.models.user import User
from prospectflow.core.auth_dependency import get_db, get_current_user_obj
from prospectflow.core.plan_limits import TIER_FREE, get_plan
from prospectflow.schemas.billing import (
    PlanResponse,
    SubscriptionResponse,
    SubscriptionSummary,
    CheckoutRequest,
    CheckoutResponse,
    ConfirmPaymentRequest,
    ConfirmPaymentResponse,
    PaymentResponse,
)
from prospectflow.services import billing_service, invoice_service, pricing_service, subscription_service
from prospectflow.services.billing_service import (
    BillingNotConfiguredError,
    PaymentGatewayError,
    InvalidWebhookError,
    PAYMENT_PAID,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/billing", tags=["Billing"])


# ✅ PLANS (public)
@router.get("/plans", response_model=List[PlanResponse])
def list_plans():
    """Purchase options with their price breakdown."""
    return pricing_service.list_plans()


# ✅ SUBSCRIPTION STATE
@router.get("/subscription", response_model=SubscriptionResponse)
def get_subscription(
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    subscription = subscription_service.get_subscription(db, user.id)
    if subscription is None:
        return SubscriptionResponse(tier=TIER_FREE, status=subscription_service.STATUS_ACTIVE)
    return SubscriptionResponse.model_validate(subscription)


@router.get("/summary", response_model=SubscriptionSummary)
def get_summary(
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Plan name, time left and record usage against the plan's limits."""
    return subscription_service.subscription_summary(db, user.id)


@router.post("/activate-free", response_model=SubscriptionResponse)
def activate_free(
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    plan = get_plan(TIER_FREE)
    try:
        subscription = subscription_service.activate_free_plan(db, user.id, plan)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to activate free plan for user_id={user.id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to activate free plan"
        )

    return SubscriptionResponse.model_validate(subscription)


# ✅ STRIPE CHECKOUT
@router.post("/checkout", response_model=CheckoutResponse)
def create_checkout(
    data: CheckoutRequest,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """
    Open a Stripe Checkout session for a premium plan.

    Buying while premium is active extends the current expiry.
    """
    try:
        session, payment = billing_service.create_checkout(
            db, user, data.plan_id, data.success_url, data.cancel_url
        )
    except BillingNotConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except PaymentGatewayError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create checkout for user_id={user.id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create checkout session"
        )

    return CheckoutResponse(
        checkout_url=session.url,
        session_id=session.id,
        amount=payment.amount,
        currency=payment.currency,
        plan_id=payment.plan_id,
    )


@router.post("/confirm", response_model=ConfirmPaymentResponse)
def confirm_checkout(
    data: ConfirmPaymentRequest,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Confirm a checkout session after Stripe redirects back. Safe to call repeatedly."""
    try:
        payment, subscription = billing_service.confirm_checkout(db, user, data.session_id)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except BillingNotConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except PaymentGatewayError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to confirm session {data.session_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to confirm payment"
        )

    return ConfirmPaymentResponse(
        payment=PaymentResponse.model_validate(payment),
        subscription=SubscriptionResponse.model_validate(subscription),
    )


# ✅ STRIPE WEBHOOK (public, signature checked)
@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    stripe_signature: str = Header(None),
    db: Session = Depends(get_db)
):
    payload = await request.body()

    try:
        event = billing_service.verify_webhook(payload, stripe_signature)
    except BillingNotConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except InvalidWebhookError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        result = billing_service.handle_webhook_event(db, event)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to handle webhook {event['type']}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process webhook"
        )

    return {"status": "success", "result": result}


# ✅ PAYMENTS AND INVOICES
@router.get("/payments", response_model=List[PaymentResponse])
def list_payments(
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    return [PaymentResponse.model_validate(p) for p in billing_service.list_payments(db, user.id)]


@router.get("/payments/{payment_id}/invoice")
def download_invoice(
    payment_id: int,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Invoice PDF for a paid payment."""
    try:
        payment = billing_service.get_payment(db, user.id, payment_id)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    if payment.status != PAYMENT_PAID or not payment.invoice_number:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Invoice is only available for paid payments")

    try:
        pdf = invoice_service.generate_invoice_pdf(invoice_service.build_invoice_data(payment, user))
    except Exception as e:
        logger.error(f"Failed to generate invoice for payment {payment_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate invoice"
        )

    filename = invoice_service.invoice_filename(payment.invoice_number)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
