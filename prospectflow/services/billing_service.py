"""
Billing service for Stripe integration.

Premium plans are one-off purchases: a Checkout session in "payment" mode is
opened for the discounted total, a pending Payment row is stored, and the plan
is activated (or extended) once Stripe reports the session as paid, either
through the confirm endpoint or the signed webhook.
"""
import logging
from datetime import datetime
from typing import Any, List, Optional, Tuple
import stripe
from sqlalchemy.orm import Session

from prospectflow.db.models.user import User
from prospectflow.db.models.payment import Payment
from prospectflow.db.models.subscription import Subscription
from prospectflow.core.config import (
    STRIPE_SECRET_KEY,
    STRIPE_WEBHOOK_SECRET,
    PAYMENT_CURRENCY,
    FRONTEND_URL,
)
from prospectflow.core.plan_limits import TIER_PREMIUM, get_plan
from prospectflow.services.pricing_service import amount_in_minor_units
from prospectflow.services.subscription_service import activate_plan

logger = logging.getLogger(__name__)

PAYMENT_PENDING = "pending"
PAYMENT_PAID = "paid"
PAYMENT_FAILED = "failed"

# Initialize Stripe
if STRIPE_SECRET_KEY:
    stripe.api_key = STRIPE_SECRET_KEY
else:
    logger.warning("STRIPE_SECRET_KEY not configured - payments disabled")


class BillingNotConfiguredError(RuntimeError):
    """Stripe keys are missing."""


class PaymentGatewayError(RuntimeError):
    """Stripe rejected or failed a request."""


class InvalidWebhookError(ValueError):
    """Webhook payload or signature did not verify."""


def _field(obj: Any, name: str) -> Any:
    """Read a field from a Stripe object or a plain dict."""
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _require_stripe() -> None:
    if not STRIPE_SECRET_KEY:
        raise BillingNotConfiguredError("Payments are not configured")
    stripe.api_key = STRIPE_SECRET_KEY


def generate_invoice_number(payment: Payment, issued_at: datetime) -> str:
    return f"INV-{issued_at:%Y%m%d}-{payment.id:05d}"


def create_checkout(
    db: Session,
    user: User,
    plan_id: str,
    success_url: Optional[str] = None,
    cancel_url: Optional[str] = None,
) -> Tuple[Any, Payment]:
    """
    Open a Stripe Checkout session for a premium plan and record a pending payment.

    Raises:
        ValueError: unknown or free plan
        BillingNotConfiguredError: Stripe key missing
        PaymentGatewayError: Stripe error (message passed through)
    """
    plan = get_plan(plan_id)
    if plan is None or plan.database_tier != TIER_PREMIUM:
        raise ValueError(f"Unknown paid plan: {plan_id}")

    _require_stripe()

    amount = amount_in_minor_units(plan)
    currency = PAYMENT_CURRENCY.upper()
    if not success_url:
        success_url = f"{FRONTEND_URL}/settings/billing?session_id={{CHECKOUT_SESSION_ID}}"
    if not cancel_url:
        cancel_url = f"{FRONTEND_URL}/settings/billing?cancelled=1"

    try:
        session = stripe.checkout.Session.create(
            mode="payment",
            customer_email=user.email,
            client_reference_id=str(user.id),
            line_items=[{
                "price_data": {
                    "currency": currency.lower(),
                    "unit_amount": amount,
                    "product_data": {
                        "name": plan.name,
                        "description": plan.description,
                    },
                },
                "quantity": 1,
            }],
            success_url=success_url,
            cancel_url=cancel_url,
            metadata={
                "user_id": str(user.id),
                "plan_id": plan.id,
                "duration_months": str(plan.duration_months),
            },
        )
    except stripe.StripeError as e:
        message = getattr(e, "user_message", None) or str(e)
        logger.error(f"Stripe error creating checkout session for user_id={user.id}: {message}", exc_info=True)
        raise PaymentGatewayError(message)

    payment = Payment(
        user_id=user.id,
        plan_id=plan.id,
        plan_name=plan.name,
        duration_months=plan.duration_months,
        amount=amount,
        currency=currency,
        stripe_session_id=session.id,
        status=PAYMENT_PENDING,
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)

    logger.info(
        f"Created checkout session {session.id} for user_id={user.id}, "
        f"plan={plan.id}, amount={amount} {currency}"
    )
    return session, payment


def _claim_payment(db: Session, payment: Payment) -> bool:
    """
    Flip a payment to paid unless another request already has.

    Confirm and the webhook can run at once for one session; the matched row
    stays locked until this transaction commits.
    """
    claimed = (
        db.query(Payment)
        .filter(Payment.id == payment.id, Payment.status != PAYMENT_PAID)
        .update({Payment.status: PAYMENT_PAID}, synchronize_session=False)
    )
    return claimed == 1


def _mark_paid(db: Session, payment: Payment, session: Any) -> Optional[Subscription]:
    """
    Activate or extend premium for a paid session and stamp the payment. Commits.

    Returns None when another request already marked this payment paid.
    """
    plan = get_plan(payment.plan_id)
    if plan is None:
        raise ValueError(f"Payment {payment.id} refers to unknown plan {payment.plan_id}")

    if not _claim_payment(db, payment):
        db.commit()
        db.refresh(payment)
        logger.info(f"Payment {payment.id} was already marked paid by another request")
        return None

    payment_intent = _field(session, "payment_intent")
    if payment_intent is not None and not isinstance(payment_intent, str):
        payment_intent = _field(payment_intent, "id")

    subscription = activate_plan(
        db,
        payment.user_id,
        plan,
        stripe_session_id=payment.stripe_session_id,
        stripe_payment_intent_id=payment_intent,
    )

    now = datetime.utcnow()
    payment.status = PAYMENT_PAID
    payment.stripe_payment_intent_id = payment_intent
    payment.paid_at = now
    payment.period_start = subscription.plan_start_date
    payment.period_end = subscription.plan_expiry_date
    payment.invoice_number = generate_invoice_number(payment, now)

    db.commit()
    db.refresh(payment)
    db.refresh(subscription)
    logger.info(f"Payment {payment.id} paid, invoice {payment.invoice_number}, user_id={payment.user_id}")
    return subscription


def _get_payment_by_session(db: Session, session_id: str, user_id: Optional[int] = None) -> Optional[Payment]:
    query = db.query(Payment).filter(Payment.stripe_session_id == session_id)
    if user_id is not None:
        query = query.filter(Payment.user_id == user_id)
    return query.first()


def confirm_checkout(db: Session, user: User, session_id: str) -> Tuple[Payment, Subscription]:
    """
    Confirm a checkout session after the redirect back from Stripe.

    Idempotent: confirming an already paid session returns it unchanged.

    Raises:
        LookupError: no payment for this session and user
        ValueError: the session is not paid
        BillingNotConfiguredError / PaymentGatewayError
    """
    payment = _get_payment_by_session(db, session_id, user.id)
    if payment is None:
        raise LookupError("Payment not found")

    if payment.status == PAYMENT_PAID:
        subscription = db.query(Subscription).filter(Subscription.user_id == user.id).first()
        return payment, subscription

    _require_stripe()
    try:
        session = stripe.checkout.Session.retrieve(session_id)
    except stripe.StripeError as e:
        message = getattr(e, "user_message", None) or str(e)
        logger.error(f"Stripe error retrieving session {session_id}: {message}", exc_info=True)
        raise PaymentGatewayError(message)

    if _field(session, "payment_status") != "paid":
        raise ValueError("Payment has not been completed")

    subscription = _mark_paid(db, payment, session)
    if subscription is None:
        subscription = db.query(Subscription).filter(Subscription.user_id == user.id).first()
    return payment, subscription


def verify_webhook(payload: bytes, signature: Optional[str]) -> Any:
    """
    Verify the Stripe-Signature header (HMAC-SHA256 of the raw body) and parse the event.

    Raises:
        BillingNotConfiguredError: webhook secret missing
        InvalidWebhookError: bad payload or signature
    """
    if not STRIPE_WEBHOOK_SECRET:
        raise BillingNotConfiguredError("STRIPE_WEBHOOK_SECRET not configured")
    if not signature:
        raise InvalidWebhookError("Missing Stripe-Signature header")

    try:
        event = stripe.Webhook.construct_event(payload, signature, STRIPE_WEBHOOK_SECRET)
    except ValueError as e:
        logger.error(f"Invalid webhook payload: {e}")
        raise InvalidWebhookError(f"Invalid webhook payload: {e}")
    except stripe.SignatureVerificationError as e:
        logger.error(f"Webhook signature verification failed: {e}")
        raise InvalidWebhookError(f"Invalid signature: {e}")

    logger.info(f"Verified webhook event: {event['type']}, id={event['id']}")
    return event


def handle_webhook_event(db: Session, event: Any) -> str:
    """Apply a verified checkout event. Returns what was done, for the response body."""
    event_type = event["type"]
    session = event["data"]["object"]
    session_id = _field(session, "id")

    if event_type not in (
        "checkout.session.completed",
        "checkout.session.async_payment_succeeded",
        "checkout.session.expired",
        "checkout.session.async_payment_failed",
    ):
        logger.info(f"Ignoring webhook event {event_type}")
        return "ignored"

    payment = _get_payment_by_session(db, session_id) if session_id else None
    if payment is None:
        logger.warning(f"Webhook {event_type} for unknown session {session_id}")
        return "unknown_session"

    if event_type in ("checkout.session.completed", "checkout.session.async_payment_succeeded"):
        if payment.status == PAYMENT_PAID:
            return "already_paid"
        if _field(session, "payment_status") != "paid":
            # Delayed payment methods report completion before the money arrives
            logger.info(f"Session {session_id} completed but not paid yet")
            return "awaiting_payment"
        if _mark_paid(db, payment, session) is None:
            return "already_paid"
        return "paid"

    if payment.status == PAYMENT_PENDING:
        payment.status = PAYMENT_FAILED
        db.commit()
        logger.info(f"Payment {payment.id} marked failed after {event_type}")
        return "failed"
    return "unchanged"


def list_payments(db: Session, user_id: int) -> List[Payment]:
    return (
        db.query(Payment)
        .filter(Payment.user_id == user_id)
        .order_by(Payment.created_at.desc(), Payment.id.desc())
        .all()
    )


def get_payment(db: Session, user_id: int, payment_id: int) -> Payment:
    payment = db.query(Payment).filter(
        Payment.id == payment_id,
        Payment.user_id == user_id,
    ).first()
    if not payment:
        raise LookupError("Payment not found")
    return payment
