"""
Tests for invoice PDF rendering.
"""
from datetime import datetime

from prospectflow.db.models.payment import Payment
from prospectflow.db.models.user import User
from prospectflow.services.invoice_service import (
    InvoiceData,
    build_invoice_data,
    generate_invoice_pdf,
    invoice_filename,
)


def test_generate_invoice_pdf():
    data = InvoiceData(
        invoice_number="INV-20260310-00007",
        invoice_date="Mar 10, 2026",
        payment_id="pi_test_456",
        user_name="Olivia <Owner> & Co",
        user_email="owner@example.com",
        plan_name="Premium Plan (6 months)",
        plan_price=1015.0,
    )

    pdf = generate_invoice_pdf(data)

    assert pdf.startswith(b"%PDF")
    assert len(pdf) > 1000


def test_invoice_filename():
    assert invoice_filename("INV-20260310-00007") == "Invoice-INV-20260310-00007.pdf"


def test_build_invoice_data_from_payment():
    user = User(email="owner@example.com", full_name="Olivia Owner", password_hash="x")
    payment = Payment(
        user_id=1,
        plan_id="premium-6m",
        plan_name="Premium Plan (6 months)",
        duration_months=6,
        amount=101500,
        currency="INR",
        stripe_session_id="cs_test_123",
        stripe_payment_intent_id="pi_test_456",
        status="paid",
        invoice_number="INV-20260310-00007",
        paid_at=datetime(2026, 3, 10, 9, 30),
    )

    data = build_invoice_data(payment, user)

    assert data.plan_price == 1015.0
    assert data.invoice_date == "Mar 10, 2026"
    assert data.payment_id == "pi_test_456"
    assert data.user_name == "Olivia Owner"
    assert data.currency == "INR"


def test_build_invoice_data_falls_back_to_session_and_email():
    user = User(email="nameless@example.com", full_name=None, password_hash="x")
    payment = Payment(
        user_id=1,
        plan_id="premium-1m",
        plan_name="Premium Plan (1 month)",
        duration_months=1,
        amount=19900,
        currency="INR",
        stripe_session_id="cs_test_999",
        status="paid",
        invoice_number="INV-20260310-00008",
        created_at=datetime(2026, 3, 10, 9, 30),
    )

    data = build_invoice_data(payment, user)

    assert data.payment_id == "cs_test_999"
    assert data.user_name == "nameless@example.com"
    assert data.plan_price == 199.0
