"""
Payment model for checkout sessions created with the payment gateway.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from prospectflow.db.base import Base


class Payment(Base):
    """
    One purchase attempt of a premium plan.

    Created as "pending" when the checkout session is opened and moved to
    "paid" (with an invoice number) or "failed" by the gateway callbacks.
    """
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    plan_id = Column(String, nullable=False)  # purchase option, e.g. "premium-6m"
    plan_name = Column(String, nullable=False)
    duration_months = Column(Integer, nullable=False)
    amount = Column(Integer, nullable=False)  # minor units (paise)
    currency = Column(String(3), nullable=False)

    stripe_session_id = Column(String, unique=True, nullable=False, index=True)
    stripe_payment_intent_id = Column(String, nullable=True)
    status = Column(String, nullable=False, default="pending")  # pending | paid | failed
    invoice_number = Column(String, unique=True, nullable=True)

    period_start = Column(DateTime(timezone=True), nullable=True)
    period_end = Column(DateTime(timezone=True), nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    user = relationship("User", backref="payments")

    __table_args__ = (
        Index("idx_payments_user_created", "user_id", "created_at"),
    )

    def __repr__(self):
        return f"<Payment(id={self.id}, plan_id='{self.plan_id}', status='{self.status}')>"
