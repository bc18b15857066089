from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from prospectflow.db.base import Base


class Subscription(Base):
    __tablename__ = "user_subscriptions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    tier = Column(String, nullable=False, default="free")  # free | premium
    status = Column(String, nullable=False, default="active")  # active | expired | cancelled | pending_payment | trialing | payment_failed
    plan_start_date = Column(DateTime(timezone=True), nullable=True)
    plan_expiry_date = Column(DateTime(timezone=True), nullable=True)

    # Last checkout that activated or extended the plan
    stripe_session_id = Column(String, nullable=True)
    stripe_payment_intent_id = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Subscription(user_id={self.user_id}, tier='{self.tier}', status='{self.status}')>"
