# venue_admin/models/subscriptions.py
from sqlalchemy import Column, Integer, String, Boolean, Text, Numeric
from sqlalchemy.dialects.postgresql import ARRAY
from .base import Base, TimestampMixin

class SubscriptionPlan(TimestampMixin, Base):
    __tablename__ = "subscription_plans"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=True)
    price_monthly = Column(Numeric(10, 2), nullable=False)
    price_yearly = Column(Numeric(10, 2), nullable=True)
    tier_level = Column(Integer, nullable=True)
    benefits = Column(ARRAY(String), nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)

    def __str__(self):
        return self.name
