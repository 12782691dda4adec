"""
Order Model — Razorpay orders export.
"""
from sqlalchemy import Column, String, Integer

from txn_history.config import get_settings
from txn_history.database import Base

settings = get_settings()


class RazorpayOrder(Base):
    __tablename__ = settings.ORDERS_TABLE

    id = Column(String(32), primary_key=True, index=True)   # order_XXXXXXXXXXXXXX
    amount = Column(Integer, default=0)
    amount_paid = Column(Integer, default=0)
    amount_due = Column(Integer, default=0)
    currency = Column(String(3), default="INR")
    receipt = Column(String(64))
    status = Column(String(16))               # created | attempted | paid
    attempts = Column(Integer, default=0)
    created_at = Column(String(32))
    payment_id = Column(String(32), index=True)
