"""
Refund Model — Razorpay refunds export.
"""
from sqlalchemy import Column, String, Integer

from txn_history.config import get_settings
from txn_history.database import Base

settings = get_settings()


class RazorpayRefund(Base):
    __tablename__ = settings.REFUNDS_TABLE

    id = Column(String(32), primary_key=True, index=True)   # rfnd_XXXXXXXXXXXXXX
    amount = Column(Integer, default=0)
    currency = Column(String(3), default="INR")
    payment_id = Column(String(32), index=True)
    status = Column(String(16))               # pending | processed | failed
    created_at = Column(String(32))
    speed_requested = Column(String(16))      # normal | optimum
    speed_processed = Column(String(16))
    receipt = Column(String(64))
