"""
Payment Model — Razorpay payments export, one row per payment attempt.
"""
from sqlalchemy import Column, String, Integer

from txn_history.config import get_settings
from txn_history.database import Base

settings = get_settings()


class RazorpayPayment(Base):
    __tablename__ = settings.PAYMENTS_TABLE

    id = Column(String(32), primary_key=True, index=True)   # pay_XXXXXXXXXXXXXX
    amount = Column(Integer, default=0)                     # Amount in paise
    currency = Column(String(3), default="INR")
    status = Column(String(16), index=True)   # created | authorized | captured | refunded | failed
    order_id = Column(String(32))
    method = Column(String(16))               # upi | card | netbanking | wallet | emi
    amount_refunded = Column(Integer, default=0)
    refund_status = Column(String(16))        # null | partial | full
    description = Column(String(256))
    email = Column(String(128), index=True)
    contact = Column(String(32), index=True)
    error_description = Column(String(256))
    created_at = Column(String(32))           # Locale-formatted, as exported
    receipt = Column(String(64))
