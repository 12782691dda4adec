"""
Pydantic Schemas — Output records and the customer-data response envelope.
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, Field


# ──────────────── Records ────────────────

class PaymentRecord(BaseModel):
    id: str = ""
    amount: str = Field("", description="Formatted amount, e.g. ₹12,345.00")
    amount_raw: int = Field(0, description="Amount in minor units (paise)")
    currency: str = "INR"
    status: str = ""
    order_id: str = ""
    method: str = ""
    amount_refunded: str = ""
    amount_refunded_raw: int = 0
    refund_status: str = ""
    description: str = ""
    email: str = ""
    contact: str = ""
    error_description: str = ""
    created_at: str = ""
    receipt: str = ""


class OrderRecord(BaseModel):
    id: str = ""
    amount: str = ""
    amount_raw: int = 0
    amount_paid: str = ""
    amount_paid_raw: int = 0
    amount_due: str = ""
    amount_due_raw: int = 0
    currency: str = "INR"
    receipt: str = ""
    status: str = ""
    attempts: int = 0
    created_at: str = ""
    payment_id: str = ""


class RefundRecord(BaseModel):
    id: str = ""
    amount: str = ""
    amount_raw: int = 0
    currency: str = "INR"
    payment_id: str = ""
    status: str = ""
    created_at: str = ""
    speed_requested: str = ""
    speed_processed: str = ""
    receipt: str = ""


# ──────────────── Envelope ────────────────

class CustomerDataResponse(BaseModel):
    success: bool
    error: Optional[str] = None            # Only when success=False
    payments: List[PaymentRecord] = []
    orders: List[OrderRecord] = []
    refunds: List[RefundRecord] = []
    customerEmail: Optional[str] = None    # Only when success=True
    customerPhone: Optional[str] = None

    @classmethod
    def failure(cls, error: str) -> "CustomerDataResponse":
        return cls(success=False, error=error, payments=[], orders=[], refunds=[])


# ──────────────── Health ────────────────

class HealthResponse(BaseModel):
    status: str
    database: str
    data_source: str
    tables: Dict[str, Optional[int]]
    uptime_seconds: float
    version: str
