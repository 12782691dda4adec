"""
Customer Routes — Transaction history lookup by email and/or phone.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from txn_history.config import LookupConfig, get_settings
from txn_history.database import get_db
from txn_history.schemas.schemas import CustomerDataResponse
from txn_history.services.lookup_service import CustomerLookupService
from txn_history.services.table_source import source_factory

router = APIRouter(prefix="/api", tags=["Customer"])


def get_lookup_service(db: Session = Depends(get_db)) -> CustomerLookupService:
    """FastAPI dependency: a lookup service bound to this request's tables."""
    settings = get_settings()
    return CustomerLookupService(LookupConfig.from_settings(settings), source_factory(settings, db))


@router.get(
    "/customer-data",
    response_model=CustomerDataResponse,
    response_model_exclude_none=True,
)
def get_customer_data(
    email: Optional[str] = Query(None, description="Customer email (case-insensitive)"),
    phone: Optional[str] = Query(None, description="Customer phone (spaces, dashes, brackets ignored)"),
    service: CustomerLookupService = Depends(get_lookup_service),
):
    """Payments, orders and refunds for a customer, newest first.

    Always answers 200; failures are reported in-body with success=false.
    """
    return service.get_all_customer_data(email=email, phone=phone)
