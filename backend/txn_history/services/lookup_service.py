"""
Customer Lookup Service — Resolves an email/phone into payments, orders and refunds.

Pipeline:
    normalize identity → match payments → project → collect payment ids
    → match orders + refunds by payment_id → project → sort newest first
    → response envelope
"""
from typing import Callable, List, Optional

from txn_history.config import LookupConfig
from txn_history.schemas.schemas import CustomerDataResponse
from txn_history.services.matcher import find_matching_by_foreign_key, find_matching_payments
from txn_history.services.projector import project_order, project_payment, project_refund
from txn_history.services.schema import ORDER_SCHEMA, REFUND_SCHEMA
from txn_history.services.table_source import TableSource
from txn_history.utils.dates import sort_newest_first
from txn_history.utils.log import log_event
from txn_history.utils.normalize import normalize_email, normalize_phone
from txn_history.utils.results import QueryResult

NO_IDENTITY_ERROR = "No email or phone provided"


def _mask(value: str) -> str:
    """Partially hide an email or phone for log lines."""
    if not value:
        return "-"
    if "@" in value:
        local, _, domain = value.partition("@")
        return f"{local[:2]}***@{domain}"
    return f"***{value[-4:]}"


class CustomerLookupService:
    """Stateless lookup over the payments, orders and refunds tables."""

    def __init__(self, config: LookupConfig, open_table: Callable[[str], TableSource]):
        self.config = config
        self.open_table = open_table

    def payment_ids(self, payments) -> List[str]:
        """Non-empty payment ids in result order (duplicates kept)."""
        return [p.id for p in payments if p.id]

    def get_all_customer_data(
        self, email: Optional[str] = None, phone: Optional[str] = None,
    ) -> CustomerDataResponse:
        """Full transaction history for a customer.

        Args:
            email: Customer email, any case / surrounding whitespace.
            phone: Customer phone, any punctuation.

        Returns:
            CustomerDataResponse. On failure all three lists are empty and
            `error` carries the reason.
        """
        email = normalize_email(email)
        phone = normalize_phone(phone)
        if not email and not phone:
            return CustomerDataResponse.failure(NO_IDENTITY_ERROR)

        cfg = self.config

        payments_result = find_matching_payments(self.open_table(cfg.payments_table), email, phone, cfg)
        if not payments_result.success:
            return self._failed(cfg.payments_table, payments_result)
        payments = [project_payment(row, cfg.default_currency) for row in payments_result.data]

        ids = self.payment_ids(payments)

        orders_result = find_matching_by_foreign_key(
            self.open_table(cfg.orders_table), ORDER_SCHEMA, "payment_id", ids, cfg,
        )
        if not orders_result.success:
            return self._failed(cfg.orders_table, orders_result)
        orders = [project_order(row, cfg.default_currency) for row in orders_result.data]

        refunds_result = find_matching_by_foreign_key(
            self.open_table(cfg.refunds_table), REFUND_SCHEMA, "payment_id", ids, cfg,
        )
        if not refunds_result.success:
            return self._failed(cfg.refunds_table, refunds_result)
        refunds = [project_refund(row, cfg.default_currency) for row in refunds_result.data]

        log_event(
            "lookup",
            f"email={_mask(email)} phone={_mask(phone)} -> "
            f"{len(payments)} payments, {len(orders)} orders, {len(refunds)} refunds",
        )

        return CustomerDataResponse(
            success=True,
            payments=sort_newest_first(payments, lambda p: p.created_at),
            orders=sort_newest_first(orders, lambda o: o.created_at),
            refunds=sort_newest_first(refunds, lambda r: r.created_at),
            customerEmail=email,
            customerPhone=phone,
        )

    def _failed(self, table: str, result: QueryResult) -> CustomerDataResponse:
        log_event("lookup", f"read of '{table}' failed [{result.error_code}]: {result.error}")
        return CustomerDataResponse.failure(result.error or f"Failed to read table '{table}'")
