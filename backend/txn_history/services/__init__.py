from txn_history.services.lookup_service import CustomerLookupService
from txn_history.services.matcher import find_matching_payments, find_matching_by_foreign_key
from txn_history.services.projector import project_payment, project_order, project_refund
from txn_history.services.table_source import CsvTableSource, MemoryTableSource, SqlTableSource, source_factory

__all__ = [
    "CustomerLookupService",
    "find_matching_payments", "find_matching_by_foreign_key",
    "project_payment", "project_order", "project_refund",
    "CsvTableSource", "MemoryTableSource", "SqlTableSource", "source_factory",
]
