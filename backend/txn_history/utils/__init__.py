from txn_history.utils.normalize import normalize_email, normalize_phone
from txn_history.utils.currency import format_amount, to_minor_units
from txn_history.utils.dates import parse_timestamp, sort_newest_first
from txn_history.utils.results import QueryResult

__all__ = [
    "normalize_email", "normalize_phone",
    "format_amount", "to_minor_units",
    "parse_timestamp", "sort_newest_first",
    "QueryResult",
]
