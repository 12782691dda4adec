"""
Timestamp Parsing — Turns exported created_at cells into comparable datetimes.

Exports arrive with en-IN day-first timestamps ("05/06/2024 14:30:00"),
ISO-8601 strings or Unix epoch seconds. Anything else is unparsable and sorts
after every valid timestamp.
"""
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional, TypeVar

T = TypeVar("T")

DAY_FIRST_FORMATS = (
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y",
    "%d-%m-%Y %H:%M:%S",
    "%d-%m-%Y %H:%M",
    "%d-%m-%Y",
    "%d %b %Y, %I:%M %p",
    "%d %b %Y, %I:%M:%S %p",
    "%d %b %Y %H:%M:%S",
    "%d %b %Y",
    "%b %d, %Y, %I:%M:%S %p",
    "%b %d, %Y",
)

# Epoch seconds before this are not Razorpay timestamps (2001-09-09)
_MIN_EPOCH = 1_000_000_000


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_timestamp(value) -> Optional[datetime]:
    """Parse a created_at cell. Returns None when the value is not a date."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _to_naive_utc(value)
    if isinstance(value, (int, float)):
        if value != value or value < _MIN_EPOCH:
            return None
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc).replace(tzinfo=None)
        except (OverflowError, OSError, ValueError):
            return None

    text = str(value).strip()
    if not text:
        return None
    if text.isdigit():
        return parse_timestamp(int(text))

    try:
        return _to_naive_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        pass

    for fmt in DAY_FIRST_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def sort_newest_first(items: Iterable[T], timestamp_of: Callable[[T], object]) -> List[T]:
    """Stable newest-first sort.

    Unparsable timestamps compare equal to each other and older than any
    valid timestamp, so they keep their relative order at the end.
    """
    def key(item):
        ts = parse_timestamp(timestamp_of(item))
        return (ts is not None, ts or datetime.min)

    return sorted(items, key=key, reverse=True)
