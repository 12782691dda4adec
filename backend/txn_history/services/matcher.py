"""
Row Matcher — Finds payment rows for a customer identity, and order/refund rows
for a set of payment ids.

Matching runs in two steps. A strategy fetches candidate rows from the table
(every row for a linear scan, a SQL pre-filter for an indexed search); then the
same predicate is applied to every candidate, so both strategies return the
same rows. All matches are ordered newest first and the first `max_results`
are kept.
"""
from dataclasses import dataclass
from typing import Callable, FrozenSet, Iterable, List, Optional, Sequence

from txn_history.config import LookupConfig
from txn_history.services.schema import (
    PAYMENT_SCHEMA, BoundRow, BoundSchema, TableSchema, cell_text,
)
from txn_history.services.table_source import SearchCriterion, TableSource
from txn_history.utils.dates import sort_newest_first
from txn_history.utils.log import log_event
from txn_history.utils.normalize import WHITESPACE_CHARS, normalize_email, normalize_phone
from txn_history.utils.results import QueryResult

# The SQL pre-filter drops these anywhere in the cell; the exact check runs afterwards
EMAIL_STRIP_CHARS = WHITESPACE_CHARS
PHONE_STRIP_CHARS = WHITESPACE_CHARS + "()-"


@dataclass(frozen=True)
class MatchCriterion:
    """`field` matches when normalize(cell) is one of `values`."""

    field: str
    values: FrozenSet[str]
    normalize: Callable[[object], str] = cell_text
    ignore_case: bool = False
    trim: bool = False
    strip_chars: str = ""

    def matches(self, row: BoundRow) -> bool:
        cell = row.value(self.field)
        if cell is None:
            return False
        value = self.normalize(cell)
        if self.ignore_case:
            value = value.lower()
        return value in self.values

    @property
    def searchable(self) -> bool:
        """False when a source's ASCII-only lower() could miss a match."""
        return not (self.ignore_case and any(not v.isascii() for v in self.values))

    def for_search(self, bound: BoundSchema) -> SearchCriterion:
        return SearchCriterion(
            column=bound.schema.column(self.field).header_name,
            values=self.values,
            ignore_case=self.ignore_case,
            trim=self.trim,
            strip_chars=self.strip_chars,
        )


class LinearScanStrategy:
    """Reads every row. Works with any source."""

    name = "scan"

    def candidates(
        self, source: TableSource, bound: BoundSchema, criteria: Sequence[MatchCriterion],
    ) -> QueryResult[List[BoundRow]]:
        result = source.rows()
        if not result.success:
            return QueryResult.failure(result.error, result.error_code)
        return QueryResult.ok([BoundRow(cells, bound) for _, cells in result.data])


class IndexedSearchStrategy:
    """Lets the source pre-filter rows with its own search (SQL WHERE ... IN).

    The pre-filter may return extra rows but never fewer than the exact
    predicate accepts. Case-insensitive lookups of non-ASCII values fall back
    to a scan.
    """

    name = "indexed"

    def candidates(
        self, source: TableSource, bound: BoundSchema, criteria: Sequence[MatchCriterion],
    ) -> QueryResult[List[BoundRow]]:
        if not all(c.searchable for c in criteria):
            return LinearScanStrategy().candidates(source, bound, criteria)
        result = source.search([c.for_search(bound) for c in criteria])
        if not result.success:
            return QueryResult.failure(result.error, result.error_code)
        return QueryResult.ok([BoundRow(cells, bound) for _, cells in result.data])


def select_strategy(source: TableSource):
    """Indexed search when the source can do it, linear scan otherwise."""
    if getattr(source, "supports_search", False):
        return IndexedSearchStrategy()
    return LinearScanStrategy()


def match_rows(
    source: TableSource,
    schema: TableSchema,
    criteria: Iterable[MatchCriterion],
    limit: int,
    exclude: Optional[Callable[[BoundRow], bool]] = None,
    strategy=None,
) -> QueryResult[List[BoundRow]]:
    """Rows of `source` satisfying ANY criterion, newest first, at most `limit`.

    A missing table, a header-only table or a table lacking every criterion
    column yields an empty success.
    """
    criteria = [c for c in criteria if c.values]
    if not criteria:
        return QueryResult.ok([])

    header = source.header()
    if not header.success:
        return QueryResult.failure(header.error, header.error_code)
    if not header.data:
        return QueryResult.ok([])

    bound = schema.bind(header.data)
    if bound.missing_required:
        log_event("matcher", f"{source.name}: missing columns {', '.join(bound.missing_required)}")

    criteria = [c for c in criteria if bound.has(c.field)]
    if not criteria:
        return QueryResult.ok([])

    strategy = strategy or select_strategy(source)
    result = strategy.candidates(source, bound, criteria)
    if not result.success:
        return result

    matched = [
        row for row in result.data
        if any(c.matches(row) for c in criteria) and not (exclude and exclude(row))
    ]
    newest = sort_newest_first(matched, lambda row: row.value("created_at"))
    return QueryResult.ok(newest[:limit])


def find_matching_payments(
    source: TableSource,
    email: str,
    phone: str,
    config: LookupConfig,
    strategy=None,
) -> QueryResult[List[BoundRow]]:
    """Payments whose email OR contact equals the given identity.

    `email` and `phone` are expected normalized; empty parts are ignored and an
    identity with neither part matches nothing. Rows whose status equals
    config.excluded_status (any case) are dropped.
    """
    criteria = []
    if email:
        criteria.append(MatchCriterion(
            field="email",
            values=frozenset({email.lower()}),
            normalize=normalize_email,
            ignore_case=True,
            trim=True,
            strip_chars=EMAIL_STRIP_CHARS,
        ))
    if phone:
        criteria.append(MatchCriterion(
            field="contact",
            values=frozenset({phone.lower()}),
            normalize=normalize_phone,
            ignore_case=True,
            trim=True,
            strip_chars=PHONE_STRIP_CHARS,
        ))

    excluded = (config.excluded_status or "").strip().lower()

    def is_excluded(row: BoundRow) -> bool:
        return bool(excluded) and row.text("status").strip().lower() == excluded

    return match_rows(
        source, PAYMENT_SCHEMA, criteria,
        limit=config.max_results, exclude=is_excluded, strategy=strategy,
    )


def find_matching_by_foreign_key(
    source: TableSource,
    schema: TableSchema,
    foreign_key: str,
    keys: Iterable[str],
    config: LookupConfig,
    strategy=None,
) -> QueryResult[List[BoundRow]]:
    """Rows whose `foreign_key` cell is exactly (case-sensitive) one of `keys`."""
    keys = frozenset(k for k in keys if k)
    if not keys:
        return QueryResult.ok([])
    criterion = MatchCriterion(field=foreign_key, values=keys)
    return match_rows(source, schema, [criterion], limit=config.max_results, strategy=strategy)
