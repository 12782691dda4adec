"""
Table Sources — Read-only, row-oriented access to the exported tables.

Every read returns a QueryResult. A table that does not exist, or holds only
a header row, is a successful empty read; driver and file errors are
failures carrying the error text.

Two backends:
- SqlTableSource: reflects a database table and can pre-filter rows in SQL
  (supports_search = True).
- CsvTableSource: one CSV export per table, read fully into memory.
"""
import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, FrozenSet, List, Optional, Sequence, Tuple

from sqlalchemy import MetaData, String, Table, cast, func, inspect, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from txn_history.config import Settings
from txn_history.utils.results import QueryResult

# (position in table, cell values)
SourceRow = Tuple[int, Sequence]

# Non-ASCII characters whose str.lower() is ASCII; SQLite's lower() leaves them alone
ASCII_CASE_FOLDS = (("\u212a", "k"),)   # KELVIN SIGN


@dataclass(frozen=True)
class SearchCriterion:
    """Column filter a searchable source can evaluate natively.

    A cell passes when, after removing `strip_chars`, optional trimming and
    optional lowercasing, it equals one of `values`.
    """

    column: str
    values: FrozenSet[str]
    ignore_case: bool = False
    trim: bool = False
    strip_chars: str = ""


class TableSource:
    """Interface for one readable table."""

    name: str = ""
    supports_search = False

    def header(self) -> QueryResult[List[str]]:
        raise NotImplementedError

    def rows(self) -> QueryResult[List[SourceRow]]:
        raise NotImplementedError

    def search(self, criteria: Sequence[SearchCriterion]) -> QueryResult[List[SourceRow]]:
        """Rows passing ANY of the criteria. Only for supports_search sources."""
        raise NotImplementedError(f"{type(self).__name__} does not support search")

    def row_count(self) -> QueryResult[Optional[int]]:
        """Number of data rows, or None when the table does not exist."""
        header = self.header()
        if not header.success:
            return QueryResult.failure(header.error, header.error_code)
        if not header.data:
            return QueryResult.ok(None)
        result = self.rows()
        if not result.success:
            return QueryResult.failure(result.error, result.error_code)
        return QueryResult.ok(len(result.data))


# ──────────────── In-memory / CSV ────────────────

class MemoryTableSource(TableSource):
    """A table held as a header plus a list of rows."""

    def __init__(self, name: str, header: Sequence = (), rows: Sequence[Sequence] = ()):
        self.name = name
        self._header = list(header)
        self._rows = [list(r) for r in rows]

    def header(self) -> QueryResult[List[str]]:
        return QueryResult.ok(list(self._header))

    def rows(self) -> QueryResult[List[SourceRow]]:
        if not self._header:
            return QueryResult.ok([])
        return QueryResult.ok(list(enumerate(self._rows)))


class CsvTableSource(MemoryTableSource):
    """A table backed by a CSV export; a missing file reads as an empty table."""

    def __init__(self, path, name: Optional[str] = None):
        self.path = Path(path)
        super().__init__(name or self.path.stem)
        self._loaded = False
        self._failure: Optional[QueryResult] = None

    def _load(self) -> Optional[QueryResult]:
        if self._loaded:
            return self._failure
        self._loaded = True
        if not self.path.exists():
            return None
        try:
            with open(self.path, newline="", encoding="utf-8-sig") as f:
                records = list(csv.reader(f))
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            self._failure = QueryResult.from_exception(exc, "TABLE_READ_FAILED")
            return self._failure
        if records:
            self._header = records[0]
            self._rows = [r for r in records[1:] if any(cell.strip() for cell in r)]
        return None

    def header(self) -> QueryResult[List[str]]:
        failure = self._load()
        if failure is not None:
            return QueryResult.failure(failure.error, failure.error_code)
        return super().header()

    def rows(self) -> QueryResult[List[SourceRow]]:
        failure = self._load()
        if failure is not None:
            return QueryResult.failure(failure.error, failure.error_code)
        return super().rows()


# ──────────────── SQL ────────────────

class SqlTableSource(TableSource):
    """A database table, reflected on first use within the request."""

    supports_search = True

    def __init__(self, db: Session, name: str):
        self.db = db
        self.name = name
        self._table: Optional[Table] = None
        self._reflected = False

    def _reflect(self) -> Optional[Table]:
        if not self._reflected:
            bind = self.db.get_bind()
            if inspect(bind).has_table(self.name):
                self._table = Table(self.name, MetaData(), autoload_with=bind)
            self._reflected = True
        return self._table

    def _select(self, table: Table):
        stmt = select(table)
        if table.primary_key.columns:
            stmt = stmt.order_by(*table.primary_key.columns)
        return stmt

    def header(self) -> QueryResult[List[str]]:
        try:
            table = self._reflect()
        except SQLAlchemyError as exc:
            return QueryResult.from_exception(exc, "TABLE_READ_FAILED")
        if table is None:
            return QueryResult.ok([])
        return QueryResult.ok([col.name for col in table.columns])

    def rows(self) -> QueryResult[List[SourceRow]]:
        try:
            table = self._reflect()
            if table is None:
                return QueryResult.ok([])
            records = self.db.execute(self._select(table)).all()
        except SQLAlchemyError as exc:
            return QueryResult.from_exception(exc, "TABLE_READ_FAILED")
        return QueryResult.ok([(i, tuple(r)) for i, r in enumerate(records)])

    def search(self, criteria: Sequence[SearchCriterion]) -> QueryResult[List[SourceRow]]:
        try:
            table = self._reflect()
            if table is None:
                return QueryResult.ok([])

            clauses = []
            for criterion in criteria:
                if criterion.column not in table.c or not criterion.values:
                    continue
                expr = cast(table.c[criterion.column], String)
                values = set(criterion.values)
                for ch in criterion.strip_chars:
                    expr = func.replace(expr, ch, "")
                    values = {v.replace(ch, "") for v in values}
                if criterion.trim:
                    expr = func.trim(expr)
                    values = {v.strip(" ") for v in values}
                if criterion.ignore_case:
                    for upper, lower in ASCII_CASE_FOLDS:
                        expr = func.replace(expr, upper, lower)
                    expr = func.lower(expr)
                    values = {v.lower() for v in values}
                clauses.append(expr.in_(sorted(values)))

            if not clauses:
                return QueryResult.ok([])
            records = self.db.execute(self._select(table).where(or_(*clauses))).all()
        except SQLAlchemyError as exc:
            return QueryResult.from_exception(exc, "TABLE_READ_FAILED")
        return QueryResult.ok([(i, tuple(r)) for i, r in enumerate(records)])

    def row_count(self) -> QueryResult[Optional[int]]:
        try:
            table = self._reflect()
            if table is None:
                return QueryResult.ok(None)
            count = self.db.execute(select(func.count()).select_from(table)).scalar()
        except SQLAlchemyError as exc:
            return QueryResult.from_exception(exc, "TABLE_READ_FAILED")
        return QueryResult.ok(count or 0)


def source_factory(settings: Settings, db: Optional[Session] = None) -> Callable[[str], TableSource]:
    """Build the table opener for the configured DATA_SOURCE."""
    if settings.DATA_SOURCE == "csv":
        csv_dir = Path(settings.CSV_DIR)
        return lambda name: CsvTableSource(csv_dir / f"{name}.csv", name)
    if settings.DATA_SOURCE == "database":
        if db is None:
            raise ValueError("DATA_SOURCE=database requires a database session")
        return lambda name: SqlTableSource(db, name)
    raise ValueError(f"Unknown DATA_SOURCE '{settings.DATA_SOURCE}' (expected 'database' or 'csv')")
