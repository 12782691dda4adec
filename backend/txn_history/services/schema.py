"""
Table Schemas — Declared column layouts for the payments, orders and refunds tables.

A TableSchema is bound to a table's actual header row once per request. The
resulting BoundSchema maps every declared field to a column position, or to
None when the column is absent, so reads of missing columns fall back to the
field's declared default instead of failing.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

TEXT = "text"
INTEGER = "integer"
AMOUNT = "amount"
CURRENCY = "currency"


@dataclass(frozen=True)
class Column:
    field: str
    kind: str = TEXT
    header: Optional[str] = None     # Defaults to the field name
    required: bool = False

    @property
    def header_name(self) -> str:
        return self.header or self.field


@dataclass(frozen=True)
class TableSchema:
    name: str
    columns: Tuple[Column, ...]

    def column(self, name: str) -> Column:
        for col in self.columns:
            if col.field == name:
                return col
        raise KeyError(f"{self.name} has no declared field '{name}'")

    def bind(self, header: Sequence) -> "BoundSchema":
        """Resolve declared columns against a header row.

        Header cells are compared case-sensitively after trimming surrounding
        whitespace. When a header repeats, the first occurrence wins.
        """
        positions: Dict[str, int] = {}
        for idx, cell in enumerate(header):
            name = "" if cell is None else str(cell).strip()
            if name and name not in positions:
                positions[name] = idx

        indexes = {col.field: positions.get(col.header_name) for col in self.columns}
        return BoundSchema(schema=self, indexes=indexes)


@dataclass(frozen=True)
class BoundSchema:
    schema: TableSchema
    indexes: Dict[str, Optional[int]] = field(default_factory=dict)

    def has(self, name: str) -> bool:
        return self.indexes.get(name) is not None

    def index_of(self, name: str) -> Optional[int]:
        return self.indexes.get(name)

    @property
    def missing(self) -> List[str]:
        return [col.header_name for col in self.schema.columns if self.indexes.get(col.field) is None]

    @property
    def missing_required(self) -> List[str]:
        return [
            col.header_name for col in self.schema.columns
            if col.required and self.indexes.get(col.field) is None
        ]


def cell_text(value) -> str:
    """Render a cell as text without altering it beyond type conversion."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class BoundRow:
    """One table row read through a BoundSchema."""

    __slots__ = ("cells", "bound")

    def __init__(self, cells: Sequence, bound: BoundSchema):
        self.cells = cells
        self.bound = bound

    def value(self, name: str):
        idx = self.bound.index_of(name)
        if idx is None or idx >= len(self.cells):
            return None
        return self.cells[idx]

    def text(self, name: str, default: str = "") -> str:
        value = self.value(name)
        if value is None or value == "":
            return default
        return cell_text(value)

    def __repr__(self) -> str:
        return f"BoundRow({self.bound.schema.name}, {list(self.cells)!r})"


# ──────────────── Razorpay export layouts ────────────────

PAYMENT_SCHEMA = TableSchema(
    name="payments",
    columns=(
        Column("id", required=True),
        Column("amount", AMOUNT),
        Column("currency", CURRENCY),
        Column("status"),
        Column("order_id"),
        Column("method"),
        Column("amount_refunded", AMOUNT),
        Column("refund_status"),
        Column("description"),
        Column("email"),
        Column("contact"),
        Column("error_description"),
        Column("created_at"),
        Column("receipt"),
    ),
)

ORDER_SCHEMA = TableSchema(
    name="orders",
    columns=(
        Column("id", required=True),
        Column("amount", AMOUNT),
        Column("amount_paid", AMOUNT),
        Column("amount_due", AMOUNT),
        Column("currency", CURRENCY),
        Column("receipt"),
        Column("status"),
        Column("attempts", INTEGER),
        Column("created_at"),
        Column("payment_id", required=True),
    ),
)

REFUND_SCHEMA = TableSchema(
    name="refunds",
    columns=(
        Column("id", required=True),
        Column("amount", AMOUNT),
        Column("currency", CURRENCY),
        Column("payment_id", required=True),
        Column("status"),
        Column("created_at"),
        Column("speed_requested"),
        Column("speed_processed"),
        Column("receipt"),
    ),
)
