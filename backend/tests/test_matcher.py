import pytest

from conftest import make_order, make_payment, make_refund
from txn_history.config import LookupConfig
from txn_history.services.matcher import (
    IndexedSearchStrategy, LinearScanStrategy, find_matching_by_foreign_key,
    find_matching_payments, select_strategy,
)
from txn_history.services.schema import ORDER_SCHEMA, REFUND_SCHEMA
from txn_history.services.table_source import MemoryTableSource, SqlTableSource
from txn_history.utils.results import QueryResult


def memory_table(name, rows):
    header = list(rows[0].keys()) if rows else list(make_payment().keys())
    return MemoryTableSource(name, header, [[r[h] for h in header] for r in rows])


@pytest.fixture(params=["scan", "indexed"])
def tables(request, db, seed):
    """Build payments/orders/refunds sources backed by memory or SQL."""
    def _tables(payments=(), orders=(), refunds=()):
        if request.param == "scan":
            return (
                memory_table("payments", list(payments)),
                memory_table("orders", list(orders)) if orders else MemoryTableSource("orders", list(make_order())),
                memory_table("refunds", list(refunds)) if refunds else MemoryTableSource("refunds", list(make_refund())),
            )
        seed(payments=payments, orders=orders, refunds=refunds)
        return SqlTableSource(db, "payments"), SqlTableSource(db, "orders"), SqlTableSource(db, "refunds")
    return _tables


def ids(result):
    assert result.success, result.error
    return [row.text("id") for row in result.data]


class TestFindMatchingPayments:
    def test_email_match_is_case_and_whitespace_insensitive(self, tables, config):
        payments, _, _ = tables([make_payment(id="pay_1", email="a@b.com")])
        result = find_matching_payments(payments, "a@b.com", "", config)
        assert ids(result) == ["pay_1"]

    def test_stored_email_with_odd_case(self, tables, config):
        payments, _, _ = tables([make_payment(id="pay_1", email="  A@B.Com ")])
        assert ids(find_matching_payments(payments, "a@b.com", "", config)) == ["pay_1"]

    def test_phone_match_ignores_formatting(self, tables, config):
        payments, _, _ = tables([
            make_payment(id="pay_1", email="x@y.com", contact="+91 (98765) 432-10"),
            make_payment(id="pay_2", email="z@y.com", contact="+919999999999"),
        ])
        assert ids(find_matching_payments(payments, "", "+919876543210", config)) == ["pay_1"]

    def test_email_or_phone(self, tables, config):
        payments, _, _ = tables([
            make_payment(id="pay_1", email="a@b.com", contact="111", created_at="2024-01-01"),
            make_payment(id="pay_2", email="other@b.com", contact="+91 98765 43210", created_at="2024-02-01"),
            make_payment(id="pay_3", email="nobody@b.com", contact="222", created_at="2024-03-01"),
        ])
        result = find_matching_payments(payments, "a@b.com", "+919876543210", config)
        assert ids(result) == ["pay_2", "pay_1"]

    def test_no_substring_matches(self, tables, config):
        payments, _, _ = tables([make_payment(id="pay_1", email="aa@b.com")])
        assert ids(find_matching_payments(payments, "a@b.com", "", config)) == []

    def test_failed_payments_are_excluded(self, tables, config):
        payments, _, _ = tables([
            make_payment(id="pay_1", status="failed"),
            make_payment(id="pay_2", status="FAILED"),
            make_payment(id="pay_3", status="captured"),
        ])
        assert ids(find_matching_payments(payments, "a@b.com", "", config)) == ["pay_3"]

    def test_empty_identity_touches_nothing(self, config):
        class Exploding(MemoryTableSource):
            def header(self):
                raise AssertionError("table accessed")

        assert ids(find_matching_payments(Exploding("payments"), "", "", config)) == []

    def test_capped_at_max_results_newest_first(self, tables, config):
        rows = [
            make_payment(id=f"pay_{i:03d}", created_at=f"2024-01-01T00:{i // 60:02d}:{i % 60:02d}")
            for i in range(60)
        ]
        payments, _, _ = tables(rows)
        result = find_matching_payments(payments, "a@b.com", "", config)
        found = ids(result)
        assert len(found) == 50
        assert found[0] == "pay_059"
        assert found[-1] == "pay_010"

    def test_custom_cap(self, tables):
        payments, _, _ = tables([make_payment(id=f"pay_{i}") for i in range(5)])
        result = find_matching_payments(payments, "a@b.com", "", LookupConfig(max_results=2))
        assert len(ids(result)) == 2


class TestFindMatchingByForeignKey:
    def test_matches_only_known_payment_ids(self, tables, config):
        _, orders, _ = tables(orders=[
            make_order(id="order_1", payment_id="p1"),
            make_order(id="order_3", payment_id="p3"),
        ])
        result = find_matching_by_foreign_key(orders, ORDER_SCHEMA, "payment_id", ["p1", "p2"], config)
        assert ids(result) == ["order_1"]

    def test_case_sensitive_exact(self, tables, config):
        _, _, refunds = tables(refunds=[
            make_refund(id="rfnd_1", payment_id="PAY_1"),
            make_refund(id="rfnd_2", payment_id="pay_1"),
            make_refund(id="rfnd_3", payment_id="pay_10"),
        ])
        result = find_matching_by_foreign_key(refunds, REFUND_SCHEMA, "payment_id", {"pay_1"}, config)
        assert ids(result) == ["rfnd_2"]

    def test_empty_keys_touch_nothing(self, config):
        class Exploding(MemoryTableSource):
            def header(self):
                raise AssertionError("table accessed")

        result = find_matching_by_foreign_key(Exploding("orders"), ORDER_SCHEMA, "payment_id", [], config)
        assert ids(result) == []
        result = find_matching_by_foreign_key(Exploding("orders"), ORDER_SCHEMA, "payment_id", [""], config)
        assert ids(result) == []


class TestEmptyAndMissingTables:
    def test_header_only_table(self, config):
        source = MemoryTableSource("payments", list(make_payment()), [])
        assert ids(find_matching_payments(source, "a@b.com", "", config)) == []

    def test_missing_table(self, config):
        source = MemoryTableSource("payments")
        assert ids(find_matching_payments(source, "a@b.com", "", config)) == []

    def test_missing_sql_table(self, db, config):
        result = find_matching_payments(SqlTableSource(db, "no_such_table"), "a@b.com", "", config)
        assert ids(result) == []

    def test_missing_match_column(self, config):
        source = MemoryTableSource("payments", ["id", "status"], [["pay_1", "captured"]])
        assert ids(find_matching_payments(source, "a@b.com", "", config)) == []

    def test_read_failure_is_returned(self, config):
        class Broken(MemoryTableSource):
            def rows(self):
                return QueryResult.failure("disk on fire", "TABLE_READ_FAILED")

        source = Broken("payments", list(make_payment()), [])
        result = find_matching_payments(source, "a@b.com", "", config)
        assert not result.success
        assert result.error == "disk on fire"


class TestStrategySelection:
    def test_sql_sources_use_indexed_search(self, db):
        assert isinstance(select_strategy(SqlTableSource(db, "payments")), IndexedSearchStrategy)

    def test_memory_sources_use_linear_scan(self):
        assert isinstance(select_strategy(MemoryTableSource("payments")), LinearScanStrategy)

    def test_scan_and_indexed_agree(self, db, seed, config):
        rows = [
            make_payment(id="pay_1", email=" A@B.COM", contact="1", created_at="2024-01-01"),
            make_payment(id="pay_2", email="x@y.com", contact="98765-43210", created_at="2024-03-01"),
            make_payment(id="pay_3", email="a@b.com", status="Failed", created_at="2024-02-01"),
        ]
        seed(payments=rows)
        source = SqlTableSource(db, "payments")
        scan = find_matching_payments(source, "a@b.com", "9876543210", config, strategy=LinearScanStrategy())
        indexed = find_matching_payments(source, "a@b.com", "9876543210", config, strategy=IndexedSearchStrategy())
        assert ids(scan) == ids(indexed) == ["pay_2", "pay_1"]

    @pytest.mark.parametrize("stored, email, phone", [
        ({"email": "a@b.com\t"}, "a@b.com", ""),
        ({"email": " a@b.com\r\n"}, "a@b.com", ""),
        ({"contact": "98765\u00a043210"}, "", "9876543210"),
        ({"contact": "\t(98765) 43210 "}, "", "9876543210"),
        ({"email": "\u212a@b.com"}, "k@b.com", ""),
        ({"email": "\u00c9MILE@B.COM"}, "\u00e9mile@b.com", ""),
    ])
    def test_indexed_search_finds_what_scan_finds(self, db, seed, config, stored, email, phone):
        hit = {"id": "pay_hit", "email": "nobody@x.com", "contact": "0", **stored}
        seed(payments=[
            make_payment(**hit),
            make_payment(id="pay_miss", email="other@x.com", contact="1"),
        ])
        source = SqlTableSource(db, "payments")
        scan = find_matching_payments(source, email, phone, config, strategy=LinearScanStrategy())
        indexed = find_matching_payments(source, email, phone, config, strategy=IndexedSearchStrategy())
        assert ids(scan) == ids(indexed) == ["pay_hit"]
