"""Tests for owner statements."""
from datetime import date
from decimal import Decimal

import pytest

from propledger.schemas.transactions import TransactionCreate
from propledger.services.owner_statements import (
    build_owner_statement,
    summarize_property,
    total_statements,
)
from propledger.services.record_store import EntityKind

START = date(2024, 2, 1)
END = date(2024, 2, 29)


class TestSummarizeProperty:
    def test_period_figures(self, properties, make_detail):
        transactions = [
            make_detail(1000, date(2024, 1, 1), "Rent Charge"),
            make_detail(-800, date(2024, 1, 10), "Rent Payment"),
            make_detail(1000, date(2024, 2, 1), "Rent Charge"),
            make_detail(-1000, date(2024, 2, 5), "Rent Payment"),
            make_detail(-150, date(2024, 2, 20), "Insurance"),
            make_detail(-500, date(2024, 3, 2), "Rent Payment"),
        ]

        section = summarize_property(properties[0], transactions, START, END)

        assert section.previous_balance == Decimal("200.00")
        assert section.amount_due == Decimal("1200.00")
        assert section.total_received == Decimal("1000.00")
        assert section.balance_remaining == Decimal("200.00")
        assert section.insurance_costs == Decimal("150.00")
        assert section.management_fee == Decimal("100.00")
        assert section.net_to_owner == Decimal("750.00")
        assert [line.type for line in section.transactions] == ["Rent Charge", "Rent Payment", "Insurance"]

    def test_lease_percentage_adds_to_fee_rate(self, properties, make_detail):
        # 8% management + 50% lease on 1500 received
        transactions = [make_detail(-1500, date(2024, 2, 3), "Rent Payment")]
        section = summarize_property(properties[1], transactions, START, END)
        assert section.management_fee == Decimal("870.00")

    def test_empty_period(self, properties):
        section = summarize_property(properties[2], [], START, END)

        assert section.amount_due == Decimal("900.00")
        assert section.total_received == Decimal("0")
        assert section.net_to_owner == Decimal("0")
        assert section.transactions == []

    def test_lines_sorted_by_date(self, properties, make_detail):
        transactions = [
            make_detail(-10, date(2024, 2, 20), "Rent Payment"),
            make_detail(-20, date(2024, 2, 2), "Rent Payment"),
        ]
        section = summarize_property(properties[0], transactions, START, END)
        assert [line.amount for line in section.transactions] == [Decimal("-20"), Decimal("-10")]


class TestTotals:
    def test_sums_each_column(self, properties, make_detail):
        sections = [
            summarize_property(properties[0], [make_detail(-1000, date(2024, 2, 5), "Rent Payment")], START, END),
            summarize_property(properties[2], [], START, END),
        ]
        totals = total_statements(sections)

        assert totals.rent_amount == Decimal("1900.00")
        assert totals.total_received == Decimal("1000.00")
        assert totals.net_to_owner == Decimal("900.00")


class TestBuildOwnerStatement:
    @pytest.mark.asyncio
    async def test_only_owner_properties(self, store, owners, properties, type_by_name):
        await store.insert_many(
            EntityKind.TRANSACTION,
            [
                TransactionCreate(
                    property_id=properties[0].id,
                    type_id=type_by_name["Rent Payment"].id,
                    amount=Decimal("-1000"),
                    transaction_date=date(2024, 2, 3),
                ),
                TransactionCreate(
                    property_id=properties[1].id,
                    type_id=type_by_name["Rent Payment"].id,
                    amount=Decimal("-1500"),
                    transaction_date=date(2024, 2, 3),
                ),
            ],
        )

        statement = await build_owner_statement(store, owners[0].id, START, END)

        assert statement.owner_name == "Alice Owner"
        assert [s.property_address for s in statement.properties] == ["123 Main St"]
        assert statement.totals.total_received == Decimal("1000.00")
        assert statement.totals.net_to_owner == Decimal("900.00")

    @pytest.mark.asyncio
    async def test_end_before_start(self, store, owners):
        with pytest.raises(ValueError):
            await build_owner_statement(store, owners[0].id, END, START)
