"""Tests for amount/date parsing and row normalization."""
from datetime import date, datetime
from decimal import Decimal

import pytest

from propledger.schemas.imports import ColumnMapping
from propledger.services.row_normalizer import normalize_row, parse_amount, parse_date


class TestParseAmount:
    """Accounting-style amounts."""

    def test_parenthesized_dollars_are_negative(self):
        assert parse_amount("$(1,200.50)") == Decimal("-1200.50")

    def test_plain_positive(self):
        assert parse_amount("1200.50") == Decimal("1200.50")

    def test_minus_sign(self):
        assert parse_amount("-75") == Decimal("-75.00")
        assert parse_amount("$-1,000.00") == Decimal("-1000.00")

    def test_parentheses_without_dollar(self):
        assert parse_amount("(75.00)") == Decimal("-75.00")

    def test_garbage_is_zero(self):
        assert parse_amount("abc") == Decimal("0")

    @pytest.mark.parametrize("raw", [None, "", "   ", "$", "()"])
    def test_empty_values_are_zero(self, raw):
        assert parse_amount(raw) == Decimal("0")

    def test_rounds_half_up(self):
        assert parse_amount("10.005") == Decimal("10.01")
        assert parse_amount("(10.005)") == Decimal("-10.01")

    def test_numeric_input(self):
        assert parse_amount(12.5) == Decimal("12.50")
        assert parse_amount(Decimal("-3")) == Decimal("-3.00")

    @pytest.mark.parametrize("raw", ["1e30", "(1e30)", Decimal("1e30"), float("inf"), "NaN"])
    def test_out_of_range_is_zero(self, raw):
        assert parse_amount(raw) == Decimal("0")

    def test_small_float(self):
        assert parse_amount(0.00001) == Decimal("0.00")


class TestParseDate:
    def test_iso(self):
        assert parse_date("2024-01-15") == date(2024, 1, 15)

    def test_date_and_datetime_pass_through(self):
        assert parse_date(date(2024, 2, 1)) == date(2024, 2, 1)
        assert parse_date(datetime(2024, 2, 1, 13, 30)) == date(2024, 2, 1)

    def test_us_slash_format(self):
        assert parse_date("01/15/2024") == date(2024, 1, 15)

    def test_day_first_falls_back_to_year_day_month(self):
        assert parse_date("15/01/2024") == date(2024, 1, 15)

    def test_dashes_month_first(self):
        assert parse_date("03-04-2024") == date(2024, 3, 4)

    def test_two_digit_year(self):
        assert parse_date("1/5/24") == date(2024, 1, 5)

    def test_month_name(self):
        assert parse_date("Jan 15, 2024") == date(2024, 1, 15)

    @pytest.mark.parametrize("raw", [None, "", "not a date", "32/32/2024", "13/2024", "01/15/99999999999999999999"])
    def test_invalid_is_none(self, raw):
        assert parse_date(raw) is None


class TestNormalizeRow:
    def test_extracts_mapped_fields(self):
        row = {
            "Date": "2024-03-01",
            "Amount": "$1,000.00",
            "Invoice": "INV-7",
            "Notes": "March rent",
        }
        result = normalize_row(row, ColumnMapping())

        assert result == {
            "amount": Decimal("1000.00"),
            "transaction_date": date(2024, 3, 1),
            "invoice_number": "INV-7",
            "notes": "March rent",
        }

    def test_unmapped_references_are_omitted(self):
        row = {"Date": "2024-03-01", "Amount": "5", "Invoice": "INV-7"}
        mappings = ColumnMapping(invoice_number=None, notes=None)
        result = normalize_row(row, mappings)

        assert result["invoice_number"] is None
        assert result["notes"] is None

    def test_missing_amount_and_date(self):
        result = normalize_row({}, ColumnMapping())
        assert result["amount"] == Decimal("0")
        assert result["transaction_date"] is None

    def test_custom_column_names(self):
        row = {"Posted": "2024-05-02", "Value": "(20.00)"}
        mappings = ColumnMapping(date="Posted", amount="Value")
        result = normalize_row(row, mappings)

        assert result["amount"] == Decimal("-20.00")
        assert result["transaction_date"] == date(2024, 5, 2)
