"""Parse raw import cells into amounts, dates and pass-through references."""
import logging
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from propledger.schemas.imports import ColumnMapping
from propledger.services.currency import ZERO, round_currency, to_decimal

logger = logging.getLogger(__name__)

# Formats tried after ISO 8601
DATE_FORMATS = [
    "%Y/%m/%d",      # 2024/01/15
    "%m/%d/%Y",      # 01/15/2024
    "%b %d, %Y",     # Jan 15, 2024
    "%B %d, %Y",     # January 15, 2024
    "%d %b %Y",      # 15 Jan 2024
]

DATE_SEPARATORS = re.compile(r"[/\-]")


def parse_amount(raw: Any) -> Decimal:
    """
    Parse a currency cell.

    ``$`` ``,`` and parentheses are stripped. The value is negative when it
    contains a minus sign or an opening parenthesis (accounting format).
    Unparseable or missing values give 0.00, which the validator flags.
    """
    if raw is None:
        return ZERO
    if isinstance(raw, (int, float, Decimal)):
        try:
            amount = to_decimal(raw)
            return round_currency(amount) if amount.is_finite() else ZERO
        except InvalidOperation:
            logger.debug(f"Amount out of range '{raw}'")
            return ZERO

    original = str(raw)
    cleaned = re.sub(r"[$,()\s]", "", original)
    negative = "-" in cleaned or "(" in original
    cleaned = cleaned.replace("-", "")

    if not cleaned:
        return ZERO

    try:
        amount = Decimal(cleaned)
        if not amount.is_finite():
            return ZERO
        amount = round_currency(amount)
    except InvalidOperation:
        logger.debug(f"Unparseable amount '{original}'")
        return ZERO

    return -amount if negative else amount


def _build_date(year: str, month: str, day: str) -> Optional[date]:
    try:
        year_num = int(year)
        if len(year.strip()) <= 2:
            year_num += 2000
        return date(year_num, int(month), int(day))
    except (ValueError, OverflowError):
        return None


def parse_date(raw: Any) -> Optional[date]:
    """
    Parse a date cell.

    Accepts date/datetime values, ISO strings and the common formats in
    DATE_FORMATS. As a last resort the value is split on ``/`` or ``-`` and
    read as month-day-year, then day-month-year. Returns None when nothing fits.
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw

    value = str(raw).strip()
    if not value:
        return None

    try:
        return date.fromisoformat(value)
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue

    parts = DATE_SEPARATORS.split(value)
    if len(parts) == 3:
        first, second, year = (p.strip() for p in parts)
        parsed = _build_date(year, first, second) or _build_date(year, second, first)
        if parsed:
            return parsed

    logger.debug(f"Unparseable date '{value}'")
    return None


def _passthrough(row: Dict[str, Any], mappings: ColumnMapping, field: str) -> Optional[Any]:
    column = mappings.column_for(field)
    if not column:
        return None
    return row.get(column)


def normalize_row(row: Dict[str, Any], mappings: ColumnMapping) -> Dict[str, Any]:
    """
    Extract typed values from one raw row.

    Returns a dict with ``amount`` (Decimal, 0.00 when missing/invalid),
    ``transaction_date`` (date or None), and the raw ``invoice_number`` and
    ``notes`` values (None when the column is unmapped).
    """
    return {
        "amount": parse_amount(mappings.value_for(row, "amount")),
        "transaction_date": parse_date(mappings.value_for(row, "date")),
        "invoice_number": _passthrough(row, mappings, "invoice_number"),
        "notes": _passthrough(row, mappings, "notes"),
    }
