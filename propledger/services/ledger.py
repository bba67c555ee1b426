"""
Running-balance ledgers for tenants and properties.

``compute_ledger`` is a pure fold: filter by type, stable-sort by date, then
accumulate from the starting balance. Nothing is cached; ledgers are rebuilt
from the transaction history on every read.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence
from uuid import UUID

from propledger.config import settings
from propledger.schemas.reports import LedgerEntry, LedgerResponse
from propledger.schemas.transactions import TransactionDetail
from propledger.services.currency import round_currency
from propledger.services.record_store import EntityKind, RecordStore
from propledger.services.transaction_service import get_transaction_details

logger = logging.getLogger(__name__)


def _type_label(transaction: TransactionDetail) -> Optional[str]:
    return transaction.type_display_name or transaction.type_name


def filter_by_type(
    transactions: Iterable[TransactionDetail], allowed_types: Optional[Iterable[str]]
) -> List[TransactionDetail]:
    """Keep transactions whose type display name is allowed. None allows all."""
    if allowed_types is None:
        return list(transactions)
    allowed = set(allowed_types)
    return [t for t in transactions if _type_label(t) in allowed]


def opening_balance(
    starting_balance: Decimal,
    transactions: Sequence[TransactionDetail],
    allowed_types: Optional[Iterable[str]] = None,
    start_date: Optional[date] = None,
) -> Decimal:
    """Starting balance plus every allowed transaction dated before start_date."""
    balance = round_currency(starting_balance)
    if start_date is None:
        return balance
    for txn in filter_by_type(transactions, allowed_types):
        if txn.transaction_date < start_date:
            balance = round_currency(balance + txn.amount)
    return balance


def compute_ledger(
    starting_balance: Decimal,
    transactions: Sequence[TransactionDetail],
    allowed_types: Optional[Iterable[str]] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[LedgerEntry]:
    """
    Build a running-balance ledger.

    Args:
        starting_balance: Balance before any transaction
        transactions: Transactions in stored order
        allowed_types: Type display names to include (None = all)
        start_date: Transactions before this date roll into the opening balance
        end_date: Transactions after this date are left out

    Returns:
        Entries in ascending date order (ties keep their original relative
        order), each carrying the balance after it was applied
    """
    filtered = filter_by_type(transactions, allowed_types)
    ordered = sorted(filtered, key=lambda t: t.transaction_date)

    balance = opening_balance(starting_balance, filtered, None, start_date)
    entries: List[LedgerEntry] = []

    for txn in ordered:
        if start_date and txn.transaction_date < start_date:
            continue
        if end_date and txn.transaction_date > end_date:
            continue
        balance = round_currency(balance + txn.amount)
        entries.append(LedgerEntry(**txn.model_dump(), running_balance=balance))

    return entries


def closing_balance(opening: Decimal, entries: Sequence[LedgerEntry]) -> Decimal:
    """Balance after the last entry, or the opening balance if there is none."""
    if entries:
        return entries[-1].running_balance
    return opening


async def build_tenant_ledger(
    store: RecordStore,
    tenant_id: UUID,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    allowed_types: Optional[Iterable[str]] = None,
) -> LedgerResponse:
    """
    Tenant-facing ledger from the tenant's starting balance.

    Only the configured tenant ledger types are shown, so management and
    lease fees never affect what the tenant owes.
    """
    tenant = await store.get_by_id(EntityKind.TENANT, tenant_id)
    if allowed_types is None:
        allowed_types = settings.TENANT_LEDGER_TYPES

    transactions = await get_transaction_details(store, tenant_id=tenant_id)
    opening = opening_balance(tenant.starting_balance, transactions, allowed_types, start_date)
    entries = compute_ledger(
        tenant.starting_balance, transactions, allowed_types, start_date, end_date
    )

    logger.debug(f"Tenant {tenant_id} ledger: {len(entries)} entries")
    return LedgerResponse(
        subject_id=tenant.id,
        subject_name=tenant.name,
        starting_balance=round_currency(tenant.starting_balance),
        opening_balance=opening,
        closing_balance=closing_balance(opening, entries),
        start_date=start_date,
        end_date=end_date,
        entries=entries,
    )


async def build_property_ledger(
    store: RecordStore,
    property_id: UUID,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> LedgerResponse:
    """Property ledger over every transaction type, starting from zero."""
    prop = await store.get_by_id(EntityKind.PROPERTY, property_id)
    transactions = await get_transaction_details(store, property_id=property_id)
    opening = opening_balance(Decimal("0"), transactions, None, start_date)
    entries = compute_ledger(Decimal("0"), transactions, None, start_date, end_date)

    return LedgerResponse(
        subject_id=prop.id,
        subject_name=prop.address,
        starting_balance=Decimal("0.00"),
        opening_balance=opening,
        closing_balance=closing_balance(opening, entries),
        start_date=start_date,
        end_date=end_date,
        entries=entries,
    )
