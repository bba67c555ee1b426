"""
Single-transaction operations and cached balance upkeep.

Every create, update or delete recomputes ``current_balance`` on the
affected properties and tenants from their full transaction history.
"""
import logging
from decimal import Decimal
from typing import Iterable, List, Optional
from uuid import UUID

from propledger.schemas.transactions import (
    FeeApplicationResult,
    FeeCalculation,
    TransactionCreate,
    TransactionDetail,
    TransactionRecord,
    TransactionUpdate,
)
from propledger.services.currency import round_currency, sum_currency
from propledger.services.fee_engine import build_fee_transactions, calculate_fees
from propledger.services.record_store import EntityKind, RecordStore

logger = logging.getLogger(__name__)


async def get_transaction_details(store: RecordStore, **filters) -> List[TransactionDetail]:
    """Load transactions joined with type, property address and tenant name."""
    transactions = await store.get_all(EntityKind.TRANSACTION, **filters)
    if not transactions:
        return []

    types = {t.id: t for t in await store.get_all(EntityKind.TRANSACTION_TYPE)}
    properties = {p.id: p for p in await store.get_all(EntityKind.PROPERTY)}
    tenants = {t.id: t for t in await store.get_all(EntityKind.TENANT)}

    details = []
    for txn in transactions:
        txn_type = types.get(txn.type_id)
        prop = properties.get(txn.property_id)
        tenant = tenants.get(txn.tenant_id)
        details.append(
            TransactionDetail(
                **txn.model_dump(),
                type_name=txn_type.name if txn_type else None,
                type_display_name=txn_type.display_name if txn_type else None,
                type_category=txn_type.category if txn_type else None,
                property_address=prop.address if prop else None,
                tenant_name=tenant.name if tenant else None,
            )
        )
    return details


async def get_transaction_detail(store: RecordStore, transaction_id: UUID) -> TransactionDetail:
    """Load one transaction with its joined names. Raises RecordNotFoundError."""
    txn = await store.get_by_id(EntityKind.TRANSACTION, transaction_id)
    details = await get_transaction_details(store, id=txn.id)
    return details[0]


# Balances

async def recompute_property_balance(store: RecordStore, property_id: UUID) -> Decimal:
    """Property balance is the sum of every transaction on the property."""
    transactions = await store.get_all(EntityKind.TRANSACTION, property_id=property_id)
    balance = sum_currency(t.amount for t in transactions)
    await store.update(EntityKind.PROPERTY, property_id, {"current_balance": balance})
    logger.info(f"Property {property_id} balance recomputed: {balance}")
    return balance


async def recompute_tenant_balance(store: RecordStore, tenant_id: UUID) -> Decimal:
    """Tenant balance is the starting balance plus every transaction on the tenant."""
    tenant = await store.get_by_id(EntityKind.TENANT, tenant_id)
    transactions = await store.get_all(EntityKind.TRANSACTION, tenant_id=tenant_id)
    balance = round_currency(tenant.starting_balance + sum_currency(t.amount for t in transactions))
    await store.update(EntityKind.TENANT, tenant_id, {"current_balance": balance})
    logger.info(f"Tenant {tenant_id} balance recomputed: {balance}")
    return balance


async def recompute_balances(
    store: RecordStore,
    property_ids: Iterable[Optional[UUID]] = (),
    tenant_ids: Iterable[Optional[UUID]] = (),
) -> None:
    """Recompute each distinct non-null property and tenant once."""
    for property_id in {p for p in property_ids if p}:
        await recompute_property_balance(store, property_id)
    for tenant_id in {t for t in tenant_ids if t}:
        await recompute_tenant_balance(store, tenant_id)


async def recompute_for_transactions(
    store: RecordStore, transactions: Iterable[TransactionRecord]
) -> None:
    """Recompute balances touched by a batch of transactions."""
    transactions = list(transactions)
    await recompute_balances(
        store,
        property_ids=[t.property_id for t in transactions],
        tenant_ids=[t.tenant_id for t in transactions],
    )


# CRUD

async def create_transaction(
    store: RecordStore, payload: TransactionCreate
) -> TransactionRecord:
    """Record one transaction and refresh the balances it affects."""
    # Unknown type ids raise RecordNotFoundError before anything is written
    await store.get_by_id(EntityKind.TRANSACTION_TYPE, payload.type_id)

    created = (await store.insert_many(EntityKind.TRANSACTION, [payload]))[0]
    await recompute_for_transactions(store, [created])

    logger.info(f"Created transaction {created.id} ({created.amount})")
    return created


async def update_transaction(
    store: RecordStore, transaction_id: UUID, update: TransactionUpdate
) -> TransactionRecord:
    """
    Apply an edit and flag the transaction as manually edited.

    Balances are recomputed for both the previous and the new
    property/tenant so moving a transaction leaves neither side stale.
    """
    before = await store.get_by_id(EntityKind.TRANSACTION, transaction_id)

    patch = update.model_dump(exclude_unset=True)
    if "type_id" in patch:
        if patch["type_id"] is None:
            raise ValueError("Transaction type cannot be removed")
        await store.get_by_id(EntityKind.TRANSACTION_TYPE, patch["type_id"])
    if "amount" in patch and patch["amount"] is None:
        raise ValueError("Transaction amount cannot be removed")
    if "transaction_date" in patch and patch["transaction_date"] is None:
        raise ValueError("Transaction date cannot be removed")
    patch["is_manual_edit"] = True

    after = await store.update(EntityKind.TRANSACTION, transaction_id, patch)
    await recompute_for_transactions(store, [before, after])

    logger.info(f"Updated transaction {transaction_id}")
    return after


async def delete_transaction(store: RecordStore, transaction_id: UUID) -> None:
    """Delete a transaction and refresh the balances it affected."""
    before = await store.get_by_id(EntityKind.TRANSACTION, transaction_id)
    await store.delete(EntityKind.TRANSACTION, transaction_id)
    await recompute_for_transactions(store, [before])
    logger.info(f"Deleted transaction {transaction_id}")


# Fees

async def calculate_transaction_fees(store: RecordStore, transaction_id: UUID) -> FeeCalculation:
    """Fees a transaction would generate. Nothing is written."""
    txn = await store.get_by_id(EntityKind.TRANSACTION, transaction_id)
    txn_type = await store.get_by_id(EntityKind.TRANSACTION_TYPE, txn.type_id)

    if txn.property_id is None:
        return FeeCalculation(transaction_id=txn.id, transaction_type=txn_type.name)

    prop = await store.get_by_id(EntityKind.PROPERTY, txn.property_id)
    return calculate_fees(txn, prop, txn_type.name)


async def apply_transaction_fees(store: RecordStore, transaction_id: UUID) -> FeeApplicationResult:
    """Record the fee transactions derived from one transaction."""
    fees = await calculate_transaction_fees(store, transaction_id)
    if not (fees.management_fee or fees.lease_fee) or fees.property_id is None:
        return FeeApplicationResult(fees=fees)

    txn = await store.get_by_id(EntityKind.TRANSACTION, transaction_id)
    prop = await store.get_by_id(EntityKind.PROPERTY, fees.property_id)
    types = await store.get_all(EntityKind.TRANSACTION_TYPE)

    payloads = build_fee_transactions(fees, txn, prop, types)
    created = await store.insert_many(EntityKind.TRANSACTION, payloads)
    await recompute_for_transactions(store, created)

    logger.info(f"Recorded {len(created)} fee transactions for {transaction_id}")
    return FeeApplicationResult(fees=fees, created=created)
