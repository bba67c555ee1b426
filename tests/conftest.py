"""Shared fixtures: reference data and an in-memory record store."""
from datetime import date
from decimal import Decimal
from typing import List
from uuid import uuid4

import pytest

from propledger.schemas.entities import (
    OwnerRecord,
    PropertyRecord,
    TenantRecord,
    TransactionTypeRecord,
)
from propledger.schemas.transactions import TransactionDetail
from propledger.services.record_store import EntityKind, InMemoryRecordStore
from propledger.services.seed_data import DEFAULT_TRANSACTION_TYPES


# =============================================================================
# REFERENCE DATA
# =============================================================================

@pytest.fixture
def owners() -> List[OwnerRecord]:
    return [
        OwnerRecord(id=uuid4(), name="Alice Owner", email="alice@example.com"),
        OwnerRecord(id=uuid4(), name="Bob Landlord", email="bob@example.com"),
    ]


@pytest.fixture
def properties(owners) -> List[PropertyRecord]:
    return [
        PropertyRecord(
            id=uuid4(),
            address="123 Main St",
            city="Springfield",
            owner_id=owners[0].id,
            rent_amount=Decimal("1000.00"),
            late_fee_amount=Decimal("50.00"),
            mgmt_fee_percentage=Decimal("10"),
            lease_fee_amount=Decimal("250.00"),
        ),
        PropertyRecord(
            id=uuid4(),
            address="456 Oak Avenue, Unit 2",
            owner_id=owners[1].id,
            rent_amount=Decimal("1500.00"),
            mgmt_fee_percentage=Decimal("8"),
            lease_fee_percentage=Decimal("50"),
        ),
        PropertyRecord(
            id=uuid4(),
            address="789 Pine Blvd",
            owner_id=None,
            rent_amount=Decimal("900.00"),
        ),
    ]


@pytest.fixture
def tenants(properties) -> List[TenantRecord]:
    return [
        TenantRecord(
            id=uuid4(),
            name="John Smith",
            email="john@example.com",
            property_id=properties[0].id,
            rent_amount=Decimal("1000.00"),
        ),
        TenantRecord(
            id=uuid4(),
            name="Jane Doe",
            email="jane@example.com",
            property_id=properties[1].id,
            rent_amount=Decimal("1500.00"),
            starting_balance=Decimal("200.00"),
        ),
        TenantRecord(
            id=uuid4(),
            name="Mary Major",
            property_id=properties[1].id,
        ),
    ]


@pytest.fixture
def transaction_types() -> List[TransactionTypeRecord]:
    return [TransactionTypeRecord(id=uuid4(), **t) for t in DEFAULT_TRANSACTION_TYPES]


@pytest.fixture
def type_by_name(transaction_types):
    return {t.name: t for t in transaction_types}


@pytest.fixture
async def store(owners, properties, tenants, transaction_types) -> InMemoryRecordStore:
    """In-memory store loaded with the reference data above."""
    store = InMemoryRecordStore()
    await store.insert_many(EntityKind.OWNER, owners)
    await store.insert_many(EntityKind.PROPERTY, properties)
    await store.insert_many(EntityKind.TENANT, tenants)
    await store.insert_many(EntityKind.TRANSACTION_TYPE, transaction_types)
    return store


# =============================================================================
# HELPERS
# =============================================================================

def _make_detail(amount, on: date, type_name: str, **kwargs) -> TransactionDetail:
    """Build a joined transaction for pure ledger/statement tests."""
    category = kwargs.pop("type_category", None)
    if category is None:
        category = next(
            (t["category"] for t in DEFAULT_TRANSACTION_TYPES if t["name"] == type_name),
            "Charge",
        )
    return TransactionDetail(
        id=kwargs.pop("id", uuid4()),
        type_id=kwargs.pop("type_id", uuid4()),
        amount=Decimal(str(amount)),
        transaction_date=on,
        type_name=type_name,
        type_display_name=kwargs.pop("type_display_name", type_name),
        type_category=category,
        **kwargs,
    )


@pytest.fixture
def make_detail():
    return _make_detail
