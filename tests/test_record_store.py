"""Tests for the record store implementations."""
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from pydantic import ValidationError

from propledger.schemas.transactions import TransactionCreate
from propledger.services.record_store import (
    EntityKind,
    InMemoryRecordStore,
    RecordNotFoundError,
    SqlRecordStore,
)


@pytest.fixture
def payment(type_by_name):
    return TransactionCreate(
        type_id=type_by_name["Rent Payment"].id,
        amount=Decimal("-10"),
        transaction_date=date(2024, 1, 1),
    )


class TestInMemoryRecordStore:
    @pytest.mark.asyncio
    async def test_insert_assigns_id_and_created_at(self, payment):
        store = InMemoryRecordStore()
        created = (await store.insert_many(EntityKind.TRANSACTION, [payment]))[0]

        assert created.id is not None
        assert created.created_at is not None
        assert await store.get_by_id(EntityKind.TRANSACTION, created.id) == created

    @pytest.mark.asyncio
    async def test_filters(self, store, tenants, properties):
        result = await store.get_all(EntityKind.TENANT, property_id=properties[1].id)
        assert [t.name for t in result] == ["Jane Doe", "Mary Major"]

    @pytest.mark.asyncio
    async def test_returns_copies(self, store, owners):
        record = await store.get_by_id(EntityKind.OWNER, owners[0].id)
        record.name = "Changed"
        assert (await store.get_by_id(EntityKind.OWNER, owners[0].id)).name == "Alice Owner"

    @pytest.mark.asyncio
    async def test_bad_record_inserts_nothing(self, payment):
        store = InMemoryRecordStore()
        with pytest.raises(ValidationError):
            await store.insert_many(EntityKind.TRANSACTION, [payment, {"amount": "5"}])
        assert await store.get_all(EntityKind.TRANSACTION) == []

    @pytest.mark.asyncio
    async def test_update_sets_updated_at(self, store, owners):
        updated = await store.update(EntityKind.OWNER, owners[0].id, {"phone": "555-0100"})
        assert updated.phone == "555-0100"
        assert updated.updated_at is not None

    @pytest.mark.asyncio
    async def test_missing_records(self, store):
        missing = uuid4()
        with pytest.raises(RecordNotFoundError) as exc_info:
            await store.get_by_id(EntityKind.TENANT, missing)
        assert exc_info.value.record_id == missing

        with pytest.raises(RecordNotFoundError):
            await store.update(EntityKind.TENANT, missing, {})
        with pytest.raises(RecordNotFoundError):
            await store.delete(EntityKind.TENANT, missing)

    @pytest.mark.asyncio
    async def test_delete(self, store, owners):
        await store.delete(EntityKind.OWNER, owners[1].id)
        assert [o.name for o in await store.get_all(EntityKind.OWNER)] == ["Alice Owner"]


class TestSqlRecordStore:
    """Commit failures roll back and propagate unchanged."""

    @pytest.mark.asyncio
    async def test_insert_rolls_back_on_commit_failure(self, payment):
        failure = RuntimeError("connection lost")
        db = MagicMock()
        db.commit = AsyncMock(side_effect=failure)
        db.rollback = AsyncMock()
        db.refresh = AsyncMock()

        with pytest.raises(RuntimeError) as exc_info:
            await SqlRecordStore(db).insert_many(EntityKind.TRANSACTION, [payment])

        assert exc_info.value is failure
        db.add_all.assert_called_once()
        db.rollback.assert_awaited_once()
        db.refresh.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self):
        db = MagicMock()
        db.get = AsyncMock(return_value=None)

        with pytest.raises(RecordNotFoundError):
            await SqlRecordStore(db).get_by_id(EntityKind.PROPERTY, uuid4())

    @pytest.mark.asyncio
    async def test_delete_missing_does_not_commit(self):
        db = MagicMock()
        db.get = AsyncMock(return_value=None)
        db.commit = AsyncMock()

        with pytest.raises(RecordNotFoundError):
            await SqlRecordStore(db).delete(EntityKind.TRANSACTION, uuid4())
        db.commit.assert_not_awaited()
