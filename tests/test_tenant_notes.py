"""Tests for tenant notes."""
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from propledger.schemas.entities import TenantNoteCreate, TenantNoteUpdate
from propledger.services.record_store import EntityKind, RecordNotFoundError
from propledger.services.tenant_notes import add_note, delete_note, list_notes, update_note


@pytest.fixture
def note():
    return TenantNoteCreate(content="Called about the broken heater", created_by="manager")


class TestTenantNotes:
    @pytest.mark.asyncio
    async def test_add_and_list(self, store, tenants, note):
        created = await add_note(store, tenants[0].id, note)

        notes = await list_notes(store, tenants[0].id)
        assert [n.id for n in notes] == [created.id]
        assert notes[0].created_by == "manager"
        assert notes[0].is_deleted is False

    @pytest.mark.asyncio
    async def test_newest_first(self, store, tenants):
        now = datetime.now(timezone.utc)
        await store.insert_many(
            EntityKind.TENANT_NOTE,
            [
                {"tenant_id": tenants[0].id, "content": "old", "created_by": "a", "created_at": now - timedelta(days=2)},
                {"tenant_id": tenants[0].id, "content": "new", "created_by": "a", "created_at": now},
                {"tenant_id": tenants[0].id, "content": "mid", "created_by": "a", "created_at": now - timedelta(days=1)},
            ],
        )

        notes = await list_notes(store, tenants[0].id)
        assert [n.content for n in notes] == ["new", "mid", "old"]

    @pytest.mark.asyncio
    async def test_only_that_tenant(self, store, tenants, note):
        await add_note(store, tenants[0].id, note)
        assert await list_notes(store, tenants[1].id) == []

    @pytest.mark.asyncio
    async def test_unknown_tenant(self, store, note):
        with pytest.raises(RecordNotFoundError):
            await add_note(store, uuid4(), note)

    @pytest.mark.asyncio
    async def test_update(self, store, tenants, note):
        created = await add_note(store, tenants[0].id, note)

        updated = await update_note(store, created.id, TenantNoteUpdate(content="Heater fixed"))

        assert updated.content == "Heater fixed"
        assert updated.updated_at is not None

    @pytest.mark.asyncio
    async def test_soft_delete(self, store, tenants, note):
        created = await add_note(store, tenants[0].id, note)

        deleted = await delete_note(store, created.id)

        assert deleted.is_deleted is True
        assert await list_notes(store, tenants[0].id) == []
        # Still stored
        assert (await store.get_by_id(EntityKind.TENANT_NOTE, created.id)).is_deleted is True

    @pytest.mark.asyncio
    async def test_deleted_note_cannot_be_edited(self, store, tenants, note):
        created = await add_note(store, tenants[0].id, note)
        await delete_note(store, created.id)

        with pytest.raises(RecordNotFoundError):
            await update_note(store, created.id, TenantNoteUpdate(content="x"))
        with pytest.raises(RecordNotFoundError):
            await delete_note(store, created.id)
