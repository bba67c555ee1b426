"""Tenant notes. Notes are soft-deleted and never removed from the store."""
import logging
from typing import List
from uuid import UUID

from propledger.schemas.entities import (
    TenantNoteCreate,
    TenantNoteRecord,
    TenantNoteUpdate,
)
from propledger.services.record_store import EntityKind, RecordNotFoundError, RecordStore

logger = logging.getLogger(__name__)


async def list_notes(store: RecordStore, tenant_id: UUID) -> List[TenantNoteRecord]:
    """Visible notes for a tenant, newest first."""
    notes = await store.get_all(EntityKind.TENANT_NOTE, tenant_id=tenant_id, is_deleted=False)
    return sorted(notes, key=lambda n: n.created_at, reverse=True)


async def add_note(
    store: RecordStore, tenant_id: UUID, note: TenantNoteCreate
) -> TenantNoteRecord:
    # Unknown tenants raise RecordNotFoundError
    await store.get_by_id(EntityKind.TENANT, tenant_id)

    created = await store.insert_many(
        EntityKind.TENANT_NOTE,
        [{"tenant_id": tenant_id, "content": note.content, "created_by": note.created_by, "is_deleted": False}],
    )
    logger.info(f"Added note {created[0].id} to tenant {tenant_id}")
    return created[0]


async def _visible_note(store: RecordStore, note_id: UUID) -> TenantNoteRecord:
    note = await store.get_by_id(EntityKind.TENANT_NOTE, note_id)
    if note.is_deleted:
        raise RecordNotFoundError(EntityKind.TENANT_NOTE, note_id)
    return note


async def update_note(
    store: RecordStore, note_id: UUID, update: TenantNoteUpdate
) -> TenantNoteRecord:
    await _visible_note(store, note_id)
    return await store.update(EntityKind.TENANT_NOTE, note_id, {"content": update.content})


async def delete_note(store: RecordStore, note_id: UUID) -> TenantNoteRecord:
    """Hide a note by flagging it deleted."""
    await _visible_note(store, note_id)
    deleted = await store.update(EntityKind.TENANT_NOTE, note_id, {"is_deleted": True})
    logger.info(f"Soft-deleted note {note_id}")
    return deleted
