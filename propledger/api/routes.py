"""Shared API dependencies and tenant note routes."""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from propledger.database import get_db
from propledger.schemas.entities import (
    TenantNoteCreate,
    TenantNoteRecord,
    TenantNoteUpdate,
)
from propledger.services import tenant_notes
from propledger.services.record_store import RecordNotFoundError, RecordStore, SqlRecordStore

logger = logging.getLogger(__name__)

# Create router
api_router = APIRouter(prefix="/api", tags=["notes"])


async def get_store(db: AsyncSession = Depends(get_db)) -> RecordStore:
    """FastAPI dependency returning the SQL-backed record store."""
    return SqlRecordStore(db)


@api_router.get("/tenants/{tenant_id}/notes", response_model=List[TenantNoteRecord])
async def list_tenant_notes(tenant_id: UUID, store: RecordStore = Depends(get_store)):
    """List a tenant's notes, newest first."""
    return await tenant_notes.list_notes(store, tenant_id)


@api_router.post("/tenants/{tenant_id}/notes", response_model=TenantNoteRecord, status_code=201)
async def add_tenant_note(
    tenant_id: UUID,
    note: TenantNoteCreate,
    store: RecordStore = Depends(get_store),
):
    """Add a note to a tenant."""
    try:
        return await tenant_notes.add_note(store, tenant_id, note)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Tenant not found")


@api_router.patch("/notes/{note_id}", response_model=TenantNoteRecord)
async def update_tenant_note(
    note_id: UUID,
    update: TenantNoteUpdate,
    store: RecordStore = Depends(get_store),
):
    """Edit a note's content."""
    try:
        return await tenant_notes.update_note(store, note_id, update)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Note not found")


@api_router.delete("/notes/{note_id}")
async def delete_tenant_note(note_id: UUID, store: RecordStore = Depends(get_store)):
    """Soft-delete a note."""
    try:
        await tenant_notes.delete_note(store, note_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Note not found")

    return {"status": "deleted", "id": str(note_id)}
