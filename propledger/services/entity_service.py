"""
Owners, properties and tenants.

Reference records the importer matches against. Links are checked before
anything is written, and records still referenced elsewhere are never
deleted.
"""
import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from propledger.schemas.entities import (
    OwnerCreate,
    OwnerRecord,
    OwnerUpdate,
    PropertyCreate,
    PropertyRecord,
    PropertyUpdate,
    TenantCreate,
    TenantRecord,
    TenantUpdate,
)
from propledger.services.record_store import EntityKind, RecordStore
from propledger.services.transaction_service import recompute_tenant_balance

logger = logging.getLogger(__name__)


class EntityInUseError(Exception):
    """Raised when deleting a record that other records still reference."""

    def __init__(self, kind: EntityKind, record_id: UUID, referenced_by: str):
        self.kind = kind
        self.record_id = record_id
        self.referenced_by = referenced_by
        super().__init__(f"{kind.value} record {record_id} is still referenced by {referenced_by}")


def _patch(update, required: List[str]) -> Dict[str, Any]:
    """Explicitly set fields of an update; required columns cannot be cleared."""
    patch = update.model_dump(exclude_unset=True)
    for column in required:
        if column in patch and patch[column] is None:
            raise ValueError(f"{column} cannot be removed")
    return patch


async def _ensure_exists(store: RecordStore, kind: EntityKind, record_id: Optional[UUID]) -> None:
    # Unknown ids raise RecordNotFoundError
    if record_id is not None:
        await store.get_by_id(kind, record_id)


async def _ensure_unreferenced(
    store: RecordStore, kind: EntityKind, record_id: UUID, references: Dict[EntityKind, str]
) -> None:
    for referencing_kind, column in references.items():
        if await store.get_all(referencing_kind, **{column: record_id}):
            raise EntityInUseError(kind, record_id, referencing_kind.value)


# =============================================================================
# OWNERS
# =============================================================================

async def list_owners(store: RecordStore) -> List[OwnerRecord]:
    owners = await store.get_all(EntityKind.OWNER)
    return sorted(owners, key=lambda o: o.name.lower())


async def create_owner(store: RecordStore, payload: OwnerCreate) -> OwnerRecord:
    created = (await store.insert_many(EntityKind.OWNER, [payload]))[0]
    logger.info(f"Created owner {created.id} ({created.name})")
    return created


async def update_owner(store: RecordStore, owner_id: UUID, update: OwnerUpdate) -> OwnerRecord:
    patch = _patch(update, ["name"])
    return await store.update(EntityKind.OWNER, owner_id, patch)


async def delete_owner(store: RecordStore, owner_id: UUID) -> None:
    """Delete an owner that no property or transaction points at."""
    await store.get_by_id(EntityKind.OWNER, owner_id)
    await _ensure_unreferenced(
        store,
        EntityKind.OWNER,
        owner_id,
        {EntityKind.PROPERTY: "owner_id", EntityKind.TRANSACTION: "owner_id"},
    )
    await store.delete(EntityKind.OWNER, owner_id)
    logger.info(f"Deleted owner {owner_id}")


# =============================================================================
# PROPERTIES
# =============================================================================

async def list_properties(store: RecordStore, owner_id: Optional[UUID] = None) -> List[PropertyRecord]:
    filters = {"owner_id": owner_id} if owner_id else {}
    properties = await store.get_all(EntityKind.PROPERTY, **filters)
    return sorted(properties, key=lambda p: p.address.lower())


async def create_property(store: RecordStore, payload: PropertyCreate) -> PropertyRecord:
    await _ensure_exists(store, EntityKind.OWNER, payload.owner_id)
    created = (await store.insert_many(EntityKind.PROPERTY, [payload]))[0]
    logger.info(f"Created property {created.id} ({created.address})")
    return created


async def update_property(
    store: RecordStore, property_id: UUID, update: PropertyUpdate
) -> PropertyRecord:
    """Edit a property. Reassigning the owner does not touch past transactions."""
    patch = _patch(
        update,
        ["address", "rent_amount", "late_fee_amount", "mgmt_fee_percentage", "has_insurance"],
    )
    await store.get_by_id(EntityKind.PROPERTY, property_id)
    if "owner_id" in patch:
        await _ensure_exists(store, EntityKind.OWNER, patch["owner_id"])
    return await store.update(EntityKind.PROPERTY, property_id, patch)


async def delete_property(store: RecordStore, property_id: UUID) -> None:
    await store.get_by_id(EntityKind.PROPERTY, property_id)
    await _ensure_unreferenced(
        store,
        EntityKind.PROPERTY,
        property_id,
        {EntityKind.TENANT: "property_id", EntityKind.TRANSACTION: "property_id"},
    )
    await store.delete(EntityKind.PROPERTY, property_id)
    logger.info(f"Deleted property {property_id}")


# =============================================================================
# TENANTS
# =============================================================================

async def list_tenants(store: RecordStore, property_id: Optional[UUID] = None) -> List[TenantRecord]:
    filters = {"property_id": property_id} if property_id else {}
    tenants = await store.get_all(EntityKind.TENANT, **filters)
    return sorted(tenants, key=lambda t: t.name.lower())


async def create_tenant(store: RecordStore, payload: TenantCreate) -> TenantRecord:
    """Add a tenant; the cached balance starts at the starting balance."""
    await _ensure_exists(store, EntityKind.PROPERTY, payload.property_id)
    created = (await store.insert_many(EntityKind.TENANT, [payload]))[0]
    await recompute_tenant_balance(store, created.id)
    logger.info(f"Created tenant {created.id} ({created.name})")
    return await store.get_by_id(EntityKind.TENANT, created.id)


async def update_tenant(store: RecordStore, tenant_id: UUID, update: TenantUpdate) -> TenantRecord:
    """Edit a tenant. A new starting balance refreshes the cached balance."""
    patch = _patch(update, ["name", "rent_amount", "security_deposit", "starting_balance"])
    await store.get_by_id(EntityKind.TENANT, tenant_id)
    if "property_id" in patch:
        await _ensure_exists(store, EntityKind.PROPERTY, patch["property_id"])

    updated = await store.update(EntityKind.TENANT, tenant_id, patch)
    if "starting_balance" in patch:
        await recompute_tenant_balance(store, tenant_id)
        updated = await store.get_by_id(EntityKind.TENANT, tenant_id)
    return updated


async def delete_tenant(store: RecordStore, tenant_id: UUID) -> None:
    await store.get_by_id(EntityKind.TENANT, tenant_id)
    await _ensure_unreferenced(
        store,
        EntityKind.TENANT,
        tenant_id,
        {EntityKind.TRANSACTION: "tenant_id", EntityKind.TENANT_NOTE: "tenant_id"},
    )
    await store.delete(EntityKind.TENANT, tenant_id)
    logger.info(f"Deleted tenant {tenant_id}")
