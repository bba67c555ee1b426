"""API routes for owners, properties and tenants."""
import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from propledger.api.routes import get_store
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
from propledger.services import entity_service
from propledger.services.entity_service import EntityInUseError
from propledger.services.record_store import EntityKind, RecordNotFoundError, RecordStore

logger = logging.getLogger(__name__)

# Create router
entity_router = APIRouter(prefix="/api", tags=["entities"])


# =============================================================================
# OWNERS
# =============================================================================

@entity_router.get("/owners", response_model=List[OwnerRecord])
async def list_owners(store: RecordStore = Depends(get_store)):
    """List owners by name."""
    return await entity_service.list_owners(store)


@entity_router.post("/owners", response_model=OwnerRecord, status_code=201)
async def create_owner(payload: OwnerCreate, store: RecordStore = Depends(get_store)):
    """Add an owner."""
    return await entity_service.create_owner(store, payload)


@entity_router.get("/owners/{owner_id}", response_model=OwnerRecord)
async def get_owner(owner_id: UUID, store: RecordStore = Depends(get_store)):
    try:
        return await store.get_by_id(EntityKind.OWNER, owner_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Owner not found")


@entity_router.patch("/owners/{owner_id}", response_model=OwnerRecord)
async def update_owner(owner_id: UUID, update: OwnerUpdate, store: RecordStore = Depends(get_store)):
    """Edit an owner's name or contact details."""
    try:
        return await entity_service.update_owner(store, owner_id, update)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Owner not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@entity_router.delete("/owners/{owner_id}")
async def delete_owner(owner_id: UUID, store: RecordStore = Depends(get_store)):
    """Delete an owner with no properties or transactions."""
    try:
        await entity_service.delete_owner(store, owner_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Owner not found")
    except EntityInUseError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return {"status": "deleted", "id": str(owner_id)}


# =============================================================================
# PROPERTIES
# =============================================================================

@entity_router.get("/properties", response_model=List[PropertyRecord])
async def list_properties(
    owner_id: Optional[UUID] = Query(None),
    store: RecordStore = Depends(get_store),
):
    """List properties by address, optionally for one owner."""
    return await entity_service.list_properties(store, owner_id)


@entity_router.post("/properties", response_model=PropertyRecord, status_code=201)
async def create_property(payload: PropertyCreate, store: RecordStore = Depends(get_store)):
    """Add a property with its fee configuration."""
    try:
        return await entity_service.create_property(store, payload)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@entity_router.get("/properties/{property_id}", response_model=PropertyRecord)
async def get_property(property_id: UUID, store: RecordStore = Depends(get_store)):
    try:
        return await store.get_by_id(EntityKind.PROPERTY, property_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Property not found")


@entity_router.patch("/properties/{property_id}", response_model=PropertyRecord)
async def update_property(
    property_id: UUID,
    update: PropertyUpdate,
    store: RecordStore = Depends(get_store),
):
    """Edit a property, including its owner and fees."""
    try:
        return await entity_service.update_property(store, property_id, update)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@entity_router.delete("/properties/{property_id}")
async def delete_property(property_id: UUID, store: RecordStore = Depends(get_store)):
    """Delete a property with no tenants or transactions."""
    try:
        await entity_service.delete_property(store, property_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Property not found")
    except EntityInUseError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return {"status": "deleted", "id": str(property_id)}


# =============================================================================
# TENANTS
# =============================================================================

@entity_router.get("/tenants", response_model=List[TenantRecord])
async def list_tenants(
    property_id: Optional[UUID] = Query(None),
    store: RecordStore = Depends(get_store),
):
    """List tenants by name, optionally for one property."""
    return await entity_service.list_tenants(store, property_id)


@entity_router.post("/tenants", response_model=TenantRecord, status_code=201)
async def create_tenant(payload: TenantCreate, store: RecordStore = Depends(get_store)):
    """Add a tenant."""
    try:
        return await entity_service.create_tenant(store, payload)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@entity_router.get("/tenants/{tenant_id}", response_model=TenantRecord)
async def get_tenant(tenant_id: UUID, store: RecordStore = Depends(get_store)):
    try:
        return await store.get_by_id(EntityKind.TENANT, tenant_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Tenant not found")


@entity_router.patch("/tenants/{tenant_id}", response_model=TenantRecord)
async def update_tenant(tenant_id: UUID, update: TenantUpdate, store: RecordStore = Depends(get_store)):
    """Edit a tenant. Changing the starting balance refreshes the current balance."""
    try:
        return await entity_service.update_tenant(store, tenant_id, update)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@entity_router.delete("/tenants/{tenant_id}")
async def delete_tenant(tenant_id: UUID, store: RecordStore = Depends(get_store)):
    """Delete a tenant with no transactions or notes."""
    try:
        await entity_service.delete_tenant(store, tenant_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Tenant not found")
    except EntityInUseError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return {"status": "deleted", "id": str(tenant_id)}
