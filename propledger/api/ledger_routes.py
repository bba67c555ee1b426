"""API routes for ledgers and owner statements."""
import logging
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from propledger.api.routes import get_store
from propledger.schemas.reports import LedgerResponse, OwnerStatement
from propledger.services.ledger import build_property_ledger, build_tenant_ledger
from propledger.services.owner_statements import build_owner_statement
from propledger.services.record_store import RecordNotFoundError, RecordStore

logger = logging.getLogger(__name__)

# Create router
ledger_router = APIRouter(prefix="/api", tags=["ledgers"])


def _check_range(start_date: Optional[date], end_date: Optional[date]) -> None:
    if start_date and end_date and end_date < start_date:
        raise HTTPException(status_code=400, detail="end_date is before start_date")


@ledger_router.get("/tenants/{tenant_id}/ledger", response_model=LedgerResponse)
async def get_tenant_ledger(
    tenant_id: UUID,
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    store: RecordStore = Depends(get_store),
):
    """Tenant ledger limited to tenant-facing transaction types."""
    _check_range(start_date, end_date)
    try:
        return await build_tenant_ledger(store, tenant_id, start_date, end_date)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Tenant not found")


@ledger_router.get("/properties/{property_id}/ledger", response_model=LedgerResponse)
async def get_property_ledger(
    property_id: UUID,
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    store: RecordStore = Depends(get_store),
):
    """Property ledger over all transaction types."""
    _check_range(start_date, end_date)
    try:
        return await build_property_ledger(store, property_id, start_date, end_date)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Property not found")


@ledger_router.get("/owners/{owner_id}/statement", response_model=OwnerStatement)
async def get_owner_statement(
    owner_id: UUID,
    start_date: date = Query(...),
    end_date: date = Query(...),
    store: RecordStore = Depends(get_store),
):
    """Owner statement for a period."""
    _check_range(start_date, end_date)
    try:
        return await build_owner_statement(store, owner_id, start_date, end_date)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Owner not found")
