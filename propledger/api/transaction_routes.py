"""API routes for single transactions and their fees."""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from propledger.api.routes import get_store
from propledger.schemas.transactions import (
    FeeApplicationResult,
    FeeCalculation,
    TransactionCreate,
    TransactionDetail,
    TransactionRecord,
    TransactionUpdate,
)
from propledger.services import transaction_service
from propledger.services.record_store import RecordNotFoundError, RecordStore

logger = logging.getLogger(__name__)

# Create router
transaction_router = APIRouter(prefix="/api/transactions", tags=["transactions"])


@transaction_router.post("", response_model=TransactionRecord, status_code=201)
async def create_transaction(
    payload: TransactionCreate, store: RecordStore = Depends(get_store)
):
    """Record a transaction and refresh property/tenant balances."""
    try:
        return await transaction_service.create_transaction(store, payload)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@transaction_router.get("/{transaction_id}", response_model=TransactionDetail)
async def get_transaction(transaction_id: UUID, store: RecordStore = Depends(get_store)):
    """Transaction with type, property and tenant names."""
    try:
        return await transaction_service.get_transaction_detail(store, transaction_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Transaction not found")


@transaction_router.patch("/{transaction_id}", response_model=TransactionRecord)
async def update_transaction(
    transaction_id: UUID,
    update: TransactionUpdate,
    store: RecordStore = Depends(get_store),
):
    """Edit a transaction. The edit is flagged as manual."""
    try:
        return await transaction_service.update_transaction(store, transaction_id, update)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@transaction_router.delete("/{transaction_id}")
async def delete_transaction(transaction_id: UUID, store: RecordStore = Depends(get_store)):
    """Delete a transaction and refresh balances."""
    try:
        await transaction_service.delete_transaction(store, transaction_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Transaction not found")

    return {"status": "deleted", "id": str(transaction_id)}


@transaction_router.get("/{transaction_id}/fees", response_model=FeeCalculation)
async def get_transaction_fees(transaction_id: UUID, store: RecordStore = Depends(get_store)):
    """Management and lease fees derived from a transaction."""
    try:
        return await transaction_service.calculate_transaction_fees(store, transaction_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@transaction_router.post("/{transaction_id}/fees/apply", response_model=FeeApplicationResult)
async def apply_transaction_fees(transaction_id: UUID, store: RecordStore = Depends(get_store)):
    """Record the derived fees as owner charges."""
    try:
        return await transaction_service.apply_transaction_fees(store, transaction_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=409, detail=str(e))
