"""Record store adapter: CRUD and filtered reads over the entity collections.

Two implementations share one interface:

- ``SqlRecordStore`` wraps an ``AsyncSession`` and is what the API uses.
- ``InMemoryRecordStore`` keeps records in dictionaries; it backs the test suite
  and scripted imports that run without a database.

Both return pydantic record schemas, never ORM instances, so the pure
matching/ledger code only ever sees plain attribute objects.
"""
import copy
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Sequence, Type, Union
from uuid import UUID, uuid4

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from propledger.models.db_models import (
    Owner,
    Property,
    Tenant,
    TenantNote,
    Transaction,
    TransactionType,
)
from propledger.schemas.entities import (
    OwnerRecord,
    PropertyRecord,
    TenantNoteRecord,
    TenantRecord,
    TransactionTypeRecord,
)
from propledger.schemas.transactions import TransactionRecord

logger = logging.getLogger(__name__)

RecordInput = Union[BaseModel, Mapping[str, Any]]


class EntityKind(str, Enum):
    """Entity collections exposed by the store."""
    OWNER = "owners"
    PROPERTY = "properties"
    TENANT = "tenants"
    TRANSACTION_TYPE = "transaction_types"
    TRANSACTION = "transactions"
    TENANT_NOTE = "tenant_notes"


RECORD_SCHEMAS: Dict[EntityKind, Type[BaseModel]] = {
    EntityKind.OWNER: OwnerRecord,
    EntityKind.PROPERTY: PropertyRecord,
    EntityKind.TENANT: TenantRecord,
    EntityKind.TRANSACTION_TYPE: TransactionTypeRecord,
    EntityKind.TRANSACTION: TransactionRecord,
    EntityKind.TENANT_NOTE: TenantNoteRecord,
}

ORM_MODELS: Dict[EntityKind, Any] = {
    EntityKind.OWNER: Owner,
    EntityKind.PROPERTY: Property,
    EntityKind.TENANT: Tenant,
    EntityKind.TRANSACTION_TYPE: TransactionType,
    EntityKind.TRANSACTION: Transaction,
    EntityKind.TENANT_NOTE: TenantNote,
}


class RecordNotFoundError(LookupError):
    """Raised when a record id does not exist in a collection."""

    def __init__(self, kind: EntityKind, record_id: UUID):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind.value} record {record_id} not found")


def _payload(record: RecordInput) -> Dict[str, Any]:
    """Turn a schema or mapping into a plain dict of column values."""
    if isinstance(record, BaseModel):
        return record.model_dump(exclude_unset=False)
    return dict(record)


class RecordStore(ABC):
    """Interface consumed by the import, ledger and transaction services."""

    @abstractmethod
    async def get_all(self, kind: EntityKind, **filters: Any) -> List[BaseModel]:
        """Return every record of a kind, optionally filtered by column equality."""

    @abstractmethod
    async def get_by_id(self, kind: EntityKind, record_id: UUID) -> BaseModel:
        """Return one record or raise RecordNotFoundError."""

    @abstractmethod
    async def insert_many(
        self, kind: EntityKind, records: Sequence[RecordInput]
    ) -> List[BaseModel]:
        """Insert all records or none of them."""

    @abstractmethod
    async def update(
        self, kind: EntityKind, record_id: UUID, patch: Mapping[str, Any]
    ) -> BaseModel:
        """Apply a partial update and return the updated record."""

    @abstractmethod
    async def delete(self, kind: EntityKind, record_id: UUID) -> None:
        """Delete a record. Callers recompute affected balances afterwards."""


class SqlRecordStore(RecordStore):
    """Record store backed by SQLAlchemy's async session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(self, kind: EntityKind, **filters: Any) -> List[BaseModel]:
        model = ORM_MODELS[kind]
        schema = RECORD_SCHEMAS[kind]

        query = select(model)
        for column, value in filters.items():
            query = query.where(getattr(model, column) == value)
        if hasattr(model, "created_at"):
            query = query.order_by(model.created_at)

        result = await self.db.execute(query)
        return [schema.model_validate(row) for row in result.scalars().all()]

    async def get_by_id(self, kind: EntityKind, record_id: UUID) -> BaseModel:
        instance = await self.db.get(ORM_MODELS[kind], record_id)
        if instance is None:
            raise RecordNotFoundError(kind, record_id)
        return RECORD_SCHEMAS[kind].model_validate(instance)

    async def insert_many(
        self, kind: EntityKind, records: Sequence[RecordInput]
    ) -> List[BaseModel]:
        model = ORM_MODELS[kind]
        schema = RECORD_SCHEMAS[kind]
        instances = []
        for record in records:
            data = _payload(record)
            # Let column defaults fill generated values
            for generated in ("id", "created_at"):
                if data.get(generated) is None:
                    data.pop(generated, None)
            instances.append(model(**data))

        try:
            self.db.add_all(instances)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        for instance in instances:
            await self.db.refresh(instance)

        logger.info(f"Inserted {len(instances)} {kind.value} records")
        return [schema.model_validate(instance) for instance in instances]

    async def update(
        self, kind: EntityKind, record_id: UUID, patch: Mapping[str, Any]
    ) -> BaseModel:
        instance = await self.db.get(ORM_MODELS[kind], record_id)
        if instance is None:
            raise RecordNotFoundError(kind, record_id)

        for column, value in patch.items():
            setattr(instance, column, value)

        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(instance)
        return RECORD_SCHEMAS[kind].model_validate(instance)

    async def delete(self, kind: EntityKind, record_id: UUID) -> None:
        instance = await self.db.get(ORM_MODELS[kind], record_id)
        if instance is None:
            raise RecordNotFoundError(kind, record_id)

        try:
            await self.db.delete(instance)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise


class InMemoryRecordStore(RecordStore):
    """Dictionary-backed record store preserving insertion order."""

    def __init__(self):
        self._collections: Dict[EntityKind, Dict[UUID, BaseModel]] = {
            kind: {} for kind in EntityKind
        }

    def _build(self, kind: EntityKind, record: RecordInput) -> BaseModel:
        data = _payload(record)
        if data.get("id") is None:
            data["id"] = uuid4()
        if "created_at" in RECORD_SCHEMAS[kind].model_fields and data.get("created_at") is None:
            data["created_at"] = datetime.now().astimezone()
        return RECORD_SCHEMAS[kind].model_validate(data)

    async def get_all(self, kind: EntityKind, **filters: Any) -> List[BaseModel]:
        records = self._collections[kind].values()
        return [
            record.model_copy()
            for record in records
            if all(getattr(record, column) == value for column, value in filters.items())
        ]

    async def get_by_id(self, kind: EntityKind, record_id: UUID) -> BaseModel:
        record = self._collections[kind].get(record_id)
        if record is None:
            raise RecordNotFoundError(kind, record_id)
        return record.model_copy()

    async def insert_many(
        self, kind: EntityKind, records: Sequence[RecordInput]
    ) -> List[BaseModel]:
        # Build everything first so a bad record leaves the collection untouched
        built = [self._build(kind, record) for record in records]
        for record in built:
            self._collections[kind][record.id] = record
        return [record.model_copy() for record in built]

    async def update(
        self, kind: EntityKind, record_id: UUID, patch: Mapping[str, Any]
    ) -> BaseModel:
        current = self._collections[kind].get(record_id)
        if current is None:
            raise RecordNotFoundError(kind, record_id)

        data = current.model_dump()
        data.update(copy.deepcopy(dict(patch)))
        if "updated_at" in RECORD_SCHEMAS[kind].model_fields:
            data["updated_at"] = datetime.now().astimezone()
        updated = RECORD_SCHEMAS[kind].model_validate(data)
        self._collections[kind][record_id] = updated
        return updated.model_copy()

    async def delete(self, kind: EntityKind, record_id: UUID) -> None:
        if record_id not in self._collections[kind]:
            raise RecordNotFoundError(kind, record_id)
        del self._collections[kind][record_id]
