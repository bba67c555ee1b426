"""Pydantic schemas package."""
from propledger.schemas.entities import (
    OwnerRecord,
    PropertyRecord,
    TenantNoteRecord,
    TenantRecord,
    TransactionTypeRecord,
)
from propledger.schemas.imports import (
    CandidateStatus,
    ColumnMapping,
    ImportCandidate,
    ImportMode,
)
from propledger.schemas.transactions import (
    TransactionCreate,
    TransactionDetail,
    TransactionRecord,
)

__all__ = [
    "OwnerRecord",
    "PropertyRecord",
    "TenantRecord",
    "TenantNoteRecord",
    "TransactionTypeRecord",
    "CandidateStatus",
    "ColumnMapping",
    "ImportCandidate",
    "ImportMode",
    "TransactionCreate",
    "TransactionDetail",
    "TransactionRecord",
]
