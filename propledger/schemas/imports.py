"""Pydantic schemas for the CSV import workflow."""
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from propledger.schemas.entities import (
    OwnerRecord,
    PropertyRecord,
    TenantRecord,
    TransactionTypeRecord,
)
from propledger.schemas.transactions import TransactionRecord


# Enums
class ImportMode(str, Enum):
    """Whether imported rows belong to tenants or are charges to owners."""
    TENANT = "tenant"
    OWNER = "owner"


class CandidateStatus(str, Enum):
    """Validation status of an import candidate."""
    VALID = "valid"
    WARNING = "warning"
    ERROR = "error"


class ImportStep(str, Enum):
    """Wizard step of an import session."""
    UPLOAD = "upload"
    MAP = "map"
    PREVIEW = "preview"
    CONFIRM = "confirm"
    COMMITTED = "committed"


# Column mapping
class ColumnMapping(BaseModel):
    """Maps logical import fields to CSV header names. None = unmapped."""
    date: Optional[str] = "Date"
    amount: Optional[str] = "Amount"
    description: Optional[str] = "Description"
    property: Optional[str] = "Property"
    tenant: Optional[str] = "Tenant"
    owner: Optional[str] = "Owner"
    type: Optional[str] = "Type"
    invoice_number: Optional[str] = "Invoice"
    notes: Optional[str] = "Notes"
    category: Optional[str] = "Category"

    def column_for(self, field: str) -> Optional[str]:
        """Return the mapped header for a logical field, treating '' as unmapped."""
        column = getattr(self, field, None)
        return column or None

    def value_for(self, row: Dict[str, Any], field: str) -> Optional[Any]:
        """Return the row's value for a logical field, or None when absent or blank."""
        column = self.column_for(field)
        if not column:
            return None
        value = row.get(column)
        if value is None:
            return None
        if isinstance(value, str) and not value.strip():
            return None
        return value


# Candidates
class ImportCandidate(BaseModel):
    """An imported row with its matches, parsed values and validation status."""
    row_number: int
    original_data: Dict[str, Any] = Field(default_factory=dict)

    property_id: Optional[UUID] = None
    tenant_id: Optional[UUID] = None
    owner_id: Optional[UUID] = None
    type_id: Optional[UUID] = None
    amount: Decimal = Decimal("0.00")
    transaction_date: Optional[date] = None
    invoice_number: Optional[str] = None
    notes: Optional[str] = None
    is_manual_edit: bool = False

    status: CandidateStatus = CandidateStatus.VALID
    message: Optional[str] = None

    property_match: Optional[PropertyRecord] = None
    tenant_match: Optional[TenantRecord] = None
    owner_match: Optional[OwnerRecord] = None
    type_match: Optional[TransactionTypeRecord] = None


class CandidateUpdate(BaseModel):
    """Manual correction of a candidate during preview."""
    property_id: Optional[UUID] = None
    tenant_id: Optional[UUID] = None
    type_id: Optional[UUID] = None
    amount: Optional[Decimal] = None
    transaction_date: Optional[date] = None
    invoice_number: Optional[str] = None
    notes: Optional[str] = None


class ImportCounts(BaseModel):
    """Row counts by status shown before committing."""
    valid: int = 0
    warning: int = 0
    error: int = 0

    @property
    def importable(self) -> int:
        return self.valid + self.warning


class ImportResult(BaseModel):
    """Outcome of a committed import batch."""
    mode: ImportMode
    imported_count: int
    excluded_count: int
    skipped_count: int = 0
    transactions: List[TransactionRecord] = []


# Session responses
class ImportSessionResponse(BaseModel):
    """State of an import session after upload or mapping."""
    session_id: str
    mode: ImportMode
    step: ImportStep
    filename: Optional[str] = None
    headers: List[str]
    mappings: ColumnMapping
    preview_rows: List[Dict[str, Any]] = []
    row_count: int


class ImportPreviewResponse(BaseModel):
    """Matched and validated candidates awaiting confirmation."""
    session_id: str
    mode: ImportMode
    step: ImportStep
    counts: ImportCounts
    candidates: List[ImportCandidate]
