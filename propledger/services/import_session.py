"""
CSV import wizard.

An ``ImportSession`` holds one upload through the steps
upload -> map -> preview -> confirm -> committed. Reference data (properties,
tenants, owners, types) is snapshotted from the store when the session is
created, so matching and re-validation are pure over that snapshot.

Sessions live in a process-local registry keyed by session id, one user per
session.
"""
import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

from propledger.config import settings
from propledger.schemas.entities import (
    OwnerRecord,
    PropertyRecord,
    TenantRecord,
    TransactionTypeRecord,
)
from propledger.schemas.imports import (
    CandidateStatus,
    CandidateUpdate,
    ColumnMapping,
    ImportCandidate,
    ImportCounts,
    ImportMode,
    ImportPreviewResponse,
    ImportResult,
    ImportSessionResponse,
    ImportStep,
)
from propledger.services.batch_importer import commit_candidates
from propledger.services.csv_parser import ParsedCSV
from propledger.services.currency import round_currency
from propledger.services.import_validator import validate_candidate
from propledger.services.matcher import (
    match_owner,
    match_property,
    match_tenant,
    match_transaction_type,
)
from propledger.services.record_store import EntityKind, RecordStore
from propledger.services.row_normalizer import normalize_row

logger = logging.getLogger(__name__)


class ImportSessionError(Exception):
    """Raised when the wizard is driven out of order or with bad input."""


# Downloadable examples of the expected layout per mode
TEMPLATES: Dict[ImportMode, str] = {
    ImportMode.TENANT: (
        "date,tenant,property,amount,type,notes\n"
        "2025-01-15,John Smith,123 Main St,1200.00,Rent Payment,January rent\n"
        "2025-01-20,Jane Doe,456 Oak Ave,50.00,Late Fee,Late payment fee\n"
        '2025-01-22,Michael Johnson,789 Pine Blvd,-850.00,Rent Payment,"Partial payment, balance due"\n'
        "2025-01-25,Sarah Williams,101 Elm St,1500.00,Security Deposit,Initial security deposit\n"
    ),
    ImportMode.OWNER: (
        "date,property,amount,type,notes\n"
        "2025-01-15,123 Main St,120.00,Management Fee,Monthly management fee\n"
        "2025-01-15,456 Oak Ave,250.00,Maintenance,Plumbing repair\n"
        '2025-01-20,789 Pine Blvd,150.00,Maintenance,"Landscaping, includes fertilization"\n'
        "2025-01-25,101 Elm St,1200.00,Owner Draw,Monthly distribution\n"
    ),
}


def get_template(mode: ImportMode) -> str:
    """Return example CSV text for an import mode."""
    return TEMPLATES[ImportMode(mode)]


def guess_mappings(headers: Sequence[str]) -> ColumnMapping:
    """
    Map logical fields to headers whose name matches the default,
    ignoring case. Fields without a matching header are left unmapped.
    """
    by_lower = {h.strip().lower(): h for h in headers}
    guessed = {}
    for name, default_column in ColumnMapping().model_dump().items():
        guessed[name] = by_lower.get((default_column or "").lower())
    return ColumnMapping(**guessed)


@dataclass
class ReferenceData:
    """Snapshot of the records rows are matched against."""
    properties: List[PropertyRecord] = field(default_factory=list)
    tenants: List[TenantRecord] = field(default_factory=list)
    owners: List[OwnerRecord] = field(default_factory=list)
    transaction_types: List[TransactionTypeRecord] = field(default_factory=list)

    @classmethod
    async def load(cls, store: RecordStore) -> "ReferenceData":
        return cls(
            properties=await store.get_all(EntityKind.PROPERTY),
            tenants=await store.get_all(EntityKind.TENANT),
            owners=await store.get_all(EntityKind.OWNER),
            transaction_types=await store.get_all(EntityKind.TRANSACTION_TYPE),
        )

    def find(self, collection: str, record_id: Any) -> Optional[Any]:
        return next((r for r in getattr(self, collection) if r.id == record_id), None)


class ImportSession:
    """State of one CSV import, from upload to commit."""

    def __init__(
        self,
        mode: ImportMode,
        parsed: ParsedCSV,
        reference: ReferenceData,
        filename: Optional[str] = None,
        session_id: Optional[str] = None,
        tenant_fallback: Optional[bool] = None,
    ):
        self.session_id = session_id or str(uuid.uuid4())
        self.created_at = datetime.now().astimezone()
        self.mode = ImportMode(mode)
        self.parsed = parsed
        self.reference = reference
        self.filename = filename
        self.tenant_fallback = (
            settings.TENANT_MATCH_FALLBACK if tenant_fallback is None else tenant_fallback
        )

        self.mappings = guess_mappings(parsed.headers)
        self.candidates: List[ImportCandidate] = []
        self.result: Optional[ImportResult] = None
        self.step = ImportStep.MAP if parsed.rows else ImportStep.UPLOAD

    # Mapping step

    def set_mappings(self, mappings: ColumnMapping) -> None:
        """Replace the column mapping. Any processed candidates are discarded."""
        self._require_not_committed()

        unknown = [
            column
            for name, column in mappings.model_dump().items()
            if name in mappings.model_fields_set and column and column not in self.parsed.headers
        ]
        if unknown:
            raise ImportSessionError(f"Mapped columns not in file: {', '.join(unknown)}")

        self.mappings = mappings
        self.candidates = []
        self.step = ImportStep.MAP

    # Preview step

    def build_candidate(self, row_number: int, row: Dict[str, Any]) -> ImportCandidate:
        """Match and normalize one row, then validate it."""
        ref = self.reference
        mappings = self.mappings

        property_match = match_property(mappings.value_for(row, "property"), ref.properties)
        property_id = property_match.id if property_match else None

        tenant_match = None
        owner_match = None
        if self.mode == ImportMode.TENANT:
            tenant_match = match_tenant(
                mappings.value_for(row, "tenant"),
                ref.tenants,
                property_id,
                fallback_to_first_tenant=self.tenant_fallback,
            )
        else:
            owner_match = match_owner(
                mappings.value_for(row, "owner"), ref.owners, property_id, ref.properties
            )

        type_match = match_transaction_type(row, mappings, ref.transaction_types, self.mode)

        candidate = ImportCandidate(
            row_number=row_number,
            original_data=dict(row),
            property_id=property_id,
            tenant_id=tenant_match.id if tenant_match else None,
            owner_id=owner_match.id if owner_match else None,
            type_id=type_match.id if type_match else None,
            property_match=property_match,
            tenant_match=tenant_match,
            owner_match=owner_match,
            type_match=type_match,
            **normalize_row(row, mappings),
        )
        return validate_candidate(candidate, self.mode, ref.properties)

    def process(self) -> List[ImportCandidate]:
        """Build candidates for every row and move to preview."""
        self._require_not_committed()
        if not self.parsed.rows:
            raise ImportSessionError("File has no data rows to import")

        self.candidates = [
            self.build_candidate(index + 1, row)
            for index, row in enumerate(self.parsed.rows)
        ]
        self.step = ImportStep.PREVIEW

        counts = self.counts()
        logger.info(
            f"Import {self.session_id}: {counts.valid} valid, "
            f"{counts.warning} warning, {counts.error} error"
        )
        return self.candidates

    def update_candidate(self, index: int, update: CandidateUpdate) -> ImportCandidate:
        """Apply a manual correction and re-validate the candidate."""
        self._require_step(ImportStep.PREVIEW, ImportStep.CONFIRM)
        if index < 0 or index >= len(self.candidates):
            raise ImportSessionError(f"No candidate at index {index}")

        candidate = self.candidates[index]
        patch = update.model_dump(exclude_unset=True)

        if "property_id" in patch:
            candidate.property_match = self._lookup("properties", patch["property_id"])
        if "tenant_id" in patch:
            candidate.tenant_match = self._lookup("tenants", patch["tenant_id"])
        if "type_id" in patch:
            candidate.type_match = self._lookup("transaction_types", patch["type_id"])
        if patch.get("amount") is not None:
            patch["amount"] = round_currency(patch["amount"])

        for key, value in patch.items():
            setattr(candidate, key, value)
        candidate.is_manual_edit = True

        self.step = ImportStep.PREVIEW
        return validate_candidate(candidate, self.mode, self.reference.properties)

    def _lookup(self, collection: str, record_id: Any) -> Optional[Any]:
        if record_id is None:
            return None
        record = self.reference.find(collection, record_id)
        if record is None:
            raise ImportSessionError(f"Unknown {collection} id {record_id}")
        return record

    # Confirm / commit

    def counts(self) -> ImportCounts:
        counts = ImportCounts()
        for candidate in self.candidates:
            if candidate.status == CandidateStatus.VALID:
                counts.valid += 1
            elif candidate.status == CandidateStatus.WARNING:
                counts.warning += 1
            else:
                counts.error += 1
        return counts

    def confirm(self) -> ImportCounts:
        """Move to the confirm step and return the counts shown to the user."""
        self._require_step(ImportStep.PREVIEW, ImportStep.CONFIRM)
        self.step = ImportStep.CONFIRM
        return self.counts()

    async def commit(self, store: RecordStore, today: Optional[date] = None) -> ImportResult:
        """Write importable candidates in one batch. Store errors propagate."""
        self._require_step(ImportStep.PREVIEW, ImportStep.CONFIRM)
        if not self.counts().importable:
            raise ImportSessionError("No valid transactions to import")

        self.result = await commit_candidates(
            store, self.candidates, self.mode, self.reference.properties, today
        )
        self.step = ImportStep.COMMITTED
        return self.result

    # Responses

    def to_response(self) -> ImportSessionResponse:
        return ImportSessionResponse(
            session_id=self.session_id,
            mode=self.mode,
            step=self.step,
            filename=self.filename,
            headers=self.parsed.headers,
            mappings=self.mappings,
            preview_rows=self.parsed.preview(),
            row_count=self.parsed.row_count,
        )

    def to_preview(self) -> ImportPreviewResponse:
        return ImportPreviewResponse(
            session_id=self.session_id,
            mode=self.mode,
            step=self.step,
            counts=self.counts(),
            candidates=self.candidates,
        )

    def _require_step(self, *steps: ImportStep) -> None:
        if self.step not in steps:
            raise ImportSessionError(
                f"Import is at step '{self.step.value}', expected one of "
                f"{', '.join(s.value for s in steps)}"
            )

    def _require_not_committed(self) -> None:
        if self.step == ImportStep.COMMITTED:
            raise ImportSessionError("Import has already been committed")


# Global registry of active import sessions
_active_sessions: Dict[str, ImportSession] = {}


def prune_sessions(now: Optional[datetime] = None) -> int:
    """Drop sessions older than IMPORT_SESSION_TTL_MINUTES. Returns how many were dropped."""
    now = now or datetime.now().astimezone()
    cutoff = now - timedelta(minutes=settings.IMPORT_SESSION_TTL_MINUTES)
    stale = [sid for sid, s in _active_sessions.items() if s.created_at < cutoff]
    for session_id in stale:
        del _active_sessions[session_id]
    if stale:
        logger.info(f"Discarded {len(stale)} abandoned import sessions")
    return len(stale)


def create_session(
    mode: ImportMode,
    parsed: ParsedCSV,
    reference: ReferenceData,
    filename: Optional[str] = None,
) -> ImportSession:
    """Create and register a new import session, discarding stale ones."""
    prune_sessions()
    session = ImportSession(mode, parsed, reference, filename=filename)
    _active_sessions[session.session_id] = session
    logger.info(f"Created {session.mode.value} import {session.session_id} ({parsed.row_count} rows)")
    return session


def get_session(session_id: str) -> Optional[ImportSession]:
    """Get an existing import session."""
    return _active_sessions.get(session_id)


def remove_session(session_id: str):
    """Remove an import session from the registry."""
    if session_id in _active_sessions:
        del _active_sessions[session_id]
