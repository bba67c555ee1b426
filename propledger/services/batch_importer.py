"""
Batch commit of import candidates.

Error rows are excluded, owner-mode rows get the property's owner attached,
and the rest is written with a single ``insert_many`` call. Fee transactions
are not derived here; see ``fee_engine.build_fee_transactions``.
"""
import logging
from datetime import date
from typing import List, Optional, Sequence, Tuple

from propledger.schemas.entities import PropertyRecord
from propledger.schemas.imports import (
    CandidateStatus,
    ImportCandidate,
    ImportMode,
    ImportResult,
)
from propledger.schemas.transactions import TransactionCreate
from propledger.services.record_store import EntityKind, RecordStore

logger = logging.getLogger(__name__)


def to_transaction(
    candidate: ImportCandidate,
    mode: ImportMode,
    properties: Sequence[PropertyRecord] = (),
    today: Optional[date] = None,
) -> TransactionCreate:
    """
    Strip session-only fields from a candidate, leaving a persistable payload.

    Owner mode attaches the matched property's owner and never carries a
    tenant. A missing date falls back to ``today``.
    """
    owner_id = candidate.owner_id
    tenant_id = candidate.tenant_id

    if mode == ImportMode.OWNER:
        prop = next((p for p in properties if p.id == candidate.property_id), None)
        if prop is None and candidate.property_match and candidate.property_match.id == candidate.property_id:
            prop = candidate.property_match
        owner_id = prop.owner_id if prop else None
        tenant_id = None

    transaction_date = candidate.transaction_date
    if transaction_date is None:
        transaction_date = today or date.today()
        logger.info(f"Row {candidate.row_number}: no valid date, using {transaction_date}")

    return TransactionCreate(
        property_id=candidate.property_id,
        tenant_id=tenant_id,
        owner_id=owner_id,
        type_id=candidate.type_id,
        amount=candidate.amount,
        transaction_date=transaction_date,
        invoice_number=candidate.invoice_number,
        notes=candidate.notes,
        is_manual_edit=candidate.is_manual_edit,
    )


def prepare_batch(
    candidates: Sequence[ImportCandidate],
    mode: ImportMode,
    properties: Sequence[PropertyRecord] = (),
    today: Optional[date] = None,
) -> Tuple[List[TransactionCreate], int, int]:
    """
    Build the payloads to insert.

    Returns (payloads, excluded_count, skipped_count). Error rows are
    excluded; zero-amount rows are skipped since a transaction amount can
    never be zero.
    """
    payloads: List[TransactionCreate] = []
    excluded = 0
    skipped = 0

    for candidate in candidates:
        if candidate.status == CandidateStatus.ERROR:
            excluded += 1
            continue
        if not candidate.amount:
            logger.warning(f"Row {candidate.row_number}: skipping zero amount")
            skipped += 1
            continue
        payloads.append(to_transaction(candidate, mode, properties, today))

    return payloads, excluded, skipped


async def commit_candidates(
    store: RecordStore,
    candidates: Sequence[ImportCandidate],
    mode: ImportMode,
    properties: Sequence[PropertyRecord] = (),
    today: Optional[date] = None,
) -> ImportResult:
    """
    Insert importable candidates as one atomic batch.

    Store errors propagate to the caller unchanged; nothing is partially
    committed.
    """
    mode = ImportMode(mode)
    payloads, excluded, skipped = prepare_batch(candidates, mode, properties, today)

    inserted = []
    if payloads:
        inserted = await store.insert_many(EntityKind.TRANSACTION, payloads)

    logger.info(
        f"Committed {len(inserted)} {mode.value} transactions "
        f"({excluded} excluded, {skipped} skipped)"
    )

    return ImportResult(
        mode=mode,
        imported_count=len(inserted),
        excluded_count=excluded,
        skipped_count=skipped,
        transactions=inserted,
    )
