"""Status assignment for import candidates."""
import logging
from typing import Optional, Sequence, Tuple

from propledger.schemas.entities import PropertyRecord
from propledger.schemas.imports import CandidateStatus, ImportCandidate, ImportMode

logger = logging.getLogger(__name__)

NO_PROPERTY = "No property match found"
NO_TYPE = "No transaction type identified"
NO_TENANT = "No tenant match found"
NO_OWNER = "Property has no owner assigned"
INVALID_AMOUNT = "Invalid or zero amount"
INVALID_DATE = "Invalid date format"


def _property_for(
    candidate: ImportCandidate, properties: Sequence[PropertyRecord]
) -> Optional[PropertyRecord]:
    if candidate.property_match and candidate.property_match.id == candidate.property_id:
        return candidate.property_match
    return next((p for p in properties if p.id == candidate.property_id), None)


def classify(
    candidate: ImportCandidate,
    mode: ImportMode,
    properties: Sequence[PropertyRecord] = (),
) -> Tuple[CandidateStatus, Optional[str]]:
    """
    Return (status, message) for a candidate.

    Checks run in a fixed order and the first failing one decides: missing
    property or type is an error, everything else is a warning.
    """
    if not candidate.property_id:
        return CandidateStatus.ERROR, NO_PROPERTY

    if not candidate.type_id:
        return CandidateStatus.ERROR, NO_TYPE

    if mode == ImportMode.TENANT and not candidate.tenant_id:
        return CandidateStatus.WARNING, NO_TENANT

    if mode == ImportMode.OWNER:
        prop = _property_for(candidate, properties)
        if not prop or not prop.owner_id:
            return CandidateStatus.WARNING, NO_OWNER

    if not candidate.amount:
        return CandidateStatus.WARNING, INVALID_AMOUNT

    if not candidate.transaction_date:
        return CandidateStatus.WARNING, INVALID_DATE

    return CandidateStatus.VALID, None


def validate_candidate(
    candidate: ImportCandidate,
    mode: ImportMode,
    properties: Sequence[PropertyRecord] = (),
) -> ImportCandidate:
    """Set status and message on the candidate, replacing any previous result."""
    status, message = classify(candidate, mode, properties)
    candidate.status = status
    candidate.message = message

    if status != CandidateStatus.VALID:
        logger.debug(f"Row {candidate.row_number}: {status.value} - {message}")

    return candidate
