"""
Import row matching.

Resolves free-text values from an imported row to existing records using an
ordered chain of heuristics (exact -> keyword -> substring -> positional /
fallback). The first hit wins; there is no scoring. Every function returns
None when nothing matches instead of raising.
"""
import logging
import re
from typing import Any, Dict, Optional, Sequence, Tuple
from uuid import UUID

from propledger.config import settings
from propledger.rules.loader import get_mode_defaults, get_type_keywords
from propledger.schemas.entities import (
    OwnerRecord,
    PropertyRecord,
    TenantRecord,
    TransactionTypeRecord,
)
from propledger.schemas.imports import ColumnMapping, ImportMode

logger = logging.getLogger(__name__)

# "123 Main St, Apt 4" -> ("123", "main st")
STREET_PATTERN = re.compile(r"^\s*(\d+)\s+([^,]+)")


def normalize_text(value: Any) -> str:
    """Lowercase and trim a raw cell value. None becomes ''."""
    if value is None:
        return ""
    return str(value).strip().lower()


def _overlaps(a: str, b: str) -> bool:
    """Substring match in either direction."""
    return a in b or b in a


def _street_parts(address: str) -> Optional[Tuple[str, str]]:
    match = STREET_PATTERN.match(address)
    if not match:
        return None
    return match.group(1), match.group(2).strip()


def match_property(
    text: Any, candidates: Sequence[PropertyRecord]
) -> Optional[PropertyRecord]:
    """
    Resolve a property by address.

    Order: exact address, substring either way, then street number plus
    street name (so "123 Main St" finds "123 Main Street, Apt 101").
    """
    value = normalize_text(text)
    if not value:
        return None

    for prop in candidates:
        if prop.address.lower() == value:
            logger.debug(f"Exact property match: {prop.address}")
            return prop

    for prop in candidates:
        if _overlaps(prop.address.lower(), value):
            logger.debug(f"Partial property match: {prop.address}")
            return prop

    input_parts = _street_parts(value)
    if input_parts:
        number, street = input_parts
        for prop in candidates:
            prop_parts = _street_parts(prop.address.lower())
            if not prop_parts:
                continue
            prop_number, prop_street = prop_parts
            if prop_number == number and _overlaps(prop_street, street):
                logger.debug(f"Street number property match: {prop.address}")
                return prop

    logger.debug(f"No property match for '{value}'")
    return None


def _exact_name_or_email(value: str, candidates: Sequence[Any]) -> Optional[Any]:
    for candidate in candidates:
        if candidate.name.lower() == value:
            return candidate
        if candidate.email and candidate.email.lower() == value:
            return candidate
    return None


def _partial_name(value: str, candidates: Sequence[Any]) -> Optional[Any]:
    for candidate in candidates:
        if _overlaps(candidate.name.lower(), value):
            return candidate
    return None


def match_tenant(
    text: Any,
    candidates: Sequence[TenantRecord],
    property_id: Optional[UUID] = None,
    fallback_to_first_tenant: Optional[bool] = None,
) -> Optional[TenantRecord]:
    """
    Resolve a tenant by name or email, within one property when given.

    When nothing matches and a property is given, the property's first tenant
    is returned if ``fallback_to_first_tenant`` is on (defaults to
    ``settings.TENANT_MATCH_FALLBACK``). A blank value never matches.
    """
    value = normalize_text(text)
    if not value:
        return None

    if fallback_to_first_tenant is None:
        fallback_to_first_tenant = settings.TENANT_MATCH_FALLBACK

    pool = [t for t in candidates if t.property_id == property_id] if property_id else list(candidates)

    exact = _exact_name_or_email(value, pool)
    if exact:
        logger.debug(f"Exact tenant match: {exact.name}")
        return exact

    # Statements usually carry only the surname
    for tenant in pool:
        name_parts = tenant.name.lower().split()
        if not name_parts:
            continue
        if _overlaps(name_parts[-1], value):
            logger.debug(f"Last name tenant match: {tenant.name}")
            return tenant

    partial = _partial_name(value, pool)
    if partial:
        logger.debug(f"Partial tenant match: {partial.name}")
        return partial

    if property_id and pool and fallback_to_first_tenant:
        logger.debug(f"Falling back to first tenant of property: {pool[0].name}")
        return pool[0]

    logger.debug(f"No tenant match for '{value}'")
    return None


def match_owner(
    text: Any,
    candidates: Sequence[OwnerRecord],
    property_id: Optional[UUID] = None,
    properties: Sequence[PropertyRecord] = (),
) -> Optional[OwnerRecord]:
    """
    Resolve an owner by name or email.

    With ``property_id``, only owners of that property (looked up in
    ``properties``) are considered. No fallback.
    """
    value = normalize_text(text)
    if not value:
        return None

    pool = list(candidates)
    if property_id:
        owner_ids = {p.owner_id for p in properties if p.id == property_id and p.owner_id}
        pool = [o for o in pool if o.id in owner_ids]

    exact = _exact_name_or_email(value, pool)
    if exact:
        return exact

    return _partial_name(value, pool)


def _match_keyword(
    value: str, candidate_types: Sequence[TransactionTypeRecord]
) -> Optional[TransactionTypeRecord]:
    """First keyword contained in value whose mapped type exists wins."""
    for keyword, type_name in get_type_keywords():
        if keyword not in value:
            continue
        for txn_type in candidate_types:
            if txn_type.name.lower() == type_name.lower():
                logger.debug(f"Keyword '{keyword}' matched type {txn_type.name}")
                return txn_type
    return None


def match_transaction_type(
    row: Dict[str, Any],
    mappings: ColumnMapping,
    candidate_types: Sequence[TransactionTypeRecord],
    mode: ImportMode,
) -> Optional[TransactionTypeRecord]:
    """
    Resolve the transaction type of a row.

    Precedence: explicit type column (exact name, keyword, substring), then
    description keywords, then notes keywords, then the import mode default.
    Each stage falls through to the next when it finds nothing.
    """
    type_value = normalize_text(mappings.value_for(row, "type"))
    if type_value:
        for txn_type in candidate_types:
            if txn_type.name.lower() == type_value:
                logger.debug(f"Exact type match: {txn_type.name}")
                return txn_type

        keyword_match = _match_keyword(type_value, candidate_types)
        if keyword_match:
            return keyword_match

        for txn_type in candidate_types:
            if _overlaps(txn_type.name.lower(), type_value):
                logger.debug(f"Partial type match: {txn_type.name}")
                return txn_type

    for field in ("description", "notes"):
        field_value = normalize_text(mappings.value_for(row, field))
        if not field_value:
            continue
        keyword_match = _match_keyword(field_value, candidate_types)
        if keyword_match:
            return keyword_match

    defaults = get_mode_defaults(ImportMode(mode).value)
    for txn_type in candidate_types:
        if txn_type.name in defaults:
            logger.debug(f"Using default {mode} type: {txn_type.name}")
            return txn_type

    logger.debug("No transaction type match found")
    return None
