"""
Fee derivation from a property's fee configuration.

Fees are computed, never written by this module. ``build_fee_transactions``
turns a calculation into owner charges that the caller may record.
"""
import logging
from decimal import Decimal
from typing import List, Optional, Sequence

from propledger.schemas.entities import PropertyRecord, TransactionTypeRecord
from propledger.schemas.transactions import (
    FeeCalculation,
    TransactionCreate,
    TransactionRecord,
)
from propledger.services.currency import ZERO, round_currency

logger = logging.getLogger(__name__)

RENT_PAYMENT = "Rent Payment"
NEW_LEASE = "New Lease"
MANAGEMENT_FEE = "Management Fee"
LEASE_FEE = "Lease Fee"


def compute_management_fee(
    amount: Decimal, prop: PropertyRecord, type_name: Optional[str]
) -> Decimal:
    """
    Management fee = amount * mgmt_fee_percentage / 100, rounded half-up.

    Only rent payments with a positive percentage carry a fee. The fee keeps
    the sign of the amount, so a (negative) payment gives a negative fee.
    """
    percentage = prop.mgmt_fee_percentage or ZERO
    if type_name != RENT_PAYMENT or percentage <= 0:
        return ZERO
    return round_currency(Decimal(amount) * percentage / Decimal("100"))


def compute_lease_fee(prop: PropertyRecord, type_name: Optional[str]) -> Decimal:
    """
    Lease fee for a new lease.

    A flat ``lease_fee_amount`` wins; otherwise ``lease_fee_percentage`` of
    the monthly rent is used. Anything that is not positive gives 0.
    """
    if type_name != NEW_LEASE:
        return ZERO

    if prop.lease_fee_amount and prop.lease_fee_amount > 0:
        return round_currency(prop.lease_fee_amount)

    if prop.lease_fee_percentage and prop.lease_fee_percentage > 0:
        fee = round_currency(prop.rent_amount * prop.lease_fee_percentage / Decimal("100"))
        if fee > 0:
            return fee

    return ZERO


def calculate_fees(
    transaction: TransactionRecord, prop: PropertyRecord, type_name: Optional[str]
) -> FeeCalculation:
    """Compute both fees for one transaction without touching it."""
    fees = FeeCalculation(
        transaction_id=transaction.id,
        property_id=prop.id,
        transaction_type=type_name,
        management_fee=compute_management_fee(transaction.amount, prop, type_name),
        lease_fee=compute_lease_fee(prop, type_name),
    )

    if fees.management_fee:
        logger.info(
            f"Management fee calculated: {fees.management_fee} for transaction amount {transaction.amount}"
        )
    if fees.lease_fee:
        logger.info(f"Lease fee calculated: {fees.lease_fee} for new lease")

    return fees


def _type_named(types: Sequence[TransactionTypeRecord], name: str) -> TransactionTypeRecord:
    for txn_type in types:
        if txn_type.name == name:
            return txn_type
    raise LookupError(f"Transaction type '{name}' is not configured")


def build_fee_transactions(
    fees: FeeCalculation,
    transaction: TransactionRecord,
    prop: PropertyRecord,
    types: Sequence[TransactionTypeRecord],
) -> List[TransactionCreate]:
    """
    Turn a fee calculation into owner charges.

    Fee transactions are positive charges against the property owner, dated
    like the source transaction, with no tenant attached.
    """
    payloads: List[TransactionCreate] = []

    for type_name, amount in ((MANAGEMENT_FEE, fees.management_fee), (LEASE_FEE, fees.lease_fee)):
        if not amount:
            continue
        payloads.append(
            TransactionCreate(
                property_id=prop.id,
                owner_id=prop.owner_id,
                type_id=_type_named(types, type_name).id,
                amount=abs(amount),
                transaction_date=transaction.transaction_date,
                notes=f"{type_name} for transaction {transaction.id}",
            )
        )

    return payloads
