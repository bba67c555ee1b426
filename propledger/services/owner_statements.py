"""Owner statements: per-property money in and out for a period."""
import logging
from datetime import date
from decimal import Decimal
from typing import List, Sequence
from uuid import UUID

from propledger.schemas.entities import PropertyRecord
from propledger.schemas.reports import (
    OwnerStatement,
    PropertyStatement,
    StatementLine,
    StatementTotals,
)
from propledger.schemas.transactions import TransactionDetail
from propledger.services.currency import round_currency, sum_currency
from propledger.services.record_store import EntityKind, RecordStore
from propledger.services.transaction_service import get_transaction_details

logger = logging.getLogger(__name__)

PAYMENT_CATEGORY = "Payment"
INSURANCE_TYPE = "Insurance"


def summarize_property(
    prop: PropertyRecord,
    transactions: Sequence[TransactionDetail],
    start_date: date,
    end_date: date,
) -> PropertyStatement:
    """
    Build one property's statement section.

    - previous balance: every transaction dated before the period
    - total received: absolute Payment-category amounts in the period
    - management fee: received * (mgmt% + lease%) / 100
    - net to owner: received - insurance - management fee
    """
    previous = [t for t in transactions if t.transaction_date < start_date]
    period = sorted(
        (t for t in transactions if start_date <= t.transaction_date <= end_date),
        key=lambda t: t.transaction_date,
    )

    previous_balance = sum_currency(t.amount for t in previous)
    total_received = sum_currency(abs(t.amount) for t in period if t.type_category == PAYMENT_CATEGORY)
    insurance_costs = sum_currency(
        abs(t.amount)
        for t in period
        if (t.type_display_name or t.type_name) == INSURANCE_TYPE
    )

    fee_percentage = (prop.mgmt_fee_percentage or Decimal("0")) + (prop.lease_fee_percentage or Decimal("0"))
    management_fee = round_currency(total_received * fee_percentage / Decimal("100"))

    amount_due = round_currency(prop.rent_amount + previous_balance)

    return PropertyStatement(
        property_id=prop.id,
        property_address=prop.address,
        rent_amount=round_currency(prop.rent_amount),
        previous_balance=previous_balance,
        amount_due=amount_due,
        total_received=total_received,
        balance_remaining=round_currency(amount_due - total_received),
        insurance_costs=insurance_costs,
        management_fee=management_fee,
        net_to_owner=round_currency(total_received - insurance_costs - management_fee),
        transactions=[
            StatementLine(
                transaction_date=t.transaction_date,
                type=t.type_display_name or t.type_name,
                category=t.type_category,
                amount=t.amount,
            )
            for t in period
        ],
    )


def total_statements(sections: Sequence[PropertyStatement]) -> StatementTotals:
    """Column totals across property sections."""
    columns = StatementTotals.model_fields.keys()
    return StatementTotals(
        **{column: sum_currency(getattr(s, column) for s in sections) for column in columns}
    )


async def build_owner_statement(
    store: RecordStore, owner_id: UUID, start_date: date, end_date: date
) -> OwnerStatement:
    """Statement for every property the owner holds, sorted by address."""
    if end_date < start_date:
        raise ValueError("Statement end date is before start date")

    owner = await store.get_by_id(EntityKind.OWNER, owner_id)
    properties = await store.get_all(EntityKind.PROPERTY, owner_id=owner_id)

    sections: List[PropertyStatement] = []
    for prop in sorted(properties, key=lambda p: p.address):
        transactions = await get_transaction_details(store, property_id=prop.id)
        sections.append(summarize_property(prop, transactions, start_date, end_date))

    logger.info(f"Owner statement for {owner.name}: {len(sections)} properties")
    return OwnerStatement(
        owner_id=owner.id,
        owner_name=owner.name,
        start_date=start_date,
        end_date=end_date,
        properties=sections,
        totals=total_statements(sections),
    )
