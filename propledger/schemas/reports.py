"""Pydantic schemas for ledgers and owner statements."""
from datetime import date
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from propledger.schemas.transactions import TransactionDetail


class LedgerEntry(TransactionDetail):
    """A transaction annotated with the balance after it was applied."""
    running_balance: Decimal


class LedgerResponse(BaseModel):
    """Ledger for a tenant or property."""
    subject_id: UUID
    subject_name: str
    starting_balance: Decimal
    opening_balance: Decimal
    closing_balance: Decimal
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    entries: List[LedgerEntry]

    @property
    def is_credit(self) -> bool:
        return self.closing_balance < 0


class StatementLine(BaseModel):
    """One transaction line on an owner statement."""
    transaction_date: date
    type: Optional[str] = None
    category: Optional[str] = None
    amount: Decimal


class PropertyStatement(BaseModel):
    """Owner statement section for one property."""
    property_id: UUID
    property_address: str
    rent_amount: Decimal
    previous_balance: Decimal
    amount_due: Decimal
    total_received: Decimal
    balance_remaining: Decimal
    insurance_costs: Decimal
    management_fee: Decimal
    net_to_owner: Decimal
    transactions: List[StatementLine] = []


class StatementTotals(BaseModel):
    """Column totals across every property on a statement."""
    rent_amount: Decimal
    previous_balance: Decimal
    amount_due: Decimal
    total_received: Decimal
    balance_remaining: Decimal
    insurance_costs: Decimal
    management_fee: Decimal
    net_to_owner: Decimal


class OwnerStatement(BaseModel):
    """Owner statement for a period."""
    owner_id: UUID
    owner_name: str
    start_date: date
    end_date: date
    properties: List[PropertyStatement]
    totals: StatementTotals
