"""Pydantic schemas for transactions and derived fees."""
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from propledger.services.currency import round_currency


# Transactions
class TransactionBase(BaseModel):
    """Base transaction schema. Charges are positive, payments negative."""
    property_id: Optional[UUID] = None
    tenant_id: Optional[UUID] = None
    owner_id: Optional[UUID] = None
    type_id: UUID
    amount: Decimal
    transaction_date: date
    unit_reference: Optional[str] = None
    invoice_number: Optional[str] = None
    notes: Optional[str] = None
    is_manual_edit: bool = False


class TransactionCreate(TransactionBase):
    """Schema for creating a transaction."""

    @field_validator("amount")
    @classmethod
    def amount_must_be_non_zero(cls, v: Decimal) -> Decimal:
        """Zero-amount transactions are never persisted."""
        v = round_currency(v)
        if v == 0:
            raise ValueError("Transaction amount cannot be zero")
        return v


class TransactionUpdate(BaseModel):
    """Schema for updating a transaction."""
    property_id: Optional[UUID] = None
    tenant_id: Optional[UUID] = None
    owner_id: Optional[UUID] = None
    type_id: Optional[UUID] = None
    amount: Optional[Decimal] = None
    transaction_date: Optional[date] = None
    unit_reference: Optional[str] = None
    invoice_number: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("amount")
    @classmethod
    def amount_must_be_non_zero(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is None:
            return v
        v = round_currency(v)
        if v == 0:
            raise ValueError("Transaction amount cannot be zero")
        return v


class TransactionRecord(TransactionBase):
    """Transaction as returned by the record store."""
    id: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TransactionDetail(TransactionRecord):
    """Transaction joined with type, property and tenant names."""
    type_name: Optional[str] = None
    type_display_name: Optional[str] = None
    type_category: Optional[str] = None
    property_address: Optional[str] = None
    tenant_name: Optional[str] = None


# Fees
class FeeCalculation(BaseModel):
    """Fee amounts derived from one transaction. Never persisted by itself."""
    transaction_id: Optional[UUID] = None
    property_id: Optional[UUID] = None
    transaction_type: Optional[str] = None
    management_fee: Decimal = Decimal("0.00")
    lease_fee: Decimal = Decimal("0.00")

    @property
    def total(self) -> Decimal:
        return self.management_fee + self.lease_fee


class FeeApplicationResult(BaseModel):
    """Result of recording fee transactions for a committed transaction."""
    fees: FeeCalculation
    created: List[TransactionRecord] = []
