"""Pydantic schemas for owners, properties, tenants, transaction types and notes."""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# Owners
class OwnerBase(BaseModel):
    """Base owner schema."""
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None


class OwnerCreate(OwnerBase):
    """Schema for creating an owner."""
    pass


class OwnerUpdate(BaseModel):
    """Schema for updating an owner."""
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None


class OwnerRecord(OwnerBase):
    """Owner as returned by the record store."""
    id: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# Properties
class PropertyBase(BaseModel):
    """Base property schema including fee configuration."""
    address: str
    city: Optional[str] = None
    zip: Optional[str] = None
    owner_id: Optional[UUID] = None
    rent_amount: Decimal = Field(default=Decimal("0"), ge=0)
    late_fee_amount: Decimal = Field(default=Decimal("0"), ge=0)
    mgmt_fee_percentage: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    lease_fee_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100)
    lease_fee_amount: Optional[Decimal] = Field(default=None, ge=0)
    has_insurance: bool = False
    notes: Optional[str] = None


class PropertyCreate(PropertyBase):
    """Schema for creating a property."""
    pass


class PropertyUpdate(BaseModel):
    """Schema for updating a property. Percentages stay within 0-100."""
    address: Optional[str] = Field(default=None, min_length=1)
    city: Optional[str] = None
    zip: Optional[str] = None
    owner_id: Optional[UUID] = None
    rent_amount: Optional[Decimal] = Field(default=None, ge=0)
    late_fee_amount: Optional[Decimal] = Field(default=None, ge=0)
    mgmt_fee_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100)
    lease_fee_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100)
    lease_fee_amount: Optional[Decimal] = Field(default=None, ge=0)
    has_insurance: Optional[bool] = None
    notes: Optional[str] = None


class PropertyRecord(PropertyBase):
    """Property as returned by the record store."""
    id: UUID
    current_balance: Decimal = Decimal("0")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# Tenants
class TenantBase(BaseModel):
    """Base tenant schema."""
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    property_id: Optional[UUID] = None
    rent_amount: Decimal = Field(default=Decimal("0"), ge=0)
    security_deposit: Decimal = Field(default=Decimal("0"), ge=0)
    starting_balance: Decimal = Decimal("0")
    lease_start: Optional[date] = None
    lease_end: Optional[date] = None
    move_in_date: Optional[date] = None
    move_out_date: Optional[date] = None


class TenantCreate(TenantBase):
    """Schema for creating a tenant."""
    pass


class TenantUpdate(BaseModel):
    """Schema for updating a tenant."""
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    property_id: Optional[UUID] = None
    rent_amount: Optional[Decimal] = Field(default=None, ge=0)
    security_deposit: Optional[Decimal] = Field(default=None, ge=0)
    starting_balance: Optional[Decimal] = None
    lease_start: Optional[date] = None
    lease_end: Optional[date] = None
    move_in_date: Optional[date] = None
    move_out_date: Optional[date] = None


class TenantRecord(TenantBase):
    """Tenant as returned by the record store."""
    id: UUID
    current_balance: Decimal = Decimal("0")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_vacant(self) -> bool:
        """A tenant without a property link is vacant."""
        return self.property_id is None


# Transaction types
class TransactionTypeRecord(BaseModel):
    """Transaction type reference data."""
    id: UUID
    name: str
    category: str
    display_name: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# Tenant notes
class TenantNoteCreate(BaseModel):
    """Schema for adding a note to a tenant."""
    content: str = Field(..., min_length=1)
    created_by: str


class TenantNoteUpdate(BaseModel):
    """Schema for editing a note."""
    content: str = Field(..., min_length=1)


class TenantNoteRecord(BaseModel):
    """Tenant note as returned by the record store."""
    id: UUID
    tenant_id: UUID
    content: str
    created_by: str
    is_deleted: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
