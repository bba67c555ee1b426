"""SQLAlchemy database models."""

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from propledger.database import Base


def local_now():
    """Return current time in local timezone."""
    return datetime.now().astimezone()


class Owner(Base):
    """Property owner."""

    __tablename__ = "owners"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), default=local_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=local_now)

    # Relationships
    properties = relationship("Property", back_populates="owner")


class Property(Base):
    """Managed property with its fee configuration."""

    __tablename__ = "properties"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    address = Column(Text, nullable=False)
    city = Column(String(100), nullable=True)
    zip = Column(String(20), nullable=True)
    owner_id = Column(UUID(as_uuid=True), ForeignKey("owners.id"), nullable=True)

    # Money
    rent_amount = Column(Numeric(12, 2), default=0, nullable=False)
    late_fee_amount = Column(Numeric(12, 2), default=0, nullable=False)
    mgmt_fee_percentage = Column(Numeric(5, 2), default=0, nullable=False)  # 0-100
    lease_fee_percentage = Column(Numeric(5, 2), nullable=True)  # 0-100
    lease_fee_amount = Column(Numeric(12, 2), nullable=True)  # Flat fee per new lease

    has_insurance = Column(Boolean, default=False, nullable=False)
    notes = Column(Text, nullable=True)

    # Cached projection of sum(transactions.amount); negative = credit
    current_balance = Column(Numeric(12, 2), default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), default=local_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=local_now)

    # Relationships
    owner = relationship("Owner", back_populates="properties")
    tenants = relationship("Tenant", back_populates="property")


class Tenant(Base):
    """Tenant, optionally linked to the property they rent."""

    __tablename__ = "tenants"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    property_id = Column(UUID(as_uuid=True), ForeignKey("properties.id"), nullable=True)

    rent_amount = Column(Numeric(12, 2), default=0, nullable=False)
    security_deposit = Column(Numeric(12, 2), default=0, nullable=False)
    starting_balance = Column(Numeric(12, 2), default=0, nullable=False)

    lease_start = Column(Date, nullable=True)
    lease_end = Column(Date, nullable=True)
    move_in_date = Column(Date, nullable=True)
    move_out_date = Column(Date, nullable=True)

    # Cached: starting_balance + sum(transactions.amount)
    current_balance = Column(Numeric(12, 2), default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), default=local_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=local_now)

    # Relationships
    property = relationship("Property", back_populates="tenants")
    notes = relationship("TenantNote", back_populates="tenant")


class TransactionType(Base):
    """Static reference data describing what a transaction represents."""

    __tablename__ = "transaction_types"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(100), unique=True, nullable=False)  # 'Rent Payment'
    category = Column(String(50), nullable=False)  # 'Charge', 'Payment', 'Expense', ...
    display_name = Column(String(100), nullable=False)
    created_at = Column(DateTime(timezone=True), default=local_now, nullable=False)


class Transaction(Base):
    """Financial transaction. Charges are positive, payments negative."""

    __tablename__ = "transactions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    property_id = Column(UUID(as_uuid=True), ForeignKey("properties.id"), nullable=True)
    tenant_id = Column(UUID(as_uuid=True), ForeignKey("tenants.id"), nullable=True)
    owner_id = Column(UUID(as_uuid=True), ForeignKey("owners.id"), nullable=True)
    type_id = Column(UUID(as_uuid=True), ForeignKey("transaction_types.id"), nullable=False)

    amount = Column(Numeric(12, 2), nullable=False)
    transaction_date = Column(Date, nullable=False)

    unit_reference = Column(String(100), nullable=True)
    invoice_number = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    is_manual_edit = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), default=local_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=local_now)

    # Relationships
    transaction_type = relationship("TransactionType")

    __table_args__ = (
        CheckConstraint("amount <> 0", name="ck_transactions_amount_nonzero"),
        Index("ix_transactions_property", "property_id"),
        Index("ix_transactions_tenant", "tenant_id"),
        Index("ix_transactions_owner", "owner_id"),
        Index("ix_transactions_date", "transaction_date"),
    )


class TenantNote(Base):
    """Free-text note on a tenant. Soft-deleted only."""

    __tablename__ = "tenant_notes"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(UUID(as_uuid=True), ForeignKey("tenants.id"), nullable=False)
    content = Column(Text, nullable=False)
    created_by = Column(String(100), nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=local_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=local_now)

    # Relationships
    tenant = relationship("Tenant", back_populates="notes")


# Database Indexes
Index("ix_owners_name", Owner.name)
Index("ix_properties_owner_id", Property.owner_id)
Index("ix_tenants_property_id", Tenant.property_id)
Index("ix_tenant_notes_tenant_id", TenantNote.tenant_id)
