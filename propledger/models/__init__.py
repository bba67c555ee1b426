"""Database models package."""
from propledger.models.db_models import (
    Owner,
    Property,
    Tenant,
    TenantNote,
    Transaction,
    TransactionType,
)

__all__ = [
    "Owner",
    "Property",
    "Tenant",
    "TenantNote",
    "Transaction",
    "TransactionType",
]
