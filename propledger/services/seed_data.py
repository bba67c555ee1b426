"""Seed data for transaction types."""
import asyncio
import logging
from typing import Optional
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from propledger.database import AsyncSessionLocal
from propledger.models.db_models import TransactionType
from propledger.services.record_store import EntityKind, RecordStore

logger = logging.getLogger(__name__)


# =============================================================================
# TRANSACTION TYPES
# =============================================================================

# Charges are positive amounts, payments negative
DEFAULT_TRANSACTION_TYPES = [
    {"name": "Rent Charge", "category": "Charge", "display_name": "Rent Charge"},
    {"name": "Rent Payment", "category": "Payment", "display_name": "Rent Payment"},
    {"name": "Late Fee", "category": "Charge", "display_name": "Late Fee"},
    {"name": "Security Deposit", "category": "Charge", "display_name": "Security Deposit"},
    {"name": "Application Fee", "category": "Charge", "display_name": "Application Fee"},
    {"name": "Maintenance", "category": "Maintenance", "display_name": "Maintenance"},
    {"name": "Repair", "category": "Repair", "display_name": "Repair"},
    {"name": "Utility Reimbursement", "category": "Charge", "display_name": "Utility Reimbursement"},
    {"name": "Management Fee", "category": "Expense", "display_name": "Management Fee"},
    {"name": "Lease Fee", "category": "Expense", "display_name": "Lease Fee"},
    {"name": "New Lease", "category": "Charge", "display_name": "New Lease"},
    {"name": "Owner Draw", "category": "Distribution", "display_name": "Owner Draw"},
    {"name": "Insurance", "category": "Expense", "display_name": "Insurance"},
    {"name": "Other Income", "category": "Income", "display_name": "Other Income"},
    {"name": "Expense", "category": "Expense", "display_name": "Expense"},
]


async def seed_transaction_types(db: AsyncSession) -> int:
    """Seed transaction types into database. Existing names are left alone."""
    count = 0

    for type_data in DEFAULT_TRANSACTION_TYPES:
        result = await db.execute(
            select(TransactionType).where(TransactionType.name == type_data["name"])
        )
        existing = result.scalar_one_or_none()

        if not existing:
            db.add(TransactionType(id=uuid4(), **type_data))
            count += 1
            logger.info(f"Added transaction type: {type_data['name']} ({type_data['category']})")
        else:
            logger.debug(f"Transaction type already exists: {type_data['name']}")

    await db.commit()
    return count


async def seed_store(store: RecordStore) -> int:
    """Seed transaction types through a record store (e.g. the in-memory one)."""
    existing = {t.name for t in await store.get_all(EntityKind.TRANSACTION_TYPE)}
    missing = [t for t in DEFAULT_TRANSACTION_TYPES if t["name"] not in existing]
    if missing:
        await store.insert_many(EntityKind.TRANSACTION_TYPE, missing)
    return len(missing)


async def seed_all(db: Optional[AsyncSession] = None) -> dict:
    """Seed all initial data."""
    close_session = False

    if db is None:
        db = AsyncSessionLocal()
        close_session = True

    try:
        results = {"transaction_types": await seed_transaction_types(db)}
        logger.info(f"Seeding complete: {results}")
        return results

    finally:
        if close_session:
            await db.close()


# =============================================================================
# CLI ENTRY POINT
# =============================================================================

async def main():
    """Run seeding from command line."""
    logging.basicConfig(level=logging.INFO)

    logger.info("Seeding database with initial data...")
    results = await seed_all()
    logger.info(f"Transaction types added: {results['transaction_types']}")


if __name__ == "__main__":
    asyncio.run(main())
