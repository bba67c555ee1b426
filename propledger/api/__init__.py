"""API package."""
from propledger.api.entity_routes import entity_router
from propledger.api.import_routes import import_router
from propledger.api.ledger_routes import ledger_router
from propledger.api.routes import api_router, get_store
from propledger.api.transaction_routes import transaction_router

__all__ = [
    "api_router",
    "entity_router",
    "import_router",
    "ledger_router",
    "transaction_router",
    "get_store",
]
