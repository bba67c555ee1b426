"""Property ledger back office."""
