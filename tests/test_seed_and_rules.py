"""Tests for transaction type seeding and the keyword rules file."""
import pytest

from propledger.rules.loader import get_mode_defaults, get_type_keywords, reload_rules
from propledger.services.record_store import EntityKind, InMemoryRecordStore
from propledger.services.seed_data import DEFAULT_TRANSACTION_TYPES, seed_store


class TestSeedStore:
    @pytest.mark.asyncio
    async def test_seeds_every_type_once(self):
        store = InMemoryRecordStore()

        assert await seed_store(store) == len(DEFAULT_TRANSACTION_TYPES)
        assert await seed_store(store) == 0

        names = {t.name for t in await store.get_all(EntityKind.TRANSACTION_TYPE)}
        assert {"Rent Payment", "Management Fee", "Lease Fee", "New Lease"} <= names

    def test_names_are_unique(self):
        names = [t["name"] for t in DEFAULT_TRANSACTION_TYPES]
        assert len(names) == len(set(names))


class TestTypeRules:
    def test_keyword_order(self):
        keywords = [keyword for keyword, _ in get_type_keywords()]
        assert keywords[:2] == ["rent", "payment"]
        assert keywords.index("late") < keywords.index("fee")

    def test_keyword_types_are_seeded(self):
        seeded = {t["name"] for t in DEFAULT_TRANSACTION_TYPES}
        assert {type_name for _, type_name in get_type_keywords()} <= seeded

    def test_mode_defaults(self):
        assert get_mode_defaults("tenant") == ["Rent Payment", "Other Income"]
        assert get_mode_defaults("owner") == ["Management Fee", "Owner Draw"]
        assert get_mode_defaults("unknown") == []

    def test_reload(self):
        reload_rules()
        assert get_type_keywords()
