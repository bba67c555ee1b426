"""Tests for the import wizard: mapping, preview, edits and commit."""
from datetime import date, timedelta
from decimal import Decimal

import pytest

from propledger.config import settings
from propledger.schemas.imports import (
    CandidateStatus,
    CandidateUpdate,
    ColumnMapping,
    ImportMode,
    ImportStep,
)
from propledger.services.csv_parser import parse_csv
from propledger.services.import_session import (
    ImportSession,
    ImportSessionError,
    ReferenceData,
    create_session,
    get_session,
    get_template,
    guess_mappings,
    prune_sessions,
    remove_session,
)
from propledger.services.record_store import EntityKind


TENANT_CSV = (
    "Date,Tenant,Property,Amount,Type,Notes\n"
    "2024-01-01,John Smith,123 Main St,1000.00,Rent Charge,January\n"
    "2024-01-15,Smith,123 Main St,(1000.00),payment,\n"
    "2024-01-20,Nobody,1 Unknown Rd,50.00,late,\n"
    "not-a-date,Jane Doe,456 Oak Avenue,abc,rent,\n"
)


@pytest.fixture
async def reference(store):
    return await ReferenceData.load(store)


@pytest.fixture
def session(reference):
    return ImportSession(ImportMode.TENANT, parse_csv(TENANT_CSV), reference, tenant_fallback=False)


class TestGuessMappings:
    def test_case_insensitive_default_names(self):
        mappings = guess_mappings(["date", "AMOUNT", "property", "Memo"])

        assert mappings.date == "date"
        assert mappings.amount == "AMOUNT"
        assert mappings.property == "property"
        assert mappings.description is None
        assert mappings.notes is None

    def test_template_headers_map_fully(self):
        parsed = parse_csv(get_template(ImportMode.TENANT))
        mappings = guess_mappings(parsed.headers)

        for field in ("date", "tenant", "property", "amount", "type", "notes"):
            assert mappings.column_for(field) is not None


class TestTemplates:
    def test_tenant_template_columns(self):
        assert get_template(ImportMode.TENANT).splitlines()[0] == "date,tenant,property,amount,type,notes"

    def test_owner_template_columns(self):
        assert get_template("owner").splitlines()[0] == "date,property,amount,type,notes"


class TestProcess:
    def test_starts_on_map_step(self, session):
        assert session.step == ImportStep.MAP
        assert session.mappings.tenant == "Tenant"

    def test_statuses(self, session, properties, tenants):
        candidates = session.process()

        assert session.step == ImportStep.PREVIEW
        assert [c.status for c in candidates] == [
            CandidateStatus.VALID,
            CandidateStatus.VALID,
            CandidateStatus.ERROR,
            CandidateStatus.WARNING,
        ]
        assert candidates[1].tenant_id == tenants[0].id
        assert candidates[1].amount == Decimal("-1000.00")
        assert candidates[3].message == "Invalid or zero amount"
        assert candidates[3].property_id == properties[1].id

    def test_counts(self, session):
        session.process()
        counts = session.counts()

        assert (counts.valid, counts.warning, counts.error) == (2, 1, 1)
        assert counts.importable == 3

    def test_original_row_is_kept(self, session):
        candidates = session.process()
        assert candidates[0].original_data["Notes"] == "January"
        assert candidates[0].row_number == 1

    def test_out_of_range_cells_are_row_warnings(self, reference):
        csv = (
            "Date,Tenant,Property,Amount,Type\n"
            "2024-01-01,John Smith,123 Main St,1e30,rent\n"
            "01/15/99999999999999999999,John Smith,123 Main St,10.00,rent\n"
        )
        session = ImportSession(ImportMode.TENANT, parse_csv(csv), reference)
        candidates = session.process()

        assert [c.message for c in candidates] == ["Invalid or zero amount", "Invalid date format"]
        assert all(c.status == CandidateStatus.WARNING for c in candidates)

    def test_empty_file_cannot_be_processed(self, reference):
        session = ImportSession(ImportMode.TENANT, parse_csv("Date,Amount\n"), reference)
        assert session.step == ImportStep.UPLOAD
        with pytest.raises(ImportSessionError):
            session.process()


class TestScenarioLateFeeRow:
    """Row {Property: 123 Main St, Amount: (75.00), Type: late}."""

    CSV = "Property,Amount,Type\n123 Main St,(75.00),late\n"

    def test_tenant_mode_warns_about_missing_tenant(self, reference, properties, type_by_name):
        session = ImportSession(ImportMode.TENANT, parse_csv(self.CSV), reference)
        candidate = session.process()[0]

        assert candidate.property_id == properties[0].id
        assert candidate.type_id == type_by_name["Late Fee"].id
        assert candidate.amount == Decimal("-75.00")
        assert candidate.status == CandidateStatus.WARNING
        assert candidate.message == "No tenant match found"

    def test_owner_mode_is_valid(self, reference, type_by_name):
        csv = "Date,Property,Amount,Type\n2024-02-01,123 Main St,(75.00),late\n"
        session = ImportSession(ImportMode.OWNER, parse_csv(csv), reference)
        candidate = session.process()[0]

        assert candidate.type_id == type_by_name["Late Fee"].id
        assert candidate.amount == Decimal("-75.00")
        assert candidate.status == CandidateStatus.VALID


class TestMappings:
    def test_set_mappings_resets_candidates(self, session):
        session.process()
        session.set_mappings(ColumnMapping(notes=None))

        assert session.candidates == []
        assert session.step == ImportStep.MAP

    def test_unknown_column_rejected(self, session):
        with pytest.raises(ImportSessionError, match="not in file"):
            session.set_mappings(ColumnMapping(amount="Total"))

    def test_unmapping_property_makes_every_row_an_error(self, session):
        session.set_mappings(ColumnMapping(property=None))
        candidates = session.process()
        assert all(c.status == CandidateStatus.ERROR for c in candidates)


class TestUpdateCandidate:
    def test_manual_fix_revalidates(self, session, properties, tenants):
        session.process()
        updated = session.update_candidate(
            2, CandidateUpdate(property_id=properties[0].id, tenant_id=tenants[0].id)
        )

        assert updated.status == CandidateStatus.VALID
        assert updated.is_manual_edit is True
        assert updated.property_match.id == properties[0].id

    def test_amount_fix_clears_warning(self, session):
        session.process()
        updated = session.update_candidate(3, CandidateUpdate(amount=Decimal("-1500.004"), transaction_date=date(2024, 1, 3)))

        assert updated.amount == Decimal("-1500.00")
        assert updated.status == CandidateStatus.VALID

    def test_removing_property_makes_error(self, session):
        session.process()
        updated = session.update_candidate(0, CandidateUpdate(property_id=None))
        assert updated.status == CandidateStatus.ERROR

    def test_bad_index(self, session):
        session.process()
        with pytest.raises(ImportSessionError):
            session.update_candidate(10, CandidateUpdate())

    def test_unknown_reference_id(self, session, owners):
        session.process()
        with pytest.raises(ImportSessionError, match="Unknown"):
            session.update_candidate(0, CandidateUpdate(property_id=owners[0].id))

    def test_requires_preview(self, session):
        with pytest.raises(ImportSessionError):
            session.update_candidate(0, CandidateUpdate())


class TestCommit:
    @pytest.mark.asyncio
    async def test_commit_writes_importable_rows(self, session, store):
        session.process()
        session.update_candidate(3, CandidateUpdate(amount=Decimal("-1500.00"), transaction_date=date(2024, 1, 3)))
        assert session.confirm().importable == 3

        result = await session.commit(store)

        assert result.imported_count == 3
        assert result.excluded_count == 1
        assert session.step == ImportStep.COMMITTED
        assert len(await store.get_all(EntityKind.TRANSACTION)) == 3

    @pytest.mark.asyncio
    async def test_commit_before_processing(self, session, store):
        with pytest.raises(ImportSessionError):
            await session.commit(store)

    @pytest.mark.asyncio
    async def test_cannot_commit_twice(self, session, store):
        session.process()
        await session.commit(store, today=date(2024, 2, 1))
        with pytest.raises(ImportSessionError):
            await session.commit(store)

    @pytest.mark.asyncio
    async def test_nothing_importable(self, reference, store):
        session = ImportSession(ImportMode.TENANT, parse_csv("Property,Amount\nNowhere,5\n"), reference)
        session.process()
        with pytest.raises(ImportSessionError, match="No valid"):
            await session.commit(store)


class TestRegistry:
    def test_create_get_remove(self, reference):
        session = create_session(ImportMode.OWNER, parse_csv(TENANT_CSV), reference, filename="jan.csv")

        assert get_session(session.session_id) is session
        assert session.to_response().filename == "jan.csv"

        remove_session(session.session_id)
        assert get_session(session.session_id) is None

    def test_abandoned_sessions_are_pruned(self, reference):
        stale = create_session(ImportMode.TENANT, parse_csv(TENANT_CSV), reference)
        stale.created_at -= timedelta(minutes=settings.IMPORT_SESSION_TTL_MINUTES + 1)

        fresh = create_session(ImportMode.TENANT, parse_csv(TENANT_CSV), reference)

        assert get_session(stale.session_id) is None
        assert get_session(fresh.session_id) is fresh
        remove_session(fresh.session_id)

    def test_prune_keeps_recent_sessions(self, reference):
        session = create_session(ImportMode.TENANT, parse_csv(TENANT_CSV), reference)

        assert prune_sessions(now=session.created_at + timedelta(minutes=1)) == 0
        assert get_session(session.session_id) is session
        remove_session(session.session_id)
