"""API routes for the CSV import wizard."""
import logging
from pathlib import Path

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import PlainTextResponse

from propledger.api.routes import get_store
from propledger.config import settings
from propledger.schemas.imports import (
    CandidateUpdate,
    ColumnMapping,
    ImportCandidate,
    ImportCounts,
    ImportMode,
    ImportPreviewResponse,
    ImportResult,
    ImportSessionResponse,
)
from propledger.services.csv_parser import CSVParseError, parse_csv
from propledger.services.import_session import (
    ImportSession,
    ImportSessionError,
    ReferenceData,
    create_session,
    get_session,
    get_template,
    remove_session,
)
from propledger.services.record_store import RecordStore
from propledger.services.transaction_service import recompute_for_transactions

logger = logging.getLogger(__name__)

# Create router
import_router = APIRouter(prefix="/api/imports", tags=["imports"])


def _session_or_404(session_id: str) -> ImportSession:
    session = get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Import session not found")
    return session


@import_router.get("/templates/{mode}", response_class=PlainTextResponse)
async def download_template(mode: ImportMode):
    """Download an example CSV for an import mode."""
    return PlainTextResponse(
        get_template(mode),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{mode.value}-transactions-template.csv"'},
    )


@import_router.post("", response_model=ImportSessionResponse, status_code=201)
async def upload_import(
    file: UploadFile = File(...),
    mode: ImportMode = Form(ImportMode.TENANT),
    store: RecordStore = Depends(get_store),
):
    """Upload a CSV and start an import session."""
    file_ext = Path(file.filename or "").suffix.lower()
    if file_ext not in settings.ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"File type {file_ext or '(none)'} not allowed. Allowed types: {settings.ALLOWED_EXTENSIONS}",
        )

    content = await file.read()
    if len(content) > settings.max_file_size_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"File size ({len(content) / 1024 / 1024:.1f}MB) exceeds maximum ({settings.MAX_FILE_SIZE_MB}MB)",
        )

    try:
        parsed = parse_csv(content)
    except CSVParseError as e:
        logger.warning(f"Rejected import file {file.filename}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    reference = await ReferenceData.load(store)
    session = create_session(mode, parsed, reference, filename=file.filename)
    return session.to_response()


@import_router.get("/{session_id}", response_model=ImportSessionResponse)
async def get_import(session_id: str):
    """Current state of an import session."""
    return _session_or_404(session_id).to_response()


@import_router.put("/{session_id}/mappings", response_model=ImportSessionResponse)
async def set_import_mappings(session_id: str, mappings: ColumnMapping):
    """Replace the column mapping."""
    session = _session_or_404(session_id)
    try:
        session.set_mappings(mappings)
    except ImportSessionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return session.to_response()


@import_router.post("/{session_id}/process", response_model=ImportPreviewResponse)
async def process_import(session_id: str):
    """Match and validate every row."""
    session = _session_or_404(session_id)
    try:
        session.process()
    except ImportSessionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return session.to_preview()


@import_router.get("/{session_id}/preview", response_model=ImportPreviewResponse)
async def preview_import(session_id: str):
    """Candidates with their status and the valid/warning/error counts."""
    return _session_or_404(session_id).to_preview()


@import_router.patch("/{session_id}/candidates/{index}", response_model=ImportCandidate)
async def update_import_candidate(session_id: str, index: int, update: CandidateUpdate):
    """Manually correct one candidate and re-validate it."""
    session = _session_or_404(session_id)
    try:
        return session.update_candidate(index, update)
    except ImportSessionError as e:
        raise HTTPException(status_code=409, detail=str(e))


@import_router.post("/{session_id}/confirm", response_model=ImportCounts)
async def confirm_import(session_id: str):
    """Counts shown to the user before committing."""
    session = _session_or_404(session_id)
    try:
        return session.confirm()
    except ImportSessionError as e:
        raise HTTPException(status_code=409, detail=str(e))


@import_router.post("/{session_id}/commit", response_model=ImportResult)
async def commit_import(session_id: str, store: RecordStore = Depends(get_store)):
    """Write importable rows in one batch and refresh affected balances."""
    session = _session_or_404(session_id)
    try:
        result = await session.commit(store)
    except ImportSessionError as e:
        raise HTTPException(status_code=409, detail=str(e))

    await recompute_for_transactions(store, result.transactions)
    remove_session(session_id)
    return result


@import_router.delete("/{session_id}")
async def cancel_import(session_id: str):
    """Discard an import session."""
    _session_or_404(session_id)
    remove_session(session_id)
    return {"status": "cancelled", "session_id": session_id}
