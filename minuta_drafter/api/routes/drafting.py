"""Drafting API routes: sessions, draft generation and draft analysis."""

import logging

from fastapi import APIRouter, HTTPException

from minuta_drafter.api.schemas import (
    AnalysisAPIRequest,
    DocumentKindItem,
    DocumentKindsResponse,
    DraftRequest,
    HealthResponse,
    SessionResponse,
)
from minuta_drafter.api.session_store import SessionStore
from minuta_drafter.models.document import DocumentKind, DocumentRequest
from minuta_drafter.services.prompts import get_party_roles
from minuta_drafter.utils.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()

# Shared session store, replaced from app.py via init_store()
store: SessionStore = SessionStore()


def init_store(shared_store: SessionStore):
    """Set the shared session store (called from app.py)."""
    global store
    store = shared_store


@router.get("/api/health", response_model=HealthResponse)
async def health():
    settings = get_settings()
    return HealthResponse(
        status="ok",
        llm_provider=settings.llm_provider,
        llm_model=settings.llm_model,
        active_sessions=store.active_count,
    )


@router.get("/api/document-kinds", response_model=DocumentKindsResponse)
async def list_document_kinds():
    """List document kinds and how their parties are labelled."""
    kinds = []
    for kind in DocumentKind:
        roles = get_party_roles(kind)
        kinds.append(DocumentKindItem(
            kind=kind,
            role1_label=roles.role1_label,
            role2_label=roles.role2_label,
        ))
    return DocumentKindsResponse(kinds=kinds)


@router.post("/api/sessions", response_model=SessionResponse)
async def create_session():
    entry = await store.create()
    return SessionResponse.from_state(entry.state)


@router.get("/api/sessions/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str):
    entry = await store.get(session_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Sessão não encontrada ou expirada.")
    return SessionResponse.from_state(entry.state)


@router.delete("/api/sessions/{session_id}")
async def delete_session(session_id: str):
    deleted = await store.delete(session_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Sessão não encontrada.")
    return {"deleted": True}


@router.post("/api/draft", response_model=SessionResponse)
async def generate_draft(request: DraftRequest):
    """Generate a draft from the submitted form.

    Missing required fields and model failures are reported in the
    session's ``error`` field, not as HTTP errors.
    """
    entry = await store.get_or_create(request.session_id)
    document_request = DocumentRequest(
        document_kind=request.document_kind,
        party1=request.party1,
        party2=request.party2,
        monetary_value=request.monetary_value,
        objective=request.objective,
    )
    state = await entry.service.generate_draft(document_request)
    return SessionResponse.from_state(state)


@router.post("/api/analysis", response_model=SessionResponse)
async def analyze_draft(request: AnalysisAPIRequest):
    """Run a risk analysis or variation suggestion on the session's draft."""
    entry = await store.get(request.session_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Sessão não encontrada ou expirada.")
    state = await entry.service.analyze(request.kind)
    return SessionResponse.from_state(state)
