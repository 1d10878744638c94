"""Request/response schemas for the Drafting API"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from minuta_drafter.models.document import AnalysisKind, AnalysisResult, DocumentKind
from minuta_drafter.models.session import ActionStatus, SessionState


class DraftRequest(BaseModel):
    """Form submitted to generate a draft"""
    session_id: Optional[str] = Field(None, description="Session ID. None = create new session")
    document_kind: DocumentKind = DocumentKind.CONTRACT
    party1: str = Field("", max_length=500)
    party2: str = Field("", max_length=500)
    monetary_value: Optional[str] = Field(None, max_length=100, description="Optional, e.g. '50.000,00'")
    objective: str = Field("", max_length=5000)


class AnalysisAPIRequest(BaseModel):
    """Request to analyse the current draft of a session"""
    session_id: str
    kind: AnalysisKind


class SessionResponse(BaseModel):
    """Current state of a drafting session"""
    session_id: str
    document_kind: DocumentKind
    party1: str = ""
    party2: str = ""
    monetary_value: Optional[str] = None
    objective: str = ""
    draft: str = ""
    analysis: Optional[AnalysisResult] = None
    error: Optional[str] = None
    draft_status: ActionStatus = ActionStatus.IDLE
    analysis_status: ActionStatus = ActionStatus.IDLE
    is_loading: bool = False
    is_analyzing: bool = False
    updated_at: Optional[datetime] = None

    @classmethod
    def from_state(cls, state: SessionState) -> "SessionResponse":
        request = state.request
        return cls(
            session_id=state.id,
            document_kind=request.document_kind,
            party1=request.party1,
            party2=request.party2,
            monetary_value=request.monetary_value,
            objective=request.objective,
            draft=state.draft,
            analysis=state.analysis,
            error=state.error,
            draft_status=state.draft_action.status,
            analysis_status=state.analysis_action.status,
            is_loading=state.is_loading,
            is_analyzing=state.is_analyzing,
            updated_at=state.updated_at,
        )


class DocumentKindItem(BaseModel):
    """A document kind with the labels used for its parties"""
    kind: DocumentKind
    role1_label: str
    role2_label: str


class DocumentKindsResponse(BaseModel):
    kinds: list[DocumentKindItem] = []


class HealthResponse(BaseModel):
    """Health check response"""
    status: str  # "ok" | "error"
    llm_provider: str
    llm_model: str
    version: str = "0.1.0"
    active_sessions: int = 0
