"""Session state owned by the drafting service"""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from minuta_drafter.models.document import AnalysisKind, AnalysisResult, DocumentRequest


class ActionKind(str, Enum):
    """User-triggered actions that call the model"""
    DRAFT = "draft"
    RISKS = "risks"
    VARIATIONS = "variations"

    @classmethod
    def for_analysis(cls, kind: AnalysisKind) -> "ActionKind":
        return cls(kind.value)


class ActionStatus(str, Enum):
    """Lifecycle of a single action"""
    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


class ActionState(BaseModel):
    """Status of one action slot (draft or analysis)"""
    status: ActionStatus = ActionStatus.IDLE
    error: Optional[str] = None
    token: int = 0  # bumped on every start; stale completions are ignored


class SessionState(BaseModel):
    """Everything one user session holds: form, draft, analysis, errors"""
    id: str = Field(default_factory=lambda: str(uuid4()))
    request: DocumentRequest = Field(default_factory=DocumentRequest)
    draft: str = ""
    analysis: Optional[AnalysisResult] = None
    error: Optional[str] = None
    draft_action: ActionState = Field(default_factory=ActionState)
    analysis_action: ActionState = Field(default_factory=ActionState)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def has_draft(self) -> bool:
        return bool(self.draft.strip())

    @property
    def is_loading(self) -> bool:
        return self.draft_action.status == ActionStatus.PENDING

    @property
    def is_analyzing(self) -> bool:
        return self.analysis_action.status == ActionStatus.PENDING

    def touch(self):
        self.updated_at = datetime.now()
