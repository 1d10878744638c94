"""Data models"""

from minuta_drafter.models.document import (
    ANALYSIS_PENDING_CONTENT,
    ANALYSIS_TITLES,
    AnalysisKind,
    AnalysisRequest,
    AnalysisResult,
    DocumentKind,
    DocumentRequest,
    PartyRoleLabels,
)
from minuta_drafter.models.session import (
    ActionKind,
    ActionState,
    ActionStatus,
    SessionState,
)

__all__ = [
    "ANALYSIS_PENDING_CONTENT",
    "ANALYSIS_TITLES",
    "AnalysisKind",
    "AnalysisRequest",
    "AnalysisResult",
    "DocumentKind",
    "DocumentRequest",
    "PartyRoleLabels",
    "ActionKind",
    "ActionState",
    "ActionStatus",
    "SessionState",
]
