"""Document request and analysis models"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class DocumentKind(str, Enum):
    """Kinds of legal document the drafter can produce"""
    CONTRACT = "Contrato"
    PETITION = "Petição"
    OPINION = "Parecer"


class AnalysisKind(str, Enum):
    """Follow-up analyses that can run against a generated draft"""
    RISKS = "risks"             # Análise de Riscos
    VARIATIONS = "variations"   # Variações de Cláusulas


ANALYSIS_TITLES: dict[AnalysisKind, str] = {
    AnalysisKind.RISKS: "Análise de Riscos",
    AnalysisKind.VARIATIONS: "Variações de Cláusulas",
}

# Content shown while an analysis call is outstanding
ANALYSIS_PENDING_CONTENT = "Analisando..."

REQUIRED_FIELDS = ("party1", "party2", "objective")


class PartyRoleLabels(BaseModel):
    """How each party is called in a given kind of document"""
    model_config = ConfigDict(frozen=True)

    role1_label: str
    role2_label: str


class DocumentRequest(BaseModel):
    """Form data for one draft generation"""
    document_kind: DocumentKind = DocumentKind.CONTRACT
    party1: str = ""
    party2: str = ""
    monetary_value: Optional[str] = None  # free text, e.g. "50.000,00"
    objective: str = ""

    def missing_fields(self) -> list[str]:
        """Required fields that are still blank."""
        return [name for name in REQUIRED_FIELDS if not getattr(self, name).strip()]

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields()

    @property
    def has_monetary_value(self) -> bool:
        return bool(self.monetary_value and self.monetary_value.strip())


class AnalysisRequest(BaseModel):
    """An analysis of an existing draft"""
    kind: AnalysisKind
    source_draft: str

    @field_validator("source_draft")
    @classmethod
    def _draft_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("source_draft must not be empty")
        return value


class AnalysisResult(BaseModel):
    """Result slot for the latest analysis.

    Holds the pending placeholder until the remote call resolves, then the
    final text. Failed analyses are discarded rather than kept here.
    """
    kind: AnalysisKind
    title: str
    content: str
    pending: bool = False

    @classmethod
    def placeholder(cls, kind: AnalysisKind) -> "AnalysisResult":
        return cls(
            kind=kind,
            title=ANALYSIS_TITLES[kind],
            content=ANALYSIS_PENDING_CONTENT,
            pending=True,
        )
