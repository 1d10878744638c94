"""Prompt templates for draft generation and draft analysis.

Everything here is pure: the same input always yields the same PromptSpec and
nothing touches the network or the session.
"""

from typing import Union

from pydantic import BaseModel, ConfigDict

from minuta_drafter.models.document import (
    AnalysisKind,
    DocumentKind,
    DocumentRequest,
    PartyRoleLabels,
)
from minuta_drafter.models.session import ActionKind


class PromptSpec(BaseModel):
    """A prompt plus the system instruction it must be sent with"""
    model_config = ConfigDict(frozen=True)

    prompt: str
    system_instruction: str


PARTY_ROLES: dict[DocumentKind, PartyRoleLabels] = {
    DocumentKind.CONTRACT: PartyRoleLabels(role1_label="Contratante", role2_label="Contratado(a)"),
    DocumentKind.PETITION: PartyRoleLabels(role1_label="Autor(a)", role2_label="Réu/Ré"),
    DocumentKind.OPINION: PartyRoleLabels(role1_label="Consulente", role2_label="Interessado(a)"),
}

DEFAULT_ROLES = PartyRoleLabels(role1_label="Parte 1", role2_label="Parte 2")

DRAFT_SYSTEM_INSTRUCTION = (
    "Você é um assistente jurídico especializado em direito brasileiro. "
    "Sua tarefa é redigir minutas de documentos legais com base nas informações fornecidas. "
    "A linguagem deve ser formal, precisa e em conformidade com a legislação brasileira vigente."
)

RISKS_SYSTEM_INSTRUCTION = (
    "Você é um advogado sênior especialista em análise de risco contratual e processual "
    "no contexto do direito brasileiro. Sua análise deve ser crítica, detalhada e focada "
    "em proteger os interesses do cliente que estaria utilizando este documento."
)

VARIATIONS_SYSTEM_INSTRUCTION = (
    "Você é um estrategista jurídico especializado em negociações contratuais e processuais. "
    "Sua tarefa é analisar um documento legal e propor variações de cláusulas com diferentes "
    "pesos e contrapesos para as partes envolvidas."
)

RISKS_INSTRUCTIONS = (
    "Revise a seguinte minuta e aponte, em formato de lista com marcadores, os principais "
    "riscos jurídicos, ambiguidades, omissões ou inconsistências com a legislação brasileira. "
    "Para cada item, explique o risco de forma concisa e, se possível, sugira uma melhoria."
)

VARIATIONS_INSTRUCTIONS = (
    "Analise o seguinte documento e, para as 3 (três) cláusulas mais importantes (como objeto, "
    "pagamento, responsabilidades, rescisão), sugira variações com diferentes enfoques. "
    "Para cada cláusula, apresente uma versão 'Mais Protetiva para a Parte 1', uma "
    "'Mais Protetiva para a Parte 2' e uma 'Neutra/Equilibrada'. Formate a resposta de forma "
    "clara, usando títulos para cada cláusula analisada."
)

# (instructions, heading above the delimited draft, system instruction)
ANALYSIS_TEMPLATES: dict[AnalysisKind, tuple[str, str, str]] = {
    AnalysisKind.RISKS: (RISKS_INSTRUCTIONS, "Minuta para revisão:", RISKS_SYSTEM_INSTRUCTION),
    AnalysisKind.VARIATIONS: (VARIATIONS_INSTRUCTIONS, "Documento para análise:", VARIATIONS_SYSTEM_INSTRUCTION),
}

DRAFT_DELIMITER = "---"


def get_party_roles(kind: Union[DocumentKind, str]) -> PartyRoleLabels:
    """Role labels for a document kind; unknown kinds get 'Parte 1'/'Parte 2'.

    Examples:
        'Contrato' → Contratante / Contratado(a)
        'Petição' → Autor(a) / Réu/Ré
        'Memorando' → Parte 1 / Parte 2
    """
    try:
        kind = DocumentKind(kind)
    except ValueError:
        return DEFAULT_ROLES
    return PARTY_ROLES.get(kind, DEFAULT_ROLES)


def build_draft_prompt(request: DocumentRequest) -> PromptSpec:
    """Build the generation prompt for a filled-in document request.

    The monetary value line is left out entirely when no value was given.
    """
    roles = get_party_roles(request.document_kind)

    facts = [
        f"- {roles.role1_label}: {request.party1}",
        f"- {roles.role2_label}: {request.party2}",
    ]
    if request.has_monetary_value:
        facts.append(f"- Valor da Causa/Contrato: R$ {request.monetary_value.strip()}")
    facts.append(f"- Objeto/Resumo do Caso: {request.objective}")
    facts_block = "\n".join(facts)

    prompt = f"""Gere uma minuta de um(a) {request.document_kind.value} com as seguintes características:

{facts_block}

Estruture o documento de forma clara, com cláusulas/seções bem definidas e numeração apropriada.
O documento deve ser completo e pronto para uso, incluindo campos para data e assinaturas ao final.
Não adicione comentários ou notas, apenas o texto do documento legal."""

    return PromptSpec(prompt=prompt, system_instruction=DRAFT_SYSTEM_INSTRUCTION)


def build_analysis_prompt(kind: AnalysisKind, draft: str) -> PromptSpec:
    """Build a review prompt that echoes the draft verbatim between delimiters."""
    instructions, heading, system_instruction = ANALYSIS_TEMPLATES[AnalysisKind(kind)]

    prompt = f"""{instructions}

{heading}
{DRAFT_DELIMITER}
{draft}
{DRAFT_DELIMITER}"""

    return PromptSpec(prompt=prompt, system_instruction=system_instruction)


def build_prompt(action: ActionKind, request: DocumentRequest | None = None, draft: str = "") -> PromptSpec:
    """Single entry point used by the drafting service to pick a template."""
    if action == ActionKind.DRAFT:
        if request is None:
            raise ValueError("A document request is required to build a draft prompt")
        return build_draft_prompt(request)
    return build_analysis_prompt(AnalysisKind(action.value), draft)
