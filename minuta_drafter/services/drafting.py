"""Drafting service: runs draft generation and draft analyses for one session."""

import logging
from typing import Callable, Optional, Union

from minuta_drafter.errors import EmptyResponseError, GatewayError, ValidationError
from minuta_drafter.models.document import (
    AnalysisKind,
    AnalysisRequest,
    AnalysisResult,
    DocumentRequest,
)
from minuta_drafter.models.session import ActionKind, ActionState, ActionStatus, SessionState
from minuta_drafter.services.prompts import PromptSpec, build_prompt, get_party_roles

logger = logging.getLogger(__name__)

OBJECTIVE_LABEL = "Objeto / Resumo do Caso"

ERROR_PREFIXES = {
    ActionKind.DRAFT: "Erro ao gerar minuta",
    ActionKind.RISKS: "Erro ao analisar documento",
    ActionKind.VARIATIONS: "Erro ao analisar documento",
}

UNKNOWN_ERROR_MESSAGE = "Ocorreu um erro desconhecido."

Subscriber = Callable[[SessionState], None]


def _field_labels(request: DocumentRequest, names: list[str]) -> list[str]:
    """Form labels for field names; party fields use the kind's role labels."""
    roles = get_party_roles(request.document_kind)
    labels = {
        "party1": roles.role1_label,
        "party2": roles.role2_label,
        "objective": OBJECTIVE_LABEL,
    }
    return [labels.get(name, name) for name in names]


class DraftingService:
    """Owns a SessionState and runs the three model-backed actions on it.

    - generate_draft(): Idle → Pending → Success(draft) | Failed(message)
    - analyze(kind): no-op without a draft; otherwise publishes a pending
      placeholder right away, then fills it in or discards it

    Every action bumps a per-slot token. A completion whose token is no longer
    the latest one is dropped, so an overtaken call never overwrites the
    result of a newer one.
    """

    def __init__(self, gateway=None, state: Optional[SessionState] = None, model_id: Optional[str] = None):
        self._gateway = gateway
        self.state = state or SessionState()
        self.model_id = model_id
        self._subscribers: list[Subscriber] = []

    @property
    def gateway(self):
        """Lazy-load the model gateway."""
        if self._gateway is None:
            from minuta_drafter.utils.llm import ModelGateway
            self._gateway = ModelGateway()
        return self._gateway

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback run after every state transition.

        Returns a function that removes the callback again.
        """
        self._subscribers.append(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: Subscriber):
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _publish(self):
        self.state.touch()
        for callback in list(self._subscribers):
            try:
                callback(self.state)
            except Exception:
                logger.exception("Session subscriber failed")

    # ------------------------------------------------------------------
    # Form
    # ------------------------------------------------------------------

    def update_request(self, **fields) -> DocumentRequest:
        """Edit form fields held in the session."""
        data = self.state.request.model_dump()
        data.update(fields)
        self.state.request = DocumentRequest(**data)
        self._publish()
        return self.state.request

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def generate_draft(self, request: Optional[DocumentRequest] = None) -> SessionState:
        """Generate a new draft from the session form (or the given request)."""
        state = self.state
        if request is not None:
            state.request = request
        request = state.request

        if not request.is_complete:
            error = ValidationError(request.missing_fields())
            logger.info(f"Draft not requested: {error}")
            labels = ", ".join(_field_labels(request, error.missing_fields))
            message = f"Preencha os campos obrigatórios: {labels}"
            state.error = message
            # A draft still in flight was built from the previous form
            self._invalidate(state.draft_action)
            state.draft_action.status = ActionStatus.FAILED
            state.draft_action.error = message
            self._publish()
            return state

        slot = state.draft_action
        token = self._begin(slot)
        state.draft = ""
        state.analysis = None
        state.error = None
        # An analysis still in flight would be about the old draft
        self._invalidate(state.analysis_action)
        self._publish()

        spec = build_prompt(ActionKind.DRAFT, request=request)
        current, text, error = await self._execute(ActionKind.DRAFT, spec, slot, token)
        if not current:
            return state

        if error is None:
            state.draft = text
            state.error = None
            slot.status = ActionStatus.SUCCESS
        else:
            state.draft = ""
            state.error = error
            slot.status = ActionStatus.FAILED
            slot.error = error
        self._publish()
        return state

    async def analyze(self, kind: Union[AnalysisKind, str]) -> SessionState:
        """Run a risk analysis or clause-variation suggestion on the draft."""
        state = self.state
        try:
            kind = AnalysisKind(kind)
        except ValueError:
            logger.warning(f"Unknown analysis kind {kind!r} (session {state.id})")
            state.error = f"Tipo de análise desconhecido: {kind}"
            self._publish()
            return state
        if not state.has_draft:
            logger.debug(f"Analysis '{kind.value}' ignored: no draft in session {state.id}")
            return state

        analysis_request = AnalysisRequest(kind=kind, source_draft=state.draft)
        action = ActionKind.for_analysis(kind)
        slot = state.analysis_action
        token = self._begin(slot)

        result = AnalysisResult.placeholder(kind)
        state.analysis = result
        state.error = None
        self._publish()

        spec = build_prompt(action, draft=analysis_request.source_draft)
        current, text, error = await self._execute(action, spec, slot, token)
        if not current:
            return state

        if error is None:
            result.content = text
            result.pending = False
            slot.status = ActionStatus.SUCCESS
        else:
            if state.analysis is result:
                state.analysis = None
            state.error = error
            slot.status = ActionStatus.FAILED
            slot.error = error
        self._publish()
        return state

    async def analyze_risks(self) -> SessionState:
        return await self.analyze(AnalysisKind.RISKS)

    async def suggest_variations(self) -> SessionState:
        return await self.analyze(AnalysisKind.VARIATIONS)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _begin(slot: ActionState) -> int:
        slot.token += 1
        slot.status = ActionStatus.PENDING
        slot.error = None
        return slot.token

    @staticmethod
    def _invalidate(slot: ActionState):
        if slot.status == ActionStatus.PENDING:
            slot.status = ActionStatus.IDLE
        slot.token += 1

    async def _execute(
        self,
        action: ActionKind,
        spec: PromptSpec,
        slot: ActionState,
        token: int,
    ) -> tuple[bool, Optional[str], Optional[str]]:
        """Call the gateway once.

        Returns (current, text, error_message). ``current`` is False when a
        newer call on the same slot started while this one was in flight.
        """
        logger.info(f"Action '{action.value}' started (session {self.state.id}, token {token})")
        text = None
        error = None
        try:
            text = await self.gateway.generate(spec.prompt, spec.system_instruction, self.model_id)
            if not text or not text.strip():
                raise EmptyResponseError()
        except GatewayError as e:
            logger.warning(f"Action '{action.value}' failed: {e}")
            error = f"{ERROR_PREFIXES[action]}: {e}"
        except Exception:
            logger.exception(f"Action '{action.value}' failed unexpectedly")
            error = UNKNOWN_ERROR_MESSAGE

        if slot.token != token:
            logger.info(
                f"Action '{action.value}' completion dropped: token {token} superseded by {slot.token}"
            )
            return False, None, None

        if error is None:
            logger.info(f"Action '{action.value}' finished ({len(text)} chars)")
        return True, text, error
