"""Tests for the HTTP API (model calls go to a fake gateway)"""

import pytest
from fastapi.testclient import TestClient

from minuta_drafter.api.app import create_app
from minuta_drafter.api.session_store import SessionStore
from minuta_drafter.errors import TransportError
from minuta_drafter.services.drafting import DraftingService

FORM = {
    "document_kind": "Contrato",
    "party1": "Acme Ltda",
    "party2": "João Silva",
    "monetary_value": "",
    "objective": "fornecimento de serviços de consultoria",
}


@pytest.fixture
def gateway(make_gateway):
    return make_gateway("MINUTA", "- risco", TransportError("rate limited"))


@pytest.fixture
def client(gateway):
    store = SessionStore()
    store.set_service_factory(lambda state: DraftingService(gateway=gateway, state=state))
    with TestClient(create_app(store=store)) as test_client:
        yield test_client


class TestMeta:

    def test_health(self, client):
        data = client.get("/api/health").json()
        assert data["status"] == "ok"
        assert data["llm_provider"] == "anthropic"
        assert data["active_sessions"] == 0

    def test_document_kinds(self, client):
        kinds = {k["kind"]: k for k in client.get("/api/document-kinds").json()["kinds"]}
        assert kinds["Contrato"]["role1_label"] == "Contratante"
        assert kinds["Petição"]["role2_label"] == "Réu/Ré"
        assert kinds["Parecer"]["role1_label"] == "Consulente"


class TestSessions:

    def test_create_get_delete(self, client):
        session_id = client.post("/api/sessions").json()["session_id"]

        data = client.get(f"/api/sessions/{session_id}").json()
        assert data["draft"] == ""
        assert data["draft_status"] == "idle"

        assert client.delete(f"/api/sessions/{session_id}").status_code == 200
        assert client.get(f"/api/sessions/{session_id}").status_code == 404

    def test_unknown_session(self, client):
        assert client.get("/api/sessions/nope").status_code == 404
        assert client.delete("/api/sessions/nope").status_code == 404


class TestDraftFlow:

    def test_draft_then_analyses(self, client, gateway):
        data = client.post("/api/draft", json=FORM).json()
        session_id = data["session_id"]
        assert data["draft"] == "MINUTA"
        assert data["draft_status"] == "success"
        assert data["is_loading"] is False
        assert "Contratante: Acme Ltda" in gateway.calls[0]["prompt"]

        data = client.post("/api/analysis", json={"session_id": session_id, "kind": "risks"}).json()
        assert data["analysis"]["title"] == "Análise de Riscos"
        assert data["analysis"]["content"] == "- risco"
        assert data["analysis"]["pending"] is False

        data = client.post("/api/analysis", json={"session_id": session_id, "kind": "variations"}).json()
        assert data["analysis"] is None
        assert data["error"] == "Erro ao analisar documento: rate limited"
        assert data["draft"] == "MINUTA"

    def test_missing_fields_reported_in_state(self, client, gateway):
        response = client.post("/api/draft", json={**FORM, "objective": ""})

        assert response.status_code == 200
        assert "Objeto / Resumo do Caso" in response.json()["error"]
        assert gateway.calls == []

    def test_analysis_without_draft_is_noop(self, client, gateway):
        session_id = client.post("/api/sessions").json()["session_id"]

        data = client.post("/api/analysis", json={"session_id": session_id, "kind": "risks"}).json()

        assert data["analysis"] is None
        assert data["error"] is None
        assert gateway.calls == []

    def test_analysis_unknown_session(self, client):
        response = client.post("/api/analysis", json={"session_id": "nope", "kind": "risks"})
        assert response.status_code == 404

    def test_invalid_kind_rejected(self, client):
        assert client.post("/api/draft", json={**FORM, "document_kind": "Memorando"}).status_code == 422
