"""Pytest configuration and fixtures"""

import pytest

from minuta_drafter.utils.llm import reset_clients


class FakeGateway:
    """Stands in for ModelGateway: records calls, replays scripted replies.

    Each reply is either a string to return or an exception to raise.
    """

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls: list[dict] = []

    async def generate(self, prompt, system_instruction, model_id=None):
        self.calls.append({
            "prompt": prompt,
            "system_instruction": system_instruction,
            "model_id": model_id,
        })
        reply = self.replies.pop(0) if self.replies else "texto gerado"
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture(autouse=True)
def test_env(monkeypatch):
    """Isolate settings from the developer's environment"""
    monkeypatch.setenv("LLM_PROVIDER", "anthropic")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "test_key")
    monkeypatch.setenv("GROQ_API_KEY", "test_key")
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    reset_clients()

    yield

    reset_clients()


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def make_gateway():
    """Factory for gateways with scripted replies"""
    return FakeGateway


@pytest.fixture
def contract_request():
    from minuta_drafter.models.document import DocumentKind, DocumentRequest

    return DocumentRequest(
        document_kind=DocumentKind.CONTRACT,
        party1="Acme Ltda",
        party2="João Silva",
        monetary_value="",
        objective="fornecimento de serviços de consultoria",
    )
