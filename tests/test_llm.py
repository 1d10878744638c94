"""Tests for the model gateway (provider SDKs are replaced with fakes)"""

import asyncio
from types import SimpleNamespace

import anthropic
import groq
import httpx
import pytest

from minuta_drafter.errors import EmptyResponseError, TransportError
from minuta_drafter.utils import llm
from minuta_drafter.utils.config import Settings
from minuta_drafter.utils.llm import ModelGateway, _prepare_kwargs


def _request():
    return httpx.Request("POST", "https://api.example.test/v1")


class FakeAnthropicMessages:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        return self.response


class FakeGroqCompletions:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        return self.response


def anthropic_response(*texts):
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=t) for t in texts])


def groq_response(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def anthropic_gateway():
    settings = Settings(llm_provider="anthropic", anthropic_api_key="k", llm_model="claude-test")
    return ModelGateway(settings=settings)


def install_anthropic(messages):
    llm._async_clients["anthropic"] = SimpleNamespace(messages=messages)


def install_groq(completions):
    llm._clients["groq"] = SimpleNamespace(chat=SimpleNamespace(completions=completions))


class TestPrepareKwargs:

    def test_anthropic_uses_system_argument(self):
        kwargs = _prepare_kwargs("anthropic", "prompt", "persona", "m", 0.3, 1000)
        assert kwargs["system"] == "persona"
        assert kwargs["messages"] == [{"role": "user", "content": "prompt"}]
        assert kwargs["model"] == "m"
        assert kwargs["temperature"] == 0.3

    def test_anthropic_zero_temperature_omitted(self):
        kwargs = _prepare_kwargs("anthropic", "prompt", "", "m", 0, 1000)
        assert "temperature" not in kwargs
        assert "system" not in kwargs

    def test_groq_puts_system_message_first(self):
        kwargs = _prepare_kwargs("groq", "prompt", "persona", "m", 0.3, 1000)
        assert kwargs["messages"][0] == {"role": "system", "content": "persona"}
        assert kwargs["messages"][1] == {"role": "user", "content": "prompt"}


class TestAnthropicGateway:

    def test_returns_text(self, anthropic_gateway):
        messages = FakeAnthropicMessages(anthropic_response("MINUTA ", "COMPLETA"))
        install_anthropic(messages)

        text = asyncio.run(anthropic_gateway.generate("prompt", "persona"))

        assert text == "MINUTA COMPLETA"
        assert messages.kwargs["model"] == "claude-test"
        assert messages.kwargs["system"] == "persona"

    def test_model_id_override(self, anthropic_gateway):
        messages = FakeAnthropicMessages(anthropic_response("ok"))
        install_anthropic(messages)

        asyncio.run(anthropic_gateway.generate("prompt", "persona", model_id="other-model"))

        assert messages.kwargs["model"] == "other-model"

    @pytest.mark.parametrize("response", [
        anthropic_response(),
        anthropic_response(""),
        anthropic_response("  \n "),
        SimpleNamespace(content=[SimpleNamespace(type="tool_use")]),
    ])
    def test_textless_response_is_empty_response(self, anthropic_gateway, response):
        install_anthropic(FakeAnthropicMessages(response))

        with pytest.raises(EmptyResponseError):
            asyncio.run(anthropic_gateway.generate("prompt", "persona"))

    def test_malformed_response_is_transport_error(self, anthropic_gateway):
        install_anthropic(FakeAnthropicMessages(SimpleNamespace()))

        with pytest.raises(TransportError):
            asyncio.run(anthropic_gateway.generate("prompt", "persona"))

    def test_connection_error_wrapped(self, anthropic_gateway):
        cause = anthropic.APIConnectionError(request=_request())
        install_anthropic(FakeAnthropicMessages(error=cause))

        with pytest.raises(TransportError) as exc_info:
            asyncio.run(anthropic_gateway.generate("prompt", "persona"))

        assert exc_info.value.__cause__ is cause

    def test_missing_api_key(self):
        gateway = ModelGateway(settings=Settings(llm_provider="anthropic", anthropic_api_key=None))

        with pytest.raises(TransportError, match="ANTHROPIC_API_KEY"):
            asyncio.run(gateway.generate("prompt", "persona"))


class TestGroqGateway:

    @pytest.fixture
    def gateway(self):
        return ModelGateway(settings=Settings(llm_provider="groq", groq_api_key="k", llm_model="llama-test"))

    def test_sync_returns_text(self, gateway):
        completions = FakeGroqCompletions(groq_response("PARECER"))
        install_groq(completions)

        assert gateway.generate_sync("prompt", "persona") == "PARECER"
        assert completions.kwargs["messages"][0]["role"] == "system"

    @pytest.mark.parametrize("response", [
        groq_response(None),
        groq_response(""),
        SimpleNamespace(choices=[]),
    ])
    def test_textless_response_is_empty_response(self, gateway, response):
        install_groq(FakeGroqCompletions(response))

        with pytest.raises(EmptyResponseError):
            gateway.generate_sync("prompt", "persona")

    def test_timeout_wrapped(self, gateway):
        install_groq(FakeGroqCompletions(error=groq.APITimeoutError(request=_request())))

        with pytest.raises(TransportError):
            gateway.generate_sync("prompt", "persona")


class TestClients:

    def test_unknown_provider(self):
        with pytest.raises(TransportError, match="Unknown LLM provider"):
            ModelGateway(provider="gemini")

    def test_client_singleton_and_reset(self):
        settings = Settings(llm_provider="anthropic", anthropic_api_key="k")
        first = llm.get_client("anthropic", settings)
        assert llm.get_client("anthropic", settings) is first
        assert first.max_retries == 0

        llm.reset_clients()
        assert llm.get_client("anthropic", settings) is not first

    def test_module_level_generate_uses_settings(self, monkeypatch):
        monkeypatch.setenv("LLM_PROVIDER", "groq")
        completions = FakeGroqCompletions(groq_response("texto"))
        install_groq(completions)

        assert llm.generate("prompt", "persona") == "texto"
