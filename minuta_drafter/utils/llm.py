"""Model gateway: single source of truth for all LLM calls.

One request, one response: no streaming, no retries (the SDK clients are
built with ``max_retries=0``). Provider failures come back as
``TransportError``; a successful call without text comes back as
``EmptyResponseError``.
"""

import logging
from typing import Any, Optional

import anthropic
import groq

from minuta_drafter.errors import EmptyResponseError, TransportError
from minuta_drafter.utils.config import Settings, get_settings

logger = logging.getLogger(__name__)

PROVIDERS = ("anthropic", "groq")

# Module-level singletons, keyed by provider
_clients: dict[str, Any] = {}
_async_clients: dict[str, Any] = {}


def _api_key(settings: Settings, provider: str) -> str:
    key = settings.anthropic_api_key if provider == "anthropic" else settings.groq_api_key
    if not key:
        raise TransportError(
            f"{provider.upper()}_API_KEY not set. Add it to your .env file."
        )
    return key


def _check_provider(provider: str) -> str:
    if provider not in PROVIDERS:
        raise TransportError(f"Unknown LLM provider '{provider}'. Use one of: {', '.join(PROVIDERS)}")
    return provider


def get_client(provider: Optional[str] = None, settings: Optional[Settings] = None):
    """Get or create the synchronous SDK client for a provider."""
    settings = settings or get_settings()
    provider = _check_provider(provider or settings.llm_provider)
    if provider not in _clients:
        key = _api_key(settings, provider)
        if provider == "anthropic":
            _clients[provider] = anthropic.Anthropic(
                api_key=key, timeout=settings.llm_timeout, max_retries=0
            )
        else:
            _clients[provider] = groq.Groq(
                api_key=key, timeout=settings.llm_timeout, max_retries=0
            )
    return _clients[provider]


def get_async_client(provider: Optional[str] = None, settings: Optional[Settings] = None):
    """Get or create the async SDK client for a provider."""
    settings = settings or get_settings()
    provider = _check_provider(provider or settings.llm_provider)
    if provider not in _async_clients:
        key = _api_key(settings, provider)
        if provider == "anthropic":
            _async_clients[provider] = anthropic.AsyncAnthropic(
                api_key=key, timeout=settings.llm_timeout, max_retries=0
            )
        else:
            _async_clients[provider] = groq.AsyncGroq(
                api_key=key, timeout=settings.llm_timeout, max_retries=0
            )
    return _async_clients[provider]


def reset_clients():
    """Drop cached clients (after a settings change, or between tests)."""
    _clients.clear()
    _async_clients.clear()


def _prepare_kwargs(
    provider: str,
    prompt: str,
    system_instruction: str,
    model: str,
    temperature: float,
    max_tokens: int,
) -> dict:
    """Build kwargs for the provider API (shared by sync and async calls)."""
    if provider == "anthropic":
        kwargs = {
            "model": model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system_instruction:
            kwargs["system"] = system_instruction
        if temperature > 0:
            kwargs["temperature"] = temperature
        return kwargs

    messages = []
    if system_instruction:
        messages.append({"role": "system", "content": system_instruction})
    messages.append({"role": "user", "content": prompt})
    return {
        "model": model,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
    }


def _extract_text(provider: str, response) -> str:
    """Pull the generated text out of a provider response.

    Raises EmptyResponseError when there is nothing textual in it.
    """
    try:
        if provider == "anthropic":
            texts = [block.text for block in response.content if hasattr(block, "text")]
            text = "".join(texts)
        else:
            text = response.choices[0].message.content if response.choices else ""
    except (AttributeError, IndexError, TypeError) as e:
        raise TransportError(f"Malformed response from {provider}: {e}") from e

    if not text or not text.strip():
        raise EmptyResponseError()
    return text


class ModelGateway:
    """Sends one prompt + system instruction to the configured provider."""

    def __init__(
        self,
        provider: Optional[str] = None,
        model_id: Optional[str] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.provider = _check_provider(provider or self.settings.llm_provider)
        self.model_id = model_id or self.settings.llm_model

    def _kwargs(self, prompt: str, system_instruction: str, model_id: Optional[str]) -> dict:
        model = model_id or self.model_id
        logger.debug(
            f"LLM request provider={self.provider} model={model} "
            f"prompt_chars={len(prompt)} system_chars={len(system_instruction)}"
        )
        return _prepare_kwargs(
            self.provider,
            prompt,
            system_instruction,
            model,
            self.settings.llm_temperature,
            self.settings.llm_max_tokens,
        )

    def generate_sync(self, prompt: str, system_instruction: str, model_id: Optional[str] = None) -> str:
        """Blocking variant of generate()."""
        client = get_client(self.provider, self.settings)
        kwargs = self._kwargs(prompt, system_instruction, model_id)
        try:
            if self.provider == "anthropic":
                response = client.messages.create(**kwargs)
            else:
                response = client.chat.completions.create(**kwargs)
        except (anthropic.APIError, groq.APIError) as e:
            logger.warning(f"LLM call failed ({self.provider}): {e}")
            raise TransportError(str(e)) from e
        return _extract_text(self.provider, response)

    async def generate(self, prompt: str, system_instruction: str, model_id: Optional[str] = None) -> str:
        """Generate text for a prompt. One round trip, no retry."""
        client = get_async_client(self.provider, self.settings)
        kwargs = self._kwargs(prompt, system_instruction, model_id)
        try:
            if self.provider == "anthropic":
                response = await client.messages.create(**kwargs)
            else:
                response = await client.chat.completions.create(**kwargs)
        except (anthropic.APIError, groq.APIError) as e:
            logger.warning(f"LLM call failed ({self.provider}): {e}")
            raise TransportError(str(e)) from e
        return _extract_text(self.provider, response)


def generate(prompt: str, system_instruction: str, model_id: Optional[str] = None) -> str:
    """Call the configured provider once (blocking) and return its text."""
    return ModelGateway().generate_sync(prompt, system_instruction, model_id)
