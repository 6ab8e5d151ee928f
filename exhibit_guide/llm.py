"""LLM client — HTTP connection to a chat-completion provider.

The generation service talks to any object matching the ChatProvider
protocol:

    configured: bool
    async def complete(self, messages, max_tokens, temperature) -> Completion

Two implementations are provided:

    HttpChatProvider — real HTTP client for OpenAI-compatible
                       /v1/chat/completions endpoints.
    EchoProvider     — returns the last message back unchanged. Useful for
                       smoke-testing the API wiring without a provider.

Tests use StubProvider (defined in conftest.py) instead.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import httpx

from exhibit_guide.models import Completion

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER_URL = "https://api.openai.com"
DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 500
DEFAULT_TIMEOUT = 30.0


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class LLMError(RuntimeError):
    """Base class for every failure to obtain text from the provider."""


class ConfigurationError(LLMError):
    """No provider credential is configured; no call was attempted."""


class ProviderError(LLMError):
    """The provider answered with a non-success status, or could not be reached."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ResponseFormatError(LLMError):
    """The provider answered 2xx but the body is not a usable completion."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


# ---------------------------------------------------------------------------
# Protocol — every provider implementation must match this signature
# ---------------------------------------------------------------------------

class ChatProvider(Protocol):
    @property
    def configured(self) -> bool: ...

    async def complete(
        self,
        messages: list[dict[str, str]],
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> Completion: ...


# ---------------------------------------------------------------------------
# HttpChatProvider — talks to an OpenAI-compatible provider
# ---------------------------------------------------------------------------

class HttpChatProvider:
    """Async HTTP client for OpenAI-compatible chat completions.

    Request:  POST {provider_url}/v1/chat/completions
              {"model", "messages": [{"role", "content"}], "temperature", "max_tokens"}
    Response: {"choices": [{"message": {"content": "..."}}], "usage": {"total_tokens": N}}

    Args:
        api_key:      Bearer token. Empty means unconfigured.
        provider_url: Base URL of the provider, e.g. "https://api.openai.com".
        model:        Model identifier sent with every request.
        timeout:      HTTP timeout in seconds.
    """

    def __init__(
        self,
        api_key: str = "",
        provider_url: str = DEFAULT_PROVIDER_URL,
        model: str = DEFAULT_MODEL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._api_key = api_key
        self._base_url = provider_url.rstrip("/")
        self._model = model
        self._timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self._api_key and self._api_key.strip())

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
        }

    def _build_request(
        self, messages: list[dict[str, str]], max_tokens: int, temperature: float
    ) -> tuple[str, dict[str, Any]]:
        url = f"{self._base_url}/v1/chat/completions"
        body = {
            "model": self._model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        return url, body

    async def complete(
        self,
        messages: list[dict[str, str]],
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> Completion:
        if not self.configured:
            raise ConfigurationError("LLM provider API key is not configured")

        url, body = self._build_request(messages, max_tokens, temperature)
        logger.debug("llm call url=%s messages=%d max_tokens=%d", url, len(messages), max_tokens)

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(url, json=body, headers=self._headers())
        except httpx.TimeoutException as e:
            raise ProviderError(504, f"LLM provider timed out after {self._timeout}s") from e
        except httpx.ConnectError as e:
            raise ProviderError(502, f"Cannot connect to LLM provider at {self._base_url}") from e
        except httpx.HTTPError as e:
            raise ProviderError(502, f"Error calling LLM provider: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise ProviderError(resp.status_code, _error_message(resp))

        try:
            data = resp.json()
        except ValueError as e:
            raise ResponseFormatError(f"Failed to parse provider response as JSON: {e}") from e

        completion = _parse_completion(data)
        logger.debug("llm response len=%d tokens=%s", len(completion.text), completion.token_count)
        return completion


def _error_message(resp: httpx.Response) -> str:
    """Best-effort message from a failed provider response.

    Prefers {"error": {"message": ...}}, then {"error": {"type": ...}}
    prefixed to the raw body, then the raw body, then a status line.
    """
    raw = resp.text or ""
    message = raw if raw.strip() else (
        f"LLM provider request failed with status {resp.status_code}: {resp.reason_phrase}"
    )
    try:
        data = json.loads(raw)
    except ValueError:
        return message

    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict):
        if error.get("message"):
            return str(error["message"])
        if error.get("type"):
            return f"{error['type']}: {message}"
    return message


def _parse_completion(data: Any) -> Completion:
    if not isinstance(data, dict):
        raise ResponseFormatError("Invalid response from LLM provider: body is not a JSON object")

    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        raise ResponseFormatError("Invalid response from LLM provider: missing or empty choices array")

    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    if not isinstance(message, dict):
        raise ResponseFormatError("Invalid response from LLM provider: missing message property")

    if "content" not in message:
        raise ResponseFormatError("Invalid response from LLM provider: missing content property")

    content = message["content"]
    if not isinstance(content, str) or not content.strip():
        raise ResponseFormatError("LLM provider returned empty content")

    token_count = None
    usage = data.get("usage")
    if isinstance(usage, dict) and isinstance(usage.get("total_tokens"), int):
        token_count = usage["total_tokens"]

    return Completion(text=content, token_count=token_count)


# ---------------------------------------------------------------------------
# EchoProvider — returns the last message unchanged; no network calls
# ---------------------------------------------------------------------------

class EchoProvider:
    """Returns the final message's content as the completion.

    Lets you exercise caching, persistence and audit logging end-to-end
    without provider credentials.
    """

    configured = True

    async def complete(
        self,
        messages: list[dict[str, str]],
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> Completion:
        logger.debug("EchoProvider messages=%d", len(messages))
        return Completion(text=messages[-1]["content"] if messages else "", token_count=None)
