"""Minimal LLM client abstraction used by the analysis pipeline."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

import httpx

from .errors import MalformedResponseError, RemoteServiceError, TransportError

LOGGER = logging.getLogger(__name__)

OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"


@dataclass
class LLMRequest:
    """Parameters for an LLM completion call."""

    model: str
    system_prompt: str
    user_prompt: str
    timeout: float
    max_tokens: int
    temperature: float = 0.1


Transport = Callable[[LLMRequest], Awaitable[str]]


class LLMClient:
    """Simple, awaitable LLM client wrapper."""

    def __init__(self, transport: Optional[Transport] = None) -> None:
        self._transport = transport or self._default_transport

    async def complete(self, request: LLMRequest) -> str:
        """Execute the request using the configured transport."""

        return await self._transport(request)

    async def _default_transport(self, request: LLMRequest) -> str:  # pragma: no cover - guidance
        """Default transport raises to signal missing integration."""

        raise TransportError(
            "No LLM transport configured. Provide a transport implementation when "
            "constructing LLMClient."
        )


class OpenRouterTransport:
    """Chat completions transport for the OpenRouter API."""

    def __init__(
        self,
        api_key: str,
        *,
        api_url: str = OPENROUTER_URL,
        http_referer: Optional[str] = None,
        x_title: Optional[str] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._api_url = api_url
        self._http_referer = http_referer
        self._x_title = x_title
        self._http_transport = http_transport

    def _headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        if self._http_referer:
            headers["HTTP-Referer"] = self._http_referer
        if self._x_title:
            headers["X-Title"] = self._x_title
        return headers

    @staticmethod
    def build_body(request: LLMRequest) -> dict[str, Any]:
        return {
            "model": request.model,
            "messages": [
                {"role": "system", "content": request.system_prompt},
                {"role": "user", "content": request.user_prompt},
            ],
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "stream": False,
        }

    async def __call__(self, request: LLMRequest) -> str:
        if not self._api_key:
            raise TransportError("OPENROUTER_API_KEY is not configured")

        body = self.build_body(request)
        timeout = httpx.Timeout(request.timeout)
        LOGGER.debug(
            "OpenRouter request model=%s prompt_length=%d max_tokens=%d",
            request.model,
            len(request.user_prompt),
            request.max_tokens,
        )
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._http_transport) as client:
                response = await client.post(self._api_url, headers=self._headers(), json=body)
        except httpx.TimeoutException as exc:
            raise TransportError(f"Request to {request.model} timed out") from exc
        except httpx.TransportError as exc:
            raise TransportError("Network error: Unable to reach AI service") from exc

        LOGGER.debug(
            "OpenRouter response model=%s status_code=%s", request.model, response.status_code
        )
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.status_code >= 400:
            message = _error_message(payload) or response.reason_phrase or "API request failed"
            raise RemoteServiceError(
                f"AI service error ({response.status_code}): {message}",
                status_code=response.status_code,
            )

        try:
            content = payload["choices"][0]["message"]["content"]  # type: ignore[index]
        except (KeyError, IndexError, TypeError) as exc:
            raise MalformedResponseError("Invalid response format from AI service") from exc
        if not isinstance(content, str) or not content.strip():
            raise MalformedResponseError("Invalid response format from AI service")
        return content.strip()


def _error_message(payload: Any) -> Optional[str]:
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        return str(message) if message else None
    if isinstance(error, str):
        return error
    return None


def create_default_client(settings=None) -> LLMClient:
    """Factory returning an ``LLMClient`` wired to OpenRouter."""

    if settings is None:
        from .config import get_settings

        settings = get_settings()
    transport = OpenRouterTransport(
        settings.openrouter_api_key,
        api_url=settings.openrouter_api_url,
        http_referer=settings.openrouter_http_referer,
        x_title=settings.openrouter_title,
    )
    return LLMClient(transport=transport)


__all__ = [
    "LLMClient",
    "LLMRequest",
    "OpenRouterTransport",
    "Transport",
    "create_default_client",
]
