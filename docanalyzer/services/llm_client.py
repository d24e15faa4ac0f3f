"""
Groq chat-completions client.

Talks to Groq's OpenAI-compatible ``/chat/completions`` endpoint over httpx.
One request per call: no retries, no streaming.  Transport failures and
non-200 responses are raised as LLMError so the routers can turn them into
500 responses.

Public API
----------
GroqChatClient.complete(messages, temperature=..., max_tokens=..., json_mode=False) -> str
GroqChatClient.check_health()                                                        -> bool
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from docanalyzer.config import settings

logger = logging.getLogger(__name__)


class LLMError(RuntimeError):
    """Raised when the completion request cannot be completed."""


class GroqChatClient:
    """Thin async wrapper over Groq chat completions."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = settings.GROQ_API_KEY if api_key is None else api_key
        self.base_url = (base_url or settings.GROQ_BASE_URL).rstrip("/")
        self.model = model or settings.GROQ_MODEL
        self.timeout = httpx.Timeout(
            float(timeout if timeout is not None else settings.GROQ_TIMEOUT),
            connect=10.0,
        )
        self._transport = transport

    def _client(self, timeout: Optional[httpx.Timeout] = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=timeout or self.timeout,
            transport=self._transport,
            headers={"Authorization": f"Bearer {self.api_key}"},
        )

    async def complete(
        self,
        messages: List[Dict[str, str]],
        *,
        temperature: float,
        max_tokens: int,
        json_mode: bool = False,
    ) -> str:
        """
        POST the message list and return the first choice's content.

        Returns an empty string when the model produced no content.

        Raises:
            LLMError: missing API key, timeout, connection failure, or a
                      non-200 response.
        """
        if not self.api_key:
            raise LLMError("GROQ_API_KEY is not configured")

        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        try:
            async with self._client() as client:
                resp = await client.post(
                    f"{self.base_url}/chat/completions", json=payload
                )
        except httpx.TimeoutException as exc:
            logger.error(
                "complete: request timed out after %.0f s", self.timeout.read or 0
            )
            raise LLMError("LLM request timed out") from exc
        except httpx.HTTPError as exc:
            logger.error("complete: connection error: %s", exc)
            raise LLMError(f"LLM request failed: {exc}") from exc

        if resp.status_code != 200:
            logger.error(
                "complete: Groq returned HTTP %d: %s",
                resp.status_code,
                resp.text[:300],
            )
            raise LLMError(f"LLM request failed with HTTP {resp.status_code}")

        try:
            choices = resp.json().get("choices") or []
        except ValueError as exc:
            raise LLMError("LLM returned a non-JSON response") from exc

        if not choices:
            return ""
        message = choices[0].get("message") or {}
        return message.get("content") or ""

    async def check_health(self) -> bool:
        """Return ``True`` if the API key is set and the models endpoint answers 200."""
        if not self.api_key:
            return False
        try:
            async with self._client(httpx.Timeout(5.0)) as client:
                resp = await client.get(f"{self.base_url}/models")
            return resp.status_code == 200
        except httpx.HTTPError as exc:
            logger.error("Groq health check failed: %s", exc)
            return False
