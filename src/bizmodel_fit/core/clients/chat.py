"""OpenAI chat-completions API client.

API docs: https://platform.openai.com/docs/api-reference/chat
One attempt per call, bounded by a timeout. Every failure surfaces as
UpstreamError so callers can fall back to deterministic results.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Optional

import httpx

from ..errors import UpstreamError

logger = logging.getLogger(__name__)

API_BASE = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_TEMPERATURE = 0.7


class ChatClient:
    """Thin async wrapper over the chat-completions endpoint.

    Construct one per application with explicit settings; `from_env` reads
    them from the environment. `transport` is passed straight to httpx.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str = API_BASE,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            raise ValueError("api_key is required")
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_env(cls) -> Optional["ChatClient"]:
        """Build a client from OPENAI_* variables, or None when no key is set."""
        api_key = os.environ.get("OPENAI_API_KEY", "")
        if not api_key:
            logger.warning("OPENAI_API_KEY not set, AI analysis disabled")
            return None
        return cls(
            api_key=api_key,
            model=os.environ.get("OPENAI_MODEL", DEFAULT_MODEL),
            base_url=os.environ.get("OPENAI_BASE_URL", API_BASE),
            timeout=float(os.environ.get("OPENAI_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))),
        )

    async def complete(
        self,
        messages: list[dict[str, str]],
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: Optional[int] = None,
        json_response: bool = False,
    ) -> str:
        """Send one chat completion request and return the reply text."""
        body: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
        }
        if max_tokens is not None:
            body["max_tokens"] = max_tokens
        if json_response:
            body["response_format"] = {"type": "json_object"}

        headers = {"Authorization": f"Bearer {self.api_key}"}
        timeout = httpx.Timeout(self.timeout, connect=10.0)

        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                response = await client.post(f"{self.base_url}/chat/completions", json=body, headers=headers)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            raise UpstreamError(f"Chat completion failed with HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Chat completion request failed: {exc}") from exc
        except ValueError as exc:
            raise UpstreamError("Chat completion returned invalid JSON") from exc

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise UpstreamError("Chat completion response has no message content") from exc

        if not isinstance(content, str) or not content.strip():
            raise UpstreamError("Chat completion returned empty content")

        usage = data.get("usage") or {}
        logger.debug("Chat completion ok (model=%s, tokens=%s)", self.model, usage.get("total_tokens"))
        return content

    async def complete_json(
        self,
        messages: list[dict[str, str]],
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: Optional[int] = None,
    ) -> dict[str, Any]:
        """Request a JSON-object reply and parse it."""
        content = await self.complete(messages, temperature=temperature, max_tokens=max_tokens, json_response=True)
        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as exc:
            raise UpstreamError("Chat completion content is not valid JSON") from exc
        if not isinstance(parsed, dict):
            raise UpstreamError("Chat completion JSON is not an object")
        return parsed
