"""OpenAI-compatible LLM backend implementation.

Works with OpenAI, Azure OpenAI, Groq, OpenRouter, local vLLM and any other
provider exposing the /v1/chat/completions endpoint.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from smarthome.llm.base import ChatMessage, LLMBackend, LLMResponse

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com"
DEFAULT_MODEL = "gpt-4o-mini"


class OpenAICompatBackend(LLMBackend):
    """OpenAI-compatible /v1/chat/completions backend."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        api_key: str = "",
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._api_key = api_key
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            headers: dict[str, str] = {}
            if self._api_key:
                headers["Authorization"] = f"Bearer {self._api_key}"
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=headers,
                timeout=httpx.Timeout(60.0, connect=10.0),
            )
        return self._client

    async def chat(
        self,
        system_prompt: str,
        messages: list[ChatMessage],
        json_mode: bool = False,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Call /v1/chat/completions with the system prompt and the turns."""
        client = await self._get_client()

        payload: dict[str, Any] = {
            "model": self._model,
            "messages": [{"role": "system", "content": system_prompt}]
            + [m.model_dump() for m in messages],
            "stream": False,
        }
        if temperature is not None:
            payload["temperature"] = temperature
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        logger.debug(
            "OpenAI-compat request: model=%s, turns=%d, json_mode=%s",
            self._model,
            len(messages),
            json_mode,
        )

        resp = await client.post("/v1/chat/completions", json=payload)
        if resp.status_code != 200:
            try:
                err_msg = resp.json().get("error", {}).get("message", resp.text)
            except ValueError:
                err_msg = resp.text
            raise RuntimeError(f"API error ({resp.status_code}): {err_msg}")

        if not resp.content or not resp.content.strip():
            raise RuntimeError(
                f"API returned an empty response (status {resp.status_code}). "
                f"Check that llm_api_url ({self._base_url}) is correct."
            )

        try:
            data = resp.json()
        except ValueError:
            preview = resp.text[:200] if resp.text else "(empty)"
            raise RuntimeError(
                f"API returned non-JSON response: {preview}... "
                f"Check that llm_api_url ({self._base_url}) is correct."
            ) from None

        if "choices" not in data or not data["choices"]:
            raise RuntimeError(
                f"Unexpected API response format (missing 'choices'). "
                f"Got keys: {list(data.keys())}."
            )

        choice = data["choices"][0]["message"]
        usage = data.get("usage", {})
        return LLMResponse(
            content=choice.get("content") or "",
            model=data.get("model", self._model),
            prompt_tokens=usage.get("prompt_tokens", 0),
            completion_tokens=usage.get("completion_tokens", 0),
            raw=data,
        )

    async def health_check(self) -> bool:
        """Check if the API is reachable by listing models."""
        try:
            client = await self._get_client()
            resp = await client.get("/v1/models")
            return resp.status_code == 200
        except httpx.HTTPError:
            return False

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
