"""Google Gemini backend using the REST generateContent endpoint."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from smarthome.llm.base import ChatMessage, LLMBackend, LLMResponse

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_MODEL = "gemini-1.5-flash"


class GeminiBackend(LLMBackend):
    """Gemini /v1beta/models/{model}:generateContent backend."""

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
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers={"x-goog-api-key": self._api_key} if self._api_key else {},
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
        client = await self._get_client()

        generation_config: dict[str, Any] = {}
        if temperature is not None:
            generation_config["temperature"] = temperature
        if max_tokens is not None:
            generation_config["maxOutputTokens"] = max_tokens
        if json_mode:
            generation_config["responseMimeType"] = "application/json"

        payload: dict[str, Any] = {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            # Gemini names the assistant role "model"
            "contents": [
                {
                    "role": "model" if m.role == "assistant" else "user",
                    "parts": [{"text": m.content}],
                }
                for m in messages
            ],
        }
        if generation_config:
            payload["generationConfig"] = generation_config

        logger.debug("Gemini request: model=%s, turns=%d", self._model, len(messages))

        resp = await client.post(
            f"/v1beta/models/{self._model}:generateContent", json=payload,
        )
        if resp.status_code != 200:
            try:
                err_msg = resp.json().get("error", {}).get("message", resp.text)
            except ValueError:
                err_msg = resp.text
            raise RuntimeError(f"Gemini API error ({resp.status_code}): {err_msg}")

        try:
            data = resp.json()
        except ValueError:
            preview = resp.text[:200] if resp.text else "(empty)"
            raise RuntimeError(f"Gemini returned non-JSON response: {preview}") from None

        candidates = data.get("candidates") or []
        if not candidates:
            raise RuntimeError(
                f"Unexpected Gemini response format (no candidates). "
                f"Got keys: {list(data.keys())}."
            )

        parts = candidates[0].get("content", {}).get("parts", [])
        usage = data.get("usageMetadata", {})
        return LLMResponse(
            content="".join(p.get("text", "") for p in parts),
            model=data.get("modelVersion", self._model),
            prompt_tokens=usage.get("promptTokenCount", 0),
            completion_tokens=usage.get("candidatesTokenCount", 0),
            raw=data,
        )

    async def health_check(self) -> bool:
        """Check if the API is reachable by fetching the model description."""
        try:
            client = await self._get_client()
            resp = await client.get(f"/v1beta/models/{self._model}")
            return resp.status_code == 200
        except httpx.HTTPError:
            return False

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
