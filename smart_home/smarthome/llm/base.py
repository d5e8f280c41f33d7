"""Abstract LLM backend interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Literal

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class LLMResponse(BaseModel):
    """Structured response from any LLM backend."""

    content: str
    model: str = ""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    raw: dict[str, Any] = Field(default_factory=dict)


class LLMBackend(ABC):
    """Abstract interface for LLM backends."""

    @property
    def model_name(self) -> str:
        return getattr(self, "_model", "")

    @abstractmethod
    async def chat(
        self,
        system_prompt: str,
        messages: list[ChatMessage],
        json_mode: bool = False,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Run a multi-turn completion.

        ``messages`` alternate user/assistant turns and end with the user
        turn to answer. With ``json_mode`` the provider is asked to return a
        single JSON object.
        """
        ...

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        json_mode: bool = False,
        temperature: float | None = None,
    ) -> LLMResponse:
        """Single-turn completion given system and user prompts."""
        return await self.chat(
            system_prompt,
            [ChatMessage(role="user", content=user_prompt)],
            json_mode=json_mode,
            temperature=temperature,
        )

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the backend is reachable and ready."""
        ...

    async def close(self) -> None:
        """Release network resources. Backends without any may ignore this."""
