"""LLM adapters for the generative fallback.

Provides a base interface and concrete adapters for OpenAI-compatible
chat completion APIs and a deterministic mock for testing.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Optional

from app.config import LLMSettings, get_llm_settings

logger = logging.getLogger(__name__)

EMPTY_COMPLETION_FALLBACK = "Lo siento, no pude procesar tu solicitud."


class GenerativeAdapterFailure(RuntimeError):
    """Raised when the generative model cannot produce a completion."""


class BaseLLMAdapter(ABC):
    """Abstract base for all generative fallback adapters."""

    @abstractmethod
    def complete(
        self,
        system_prompt: str,
        history: Sequence[Mapping[str, str]],
        user_turn: str,
    ) -> str:
        """Run one chat completion.

        Args:
            system_prompt: The fully assembled system instruction.
            history: Prior turns as ``{"role": ..., "content": ...}`` dicts,
                oldest first.
            user_turn: The new user message.

        Returns:
            The completion text.

        Raises:
            GenerativeAdapterFailure: On missing credentials or any provider
                error.
        """


def build_messages(
    system_prompt: str,
    history: Sequence[Mapping[str, str]],
    user_turn: str,
) -> list[dict[str, str]]:
    messages = [{"role": "system", "content": system_prompt}]
    messages.extend(
        {"role": str(turn["role"]), "content": str(turn["content"])} for turn in history
    )
    messages.append({"role": "user", "content": user_turn})
    return messages


class OpenAILLMAdapter(BaseLLMAdapter):
    """Adapter for OpenAI-compatible chat completion APIs.

    Configured for deterministic, non-streaming output. A missing API key
    is logged once at construction; every later ``complete`` call then
    fails with GenerativeAdapterFailure instead of reaching the network.
    """

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        max_tokens: int = 2000,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_seconds: float = 60.0,
    ) -> None:
        """Initialise the OpenAI adapter.

        Args:
            model: Model identifier.
            max_tokens: Maximum tokens in the completion.
            api_key: API key; None leaves the adapter unconfigured.
            base_url: Optional base URL for OpenAI-compatible endpoints.
            timeout_seconds: Client request timeout.
        """
        try:
            from openai import OpenAI  # type: ignore[import-untyped]
        except ImportError as exc:
            raise ImportError(
                "openai package is required for OpenAILLMAdapter. "
                "Install it with: pip install openai"
            ) from exc

        self._model = model
        self._max_tokens = max_tokens
        self._client = None
        if not api_key:
            logger.warning("LLM API key not set; generative fallback is disabled.")
            return

        client_kwargs: dict = {"api_key": api_key, "timeout": timeout_seconds}
        if base_url:
            client_kwargs["base_url"] = base_url
        self._client = OpenAI(**client_kwargs)

    def complete(
        self,
        system_prompt: str,
        history: Sequence[Mapping[str, str]],
        user_turn: str,
    ) -> str:
        if self._client is None:
            raise GenerativeAdapterFailure("LLM API key is not configured.")

        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=build_messages(system_prompt, history, user_turn),
                temperature=0,
                max_completion_tokens=self._max_tokens,
                stream=False,
            )
        except Exception as exc:
            raise GenerativeAdapterFailure(f"Chat completion failed: {exc}") from exc

        choice = response.choices[0] if response.choices else None
        logger.info(
            "Chat completion finished model=%s finish_reason=%s",
            self._model,
            getattr(choice, "finish_reason", None),
        )
        content = choice.message.content if choice is not None else None
        return content or EMPTY_COMPLETION_FALLBACK


_MOCK_RESPONSE = "Modo de prueba: respuesta simulada del asistente."


class MockLLMAdapter(BaseLLMAdapter):
    """Deterministic adapter that returns a fixed reply.

    Used for local testing and CI pipelines where no LLM API is
    available. Every call is recorded in ``calls``.
    """

    def __init__(self, response: str = _MOCK_RESPONSE) -> None:
        self._response = response
        self.calls: list[dict] = []

    def complete(
        self,
        system_prompt: str,
        history: Sequence[Mapping[str, str]],
        user_turn: str,
    ) -> str:
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "history": [dict(turn) for turn in history],
                "user_turn": user_turn,
            }
        )
        return self._response


def build_llm_adapter(settings: LLMSettings | None = None) -> BaseLLMAdapter:
    """Instantiate the adapter selected by LLM_ADAPTER.

    LLM_ADAPTER=mock   -> MockLLMAdapter  (testing, no API key required)
    LLM_ADAPTER=openai -> OpenAILLMAdapter (default)
    """
    resolved = settings or get_llm_settings()
    if resolved.adapter == "mock":
        return MockLLMAdapter()

    return OpenAILLMAdapter(
        model=resolved.model,
        max_tokens=resolved.max_tokens,
        api_key=resolved.api_key,
        base_url=resolved.base_url,
        timeout_seconds=resolved.timeout_seconds,
    )
