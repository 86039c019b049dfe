"""
llm_fallback/transcription.py

Audio transcription adapters. Failures never escape ``transcribe``: they
degrade to an empty string so the query turn becomes a no-op.
"""

from __future__ import annotations

import logging
import os
import tempfile
from abc import ABC, abstractmethod

import requests

from app.config import TranscriptionSettings, get_transcription_settings

logger = logging.getLogger(__name__)


class TranscriptionFailure(RuntimeError):
    """
    Raised when audio cannot be downloaded or transcribed.
    """


class BaseTranscriptionAdapter(ABC):
    @abstractmethod
    def transcribe(self, audio_ref: str) -> str:
        """
        Return the transcript of the referenced audio, or "" on failure.
        """


class NullTranscriptionAdapter(BaseTranscriptionAdapter):
    """
    Adapter used when transcription is disabled.
    """

    def transcribe(self, audio_ref: str) -> str:
        logger.info("Transcription disabled; ignoring audio_ref=%s", audio_ref)
        return ""


class OpenAITranscriptionAdapter(BaseTranscriptionAdapter):
    """
    Downloads the audio reference and sends it to an OpenAI-compatible
    ``audio.transcriptions`` endpoint (Whisper).
    """

    def __init__(
        self,
        *,
        api_key: str | None,
        base_url: str | None = None,
        model: str = "whisper-large-v3-turbo",
        language: str = "es",
        timeout_seconds: float = 30.0,
        session: requests.Session | None = None,
        client=None,
    ) -> None:
        self._model = model
        self._language = language
        self._timeout_seconds = timeout_seconds
        self._session = session or requests.Session()
        self._client = client
        if self._client is None and api_key:
            from openai import OpenAI  # type: ignore[import-untyped]

            client_kwargs: dict = {"api_key": api_key, "timeout": timeout_seconds}
            if base_url:
                client_kwargs["base_url"] = base_url
            self._client = OpenAI(**client_kwargs)
        if self._client is None:
            logger.warning("Transcription API key not set; audio turns will be empty.")

    def transcribe(self, audio_ref: str) -> str:
        try:
            text = self._transcribe(audio_ref)
        except TranscriptionFailure as exc:
            logger.warning("Transcription failed audio_ref=%s error=%s", audio_ref, exc)
            return ""
        logger.info("Transcription succeeded chars=%d", len(text))
        return text

    def _transcribe(self, audio_ref: str) -> str:
        if self._client is None:
            raise TranscriptionFailure("transcription client is not configured")
        if not audio_ref:
            raise TranscriptionFailure("empty audio reference")

        audio_bytes = self._download(audio_ref)
        fd, temp_path = tempfile.mkstemp(suffix=".ogg")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(audio_bytes)
            with open(temp_path, "rb") as handle:
                result = self._client.audio.transcriptions.create(
                    file=handle,
                    model=self._model,
                    language=self._language,
                )
        except Exception as exc:
            raise TranscriptionFailure(str(exc)) from exc
        finally:
            if os.path.exists(temp_path):
                os.unlink(temp_path)

        return (getattr(result, "text", "") or "").strip()

    def _download(self, audio_ref: str) -> bytes:
        try:
            response = self._session.get(audio_ref, timeout=self._timeout_seconds)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise TranscriptionFailure(f"audio download failed: {exc}") from exc
        if not response.content:
            raise TranscriptionFailure("audio download returned no content")
        return response.content


def build_transcription_adapter(
    settings: TranscriptionSettings | None = None,
) -> BaseTranscriptionAdapter:
    resolved = settings or get_transcription_settings()
    if not resolved.enabled:
        return NullTranscriptionAdapter()
    return OpenAITranscriptionAdapter(
        api_key=resolved.api_key,
        base_url=resolved.base_url,
        model=resolved.model,
        language=resolved.language,
        timeout_seconds=resolved.timeout_seconds,
    )
