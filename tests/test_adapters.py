"""
tests/test_adapters.py

Tests for the generative and transcription adapters with fake provider
clients.
"""

from __future__ import annotations

import os
from types import SimpleNamespace

import pytest
import requests

from app.config import LLMSettings, TranscriptionSettings
from llm_fallback.adapter import (
    EMPTY_COMPLETION_FALLBACK,
    GenerativeAdapterFailure,
    MockLLMAdapter,
    OpenAILLMAdapter,
    build_llm_adapter,
    build_messages,
)
from llm_fallback.transcription import (
    NullTranscriptionAdapter,
    OpenAITranscriptionAdapter,
    build_transcription_adapter,
)

HISTORY = [
    {"role": "user", "content": "hola"},
    {"role": "assistant", "content": "¿En qué te ayudo?"},
]


def _completion(content):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message, finish_reason="stop")])


def _chat_client(create):
    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


class TestGenerativeAdapters:
    def test_messages_are_ordered(self) -> None:
        messages = build_messages("SYS", HISTORY, "¿y hoy?")

        assert [message["role"] for message in messages] == ["system", "user", "assistant", "user"]
        assert messages[0]["content"] == "SYS"
        assert messages[-1]["content"] == "¿y hoy?"

    def test_mock_records_calls(self) -> None:
        adapter = MockLLMAdapter(response="listo")

        assert adapter.complete("SYS", HISTORY, "pregunta") == "listo"
        assert adapter.calls == [{"system_prompt": "SYS", "history": HISTORY, "user_turn": "pregunta"}]

    def test_build_selects_mock(self) -> None:
        assert isinstance(build_llm_adapter(LLMSettings(adapter="mock")), MockLLMAdapter)

    def test_missing_key_fails_on_call(self) -> None:
        adapter = OpenAILLMAdapter(api_key=None)

        with pytest.raises(GenerativeAdapterFailure):
            adapter.complete("SYS", [], "hola")

    def test_provider_request(self) -> None:
        captured = {}

        def create(**kwargs):
            captured.update(kwargs)
            return _completion("respuesta")

        adapter = OpenAILLMAdapter(model="test-model", max_tokens=123, api_key=None)
        adapter._client = _chat_client(create)

        assert adapter.complete("SYS", HISTORY, "hola") == "respuesta"
        assert captured["model"] == "test-model"
        assert captured["temperature"] == 0
        assert captured["max_completion_tokens"] == 123
        assert len(captured["messages"]) == 4

    def test_provider_error_is_wrapped(self) -> None:
        def create(**kwargs):
            raise TimeoutError("deadline exceeded")

        adapter = OpenAILLMAdapter(api_key=None)
        adapter._client = _chat_client(create)

        with pytest.raises(GenerativeAdapterFailure, match="deadline exceeded"):
            adapter.complete("SYS", [], "hola")

    def test_empty_completion_uses_fallback_text(self) -> None:
        adapter = OpenAILLMAdapter(api_key=None)
        adapter._client = _chat_client(lambda **kwargs: _completion(None))

        assert adapter.complete("SYS", [], "hola") == EMPTY_COMPLETION_FALLBACK


class FakeResponse:
    def __init__(self, content: bytes, status_code: int = 200) -> None:
        self.content = content
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeHttpSession:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.urls: list[str] = []

    def get(self, url, timeout=None):
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.response


class FakeTranscriptionClient:
    def __init__(self, text: str = "", error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.paths: list[str] = []
        self.payloads: list[bytes] = []
        self.audio = SimpleNamespace(transcriptions=SimpleNamespace(create=self._create))

    def _create(self, *, file, model, language):
        self.paths.append(file.name)
        self.payloads.append(file.read())
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


def _transcriber(session, client) -> OpenAITranscriptionAdapter:
    return OpenAITranscriptionAdapter(api_key=None, session=session, client=client)


class TestTranscriptionAdapter:
    def test_success(self) -> None:
        session = FakeHttpSession(FakeResponse(b"OggS-audio"))
        client = FakeTranscriptionClient(text="  dame los rojos  ")

        text = _transcriber(session, client).transcribe("https://media.example.com/a.ogg")

        assert text == "dame los rojos"
        assert session.urls == ["https://media.example.com/a.ogg"]
        assert client.payloads == [b"OggS-audio"]
        assert client.paths[0].endswith(".ogg")
        assert not os.path.exists(client.paths[0])

    def test_download_error_gives_empty_text(self) -> None:
        session = FakeHttpSession(error=requests.ConnectionError("refused"))
        client = FakeTranscriptionClient(text="never")

        assert _transcriber(session, client).transcribe("https://media.example.com/a.ogg") == ""
        assert client.paths == []

    def test_http_error_gives_empty_text(self) -> None:
        session = FakeHttpSession(FakeResponse(b"", status_code=404))

        assert _transcriber(session, FakeTranscriptionClient()).transcribe("https://x/a.ogg") == ""

    def test_provider_error_removes_temp_file(self) -> None:
        session = FakeHttpSession(FakeResponse(b"OggS"))
        client = FakeTranscriptionClient(error=RuntimeError("rate limited"))

        assert _transcriber(session, client).transcribe("https://x/a.ogg") == ""
        assert not os.path.exists(client.paths[0])

    def test_unconfigured_client(self) -> None:
        session = FakeHttpSession(FakeResponse(b"OggS"))

        assert _transcriber(session, None).transcribe("https://x/a.ogg") == ""
        assert session.urls == []

    def test_disabled_transcription(self) -> None:
        adapter = build_transcription_adapter(TranscriptionSettings(enabled=False))

        assert isinstance(adapter, NullTranscriptionAdapter)
        assert adapter.transcribe("https://x/a.ogg") == ""
