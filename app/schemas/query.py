"""
app/schemas/query.py

Request/response schemas for seller queries.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class QueryRequest(BaseModel):
    """
    One seller message. With ``audio_ref`` the text is taken from the
    transcription instead of ``text``.
    """

    user_id: str = Field(..., min_length=1)
    text: str = ""
    is_audio: bool = False
    audio_ref: str | None = None


class QueryResponse(BaseModel):
    response: str
