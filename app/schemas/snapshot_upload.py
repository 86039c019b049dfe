"""
app/schemas/snapshot_upload.py

Response schemas for snapshot upload and route listing endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SnapshotUploadResponse(BaseModel):
    """
    API response model for a successful snapshot upload.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    count: int = Field(..., ge=0)
    batch_id: str = Field(..., alias="batchId")


class ErrorResponse(BaseModel):
    error: str
