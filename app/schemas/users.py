"""
app/schemas/users.py

Request/response schemas for admin user management.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class UserAccountResponse(BaseModel):
    id: str
    email: str
    name: str | None = None
    role: str
    route: str | None = None
    quota_percentage: float | None = None


class RouteAssignmentRequest(BaseModel):
    """
    New route for a seller. ``quota_percentage`` is left unchanged when
    omitted.
    """

    route: str = ""
    quota_percentage: float | None = Field(default=None, ge=0, le=100)


class RouteAssignmentResponse(BaseModel):
    success: bool
    user: UserAccountResponse
