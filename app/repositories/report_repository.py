"""
app/repositories/report_repository.py

Persistence for field reports extracted from conversations.
"""

from __future__ import annotations

import uuid

from sqlalchemy.orm import Session

from app.repositories.base import ReportSink
from db.models.report import Report, ReportStatus


class ReportRepository(ReportSink):
    def __init__(self, session: Session) -> None:
        self._session = session

    def create_report(self, user_id: str, content: str) -> None:
        report = Report(
            content=content,
            user_id=uuid.UUID(str(user_id)),
            status=ReportStatus.PENDING,
        )
        self._session.add(report)
        self._session.commit()
