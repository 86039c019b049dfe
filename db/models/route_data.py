"""
db/models/route_data.py

One client row of the current route snapshot.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index, String, func
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class RouteData(Base):
    """
    Snapshot row. The whole table is replaced on every upload, so row ids
    carry no meaning across batches.
    """

    __tablename__ = "route_data"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    route_code: Mapped[str] = mapped_column(String(64), nullable=False)
    client_code: Mapped[str] = mapped_column(String(64), nullable=False)
    client_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    visit_day: Mapped[str | None] = mapped_column(String(64), nullable=True)
    data: Mapped[dict[str, str]] = mapped_column(
        JSONB,
        nullable=False,
        comment="Dynamic attribute bag keyed by canonical column key",
    )
    batch_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Upload timestamp shared by every row of one snapshot",
    )
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        Index("ix_route_data_route_code", "route_code"),
        Index("ix_route_data_route_code_uploaded_at", "route_code", "uploaded_at"),
    )

    def __repr__(self) -> str:
        return f"<RouteData route={self.route_code!r} client={self.client_code!r}>"
