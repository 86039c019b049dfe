"""
db/models/user.py

Sales representative account: the route it works and its quota target.
"""

import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Index, Numeric, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from db.models.report import Report


class User(Base, TimestampMixin):
    """
    Represents one seller. Queries are scoped to ``route``; snapshot rows are
    matched against it by route code.
    """

    __tablename__ = "app_users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    role: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default="user",
        server_default="user",
    )

    route: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
        comment="Route code this seller is assigned to",
    )

    quota_percentage: Mapped[Decimal | None] = mapped_column(
        Numeric(5, 2),
        nullable=True,
        comment="R+N quota target shown to the assistant",
    )

    reports: Mapped[list["Report"]] = relationship(
        "Report",
        back_populates="user",
        passive_deletes=True,
    )

    __table_args__ = (Index("ix_app_users_route", "route"),)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} route={self.route!r}>"
