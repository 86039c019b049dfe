"""
app/repositories/user_repository.py

Route assignment lookups for sellers and admin-side route assignment.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.repositories.base import RouteAssignment, UserAccount, UserAdministration, UserDirectory
from db.models.user import User


def _parse_user_id(user_id: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(str(user_id))
    except ValueError:
        return None


class UserRouteRepository(UserDirectory, UserAdministration):
    def __init__(self, session: Session) -> None:
        self._session = session

    def find_user_route(self, user_id: str) -> RouteAssignment | None:
        """
        Resolve a user's route. Malformed ids are treated as unknown users.
        """

        parsed_id = _parse_user_id(user_id)
        if parsed_id is None:
            return None

        user = self._get_user(parsed_id)
        if user is None or not user.route:
            return None

        quota = float(user.quota_percentage) if user.quota_percentage is not None else None
        return RouteAssignment(
            route_code=user.route.strip(),
            quota_percentage=quota,
            user_name=user.name,
        )

    def list_users(self) -> list[UserAccount]:
        stmt = select(User).order_by(User.created_at.desc())
        return [self._to_account(user) for user in self._session.execute(stmt).scalars().all()]

    def assign_route(
        self,
        user_id: str,
        route_code: str,
        *,
        quota_percentage: float | None = None,
    ) -> UserAccount | None:
        parsed_id = _parse_user_id(user_id)
        if parsed_id is None:
            return None

        try:
            user = self._get_user(parsed_id)
            if user is None:
                return None
            user.route = route_code.strip()
            if quota_percentage is not None:
                user.quota_percentage = Decimal(str(quota_percentage))
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise
        return self._to_account(user)

    def _get_user(self, user_id: uuid.UUID) -> User | None:
        return self._session.execute(
            select(User).where(User.id == user_id)
        ).scalars().first()

    @staticmethod
    def _to_account(user: User) -> UserAccount:
        return UserAccount(
            id=str(user.id),
            email=user.email,
            name=user.name,
            role=user.role,
            route=user.route,
            quota_percentage=float(user.quota_percentage) if user.quota_percentage is not None else None,
        )
