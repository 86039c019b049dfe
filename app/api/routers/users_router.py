"""
app/api/routers/users_router.py

Admin endpoints for listing sellers and assigning their routes.
"""

from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.api.dependencies import get_user_admin
from app.repositories.base import UserAdministration
from app.schemas.snapshot_upload import ErrorResponse
from app.schemas.users import RouteAssignmentRequest, RouteAssignmentResponse, UserAccountResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["users"])


@router.get(
    "/users",
    response_model=list[UserAccountResponse],
    responses={500: {"model": ErrorResponse}},
)
def list_users(admin: UserAdministration = Depends(get_user_admin)):
    try:
        accounts = admin.list_users()
    except SQLAlchemyError:
        logger.exception("Failed to list users")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Error obteniendo usuarios."},
        )
    return [UserAccountResponse(**asdict(account)) for account in accounts]


@router.patch(
    "/users/{user_id}/route",
    response_model=RouteAssignmentResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def assign_route(
    user_id: str,
    request: RouteAssignmentRequest,
    admin: UserAdministration = Depends(get_user_admin),
):
    """
    Assign the route (and optionally the quota) a seller's queries are
    scoped to.
    """

    route_code = request.route.strip()
    if not route_code:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Ruta requerida."},
        )

    try:
        account = admin.assign_route(
            user_id,
            route_code,
            quota_percentage=request.quota_percentage,
        )
    except SQLAlchemyError:
        logger.exception("Failed to assign route user_id=%s", user_id)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Error actualizando ruta."},
        )

    if account is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "Usuario no encontrado."},
        )

    logger.info("Route assigned user_id=%s route=%s", user_id, route_code)
    return RouteAssignmentResponse(success=True, user=UserAccountResponse(**asdict(account)))
