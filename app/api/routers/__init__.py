"""
app/api/routers package marker.
"""

from app.api.routers.query_router import router as query_router
from app.api.routers.routes_router import router as routes_router
from app.api.routers.snapshot_upload import router as snapshot_upload_router
from app.api.routers.users_router import router as users_router

__all__ = [
    "query_router",
    "routes_router",
    "snapshot_upload_router",
    "users_router",
]
