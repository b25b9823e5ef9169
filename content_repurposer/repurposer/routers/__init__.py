"""API routers."""
from repurposer.routers.health_router import router as health_router
from repurposer.routers.projects_router import router as projects_router
from repurposer.routers.content_router import router as content_router
from repurposer.routers.user_router import router as user_router

__all__ = [
    "health_router",
    "projects_router",
    "content_router",
    "user_router",
]
