"""Aggregate router exports."""
from .auth import router as auth_router
from .collections import router as collections_router
from .feeds import router as feeds_router
from .follows import router as follows_router
from .groups import router as groups_router
from .notifications import router as notifications_router
from .posts import router as posts_router
from .profiles import router as profiles_router
from .projects import router as projects_router
from .stories import router as stories_router
from .uploads import router as uploads_router

__all__ = [
    "auth_router",
    "collections_router",
    "feeds_router",
    "follows_router",
    "groups_router",
    "notifications_router",
    "posts_router",
    "profiles_router",
    "projects_router",
    "stories_router",
    "uploads_router",
]
