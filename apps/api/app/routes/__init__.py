"""Route modules."""

from .auth import router as auth_router
from .links import router as links_router
from .profiles import router as profiles_router

__all__ = ["auth_router", "links_router", "profiles_router"]
