"""Version 1 of the public API."""

from .health import health_router
from .router import router

__all__ = ["health_router", "router"]
