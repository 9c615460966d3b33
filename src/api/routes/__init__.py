"""API route modules."""

from .bubble_proxy import router as bubble_proxy_router
from .health import router as health_router

__all__ = ["health_router", "bubble_proxy_router"]
