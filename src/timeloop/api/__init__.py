"""HTTP API for Timeloop."""

from timeloop.api.routes import router

__all__ = ["router"]
