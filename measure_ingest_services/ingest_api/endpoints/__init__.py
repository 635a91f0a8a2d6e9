"""Módulo de endpoints HTTP.

Ingest lives in transports/csv; this package holds the read side and
operational endpoints.
"""

from .health import router as health_router
from .summaries import router as summaries_router

__all__ = ["health_router", "summaries_router"]
