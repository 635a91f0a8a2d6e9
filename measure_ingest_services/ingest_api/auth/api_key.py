"""API key check for write endpoints.

SECURITY: in production INGEST_API_KEY must be set; in dev an unset key
lets requests through with a warning.
"""

from __future__ import annotations

import logging
import os
import secrets

from fastapi import Header, HTTPException

logger = logging.getLogger(__name__)


def _is_production() -> bool:
    return os.getenv("ENVIRONMENT", "").strip().lower() == "production"


def require_api_key(
    x_api_key: str | None = Header(default=None, alias="X-API-Key")
) -> None:
    expected = os.getenv("INGEST_API_KEY")

    if not expected:
        if _is_production():
            logger.error("CRITICAL: INGEST_API_KEY not configured in production!")
            raise HTTPException(status_code=500, detail="Server misconfiguration: API key not set")
        logger.debug("[AUTH] INGEST_API_KEY not set - unauthenticated upload allowed (DEV ONLY)")
        return

    if not x_api_key:
        raise HTTPException(status_code=401, detail="API key required")

    if not secrets.compare_digest(x_api_key, expected):
        logger.warning("[AUTH] Invalid API key on upload")
        raise HTTPException(status_code=401, detail="Invalid API key")
