"""Health check endpoint."""

import logging
from datetime import datetime, timezone
from fastapi import APIRouter

from adapter.external.remote_dictionary import DICTIONARY_API_BASE_URL, LOOKUP_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health():
    """Liveness check with the upstream dictionary configuration."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        "services": {
            "dictionary_api": {
                "base_url": DICTIONARY_API_BASE_URL,
                "timeout_seconds": LOOKUP_TIMEOUT_SECONDS,
            }
        },
    }
