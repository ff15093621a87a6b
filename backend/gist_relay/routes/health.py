"""
Gist Relay — Health Check Route
================================

What:  Health check endpoint for monitoring and deployment checks.
How:   Reports configuration state only. GitHub is not contacted: a health check
       that spends API quota on every poll would be worse than none.

Status levels:
    - healthy:   GET and POST both usable
    - degraded:  GITHUB_TOKEN missing, only GET is usable
"""

import logging
import time

from fastapi import APIRouter, Depends

from gist_relay import __version__
from gist_relay.config import Settings
from gist_relay.dependencies import get_settings
from gist_relay.schemas.gist import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    if settings.gist_sharing_configured:
        gist_sharing = "configured"
        overall = "healthy"
    else:
        gist_sharing = "unconfigured"
        overall = "degraded"

    return HealthResponse(
        status=overall,
        version=__version__,
        gist_sharing=gist_sharing,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
