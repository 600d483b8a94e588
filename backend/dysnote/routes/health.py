"""
DysNote Backend — Health Check Route
=====================================

What:  Health check endpoint for monitoring and container probes.
How:   Asks the configured repository to ping its storage.

Status levels:
    - healthy:   storage reachable (HTTP 200)
    - unhealthy: storage unreachable (HTTP 503, stop routing traffic)
The in-memory store is always reachable.
"""

import logging
import time

from fastapi import APIRouter, Depends, Response

from dysnote import __version__
from dysnote.dependencies import get_note_repository
from dysnote.repositories.base import NoteRepository
from dysnote.schemas.note import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Storage unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(
    response: Response,
    repository: NoteRepository = Depends(get_note_repository),
) -> HealthResponse:
    available = await repository.ping()
    if not available:
        logger.warning("Health check: %s storage unreachable", repository.backend_name)
        response.status_code = 503

    return HealthResponse(
        status="healthy" if available else "unhealthy",
        version=__version__,
        storage=repository.backend_name,
        storage_status="available" if available else "unavailable",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
