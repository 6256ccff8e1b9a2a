"""
QA Extractor: Health Check Route
===================================

What:  Health check endpoint for monitoring and container probes.
How:   Asks the model client for a lightweight reachability check and
       reports uptime.

Status levels:
    - healthy:   model API reachable (HTTP 200)
    - degraded:  model API unreachable; /extract_qa will answer 500 (HTTP 200)
"""

import logging
import time

from fastapi import APIRouter, Depends

from qa_extractor import __version__
from qa_extractor.dependencies import get_model_client
from qa_extractor.schemas.qa import HealthResponse
from qa_extractor.services.llm_base import ModelClient

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    model_client: ModelClient = Depends(get_model_client),
) -> HealthResponse:
    """
    Check the health of the service and the generative model API.

    health_check() never raises, so neither does this endpoint.
    """
    model_available = await model_client.health_check()
    if not model_available:
        logger.warning("Health check: generative model API unreachable")

    return HealthResponse(
        status="healthy" if model_available else "degraded",
        version=__version__,
        model="available" if model_available else "unavailable",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
