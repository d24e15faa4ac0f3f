"""
Health check endpoint.
"""
from fastapi import APIRouter, Depends
from datetime import datetime, timezone
import logging

from docanalyzer.dependencies.services import get_llm_client
from docanalyzer.models.schemas import HealthCheckResponse
from docanalyzer.services.llm_client import GroqChatClient

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=HealthCheckResponse)
async def health_check(llm: GroqChatClient = Depends(get_llm_client)):
    """
    Health check endpoint to verify system status.

    Returns:
        HealthCheckResponse with status of the LLM provider
    """
    llm_status = "ok" if await llm.check_health() else "error"
    if llm_status == "error":
        logger.warning("LLM health check failed")

    return HealthCheckResponse(
        status="healthy" if llm_status == "ok" else "degraded",
        llm=llm_status,
        timestamp=datetime.now(timezone.utc),
    )
