"""Schema models for the document analyzer."""
from docanalyzer.models.schemas import (
    AnalyzeResponse,
    ChatMessage,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    HealthCheckResponse,
)

__all__ = [
    "AnalyzeResponse",
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "ErrorResponse",
    "HealthCheckResponse",
]
