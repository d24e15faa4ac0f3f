"""
Pydantic schemas for request/response validation.

Field names are snake_case in Python and camelCase on the wire.
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List, Literal
from datetime import datetime


class _CamelModel(BaseModel):
    """Accept both the Python name and the camelCase alias on input."""

    model_config = ConfigDict(populate_by_name=True)


# Analysis Schemas
class AnalyzeResponse(_CamelModel):
    """Response for POST /api/analyze."""

    text: str
    analysis: str
    word_count: int = Field(..., alias="wordCount", ge=0)
    suggestions: List[str] = Field(default_factory=list)
    themes: List[str] = Field(default_factory=list)


# Chat Schemas
class ChatMessage(_CamelModel):
    """One turn of the document-scoped conversation."""

    role: Literal["user", "assistant"]
    content: str
    image_url: Optional[str] = Field(None, alias="imageUrl")


class ChatRequest(_CamelModel):
    """Request body for POST /api/chat."""

    document_text: str = Field(..., alias="documentText", min_length=1)
    messages: List[ChatMessage] = Field(..., min_length=1)


class ChatResponse(_CamelModel):
    """Response for POST /api/chat."""

    response: str
    image_url: Optional[str] = Field(None, alias="imageUrl")


# Error Schema
class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx response."""

    error: str


# Health Check Schema
class HealthCheckResponse(BaseModel):
    """Schema for health check endpoint."""

    status: str
    llm: str
    timestamp: datetime
    version: str = "0.1.0"
