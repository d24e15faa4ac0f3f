"""
Service dependencies for FastAPI routes.

Each request gets fresh, stateless service objects.  Tests swap the
collaborators out through ``app.dependency_overrides``.
"""
from __future__ import annotations

from fastapi import Depends

from docanalyzer.services.analyzer import DocumentAnalyzer
from docanalyzer.services.chat_service import ChatService
from docanalyzer.services.document_parser import DocumentParser
from docanalyzer.services.llm_client import GroqChatClient


def get_llm_client() -> GroqChatClient:
    """Groq client built from the current settings."""
    return GroqChatClient()


def get_document_parser() -> DocumentParser:
    return DocumentParser()


def get_document_analyzer(
    llm: GroqChatClient = Depends(get_llm_client),
) -> DocumentAnalyzer:
    return DocumentAnalyzer(llm)


def get_chat_service(
    llm: GroqChatClient = Depends(get_llm_client),
) -> ChatService:
    return ChatService(llm)
