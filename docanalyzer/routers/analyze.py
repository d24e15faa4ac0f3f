"""
Document analysis endpoint.

POST /  : extract text from a PDF or DOCX upload and analyse it with the LLM.
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from docanalyzer.config import settings
from docanalyzer.dependencies.services import get_document_analyzer, get_document_parser
from docanalyzer.models.schemas import AnalyzeResponse, ErrorResponse
from docanalyzer.services.analyzer import AnalysisError, DocumentAnalyzer
from docanalyzer.services.document_parser import DocumentParser, ExtractionError
from docanalyzer.services.llm_client import LLMError

logger = logging.getLogger(__name__)

router = APIRouter()

_READ_SLICE = 1024 * 1024  # 1 MB


@router.post(
    "",
    response_model=AnalyzeResponse,
    status_code=status.HTTP_200_OK,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def analyze_document(
    file: Optional[UploadFile] = File(None),
    parser: DocumentParser = Depends(get_document_parser),
    analyzer: DocumentAnalyzer = Depends(get_document_analyzer),
) -> AnalyzeResponse:
    """
    Extract text from the upload and return the LLM's summary and suggestions.

    - Only PDF and DOCX (by declared content type) are accepted
    - The model sees the first 15 000 characters; the word count covers the whole text
    - Nothing is stored: every call is a fresh extraction and analysis
    """
    if file is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file provided",
        )

    content_type = file.content_type or ""
    if not settings.is_supported_mime_type(content_type):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Unsupported file type",
        )

    data = await _read_upload(file)
    logger.info("Received %r (%s, %s bytes)", file.filename, content_type, f"{len(data):,}")

    try:
        extracted = await parser.extract_text(data, content_type)
    except ExtractionError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        )

    if extracted.is_empty():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not extract text from document",
        )

    try:
        result = await analyzer.analyze(extracted.text)
    except (LLMError, AnalysisError) as exc:
        logger.error("Analysis error for %r: %s", file.filename, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc) or "Analysis failed",
        )

    return AnalyzeResponse(
        text=extracted.text,
        analysis=result.summary,
        word_count=extracted.word_count,
        suggestions=result.suggestions,
        themes=result.themes,
    )


async def _read_upload(file: UploadFile) -> bytes:
    """Read the upload in slices while enforcing MAX_FILE_SIZE."""
    buffer = bytearray()
    while True:
        chunk = await file.read(_READ_SLICE)
        if not chunk:
            break
        buffer.extend(chunk)
        if len(buffer) > settings.MAX_FILE_SIZE:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=(
                    f"File exceeds the {settings.MAX_FILE_SIZE // (1024 * 1024)} MB "
                    "size limit."
                ),
            )
    return bytes(buffer)
