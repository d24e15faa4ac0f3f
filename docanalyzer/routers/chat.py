"""
Document chat endpoint.

POST /  : answer the latest message about the supplied document, or return
          an image URL when the message asks for a picture.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from docanalyzer.dependencies.services import get_chat_service
from docanalyzer.models.schemas import ChatRequest, ChatResponse, ErrorResponse
from docanalyzer.services.chat_service import ChatService
from docanalyzer.services.llm_client import LLMError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=ChatResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat(
    request: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    """
    One chat turn.  The client resends the document text and the whole
    transcript every time; the server keeps nothing between calls.
    """
    try:
        reply = await chat_service.reply(request.document_text, request.messages)
    except LLMError as exc:
        logger.error("chat error: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc) or "Chat failed",
        )

    return ChatResponse(response=reply.response, image_url=reply.image_url)
