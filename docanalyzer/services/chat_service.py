"""
Document-scoped chat with image-request diversion.

Public API
----------
is_image_request(message)                        -> bool
extract_image_prompt(message, document_text)     -> str
build_image_url(prompt)                          -> str
ChatService.reply(document_text, messages)       -> ChatReply
"""
from __future__ import annotations

import dataclasses
import logging
import re
from typing import Dict, List, Optional, Sequence
from urllib.parse import quote

from docanalyzer.config import settings
from docanalyzer.models.schemas import ChatMessage
from docanalyzer.services.llm_client import GroqChatClient

logger = logging.getLogger(__name__)


IMAGE_KEYWORDS = (
    "generate image",
    "create image",
    "draw",
    "visualize",
    "make a picture",
    "create a diagram",
    "generate a photo",
    "show me an image",
    "create an illustration",
)

_TRIGGER_WORDS = re.compile(r"generate|create|draw|make|show me|visualize", re.IGNORECASE)
_IMAGE_NOUNS = re.compile(r"image|picture|photo|illustration|diagram", re.IGNORECASE)

MIN_PROMPT_LENGTH = 10
FALLBACK_CONTEXT_CHARS = 200

# encodeURIComponent leaves these unescaped in addition to alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"

NO_RESPONSE_FALLBACK = "I apologize, but I couldn't generate a response."


@dataclasses.dataclass
class ChatReply:
    """Returned by ChatService.reply."""

    response: str
    image_url: Optional[str] = None


# ---------------------------------------------------------------------------
# Prompt templates
# ---------------------------------------------------------------------------

_CHAT_SYSTEM_PROMPT = """\
You are a helpful AI assistant analyzing a document. The user can ask you \
questions about the document and you should provide accurate, insightful \
answers based on the document content.

Document content (first {char_limit} characters):
{document_text}

Instructions:
- Answer questions specifically about this document
- Be conversational and helpful
- If asked about something not in the document, politely say so
- Provide specific examples from the document when relevant
- Keep responses concise but informative\
"""

_IMAGE_REPLY = """\
I've generated an image based on your request! Here it is:

![Generated Image]({image_url})

**Prompt used:** {prompt}

Would you like me to generate another image with different details, or do \
you have questions about the document?\
"""


# ---------------------------------------------------------------------------
# Intent classification
# ---------------------------------------------------------------------------

def is_image_request(message: str) -> bool:
    """Return True if *message* contains any image-generation keyword."""
    lowered = message.lower()
    return any(keyword in lowered for keyword in IMAGE_KEYWORDS)


def extract_image_prompt(message: str, document_text: str) -> str:
    """
    Strip trigger verbs and image nouns from *message*.

    Falls back to the start of the document when what remains is too short
    to describe anything.
    """
    prompt = _TRIGGER_WORDS.sub("", message.lower())
    prompt = _IMAGE_NOUNS.sub("", prompt).strip()

    if len(prompt) < MIN_PROMPT_LENGTH:
        prompt = f"A visual representation of: {document_text[:FALLBACK_CONTEXT_CHARS]}"
    return prompt


def build_image_url(prompt: str) -> str:
    """Percent-encode *prompt* into the image endpoint URL."""
    encoded = quote(prompt, safe=_URI_COMPONENT_SAFE)
    return (
        f"{settings.IMAGE_BASE_URL.rstrip('/')}/prompt/{encoded}"
        f"?width={settings.IMAGE_WIDTH}&height={settings.IMAGE_HEIGHT}&nologo=true"
    )


# ---------------------------------------------------------------------------
# ChatService
# ---------------------------------------------------------------------------

class ChatService:
    """Answers one chat turn; stateless between calls."""

    SYSTEM_PROMPT = _CHAT_SYSTEM_PROMPT

    def __init__(self, llm: GroqChatClient) -> None:
        self._llm = llm
        self.context_limit = settings.CHAT_CONTEXT_CHAR_LIMIT

    async def reply(
        self, document_text: str, messages: Sequence[ChatMessage]
    ) -> ChatReply:
        """
        Produce the next assistant turn.

        Image requests never reach the LLM; the returned URL is not fetched
        or verified here.

        Raises:
            LLMError: the completion request failed.
        """
        last = messages[-1]
        if last.role == "user" and is_image_request(last.content):
            prompt = extract_image_prompt(last.content, document_text)
            image_url = build_image_url(prompt)
            logger.info("Image request detected; prompt=%r", prompt)
            return ChatReply(
                response=_IMAGE_REPLY.format(image_url=image_url, prompt=prompt),
                image_url=image_url,
            )

        answer = await self._llm.complete(
            self.build_messages(document_text, messages),
            temperature=settings.CHAT_TEMPERATURE,
            max_tokens=settings.CHAT_MAX_TOKENS,
        )
        return ChatReply(response=answer or NO_RESPONSE_FALLBACK)

    def build_messages(
        self, document_text: str, messages: Sequence[ChatMessage]
    ) -> List[Dict[str, str]]:
        """System message with the document excerpt, then the full transcript."""
        system = {
            "role": "system",
            "content": self.SYSTEM_PROMPT.format(
                char_limit=self.context_limit,
                document_text=document_text[: self.context_limit],
            ),
        }
        return [system] + [{"role": m.role, "content": m.content} for m in messages]
