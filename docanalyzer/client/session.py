"""
Client-side session for the analyzer API.

Holds everything the user is working on (selected file, analysis result,
chat transcript, loading flags, last error) in memory.  The server keeps
nothing, so every chat turn resends the document text and the full
transcript.  Errors never propagate out of the session; they land in
``session.error`` for the caller to show and dismiss.
"""
from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

from docanalyzer.client.history import HistoryStore
from docanalyzer.config import settings
from docanalyzer.models.schemas import AnalyzeResponse, ChatMessage, ChatResponse

logger = logging.getLogger(__name__)

UNSUPPORTED_FILE_MESSAGE = "Please upload a PDF or DOCX file"


@dataclasses.dataclass
class SelectedFile:
    """A local file chosen for analysis."""

    path: Path
    mime_type: str

    @property
    def name(self) -> str:
        return self.path.name


class DocumentSession:
    """One user's working state against the analyzer API."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        history: Optional[HistoryStore] = None,
    ) -> None:
        self._http = http
        self._history = history
        self.file: Optional[SelectedFile] = None
        self.result: Optional[AnalyzeResponse] = None
        self.messages: List[ChatMessage] = []
        self.error: Optional[str] = None
        self.analysis_loading = False
        self.chat_loading = False

    # ------------------------------------------------------------------
    # File selection
    # ------------------------------------------------------------------

    def select_file(self, path: str | Path) -> bool:
        """Pick a file; only .pdf and .docx are accepted."""
        path = Path(path)
        mime_type = settings.SUPPORTED_MIME_TYPES.get(path.suffix.lower())
        if mime_type is None:
            self.error = UNSUPPORTED_FILE_MESSAGE
            self.file = None
            return False

        self.file = SelectedFile(path=path, mime_type=mime_type)
        self.error = None
        self.result = None
        return True

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    async def analyze(self) -> Optional[AnalyzeResponse]:
        """Upload the selected file; replaces any previous result on success."""
        if self.file is None or self.analysis_loading:
            return None

        self.analysis_loading = True
        self.error = None
        try:
            content = self.file.path.read_bytes()
            resp = await self._http.post(
                "/api/analyze",
                files={"file": (self.file.name, content, self.file.mime_type)},
            )
            data = _json_body(resp)
            if resp.status_code != 200:
                raise _ApiError(data.get("error") or "Analysis failed")
            self.result = AnalyzeResponse.model_validate(data)
        except (_ApiError, httpx.HTTPError, OSError, ValueError) as exc:
            logger.warning("Analysis of %s failed: %s", self.file.name, exc)
            self.error = str(exc) or "An error occurred"
            return None
        finally:
            self.analysis_loading = False

        if self._history is not None:
            self._history.add(
                file_name=self.file.name,
                word_count=self.result.word_count,
                analysis=self.result.analysis,
            )
        return self.result

    # ------------------------------------------------------------------
    # Chat
    # ------------------------------------------------------------------

    async def send_chat(self, text: str) -> Optional[ChatMessage]:
        """
        Send one message about the analysed document.

        The user message is appended before the request goes out and stays
        in the transcript even if the request fails.
        """
        text = text.strip()
        if not text or self.result is None or self.chat_loading:
            return None

        user_message = ChatMessage(role="user", content=text)
        self.messages.append(user_message)
        self.chat_loading = True
        try:
            resp = await self._http.post(
                "/api/chat",
                json={
                    "documentText": self.result.text,
                    "messages": [
                        m.model_dump(by_alias=True, include={"role", "content"})
                        for m in self.messages
                    ],
                },
            )
            data = _json_body(resp)
            if resp.status_code != 200:
                raise _ApiError(data.get("error") or "Chat failed")
            reply = ChatResponse.model_validate(data)
        except (_ApiError, httpx.HTTPError, ValueError) as exc:
            logger.warning("Chat turn failed: %s", exc)
            self.error = str(exc) or "Chat error occurred"
            return None
        finally:
            self.chat_loading = False

        assistant_message = ChatMessage(
            role="assistant", content=reply.response, image_url=reply.image_url
        )
        self.messages.append(assistant_message)
        return assistant_message

    # ------------------------------------------------------------------
    # Housekeeping
    # ------------------------------------------------------------------

    def dismiss_error(self) -> None:
        self.error = None

    def reset(self) -> None:
        self.file = None
        self.result = None
        self.messages = []
        self.error = None


class _ApiError(Exception):
    """Non-200 response from the analyzer API."""


def _json_body(resp: httpx.Response) -> Dict[str, Any]:
    data = resp.json()
    if not isinstance(data, dict):
        raise ValueError("Unexpected response from server")
    return data
