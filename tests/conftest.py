"""
Shared fixtures for the document analyzer tests.

The app runs in-process through httpx's ASGITransport.  The Groq client and
the document parser are swapped out with ``app.dependency_overrides`` so no
test ever reaches the network.
"""
from __future__ import annotations

import io
import json
from typing import Any, AsyncGenerator, Dict, List, Optional

import fitz  # PyMuPDF
import pytest
import pytest_asyncio
from docx import Document as DocxDocument
from httpx import ASGITransport, AsyncClient

from docanalyzer.dependencies.services import get_document_parser, get_llm_client
from docanalyzer.main import app
from docanalyzer.services.document_parser import DocumentParser, ExtractedDocument

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

VALID_ANALYSIS = {
    "summary": "The report reviews quarterly sales across three regions.",
    "themes": ["sales", "regions", "growth"],
    "suggestions": [
        "Add a short executive summary at the top so readers grasp the key findings quickly.",
        "Label every chart axis with units so that regional comparisons are easy to read.",
        "Split the long methodology paragraph into bullet points to improve overall readability.",
        "Fix the inconsistent date formats used across the tables in the second section.",
        "Include a conclusion that ties the regional trends back to the stated objectives.",
    ],
}


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------

class FakeLLMClient:
    """Records every completion request and answers with a canned reply."""

    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.response: str = json.dumps(VALID_ANALYSIS)
        self.error: Optional[Exception] = None
        self.healthy = True

    async def complete(
        self,
        messages: List[Dict[str, str]],
        *,
        temperature: float,
        max_tokens: int,
        json_mode: bool = False,
    ) -> str:
        self.calls.append(
            {
                "messages": messages,
                "temperature": temperature,
                "max_tokens": max_tokens,
                "json_mode": json_mode,
            }
        )
        if self.error is not None:
            raise self.error
        return self.response

    async def check_health(self) -> bool:
        return self.healthy


class SpyParser(DocumentParser):
    """Real parser that records calls and can be forced to return fixed text."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: List[str] = []
        self.forced_text: Optional[str] = None

    async def extract_text(self, data: bytes, content_type: str) -> ExtractedDocument:
        self.calls.append(content_type)
        if self.forced_text is not None:
            return ExtractedDocument(content_type=content_type, text=self.forced_text)
        return await super().extract_text(data, content_type)


# ---------------------------------------------------------------------------
# Document builders
# ---------------------------------------------------------------------------

def build_pdf(lines: List[str]) -> bytes:
    """Return a one-page PDF containing *lines* (blank page when empty)."""
    doc = fitz.open()
    page = doc.new_page()
    y = 72
    for line in lines:
        page.insert_text((72, y), line)
        y += 16
    data = doc.tobytes()
    doc.close()
    return data


def build_docx(paragraphs: List[str], table: Optional[List[List[str]]] = None) -> bytes:
    doc = DocxDocument()
    for text in paragraphs:
        doc.add_paragraph(text)
    if table:
        t = doc.add_table(rows=len(table), cols=len(table[0]))
        for r, row in enumerate(table):
            for c, value in enumerate(row):
                t.cell(r, c).text = value
    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


# ---------------------------------------------------------------------------
# Per-test fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def spy_parser() -> SpyParser:
    return SpyParser()


@pytest_asyncio.fixture
async def client(
    fake_llm: FakeLLMClient, spy_parser: SpyParser
) -> AsyncGenerator[AsyncClient, None]:
    """
    httpx AsyncClient wired to the FastAPI app with the LLM client and the
    parser overridden by the per-test doubles.
    """
    app.dependency_overrides[get_llm_client] = lambda: fake_llm
    app.dependency_overrides[get_document_parser] = lambda: spy_parser

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
