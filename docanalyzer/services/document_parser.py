"""
Document parsing service for PDF and DOCX uploads.

Works entirely in memory: the upload buffer is handed to PyMuPDF or
python-docx and the plain text comes back as an ExtractedDocument.
Nothing is written to disk.
"""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import List, Optional

import fitz  # PyMuPDF
from docx import Document as DocxDocument

from docanalyzer.config import DOCX_MIME_TYPE, PDF_MIME_TYPE
from docanalyzer.utils.helpers import count_words

logger = logging.getLogger(__name__)


class UnsupportedFileTypeError(ValueError):
    """Raised when the declared MIME type is neither PDF nor DOCX."""


class ExtractionError(RuntimeError):
    """Raised when the underlying parser library cannot read the document."""


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class ExtractedDocument:
    """
    Output of the DocumentParser for a single upload.

    Attributes:
        content_type: Declared MIME type of the upload.
        text:         Full plain text, untruncated.
        page_count:   Rendered page count (PDF only; None for DOCX).
    """

    content_type: str
    text: str
    page_count: Optional[int] = None

    @property
    def word_count(self) -> int:
        return count_words(self.text)

    def is_empty(self) -> bool:
        return not self.text.strip()


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

class DocumentParser:
    """Extracts plain text from PDF and DOCX byte buffers."""

    async def extract_text(self, data: bytes, content_type: str) -> ExtractedDocument:
        """
        Dispatch on the declared MIME type and return the extracted text.

        Args:
            data:         Raw upload bytes.
            content_type: Declared MIME type of the upload.

        Raises:
            UnsupportedFileTypeError: MIME type is neither PDF nor DOCX.
            ExtractionError:          The parser library failed on the buffer.
        """
        if content_type == PDF_MIME_TYPE:
            return self._parse_pdf(data)
        if content_type == DOCX_MIME_TYPE:
            return self._parse_docx(data)
        raise UnsupportedFileTypeError(f"Unsupported file type: {content_type!r}")

    # ------------------------------------------------------------------
    # PDF
    # ------------------------------------------------------------------

    def _parse_pdf(self, data: bytes) -> ExtractedDocument:
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as exc:
            logger.error("Cannot open PDF buffer: %s", exc)
            raise ExtractionError("Failed to extract text from PDF") from exc

        try:
            if doc.needs_pass:
                raise ExtractionError("Failed to extract text from PDF")
            page_texts: List[str] = [page.get_text() for page in doc]
            page_count = doc.page_count
        except ExtractionError:
            raise
        except Exception as exc:
            logger.error("PDF text extraction failed: %s", exc)
            raise ExtractionError("Failed to extract text from PDF") from exc
        finally:
            doc.close()

        return ExtractedDocument(
            content_type=PDF_MIME_TYPE,
            text="\n".join(page_texts),
            page_count=page_count,
        )

    # ------------------------------------------------------------------
    # DOCX
    # ------------------------------------------------------------------

    def _parse_docx(self, data: bytes) -> ExtractedDocument:
        try:
            doc = DocxDocument(io.BytesIO(data))
        except Exception as exc:
            logger.error("Cannot open DOCX buffer: %s", exc)
            raise ExtractionError("Failed to extract text from DOCX") from exc

        parts: List[str] = [para.text for para in doc.paragraphs]

        # Tables are not part of doc.paragraphs
        for table in doc.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells]
                non_empty = [c for c in cells if c]
                if non_empty:
                    parts.append(" | ".join(non_empty))

        return ExtractedDocument(
            content_type=DOCX_MIME_TYPE,
            text="\n".join(parts),
        )
