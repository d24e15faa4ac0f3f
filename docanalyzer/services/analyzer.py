"""
Document analysis: one strict-JSON LLM call per document.

The model is asked for ``{summary, themes, suggestions}``.  Its output is
parsed with ``json.loads`` exactly once; malformed output is an
AnalysisError, never retried or repaired.
"""
from __future__ import annotations

import dataclasses
import json
import logging
from typing import Any, List

from docanalyzer.config import settings
from docanalyzer.services.llm_client import GroqChatClient

logger = logging.getLogger(__name__)


class AnalysisError(RuntimeError):
    """Raised when the model's output is not the expected JSON object."""


@dataclasses.dataclass
class AnalysisResult:
    """Returned by DocumentAnalyzer.analyze."""

    summary: str
    themes: List[str]
    suggestions: List[str]


# ---------------------------------------------------------------------------
# Prompt templates
# ---------------------------------------------------------------------------

_ANALYSIS_SYSTEM_PROMPT = """\
You are an expert document analyzer.

Return ONLY valid JSON in the following structure:

{
  "summary": "Full summary here...",
  "themes": ["theme1", "theme2", "theme3"],
  "suggestions": [
    "Each suggestion must be a complete sentence of at least 12 words.",
    "Suggestions can give tips on improving the writing, such as grammatical mistakes, formatting or presentation issues.",
    "Include at least 5 suggestions.",
    "Suggestions must be actionable and extremely specific."
  ]
}

RULES:
- The summary part gives a brief summary.
- Suggestions must be related to the document.
- Do NOT include any text from the original document.
- Do NOT include cut-off words.
- Do NOT include markdown.
- NEVER output text outside the JSON block.\
"""

_ANALYSIS_USER_PROMPT = "Analyze this document:\n\n{document_text}"

MIN_SUGGESTIONS = 5


class DocumentAnalyzer:
    """Summarises a document and proposes improvements via the LLM."""

    SYSTEM_PROMPT = _ANALYSIS_SYSTEM_PROMPT
    USER_PROMPT = _ANALYSIS_USER_PROMPT

    def __init__(self, llm: GroqChatClient) -> None:
        self._llm = llm
        self.char_limit = settings.ANALYSIS_CHAR_LIMIT

    async def analyze(self, text: str) -> AnalysisResult:
        """
        Send the first ``char_limit`` characters of *text* to the model.

        Raises:
            LLMError:      the completion request failed.
            AnalysisError: the reply is not a JSON object with a string summary.
        """
        excerpt = text[: self.char_limit]
        if len(text) > self.char_limit:
            logger.info(
                "Truncated document from %d to %d characters for analysis",
                len(text),
                self.char_limit,
            )

        raw = await self._llm.complete(
            [
                {"role": "system", "content": self.SYSTEM_PROMPT},
                {"role": "user", "content": self.USER_PROMPT.format(document_text=excerpt)},
            ],
            temperature=settings.ANALYSIS_TEMPERATURE,
            max_tokens=settings.ANALYSIS_MAX_TOKENS,
            json_mode=True,
        )
        return self.parse_response(raw)

    @staticmethod
    def parse_response(raw: str) -> AnalysisResult:
        """Coerce the model's JSON reply into an AnalysisResult."""
        try:
            payload = json.loads(raw)
        except (json.JSONDecodeError, TypeError) as exc:
            logger.warning("Model returned malformed JSON. Preview: %s", (raw or "")[:400])
            raise AnalysisError("Analysis failed") from exc

        if not isinstance(payload, dict) or not isinstance(payload.get("summary"), str):
            logger.warning("Model JSON is missing a string 'summary'. Preview: %s", raw[:400])
            raise AnalysisError("Analysis failed")

        suggestions = _string_list(payload.get("suggestions"))
        if len(suggestions) < MIN_SUGGESTIONS:
            logger.warning(
                "Model returned %d suggestions (expected at least %d)",
                len(suggestions),
                MIN_SUGGESTIONS,
            )

        return AnalysisResult(
            summary=payload["summary"],
            themes=_string_list(payload.get("themes")),
            suggestions=suggestions,
        )


def _string_list(value: Any) -> List[str]:
    """Keep string items of a JSON array as-is; anything else becomes []."""
    if not isinstance(value, list):
        return []
    return [item if isinstance(item, str) else str(item) for item in value if item is not None]
