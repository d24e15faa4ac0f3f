"""
Local analysis history.

A small JSON key-value file standing in for browser local storage.  All
entries live under the single key ``analysisHistory`` as a list of
``{id, fileName, timestamp, wordCount, analysis}`` objects.  There is no
schema versioning.
"""
from __future__ import annotations

import json
import logging
import time
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from docanalyzer.config import settings

logger = logging.getLogger(__name__)

HISTORY_KEY = "analysisHistory"


class HistoryItem(BaseModel):
    """One past analysis, as shown in the history list."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    file_name: str = Field(..., alias="fileName")
    timestamp: int  # epoch milliseconds
    word_count: int = Field(..., alias="wordCount")
    analysis: str


class HistoryStore:
    """Reads and writes the history list in a local JSON file."""

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = Path(path or settings.HISTORY_FILE).expanduser()

    def list(self) -> List[HistoryItem]:
        """Return stored items, newest first."""
        items: List[HistoryItem] = []
        for raw in self._read().get(HISTORY_KEY, []):
            try:
                items.append(HistoryItem.model_validate(raw))
            except ValidationError as exc:
                logger.warning("Skipping malformed history entry: %s", exc)
        return items

    def add(self, file_name: str, word_count: int, analysis: str) -> HistoryItem:
        item = HistoryItem(
            id=uuid.uuid4().hex,
            file_name=file_name,
            timestamp=int(time.time() * 1000),
            word_count=word_count,
            analysis=analysis,
        )
        self._save([item] + self.list())
        return item

    def delete(self, item_id: str) -> bool:
        """Remove one item.  Returns False if no item had that id."""
        items = self.list()
        remaining = [item for item in items if item.id != item_id]
        if len(remaining) == len(items):
            return False
        self._save(remaining)
        return True

    def clear(self) -> None:
        data = self._read()
        if data.pop(HISTORY_KEY, None) is not None:
            self._write(data)

    # ------------------------------------------------------------------
    # File helpers
    # ------------------------------------------------------------------

    def _save(self, items: List[HistoryItem]) -> None:
        data = self._read()
        data[HISTORY_KEY] = [item.model_dump(by_alias=True) for item in items]
        self._write(data)

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable history file %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
