"""Tests for the local analysis history file."""
import json

from docanalyzer.client.history import HISTORY_KEY, HistoryStore


def test_empty_when_file_missing(tmp_path):
    assert HistoryStore(str(tmp_path / "missing.json")).list() == []


def test_add_persists_camel_case_under_single_key(tmp_path):
    path = tmp_path / "history.json"
    store = HistoryStore(str(path))

    item = store.add(file_name="cv.docx", word_count=321, analysis="A strong CV.")

    data = json.loads(path.read_text())
    assert list(data) == [HISTORY_KEY]
    assert data[HISTORY_KEY] == [
        {
            "id": item.id,
            "fileName": "cv.docx",
            "timestamp": item.timestamp,
            "wordCount": 321,
            "analysis": "A strong CV.",
        }
    ]


def test_newest_first_and_delete(tmp_path):
    store = HistoryStore(str(tmp_path / "history.json"))
    first = store.add("a.pdf", 1, "first")
    second = store.add("b.pdf", 2, "second")

    assert [i.id for i in store.list()] == [second.id, first.id]
    assert store.delete(first.id) is True
    assert [i.id for i in store.list()] == [second.id]
    assert store.delete("unknown") is False


def test_clear_removes_all(tmp_path):
    store = HistoryStore(str(tmp_path / "history.json"))
    store.add("a.pdf", 1, "first")
    store.clear()
    assert store.list() == []


def test_unreadable_file_is_treated_as_empty(tmp_path):
    path = tmp_path / "history.json"
    path.write_text("{not json")
    store = HistoryStore(str(path))
    assert store.list() == []
    store.add("a.pdf", 1, "first")
    assert len(store.list()) == 1


def test_malformed_entries_skipped(tmp_path):
    path = tmp_path / "history.json"
    path.write_text(json.dumps({HISTORY_KEY: [{"id": "x"}, {
        "id": "ok", "fileName": "a.pdf", "timestamp": 1, "wordCount": 3, "analysis": "fine",
    }]}))
    assert [i.id for i in HistoryStore(str(path)).list()] == ["ok"]
