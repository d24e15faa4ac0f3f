"""Tests for POST /api/chat."""
from urllib.parse import unquote

import pytest
from httpx import AsyncClient

from docanalyzer.config import settings
from docanalyzer.services.chat_service import NO_RESPONSE_FALLBACK
from docanalyzer.services.llm_client import LLMError

DOCUMENT = "The 2024 field study measured river temperatures at twelve stations."


def _payload(content: str, document: str = DOCUMENT, history=None):
    messages = list(history or []) + [{"role": "user", "content": content}]
    return {"documentText": document, "messages": messages}


# ---------------------------------------------------------------------------
# Image requests
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_draw_returns_image_url_without_llm(client: AsyncClient, fake_llm):
    resp = await client.post("/api/chat", json=_payload("Draw a river winding through a valley"))

    assert resp.status_code == 200
    data = resp.json()
    prefix = f"{settings.IMAGE_BASE_URL}/prompt/"
    assert data["imageUrl"].startswith(prefix)
    assert data["imageUrl"].endswith(
        f"?width={settings.IMAGE_WIDTH}&height={settings.IMAGE_HEIGHT}&nologo=true"
    )
    encoded = data["imageUrl"][len(prefix):].split("?")[0]
    assert " " not in encoded
    assert unquote(encoded) == "a river winding through a valley"
    assert "![Generated Image](" in data["response"]
    assert fake_llm.calls == []


@pytest.mark.asyncio
async def test_short_image_prompt_falls_back_to_document(client: AsyncClient, fake_llm):
    resp = await client.post("/api/chat", json=_payload("generate image"))

    assert resp.status_code == 200
    encoded = resp.json()["imageUrl"].split("/prompt/")[1].split("?")[0]
    assert unquote(encoded) == f"A visual representation of: {DOCUMENT[:200]}"
    assert fake_llm.calls == []


@pytest.mark.asyncio
async def test_keyword_in_assistant_message_is_not_an_image_request(client: AsyncClient, fake_llm):
    fake_llm.response = "Sure."
    payload = {
        "documentText": DOCUMENT,
        "messages": [
            {"role": "user", "content": "What stations were used?"},
            {"role": "assistant", "content": "I could draw on the table in section 2."},
        ],
    }
    resp = await client.post("/api/chat", json=payload)
    assert resp.status_code == 200
    assert "imageUrl" not in resp.json()
    assert len(fake_llm.calls) == 1


# ---------------------------------------------------------------------------
# Questions
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_question_calls_llm_once_with_document_context(client: AsyncClient, fake_llm):
    fake_llm.response = "Twelve stations were used."
    head = "A" * settings.CHAT_CONTEXT_CHAR_LIMIT
    document = head + "TAIL-MARKER"
    history = [
        {"role": "user", "content": "Hi"},
        {"role": "assistant", "content": "Hello! Ask me about the document."},
    ]

    resp = await client.post(
        "/api/chat", json=_payload("How many stations?", document=document, history=history)
    )

    assert resp.status_code == 200
    assert resp.json() == {"response": "Twelve stations were used."}

    assert len(fake_llm.calls) == 1
    call = fake_llm.calls[0]
    system, *conversation = call["messages"]
    assert system["role"] == "system"
    assert head in system["content"]
    assert "TAIL-MARKER" not in system["content"]
    assert conversation == history + [{"role": "user", "content": "How many stations?"}]
    assert call["json_mode"] is False
    assert call["temperature"] == settings.CHAT_TEMPERATURE
    assert call["max_tokens"] == settings.CHAT_MAX_TOKENS


@pytest.mark.asyncio
async def test_empty_model_reply_uses_fallback(client: AsyncClient, fake_llm):
    fake_llm.response = ""
    resp = await client.post("/api/chat", json=_payload("Summarise section two"))
    assert resp.status_code == 200
    assert resp.json()["response"] == NO_RESPONSE_FALLBACK


@pytest.mark.asyncio
async def test_llm_failure_returns_500(client: AsyncClient, fake_llm):
    fake_llm.error = LLMError("LLM request timed out")
    resp = await client.post("/api/chat", json=_payload("Summarise section two"))
    assert resp.status_code == 500
    assert resp.json() == {"error": "LLM request timed out"}


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {},
        {"documentText": DOCUMENT},
        {"messages": [{"role": "user", "content": "hi"}]},
        {"documentText": "", "messages": [{"role": "user", "content": "hi"}]},
        {"documentText": DOCUMENT, "messages": []},
        {"documentText": DOCUMENT, "messages": "hi"},
        {"documentText": DOCUMENT, "messages": [{"role": "system", "content": "hi"}]},
        {"documentText": DOCUMENT, "messages": [{"role": "user"}]},
    ],
)
async def test_malformed_payload_rejected(client: AsyncClient, fake_llm, body):
    resp = await client.post("/api/chat", json=body)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid request format"}
    assert fake_llm.calls == []
