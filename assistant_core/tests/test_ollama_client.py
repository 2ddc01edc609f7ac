import asyncio

import httpx
import pytest

from assistant_core.domain.exceptions import UpstreamError
from assistant_core.domain.models import ChatTurn
from assistant_core.providers.base import APOLOGY_TEXT, ProviderConfig
from assistant_core.providers.ollama_client import OllamaClient

CONFIG = ProviderConfig(kind="ollama", base_url="http://ollama:11434", model="llama3", timeout=5.0)
TURNS = [ChatTurn(role="user", content="hi"), ChatTurn(role="assistant", content="hello"), ChatTurn(role="user", content="walls?")]


def _install(monkeypatch, handler):
    """用 handler(url, payload) 模拟 httpx.AsyncClient.post，返回调用记录。"""

    calls = []

    class Client:
        def __init__(self, *a, **kw):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, *a):
            return False

        async def post(self, url, json=None, **_):
            calls.append((url, json))
            return await handler(url, json)

    monkeypatch.setattr("httpx.AsyncClient", Client)
    return calls


def test_chat_endpoint_success(monkeypatch):
    async def handler(url, payload):
        return httpx.Response(200, json={"message": {"role": "assistant", "content": "Use the Wall tool."}})

    calls = _install(monkeypatch, handler)
    reply = asyncio.run(OllamaClient().generate("Be helpful.", TURNS, CONFIG))

    assert reply.text == "Use the Wall tool."
    assert reply.provider == "ollama"
    assert reply.model == "llama3"
    posts = calls
    assert len(posts) == 1
    url, payload = posts[0]
    assert url == "http://ollama:11434/api/chat"
    assert payload["stream"] is False
    assert payload["messages"][0] == {"role": "system", "content": "Be helpful."}
    assert [m["role"] for m in payload["messages"][1:]] == ["user", "assistant", "user"]


def test_chat_failure_retries_generate_once_with_transcript(monkeypatch):
    async def handler(url, payload):
        if url.endswith("/api/chat"):
            return httpx.Response(404, json={"error": "chat not supported"})
        return httpx.Response(200, json={"response": "Click the Wall tool."})

    calls = _install(monkeypatch, handler)
    reply = asyncio.run(OllamaClient().generate("Be helpful.", TURNS, CONFIG))

    assert reply.text == "Click the Wall tool."
    posts = calls
    assert [u for u, _ in posts] == ["http://ollama:11434/api/chat", "http://ollama:11434/api/generate"]
    assert posts[1][1]["prompt"] == "System: Be helpful.\nUser: hi\nAssistant: hello\nUser: walls?"


def test_both_endpoints_fail_reports_generate_error(monkeypatch):
    async def handler(url, payload):
        if url.endswith("/api/chat"):
            return httpx.Response(500, json={"error": "chat exploded"})
        return httpx.Response(500, json={"error": "model 'llama3' not found"})

    _install(monkeypatch, handler)
    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(OllamaClient().generate("x", TURNS, CONFIG))

    assert exc_info.value.message == "model 'llama3' not found"
    assert exc_info.value.http_status == 502
    assert exc_info.value.extra["status"] == 500


def test_generate_error_without_body_names_status(monkeypatch):
    async def handler(url, payload):
        return httpx.Response(503, text="<html>down</html>")

    _install(monkeypatch, handler)
    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(OllamaClient().generate("x", TURNS, CONFIG))
    assert exc_info.value.message == "Ollama request failed (503)"


def test_empty_success_uses_apology(monkeypatch):
    async def handler(url, payload):
        return httpx.Response(200, json={"message": {"role": "assistant", "content": ""}})

    _install(monkeypatch, handler)
    reply = asyncio.run(OllamaClient().generate("x", TURNS, CONFIG))
    assert reply.text == APOLOGY_TEXT


def test_timeout_is_enforced_on_both_calls(monkeypatch):
    async def handler(url, payload):
        await asyncio.sleep(5)
        return httpx.Response(200, json={"response": "too late"})

    calls = _install(monkeypatch, handler)
    fast = ProviderConfig(kind="ollama", base_url="http://ollama:11434", model="llama3", timeout=0.05)
    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(OllamaClient().generate("x", TURNS, fast))

    assert exc_info.value.code == "UPSTREAM_TIMEOUT"
    assert len(calls) == 2


def test_network_error_on_chat_falls_back_to_generate(monkeypatch):
    async def handler(url, payload):
        if url.endswith("/api/chat"):
            raise httpx.ConnectError("connection refused")
        return httpx.Response(200, json={"response": "ok"})

    _install(monkeypatch, handler)
    reply = asyncio.run(OllamaClient().generate("x", TURNS, CONFIG))
    assert reply.text == "ok"


def test_network_error_on_generate_raises(monkeypatch):
    async def handler(url, payload):
        raise httpx.ConnectError("connection refused")

    _install(monkeypatch, handler)
    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(OllamaClient().generate("x", TURNS, CONFIG))
    assert exc_info.value.code == "NETWORK_ERROR"
    assert "connection refused" in exc_info.value.message
