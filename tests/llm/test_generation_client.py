import asyncio
import json

import httpx
import pytest
from unittest.mock import AsyncMock

from config.settings import GeminiSettings
from src.llm.client import GenerationClient, build_payload
from src.llm.errors import GenerationConfigError, GenerationError, TransientGenerationError


def _reply(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def _client(settings, handler, sleep=None):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GenerationClient(settings, http_client=http_client, sleep=sleep or AsyncMock())


@pytest.mark.asyncio
async def test_generate_posts_prompt_with_api_key(gemini_settings):
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["key"] = request.headers["x-goog-api-key"]
        seen["body"] = request.content
        return httpx.Response(200, json=_reply('{"ok": true}'))

    client = _client(gemini_settings, handler)
    assert await client.generate("hello") == '{"ok": true}'

    assert seen["url"] == "https://generativelanguage.googleapis.com/v1beta/models/gemini-test:generateContent"
    assert seen["key"] == "test-key"
    assert b'"text":"hello"' in seen["body"].replace(b" ", b"")


@pytest.mark.asyncio
async def test_multi_part_text_is_joined(gemini_settings):
    payload = {"candidates": [{"content": {"parts": [{"text": "{\"a\":"}, {"text": " 1}"}]}}]}
    client = _client(gemini_settings, lambda request: httpx.Response(200, json=payload))
    assert await client.generate("p") == '{"a": 1}'


@pytest.mark.asyncio
@pytest.mark.parametrize("api_key", [None, "", "  ", "your_gemini_api_key_here"])
async def test_missing_credentials_never_send_a_request(api_key):
    handler_calls = []

    def handler(request):
        handler_calls.append(request)
        return httpx.Response(200, json=_reply("x"))

    client = _client(GeminiSettings(api_key=api_key), handler)
    assert client.is_available() is False
    with pytest.raises(GenerationConfigError):
        await client.generate_with_retry("p")
    assert handler_calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [429, 500, 503])
async def test_retryable_statuses_raise_transient(gemini_settings, status):
    client = _client(gemini_settings, lambda request: httpx.Response(status, text="busy"))
    with pytest.raises(TransientGenerationError, match=str(status)):
        await client.generate("p")


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 403, 404])
async def test_client_errors_are_not_transient(gemini_settings, status):
    client = _client(gemini_settings, lambda request: httpx.Response(status, text="nope"))
    with pytest.raises(GenerationError) as exc_info:
        await client.generate("p")
    assert not isinstance(exc_info.value, TransientGenerationError)


@pytest.mark.asyncio
async def test_transport_error_is_transient(gemini_settings):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransientGenerationError, match="Request error"):
        await _client(gemini_settings, handler).generate("p")


@pytest.mark.asyncio
async def test_attempt_timeout_is_transient():
    settings = GeminiSettings(api_key="k", timeout_seconds=0.01)

    async def handler(request):
        await asyncio.sleep(1)
        return httpx.Response(200, json=_reply("late"))

    with pytest.raises(TransientGenerationError, match="timed out"):
        await _client(settings, handler).generate("p")


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{}, {"candidates": []}, _reply("   ")])
async def test_unusable_reply_raises(gemini_settings, payload):
    client = _client(gemini_settings, lambda request: httpx.Response(200, json=payload))
    with pytest.raises(GenerationError):
        await client.generate("p")


@pytest.mark.asyncio
async def test_non_json_body_raises(gemini_settings):
    client = _client(gemini_settings, lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(GenerationError, match="invalid JSON"):
        await client.generate("p")


@pytest.mark.asyncio
async def test_generate_with_retry_recovers_after_rate_limit(gemini_settings):
    responses = iter([httpx.Response(429), httpx.Response(200, json=_reply("done"))])
    sleep = AsyncMock()
    client = _client(gemini_settings, lambda request: next(responses), sleep=sleep)

    assert await client.generate_with_retry("p") == "done"
    sleep.assert_awaited_once_with(1.0)


@pytest.mark.asyncio
async def test_generate_with_retry_exhausts_attempts(gemini_settings):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(503)

    sleep = AsyncMock()
    client = _client(gemini_settings, handler, sleep=sleep)
    with pytest.raises(TransientGenerationError):
        await client.generate_with_retry("p")

    # max_retries=2 in the fixture settings
    assert len(calls) == 3
    assert [c.args[0] for c in sleep.await_args_list] == [1.0, 2.0]


@pytest.mark.asyncio
async def test_aclose_leaves_injected_http_client_open(gemini_settings):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
    client = GenerationClient(gemini_settings, http_client=http_client)

    await client.aclose()
    assert http_client.is_closed is False
    await http_client.aclose()


@pytest.mark.asyncio
async def test_aclose_closes_owned_http_client(gemini_settings):
    client = GenerationClient(gemini_settings)
    await client.aclose()
    assert client._http_client.is_closed is True


@pytest.mark.asyncio
async def test_chat_history_and_system_instruction_are_sent(gemini_settings):
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_reply("I'm here"))

    client = _client(gemini_settings, handler)
    reply = await client.generate(
        "And today?",
        history=[{"role": "user", "text": "Hard shift"}, {"role": "assistant", "text": "Tell me more"}],
        system_instruction="Be kind",
        generation_config={"temperature": 0.7},
    )

    assert reply == "I'm here"
    assert seen["body"]["contents"] == [
        {"role": "user", "parts": [{"text": "Hard shift"}]},
        {"role": "model", "parts": [{"text": "Tell me more"}]},
        {"role": "user", "parts": [{"text": "And today?"}]},
    ]
    assert seen["body"]["systemInstruction"] == {"parts": [{"text": "Be kind"}]}
    assert seen["body"]["generationConfig"] == {"temperature": 0.7}


def test_plain_prompt_payload_has_no_extras():
    assert build_payload("p") == {"contents": [{"role": "user", "parts": [{"text": "p"}]}]}
