"""Resilient Anthropic Client — JSON extraction, retries and error mapping.

Tests:
    - parse_json_response handles bare, fenced and embedded JSON
    - Rate limits and 5xx are retried, then mapped to AIProviderError
    - Timeouts and 4xx fail immediately
    - generate_json rejects non-JSON text; generate_text rejects empty output
"""

import httpx
import pytest
from anthropic import APITimeoutError, BadRequestError, InternalServerError, RateLimitError

from urbanestate.core.errors import AIProviderError
from urbanestate.infrastructure.anthropic_client import (
    ResilientAnthropicClient, parse_json_response,
)

_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _status_error(cls, status: int, headers: dict | None = None):
    response = httpx.Response(status, request=_REQUEST, headers=headers or {})
    return cls("boom", response=response, body=None)


class _Block:
    def __init__(self, text):
        self.type = "text"
        self.text = text


class _Usage:
    input_tokens = 10
    output_tokens = 5


class _Response:
    def __init__(self, text):
        self.content = [_Block(text)] if text else []
        self.usage = _Usage()


class _Messages:
    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def create(self, **kwargs):
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return _Response(outcome)


def _client(*outcomes, max_retries=2):
    client = ResilientAnthropicClient(
        api_key="sk-ant-test", max_retries=max_retries,
        base_delay_ms=0, max_delay_ms=0,
    )
    messages = _Messages(outcomes)
    client.client = type("_Fake", (), {"messages": messages})()
    return client, messages


# ─── parse_json_response ────────────────────────────────────────

def test_parse_direct_json():
    assert parse_json_response('{"a": 1}') == {"a": 1}


def test_parse_fenced_json():
    assert parse_json_response('```json\n{"a": [1, 2]}\n```') == {"a": [1, 2]}


def test_parse_embedded_json():
    assert parse_json_response('Sure! {"ok": true} Hope that helps') == {"ok": True}


def test_parse_rejects_non_objects():
    assert parse_json_response("[1, 2]") is None
    assert parse_json_response("no json here") is None


# ─── Retry behavior ─────────────────────────────────────────────

async def test_rate_limit_retried_then_succeeds():
    client, messages = _client(
        _status_error(RateLimitError, 429), '{"ok": true}',
    )
    assert await client.generate_json(model="m", system="s", prompt="p") == {"ok": True}
    assert messages.calls == 2


async def test_server_errors_exhaust_retries():
    client, messages = _client(
        *[_status_error(InternalServerError, 500) for _ in range(3)],
    )
    with pytest.raises(AIProviderError) as exc:
        await client.generate_text(model="m", system="s", prompt="p")
    assert exc.value.api_error_type == "connection_error"
    assert messages.calls == 3


async def test_timeout_is_not_retried():
    client, messages = _client(APITimeoutError(request=_REQUEST))
    with pytest.raises(AIProviderError) as exc:
        await client.generate_text(model="m", system="s", prompt="p")
    assert exc.value.api_error_type == "timeout"
    assert messages.calls == 1


async def test_client_error_is_not_retried():
    client, messages = _client(_status_error(BadRequestError, 400))
    with pytest.raises(AIProviderError) as exc:
        await client.generate_text(model="m", system="s", prompt="p")
    assert exc.value.api_error_type == "client_error"
    assert exc.value.http_status == 503
    assert messages.calls == 1


async def test_retry_after_header_is_read_in_ms():
    client, _ = _client()
    error = _status_error(RateLimitError, 429, {"retry-after": "1.5"})
    assert client._extract_retry_after(error) == 1500


# ─── Output validation ──────────────────────────────────────────

async def test_non_json_output_is_invalid_response():
    client, _ = _client("I cannot do that")
    with pytest.raises(AIProviderError) as exc:
        await client.generate_json(model="m", system="s", prompt="p")
    assert exc.value.api_error_type == "invalid_response"


async def test_empty_output_is_empty_response():
    client, _ = _client("")
    with pytest.raises(AIProviderError) as exc:
        await client.generate_text(model="m", system="s", prompt="p")
    assert exc.value.api_error_type == "empty_response"
