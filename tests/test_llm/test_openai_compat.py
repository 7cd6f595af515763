"""Tests for the OpenAI-compatible provider against a mocked HTTP transport."""
from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from ai_cli.core.models import Message, Usage
from ai_cli.llm.openai_compat import OpenAIProvider
from ai_cli.llm.protocol import Provider, ProviderError

BASE_URL = "https://llm.test/v1"


def _completion(content: str | None = "hello", choices: int = 1) -> dict[str, object]:
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 0,
        "model": "gpt-4o",
        "choices": [
            {
                "index": i,
                "message": {"role": "assistant", "content": content if i == 0 else "other"},
                "finish_reason": "stop",
            }
            for i in range(choices)
        ],
        "usage": {"prompt_tokens": 5, "completion_tokens": 1, "total_tokens": 6},
    }


def _provider(handler: Callable[[httpx.Request], httpx.Response], **kwargs: object) -> OpenAIProvider:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return OpenAIProvider(
        api_key="test-key",
        model="gpt-4o",
        base_url=BASE_URL,
        http_client=client,
        **kwargs,  # type: ignore[arg-type]
    )


def test_request_carries_credential_model_and_history() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_completion())

    provider = _provider(handler, max_tokens=64, temperature=0.0)
    history = [Message.system("be terse"), Message.user("hi")]
    provider.send(history)

    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/v1/chat/completions"
    assert request.headers["authorization"] == "Bearer test-key"
    body = json.loads(request.content)
    assert body["model"] == "gpt-4o"
    assert body["max_tokens"] == 64
    assert body["messages"] == [
        {"role": "system", "content": "be terse"},
        {"role": "user", "content": "hi"},
    ]


def test_max_tokens_omitted_when_unset() -> None:
    seen: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json=_completion())

    _provider(handler).send([Message.user("hi")])
    assert "max_tokens" not in seen[0]


def test_first_choice_becomes_assistant_message() -> None:
    provider = _provider(lambda r: httpx.Response(200, json=_completion("hello", choices=3)))
    assert provider.send([Message.user("hi")]) == Message.assistant("hello")
    assert provider.last_usage == Usage(prompt_tokens=5, completion_tokens=1, total_tokens=6)


def test_null_content_becomes_empty_string() -> None:
    provider = _provider(lambda r: httpx.Response(200, json=_completion(None)))
    assert provider.send([Message.user("hi")]) == Message.assistant("")


def test_no_choices_is_provider_error() -> None:
    body = _completion()
    body["choices"] = []
    provider = _provider(lambda r: httpx.Response(200, json=body))
    with pytest.raises(ProviderError, match="no choices"):
        provider.send([Message.user("hi")])


def test_error_status_is_provider_error() -> None:
    error = {"error": {"message": "Incorrect API key provided", "type": "invalid_request_error"}}
    provider = _provider(lambda r: httpx.Response(401, json=error))
    with pytest.raises(ProviderError) as exc_info:
        provider.send([Message.user("hi")])
    assert exc_info.value.status_code == 401
    assert "401" in str(exc_info.value)
    assert "OpenAI (gpt-4o)" in str(exc_info.value)


def test_server_error_is_not_retried() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500, json={"error": {"message": "overloaded"}})

    with pytest.raises(ProviderError):
        _provider(handler).send([Message.user("hi")])
    assert len(calls) == 1


def test_timeout_is_provider_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(ProviderError) as exc_info:
        _provider(handler).send([Message.user("hi")])
    assert exc_info.value.status_code is None
    assert exc_info.value.__cause__ is not None


def test_connection_failure_is_provider_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProviderError):
        _provider(handler).send([Message.user("hi")])


def test_malformed_json_is_provider_error() -> None:
    provider = _provider(
        lambda r: httpx.Response(200, content=b"{not json", headers={"content-type": "application/json"})
    )
    with pytest.raises(ProviderError):
        provider.send([Message.user("hi")])


def test_empty_history_rejected() -> None:
    provider = _provider(lambda r: httpx.Response(200, json=_completion()))
    with pytest.raises(ValueError):
        provider.send([])


def test_models_lists_ids() -> None:
    listing = {
        "object": "list",
        "data": [
            {"id": "gpt-4o", "object": "model", "created": 0, "owned_by": "openai"},
            {"id": "gpt-3.5-turbo", "object": "model", "created": 0, "owned_by": "openai"},
        ],
    }
    provider = _provider(lambda r: httpx.Response(200, json=listing))
    assert provider.models() == ["gpt-3.5-turbo", "gpt-4o"]


def test_display_name_and_protocol() -> None:
    provider = _provider(lambda r: httpx.Response(200, json=_completion()))
    assert str(provider) == "OpenAI (gpt-4o)"
    assert provider.last_usage is None
    assert isinstance(provider, Provider)
