"""Claude (Anthropic) provider implementation."""
from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Iterator, Sequence
from typing import Any

import anthropic
import httpx

from ai_cli.core.models import Message, Role, Usage
from ai_cli.llm.protocol import ProviderError, require_history

_log = logging.getLogger(__name__)

# The Messages API requires an explicit response budget.
_DEFAULT_MAX_TOKENS = 1024


class ClaudeProvider:
    """Provider backed by the Anthropic Claude API.

    Implements :class:`~ai_cli.llm.protocol.Provider` using the ``anthropic``
    Python SDK.  System messages anywhere in the history are lifted into the
    request's ``system`` parameter, since the Messages API does not accept
    them inline.

    Args:
        api_key: Anthropic API key.  If ``None``, the SDK falls back to the
            ``ANTHROPIC_API_KEY`` environment variable; with neither set,
            construction fails with :class:`ProviderError`.
        model: Model identifier (e.g. ``"claude-sonnet-4-5-20250929"``).
        max_tokens: Maximum tokens in the response.
        temperature: Sampling temperature.
        timeout_s: Transport timeout.
        http_client: Pre-built :class:`httpx.Client` handed to the SDK.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-sonnet-4-5-20250929",
        max_tokens: int | None = None,
        temperature: float = 0.7,
        timeout_s: float = 60.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._model = model
        self._max_tokens = max_tokens or _DEFAULT_MAX_TOKENS
        self._temperature = temperature
        self._last_usage: Usage | None = None
        # The SDK only notices a missing credential when the first request is
        # built, and then raises TypeError.
        if not (api_key or os.environ.get("ANTHROPIC_API_KEY") or os.environ.get("ANTHROPIC_AUTH_TOKEN")):
            raise ProviderError(
                "no API key: set llm.api_key or ANTHROPIC_API_KEY",
                provider=str(self),
            )
        try:
            self._client = anthropic.Anthropic(
                api_key=api_key,
                timeout=timeout_s,
                max_retries=0,
                http_client=http_client,
            )
        except anthropic.AnthropicError as exc:
            raise ProviderError(str(exc), provider=str(self)) from exc

    def __str__(self) -> str:
        return f"Anthropic ({self._model})"

    @property
    def model(self) -> str:
        return self._model

    @property
    def last_usage(self) -> Usage | None:
        return self._last_usage

    # -- Provider interface ---------------------------------------------------

    def send(self, history: Sequence[Message]) -> Message:
        """Send the history to Claude and return the assistant reply."""
        require_history(history)
        system_parts: list[str] = []
        api_messages: list[dict[str, str]] = []

        for msg in history:
            if msg.role is Role.SYSTEM:
                system_parts.append(msg.content)
            else:
                api_messages.append(msg.to_dict())

        create_kwargs: dict[str, Any] = {
            "model": self._model,
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
            "messages": api_messages,
        }
        if system_parts:
            create_kwargs["system"] = "\n\n".join(system_parts)

        _log.debug("POST messages model=%s messages=%d", self._model, len(api_messages))
        with _translate_errors(str(self)):
            response = self._client.messages.create(**create_kwargs)

        content = getattr(response, "content", None)
        if content is None:
            raise ProviderError("response has no content", provider=str(self))

        # Extract text from content blocks.
        parts: list[str] = []
        for block in content:
            if hasattr(block, "text"):
                parts.append(block.text)

        self._last_usage = _usage_from(getattr(response, "usage", None))
        return Message.assistant("\n".join(parts))

    def models(self) -> list[str]:
        """Return the model IDs available to this API key, sorted."""
        with _translate_errors(str(self)):
            return sorted(m.id for m in self._client.models.list())


@contextlib.contextmanager
def _translate_errors(provider: str) -> Iterator[None]:
    """Re-raise SDK failures as :class:`ProviderError`."""
    try:
        yield
    except anthropic.APIStatusError as exc:
        raise ProviderError(
            f"HTTP {exc.status_code}: {exc.message}",
            provider=provider,
            status_code=exc.status_code,
        ) from exc
    except anthropic.APIError as exc:
        raise ProviderError(exc.message, provider=provider) from exc
    except json.JSONDecodeError as exc:
        raise ProviderError(f"malformed JSON in response: {exc}", provider=provider) from exc


def _usage_from(raw: object) -> Usage:
    if raw is None:
        return Usage()
    prompt = getattr(raw, "input_tokens", None)
    completion = getattr(raw, "output_tokens", None)
    total = prompt + completion if prompt is not None and completion is not None else None
    return Usage(prompt, completion, total)
