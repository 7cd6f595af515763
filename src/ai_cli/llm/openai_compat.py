"""OpenAI-compatible provider implementation."""
from __future__ import annotations

import contextlib
import json
import logging
from collections.abc import Iterator, Sequence
from typing import Any

import httpx
import openai

from ai_cli.core.models import Message, Usage
from ai_cli.llm.protocol import ProviderError, require_history

_log = logging.getLogger(__name__)


class OpenAIProvider:
    """Provider backed by any OpenAI-compatible chat completions API.

    Works with the official OpenAI API as well as any third-party endpoint
    that implements the same ``/v1/chat/completions`` interface (vLLM, Ollama,
    LM Studio, llama.cpp server, etc.), which is how local models are reached.

    Implements :class:`~ai_cli.llm.protocol.Provider`.

    Args:
        api_key: API key, sent as a bearer token.  If ``None``, the SDK falls
            back to the ``OPENAI_API_KEY`` environment variable.
        model: Model identifier (e.g. ``"gpt-4o"``).
        max_tokens: Maximum tokens in the response, or ``None`` for the
            server default.
        temperature: Sampling temperature.
        base_url: Optional base URL for an OpenAI-compatible endpoint.
        timeout_s: Transport timeout; expiry is reported as a
            :class:`ProviderError`.
        label: Display name used in messages and errors.
        http_client: Pre-built :class:`httpx.Client` handed to the SDK.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-3.5-turbo",
        max_tokens: int | None = None,
        temperature: float = 0.7,
        base_url: str | None = None,
        timeout_s: float = 60.0,
        label: str = "OpenAI",
        http_client: httpx.Client | None = None,
    ) -> None:
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._label = label
        self._last_usage: Usage | None = None
        try:
            # The SDK retries on its own by default; a send is at-most-once.
            self._client = openai.OpenAI(
                api_key=api_key,
                base_url=base_url,
                timeout=timeout_s,
                max_retries=0,
                http_client=http_client,
            )
        except openai.OpenAIError as exc:
            raise ProviderError(str(exc), provider=str(self)) from exc

    def __str__(self) -> str:
        return f"{self._label} ({self._model})"

    @property
    def model(self) -> str:
        return self._model

    @property
    def last_usage(self) -> Usage | None:
        return self._last_usage

    # -- Provider interface ---------------------------------------------------

    def send(self, history: Sequence[Message]) -> Message:
        """Send the history via the chat completions API and return the reply."""
        require_history(history)
        api_messages = [m.to_dict() for m in history]

        create_kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": api_messages,
            "temperature": self._temperature,
        }
        if self._max_tokens is not None:
            create_kwargs["max_tokens"] = self._max_tokens

        _log.debug("POST chat.completions model=%s messages=%d", self._model, len(api_messages))
        with _translate_errors(str(self)):
            response = self._client.chat.completions.create(**create_kwargs)

        choices = getattr(response, "choices", None)
        if not choices:
            raise ProviderError("response contained no choices", provider=str(self))
        message = getattr(choices[0], "message", None)
        if message is None:
            raise ProviderError("first choice has no message", provider=str(self))

        self._last_usage = _usage_from(getattr(response, "usage", None))
        return Message.assistant(getattr(message, "content", None) or "")

    def models(self) -> list[str]:
        """Return the model IDs the endpoint advertises, sorted."""
        with _translate_errors(str(self)):
            return sorted(m.id for m in self._client.models.list())


@contextlib.contextmanager
def _translate_errors(provider: str) -> Iterator[None]:
    """Re-raise SDK failures as :class:`ProviderError`."""
    try:
        yield
    except openai.APIStatusError as exc:
        raise ProviderError(
            f"HTTP {exc.status_code}: {exc.message}",
            provider=provider,
            status_code=exc.status_code,
        ) from exc
    except openai.APIError as exc:
        raise ProviderError(exc.message, provider=provider) from exc
    except json.JSONDecodeError as exc:
        raise ProviderError(f"malformed JSON in response: {exc}", provider=provider) from exc


def _usage_from(raw: object) -> Usage:
    if raw is None:
        return Usage()
    return Usage(
        prompt_tokens=getattr(raw, "prompt_tokens", None),
        completion_tokens=getattr(raw, "completion_tokens", None),
        total_tokens=getattr(raw, "total_tokens", None),
    )
