"""Provider for a self-hosted model behind a plain HTTP endpoint."""
from __future__ import annotations

import logging
from collections.abc import Sequence

import httpx

from ai_cli.core.models import Message, Usage
from ai_cli.llm.protocol import ProviderError, require_history

_log = logging.getLogger(__name__)


class CustomProvider:
    """Sends the history to a fixed URL and treats the body as the reply.

    The request body is the JSON array of ``{"role", "content"}`` objects in
    history order; the response body, decoded as text, becomes the content of
    the assistant message.  The endpoint reports no token usage.

    Args:
        url: Endpoint receiving the POST.
        api_key: Optional bearer token.
        timeout_s: Transport timeout.
        http_client: Pre-built :class:`httpx.Client`; mainly for tests.
    """

    def __init__(
        self,
        url: str,
        api_key: str | None = None,
        timeout_s: float = 60.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._url = httpx.URL(url)
        self._api_key = api_key
        self._http = http_client or httpx.Client(timeout=timeout_s)
        self._last_usage: Usage | None = None

    def __str__(self) -> str:
        return f"Custom model at {self._url.host or 'unknown location'}"

    @property
    def last_usage(self) -> Usage | None:
        return self._last_usage

    def send(self, history: Sequence[Message]) -> Message:
        require_history(history)
        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}
        payload = [m.to_dict() for m in history]

        _log.debug("POST %s messages=%d", self._url, len(payload))
        try:
            response = self._http.post(self._url, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ProviderError(
                f"HTTP {exc.response.status_code} from {self._url}",
                provider=str(self),
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(f"{type(exc).__name__}: {exc}", provider=str(self)) from exc

        self._last_usage = Usage()
        return Message.assistant(response.text)

    def models(self) -> list[str]:
        raise ProviderError("endpoint does not publish a model list", provider=str(self))
