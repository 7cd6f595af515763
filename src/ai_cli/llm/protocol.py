"""Provider protocol and error type."""
from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from ai_cli.core.models import Message, Usage


class ProviderError(RuntimeError):
    """Raised when a provider cannot turn a history into a reply.

    Covers network failures, timeouts, non-success statuses and responses
    that cannot be parsed.  The underlying exception, if any, is chained as
    ``__cause__``.

    Attributes:
        provider: Display name of the provider that failed.
        status_code: HTTP status of the failed response, when there was one.
    """

    def __init__(
        self,
        message: str,
        *,
        provider: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code

    def __str__(self) -> str:
        text = super().__str__()
        if self.provider:
            return f"{self.provider}: {text}"
        return text


@runtime_checkable
class Provider(Protocol):
    """Protocol that all provider implementations must satisfy.

    A provider is stateless beyond its identity (model and credential) and
    the usage figures of its most recent call.  The whole history is passed
    on every call; no server-side session is assumed.
    """

    @property
    def last_usage(self) -> Usage | None:
        """Token usage of the most recent successful :meth:`send`, if known."""
        ...

    def send(self, history: Sequence[Message]) -> Message:
        """Send the conversation so far and return the assistant's reply.

        Args:
            history: Ordered conversation messages, oldest first.  Must not
                be empty.

        Returns:
            Exactly one message with role ``assistant``.

        Raises:
            ProviderError: The backend call failed or its response could not
                be understood.  Never retried here.
            ValueError: *history* is empty.
        """
        ...

    def models(self) -> list[str]:
        """List the model identifiers offered by the backend.

        Providers without a listing endpoint raise :class:`ProviderError`.
        """
        ...


def require_history(history: Sequence[Message]) -> None:
    """Raise :class:`ValueError` if *history* is empty."""
    if not history:
        raise ValueError("history must contain at least one message")
