"""Stub provider for running without a real backend."""
from __future__ import annotations

from collections.abc import Sequence

from ai_cli.core.models import Message, Role, Usage
from ai_cli.llm.protocol import ProviderError, require_history


class StubProvider:
    """In-memory provider that returns canned replies.

    Useful for exercising the client, transcript and CLI without network
    access.  With no canned replies it echoes the most recent user message.
    Entries of *responses* that are exceptions are raised instead of
    returned, so failure paths can be scripted too.

    Every call's history is kept in :attr:`calls` as a tuple snapshot.
    """

    def __init__(
        self,
        responses: Sequence[str | BaseException] | None = None,
        model: str = "stub",
    ) -> None:
        self._responses = list(responses or [])
        self._model = model
        self._idx = 0
        self._last_usage: Usage | None = None
        self.calls: list[tuple[Message, ...]] = []

    def __str__(self) -> str:
        return f"Stub ({self._model})"

    @property
    def last_usage(self) -> Usage | None:
        return self._last_usage

    def send(self, history: Sequence[Message]) -> Message:
        require_history(history)
        self.calls.append(tuple(history))

        if self._responses:
            idx = min(self._idx, len(self._responses) - 1)
            self._idx += 1
            reply = self._responses[idx]
            if isinstance(reply, ProviderError):
                raise reply
            if isinstance(reply, BaseException):
                raise ProviderError(str(reply), provider=str(self)) from reply
        else:
            reply = next(
                (m.content for m in reversed(history) if m.role is Role.USER),
                "",
            )

        # Whitespace-delimited word counts stand in for tokens.
        prompt = sum(len(m.content.split()) for m in history)
        completion = len(reply.split())
        self._last_usage = Usage(prompt, completion, prompt + completion)
        return Message.assistant(reply)

    def models(self) -> list[str]:
        return [self._model]
