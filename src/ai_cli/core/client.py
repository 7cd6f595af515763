"""Conversation client: owns the history and drives a provider."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from ai_cli.core.models import Message
from ai_cli.core.transcript import Sink, Transcript
from ai_cli.llm.protocol import Provider, ProviderError

_log = logging.getLogger(__name__)


class ClientBusyError(RuntimeError):
    """Raised when ``send`` is called while another send is outstanding."""


@dataclass
class ClientConfig:
    """Per-client behaviour switches."""

    verbose: bool = False


class Client:
    """A single linear conversation with a model provider.

    The client keeps every message exchanged, oldest first, and passes the
    whole history to the provider on each turn.  History only ever grows: a
    failed turn leaves the user's message in place so it can be answered by
    the next call.

    When a transcript is bound, each message is recorded as soon as it joins
    the history.

    Example::

        client = Client(OpenAIProvider(model="gpt-4o"))
        with open("chat.txt", "a", encoding="utf-8", newline="") as fh:
            client.bind_transcript(fh)
            reply = client.send("What is the meaning of life?")

    Args:
        provider: Backend that produces assistant replies.
        history: Messages to seed the conversation with, typically the
            result of :func:`ai_cli.core.transcript.load`.  Copied, never
            written to a bound transcript.
        transcript: Live transcript to mirror new messages into.
        config: Behaviour switches.
    """

    def __init__(
        self,
        provider: Provider,
        history: Iterable[Message] | None = None,
        transcript: Transcript | None = None,
        config: ClientConfig | None = None,
    ) -> None:
        self._provider = provider
        self._history: list[Message] = list(history or [])
        self._transcript = transcript or Transcript()
        self._config = config or ClientConfig()
        self._awaiting = False
        self.tokens_sent: int | None = 0

    def __str__(self) -> str:
        return str(self._provider)

    @property
    def provider(self) -> Provider:
        return self._provider

    @property
    def history(self) -> tuple[Message, ...]:
        """Snapshot of the conversation so far."""
        return tuple(self._history)

    @property
    def transcript(self) -> Transcript:
        return self._transcript

    @property
    def awaiting(self) -> bool:
        """``True`` while a provider call is outstanding."""
        return self._awaiting

    def bind_transcript(self, sink: Sink) -> None:
        """Mirror every message from now on into *sink*."""
        self._transcript.bind(sink)

    def unbind_transcript(self) -> Sink | None:
        """Stop mirroring; return the sink that was bound, if any."""
        return self._transcript.unbind()

    def send(self, text: str) -> Message:
        """Send *text* as a user message and return the assistant's reply.

        Raises:
            ProviderError: The provider failed.  The user message stays in
                the history; no reply is appended.
            ClientBusyError: A previous send has not finished.
            OSError: Writing to the bound transcript failed.
        """
        return self.send_message(Message.user(text))

    def send_message(self, message: Message) -> Message:
        """Append *message* to the history and ask the provider for a reply.

        Behaves like :meth:`send` but accepts a message of any role.
        """
        if self._awaiting:
            raise ClientBusyError("send() called while a previous send is still awaiting a response")

        self._append(message)
        self._awaiting = True
        try:
            reply = self._provider.send(self.history)
        except ProviderError as exc:
            _log.warning("Provider call failed after %d messages: %s", len(self._history), exc)
            raise
        finally:
            self._awaiting = False

        self._append(reply)
        self._account(reply)
        return reply

    def _append(self, message: Message) -> None:
        self._history.append(message)
        self._transcript.record(message)

    def _account(self, reply: Message) -> None:
        usage = self._provider.last_usage
        total = usage.total_tokens if usage is not None else None
        if total is None or self.tokens_sent is None:
            self.tokens_sent = None
        else:
            self.tokens_sent += total

        level = logging.INFO if self._config.verbose else logging.DEBUG
        _log.log(
            level,
            "%s replied with %d chars (history=%d, tokens=%s)",
            self._provider, len(reply.content), len(self._history), total,
        )
