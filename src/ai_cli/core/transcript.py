"""Append-only conversation transcripts.

A transcript is plain text, one block per message::

    # USER:
    What is the meaning of life?

    # ASSISTANT:
    42.

Each block is a header line naming the upper-cased role, the message content,
and a blank line.  Content lines that would read as a header are escaped with
a leading backslash on write and unescaped on load, so :func:`load` is the
exact inverse of repeated :meth:`Transcript.record` calls for any content.

Sinks and sources are any objects with ``write``/``flush`` or ``read``: open
files, sockets wrapped with ``makefile``, pipes or in-memory buffers.  Both
text and binary streams work; binary streams carry UTF-8.
"""
from __future__ import annotations

import io
import logging
import re
from collections.abc import Iterable
from typing import Any, Protocol

from ai_cli.core.models import Message, Role

_log = logging.getLogger(__name__)

_HEADER = re.compile(r"# (\w+):")
# A header, possibly already escaped any number of times.
_HEADER_LIKE = re.compile(r"\\*# \w+:")
_ROLE_TOKENS: dict[str, Role] = {r.value.upper(): r for r in Role}


class FormatError(ValueError):
    """Raised when a transcript does not follow the expected layout.

    Attributes:
        line_number: 1-based number of the offending line, or ``None`` when
            the problem is not tied to a line (e.g. undecodable bytes).
        line: Text of the offending line.
    """

    def __init__(self, reason: str, line_number: int | None = None, line: str = "") -> None:
        self.reason = reason
        self.line_number = line_number
        self.line = line
        if line_number is None:
            super().__init__(reason)
        else:
            super().__init__(f"line {line_number}: {reason}: {line!r}")


class Sink(Protocol):
    """Anything a transcript can be written to."""

    def write(self, data: Any, /) -> Any: ...

    def flush(self) -> Any: ...


class Source(Protocol):
    """Anything a transcript can be read from."""

    def read(self) -> Any: ...


# ---------------------------------------------------------------------------
# Write path
# ---------------------------------------------------------------------------

def encode_message(message: Message) -> str:
    """Return the transcript block for one message, separator included."""
    lines = [
        "\\" + line if _HEADER_LIKE.fullmatch(line) else line
        for line in message.content.split("\n")
    ]
    return f"# {message.role.value.upper()}:\n" + "\n".join(lines) + "\n\n"


class Transcript:
    """Live, append-only record of a conversation.

    With no sink bound, :meth:`record` does nothing, so callers can record
    unconditionally.

    Args:
        sink: Stream each message is written to as it is recorded.
    """

    def __init__(self, sink: Sink | None = None) -> None:
        self._sink = sink
        self._count = 0

    @property
    def bound(self) -> bool:
        return self._sink is not None

    @property
    def count(self) -> int:
        """Number of messages written since construction."""
        return self._count

    def bind(self, sink: Sink) -> None:
        """Direct subsequent records to *sink*."""
        self._sink = sink

    def unbind(self) -> Sink | None:
        """Stop recording and return the previously bound sink."""
        sink, self._sink = self._sink, None
        return sink

    def record(self, message: Message) -> None:
        """Append *message* to the sink and flush it.

        Raises:
            OSError: The sink failed; nothing is buffered for a later retry.
        """
        if self._sink is None:
            return
        block = encode_message(message)
        if isinstance(self._sink, (io.RawIOBase, io.BufferedIOBase)):
            self._sink.write(block.encode("utf-8"))
        else:
            self._sink.write(block)
        self._sink.flush()
        self._count += 1
        _log.debug("Recorded %s message (%d chars)", message.role.value, len(message.content))


def dump(messages: Iterable[Message], sink: Sink) -> int:
    """Write every message in *messages* to *sink*; return how many."""
    transcript = Transcript(sink)
    for message in messages:
        transcript.record(message)
    return transcript.count


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------

def load(source: Source) -> list[Message]:
    """Read *source* to the end and return its messages in recorded order.

    Raises:
        FormatError: The input is not a well-formed transcript.  No partial
            result is returned.
    """
    data = source.read()
    if isinstance(data, (bytes, bytearray)):
        try:
            data = bytes(data).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise FormatError(f"transcript is not valid UTF-8 ({exc.reason})") from exc
    return loads(data)


def loads(text: str) -> list[Message]:
    """Parse transcript *text*; see :func:`load`.

    Files whose every line ends in ``\\r\\n`` (saved by Windows editors) are
    read as if written with ``\\n``.  In mixed files a ``\\r`` is content.
    """
    if "\n" in text and text.count("\r\n") == text.count("\n"):
        text = text.replace("\r\n", "\n")
    lines = text.split("\n")

    # Leading blank lines carry no content.
    start = 0
    while start < len(lines) and lines[start] == "":
        start += 1
    if start == len(lines):
        return []

    blocks: list[tuple[Role, list[str]]] = []
    for number, line in enumerate(lines[start:], start=start + 1):
        header = _HEADER.fullmatch(line)
        if header:
            role = _ROLE_TOKENS.get(header.group(1))
            if role is None:
                raise FormatError("unrecognised role", number, line)
            if blocks:
                body = blocks[-1][1]
                if not body or body[-1] != "":
                    raise FormatError("missing blank line before header", number, line)
                body.pop()
            blocks.append((role, []))
        elif not blocks:
            raise FormatError("expected a role header", number, line)
        else:
            blocks[-1][1].append(line[1:] if _HEADER_LIKE.fullmatch(line) else line)

    # The last block may have lost its separator, or its final newline too.
    body = blocks[-1][1]
    for _ in range(2):
        if body and body[-1] == "":
            body.pop()

    messages = [Message(role, "\n".join(body)) for role, body in blocks]
    _log.debug("Loaded %d messages from transcript", len(messages))
    return messages
