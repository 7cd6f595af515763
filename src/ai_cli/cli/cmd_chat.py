"""ai-cli chat command — interactive conversation loop."""
from __future__ import annotations

import argparse
import logging
import os
import re
import sys
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any, TextIO

from ai_cli.config.loader import load_config
from ai_cli.config.schema import AiCliConfig, ChatConfig
from ai_cli.core.client import Client, ClientConfig
from ai_cli.core.models import Message
from ai_cli.core.transcript import FormatError, Transcript, dump, load
from ai_cli.llm.protocol import ProviderError
from ai_cli.reports.formatter import format_session_summary, format_usage

logger = logging.getLogger(__name__)

_TOKENS = re.compile(r"\s+|\S+")


def cmd_chat(args: argparse.Namespace) -> int:
    overrides: dict[str, Any] = {}
    if args.provider:
        overrides["llm.provider"] = args.provider
    if args.model:
        overrides["llm.model"] = args.model
    if args.max_tokens is not None:
        overrides["llm.max_tokens"] = args.max_tokens
    if args.system is not None:
        overrides["chat.system_prompt"] = args.system
    if args.transcript:
        overrides["transcript.path"] = args.transcript
    if args.resume:
        overrides["transcript.resume"] = args.resume
    if args.dry_run:
        overrides["llm.provider"] = "stub"

    try:
        config = load_config(Path(args.config) if args.config else None, overrides)
    except (FileNotFoundError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    # Lazy import to avoid loading provider SDKs unless needed
    from ai_cli.llm.registry import create_provider

    try:
        history = _load_history(config)
        provider = create_provider(config.llm)
    except FormatError as exc:
        print(f"Error: {config.transcript.resume}: {exc}", file=sys.stderr)
        return 1
    except (OSError, ValueError, ProviderError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    sink: TextIO | None = None
    try:
        transcript = Transcript()
        if config.transcript.path:
            padding = _missing_separator(config.transcript.path)
            sink = open(config.transcript.path, "a", encoding="utf-8", newline="")
            transcript.bind(sink)
            if padding:
                # The last block was saved without its blank line.
                sink.write(padding)
                sink.flush()
            if history and not _same_file(config.transcript.path, config.transcript.resume) and sink.tell() == 0:
                dump(history, sink)

        if not history and config.chat.system_prompt:
            system = Message.system(config.chat.system_prompt)
            transcript.record(system)
            history = [system]
        elif config.chat.system_prompt:
            logger.warning("Ignoring system prompt: resumed conversations keep their own")

        client = Client(
            provider,
            history=history,
            transcript=transcript,
            config=ClientConfig(verbose=args.verbose),
        )
        print(f"ai-cli 0.1.0 | {client}")
        if config.transcript.resume:
            print(f"Resumed {len(history)} messages from {config.transcript.resume}")

        run_repl(client, config.chat, show_usage=args.show_usage)
    except OSError as exc:
        print(f"Error: transcript write failed: {exc}", file=sys.stderr)
        return 1
    finally:
        if sink is not None:
            sink.close()

    print(format_session_summary(str(client), len(client.history), client.tokens_sent))
    return 0


def run_repl(
    client: Client,
    chat: ChatConfig,
    read_line: Callable[[str], str] | None = None,
    out: TextIO | None = None,
    err: TextIO | None = None,
    show_usage: bool = False,
) -> int:
    """Read lines until EOF or Ctrl-C, sending each one to *client*.

    Provider failures are reported on *err* and the loop continues; the
    unanswered message stays in the history.

    Returns:
        The number of turns that produced a reply.
    """
    read_line = read_line or input
    out = out or sys.stdout
    err = err or sys.stderr
    turns = 0

    while True:
        try:
            line = read_line(chat.prompt)
        except (EOFError, KeyboardInterrupt):
            out.write("\n")
            break

        if not line.strip():
            continue

        try:
            reply = client.send(line)
        except ProviderError as exc:
            print(f"error: {exc}", file=err)
            continue

        turns += 1
        typewrite(reply.content, out, chat.word_delay_ms)
        if show_usage:
            print(format_usage(client.provider.last_usage), file=out)

    return turns


def typewrite(text: str, out: TextIO, delay_ms: int = 0) -> None:
    """Write *text* to *out* a word at a time, then a newline."""
    if delay_ms <= 0:
        out.write(text + "\n")
        out.flush()
        return
    for token in _TOKENS.findall(text):
        out.write(token)
        out.flush()
        if not token.isspace():
            time.sleep(delay_ms / 1000)
    out.write("\n")
    out.flush()


def _load_history(config: AiCliConfig) -> list[Message]:
    path = config.transcript.resume
    if not path:
        return []
    with open(path, encoding="utf-8", newline="") as fh:
        return load(fh)


def _missing_separator(path: str) -> str:
    """Newlines needed so the next block appended to *path* starts cleanly."""
    try:
        with open(path, "rb") as fh:
            fh.seek(0, os.SEEK_END)
            fh.seek(max(fh.tell() - 2, 0))
            tail = fh.read()
    except FileNotFoundError:
        return ""
    if not tail:
        return ""
    return "\n" * (2 - (len(tail) - len(tail.rstrip(b"\n"))))


def _same_file(a: str | None, b: str | None) -> bool:
    if not a or not b:
        return False
    return Path(a).resolve() == Path(b).resolve()
