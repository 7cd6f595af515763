"""CLI entry point for ai-cli."""
from __future__ import annotations

import argparse
import logging

from dotenv import find_dotenv, load_dotenv

from ai_cli.llm.registry import SUPPORTED_PROVIDERS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ai-cli",
        description="Chat with a text-generation model from the terminal",
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")
    parser.add_argument("--config", default=None, help="Config file path (default: ai-cli.yaml if present)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", help="Available commands")

    # init
    init_p = sub.add_parser("init", help="Write a starter ai-cli.yaml config file")
    init_p.add_argument("--provider", default=None, help="Use a built-in provider template")

    # chat
    chat_p = sub.add_parser("chat", help="Start an interactive conversation")
    chat_p.add_argument("--provider", choices=SUPPORTED_PROVIDERS, default=None, help="Provider kind")
    chat_p.add_argument("-n", "--model", default=None, help="Model identifier")
    chat_p.add_argument("-m", "--max-tokens", type=int, default=None, help="Max tokens per reply")
    chat_p.add_argument("--system", default=None, help="System prompt for a new conversation")
    chat_p.add_argument("--transcript", default=None, help="Append the session to this file")
    chat_p.add_argument("--resume", default=None, help="Preload history from a transcript")
    chat_p.add_argument("--show-usage", action="store_true", help="Print token usage after each reply")
    chat_p.add_argument("--dry-run", action="store_true", help="Use the offline echo provider")

    # show
    show_p = sub.add_parser("show", help="Print a saved transcript")
    show_p.add_argument("path", help="Transcript file")
    show_p.add_argument("--format", choices=["text", "json", "transcript"], default="text")

    # models
    models_p = sub.add_parser("models", help="List models offered by the provider")
    models_p.add_argument("--provider", choices=SUPPORTED_PROVIDERS, default=None, help="Provider kind")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    load_dotenv(find_dotenv(usecwd=True))

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "init":
        from ai_cli.cli.cmd_init import cmd_init
        return cmd_init(args)

    if args.command == "chat":
        from ai_cli.cli.cmd_chat import cmd_chat
        return cmd_chat(args)

    if args.command == "show":
        from ai_cli.cli.cmd_show import cmd_show
        return cmd_show(args)

    if args.command == "models":
        from ai_cli.cli.cmd_models import cmd_models
        return cmd_models(args)

    parser.print_help()
    return 1
