"""ai-cli show command — render a saved transcript."""
from __future__ import annotations

import argparse
import sys

from ai_cli.core.transcript import FormatError, dump, load
from ai_cli.reports.formatter import format_history, history_to_json


def cmd_show(args: argparse.Namespace) -> int:
    try:
        with open(args.path, encoding="utf-8", newline="") as fh:
            messages = load(fh)
    except FormatError as exc:
        where = f"{args.path}:{exc.line_number}" if exc.line_number else args.path
        print(f"{where}: {exc.reason}", file=sys.stderr)
        if exc.line:
            print(f"  {exc.line}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.format == "json":
        print(history_to_json(messages))
    elif args.format == "transcript":
        # Normalised re-serialisation, e.g. for piping into another file.
        dump(messages, sys.stdout)
    else:
        print(format_history(messages))
    return 0
