"""ai-cli models command — list models offered by the provider."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from ai_cli.config.loader import load_config
from ai_cli.llm.protocol import ProviderError


def cmd_models(args: argparse.Namespace) -> int:
    overrides: dict[str, Any] = {}
    if args.provider:
        overrides["llm.provider"] = args.provider

    try:
        config = load_config(Path(args.config) if args.config else None, overrides)
    except (FileNotFoundError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    from ai_cli.llm.registry import create_provider

    try:
        provider = create_provider(config.llm)
        models = provider.models()
    except (ValueError, ProviderError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for name in models:
        print(name)
    return 0
