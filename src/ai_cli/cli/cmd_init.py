"""ai-cli init command — generates config file."""
from __future__ import annotations

import argparse
from pathlib import Path

import yaml  # type: ignore[import-untyped]

from ai_cli.config.defaults import DEFAULT_CONFIG_YAML, PROVIDER_TEMPLATES
from ai_cli.config.loader import DEFAULT_CONFIG_PATH


def cmd_init(args: argparse.Namespace) -> int:
    config_path = Path(args.config) if args.config else DEFAULT_CONFIG_PATH

    if config_path.exists():
        print(f"Config already exists: {config_path}")
        print("Delete it first if you want to regenerate.")
        return 1

    content = DEFAULT_CONFIG_YAML

    if args.provider and args.provider in PROVIDER_TEMPLATES:
        print(f"Using provider template: {args.provider}")
        # Parse the default YAML, overlay the template, and re-serialize
        data = yaml.safe_load(content)
        data.setdefault("llm", {}).update(PROVIDER_TEMPLATES[args.provider])
        content = "# ai-cli configuration\n"
        content += f"# Provider: {args.provider}\n\n"
        content += yaml.dump(data, default_flow_style=False, sort_keys=False)
    elif args.provider:
        available = ", ".join(PROVIDER_TEMPLATES)
        print(f"Unknown provider template: {args.provider}")
        print(f"Available templates: {available}")
        return 1

    config_path.write_text(content, encoding="utf-8")
    print(f"Created {config_path}")
    print("Edit it to choose your provider and model; keep API keys in the environment.")
    return 0
