"""Configuration loader for ai-cli."""
from __future__ import annotations

import dataclasses
import logging
import os
from pathlib import Path
from typing import Any, TypeVar

import yaml  # type: ignore[import-untyped]

from ai_cli.config.schema import (
    AiCliConfig,
    ChatConfig,
    LLMConfig,
    TranscriptConfig,
)

DEFAULT_CONFIG_PATH = Path("ai-cli.yaml")


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file and return its contents as a dict."""
    text = path.read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a YAML mapping at top level in {path}, got {type(data).__name__}")
    return data


def _set_path(raw: dict[str, Any], key_path: list[str], value: Any) -> None:
    # Navigate to the correct nested dict, creating intermediates as needed.
    d = raw
    for part in key_path[:-1]:
        if part not in d or not isinstance(d[part], dict):
            d[part] = {}
        d = d[part]
    d[key_path[-1]] = value


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Overlay AI_CLI_* environment variables onto the raw config dict."""
    env_mappings: list[tuple[str, list[str], type]] = [
        ("AI_CLI_LLM_PROVIDER", ["llm", "provider"], str),
        ("AI_CLI_LLM_API_KEY", ["llm", "api_key"], str),
        ("AI_CLI_LLM_MODEL", ["llm", "model"], str),
        ("AI_CLI_LLM_BASE_URL", ["llm", "base_url"], str),
        ("AI_CLI_LLM_MAX_TOKENS", ["llm", "max_tokens"], int),
        ("AI_CLI_LLM_TIMEOUT", ["llm", "timeout_s"], float),
        ("AI_CLI_SYSTEM_PROMPT", ["chat", "system_prompt"], str),
        ("AI_CLI_TRANSCRIPT", ["transcript", "path"], str),
    ]

    for env_var, key_path, cast_type in env_mappings:
        value = os.environ.get(env_var)
        if value is None:
            continue
        _set_path(raw, key_path, cast_type(value))

    return raw


def _apply_cli_overrides(raw: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Apply CLI overrides using dot-notation keys (e.g., 'llm.model')."""
    for dotted_key, value in overrides.items():
        _set_path(raw, dotted_key.split("."), value)
    return raw


def _coerce_field(value: Any, field_type_str: str) -> Any:
    """Best-effort coercion of a value to match a dataclass field type string."""
    if value is None:
        return value
    # Handle stringified type annotations (from __future__ import annotations)
    if "int" in field_type_str and not isinstance(value, int):
        try:
            return int(value)
        except (ValueError, TypeError):
            return value
    if "float" in field_type_str and not isinstance(value, (int, float)):
        try:
            return float(value)
        except (ValueError, TypeError):
            return value
    if "bool" in field_type_str and not isinstance(value, bool):
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes")
        return bool(value)
    return value


_T = TypeVar("_T")


_log = logging.getLogger(__name__)


def _build_with_coercion(cls: type[_T], data: dict[str, Any]) -> _T:
    """Build a dataclass from a raw dict, coercing types and warning on unknowns."""
    known = {f.name: f for f in dataclasses.fields(cls)}  # type: ignore[arg-type]
    filtered: dict[str, Any] = {}
    for k, v in data.items():
        if k in known:
            ft = known[k].type
            type_str = ft if isinstance(ft, str) else getattr(ft, "__name__", str(ft))
            filtered[k] = _coerce_field(v, type_str)
        else:
            _log.warning(
                "Unknown config key '%s' in %s (known: %s), ignored",
                k, cls.__name__, ", ".join(sorted(known)),
            )
    return cls(**filtered)


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{name}' must be a mapping, got {type(value).__name__}")
    return value


def _build_config(raw: dict[str, Any]) -> AiCliConfig:
    """Build an AiCliConfig from a raw dict."""
    return AiCliConfig(
        llm=_build_with_coercion(LLMConfig, _section(raw, "llm")),
        chat=_build_with_coercion(ChatConfig, _section(raw, "chat")),
        transcript=_build_with_coercion(TranscriptConfig, _section(raw, "transcript")),
    )


def load_config(
    yaml_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AiCliConfig:
    """Load configuration from YAML, environment variables, and CLI overrides.

    Priority (highest to lowest):
        1. CLI overrides (dot-notation keys, e.g., ``llm.model``)
        2. Environment variables (``AI_CLI_*``)
        3. YAML file values
        4. Dataclass defaults

    Args:
        yaml_path: Path to the YAML configuration file.  If ``None``, the
            loader attempts ``ai-cli.yaml`` in the current directory; if that
            does not exist, pure defaults are used.
        cli_overrides: Optional dict of dot-notation key/value overrides from
            the command line.

    Returns:
        A fully-populated :class:`AiCliConfig` instance.

    Raises:
        FileNotFoundError: *yaml_path* was given but does not exist.
        ValueError: The YAML document or one of its sections is not a mapping.
    """
    raw: dict[str, Any] = {}

    # 1. Load YAML file if available.
    if yaml_path is not None:
        if yaml_path.exists():
            raw = _load_yaml_file(yaml_path)
        else:
            raise FileNotFoundError(f"Config file not found: {yaml_path}")
    elif DEFAULT_CONFIG_PATH.exists():
        raw = _load_yaml_file(DEFAULT_CONFIG_PATH)

    # 2. Overlay environment variables.
    raw = _apply_env_overrides(raw)

    # 3. Overlay CLI overrides.
    if cli_overrides:
        raw = _apply_cli_overrides(raw, cli_overrides)

    # 4. Build typed config from the merged dict.
    return _build_config(raw)
