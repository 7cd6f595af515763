"""Default configuration templates for ai-cli."""
from __future__ import annotations

from typing import Any

DEFAULT_CONFIG_YAML: str = """\
# ai-cli configuration

llm:
  provider: "openai"
  model: "gpt-3.5-turbo"
  # api_key: null  # Set via AI_CLI_LLM_API_KEY env var
  # base_url: null  # Set via AI_CLI_LLM_BASE_URL env var
  max_tokens: 1024
  temperature: 0.7
  timeout_s: 60

chat:
  # system_prompt: null
  prompt: ">> "
  word_delay_ms: 0

transcript:
  # path: null  # Append the live session to this file
  # resume: null  # Preload history from this transcript
"""

PROVIDER_TEMPLATES: dict[str, dict[str, Any]] = {
    "openai": {
        "provider": "openai",
        "model": "gpt-3.5-turbo",
    },
    "claude": {
        "provider": "claude",
        "model": "claude-sonnet-4-5-20250929",
        "max_tokens": 4096,
    },
    "local": {
        "provider": "openai-compat",
        "model": "llama3",
        "base_url": "http://localhost:11434/v1",
        "api_key": "unused",
    },
    "custom": {
        "provider": "custom",
        "model": "custom",
        "base_url": "http://localhost:8000",
    },
}
