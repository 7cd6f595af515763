"""Shared fixtures for ai-cli tests."""
from __future__ import annotations

from pathlib import Path

import pytest

from ai_cli.core.models import Message

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def sample_config_path(fixtures_dir: Path) -> Path:
    return fixtures_dir / "sample_config.yaml"


@pytest.fixture
def sample_transcript_path(fixtures_dir: Path) -> Path:
    return fixtures_dir / "sample_transcript.txt"


@pytest.fixture
def conversation() -> list[Message]:
    return [
        Message.system("be terse"),
        Message.user("Hello, assistant!"),
        Message.assistant("Hello, user!"),
        Message.assistant("Hello again, user!"),
    ]


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep user config, .env files and AI_CLI_* variables out of tests."""
    monkeypatch.chdir(tmp_path)
    for var in (
        "AI_CLI_LLM_PROVIDER", "AI_CLI_LLM_API_KEY", "AI_CLI_LLM_MODEL",
        "AI_CLI_LLM_BASE_URL", "AI_CLI_LLM_MAX_TOKENS", "AI_CLI_LLM_TIMEOUT",
        "AI_CLI_SYSTEM_PROMPT", "AI_CLI_TRANSCRIPT",
    ):
        monkeypatch.delenv(var, raising=False)
