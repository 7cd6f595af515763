"""Configuration schema dataclasses for ai-cli."""
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class LLMConfig:
    """Provider configuration."""

    provider: str = "openai"
    model: str = "gpt-3.5-turbo"
    api_key: str | None = None
    base_url: str | None = None
    max_tokens: int | None = 1024
    temperature: float = 0.7
    timeout_s: float = 60.0


@dataclass
class ChatConfig:
    """Interactive session settings."""

    system_prompt: str | None = None
    prompt: str = ">> "
    word_delay_ms: int = 0


@dataclass
class TranscriptConfig:
    """Where the live transcript goes and what to resume from."""

    path: str | None = None
    resume: str | None = None


@dataclass
class AiCliConfig:
    """Top-level configuration for ai-cli."""

    llm: LLMConfig = field(default_factory=LLMConfig)
    chat: ChatConfig = field(default_factory=ChatConfig)
    transcript: TranscriptConfig = field(default_factory=TranscriptConfig)

    @classmethod
    def create_default(cls) -> AiCliConfig:
        """Create a configuration with all default values."""
        return cls(
            llm=LLMConfig(),
            chat=ChatConfig(),
            transcript=TranscriptConfig(),
        )
