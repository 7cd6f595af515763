"""Provider factory registry."""
from __future__ import annotations

from ai_cli.config.schema import LLMConfig
from ai_cli.llm.protocol import Provider

DEFAULT_CUSTOM_URL = "http://localhost:8000"

SUPPORTED_PROVIDERS: tuple[str, ...] = (
    "openai", "openai-compat", "claude", "anthropic", "custom", "stub",
)


def create_provider(config: LLMConfig) -> Provider:
    """Instantiate a provider from a configuration object.

    Args:
        config: The LLM configuration specifying provider kind, model,
            credential and transport settings.

    Returns:
        An object satisfying the :class:`Provider` protocol.

    Raises:
        ValueError: If ``config.provider`` is not a recognised provider name.
        ProviderError: If the provider SDK rejects the configuration.
    """
    kind = config.provider.lower().replace("_", "-")

    if kind in ("openai", "openai-compat"):
        from ai_cli.llm.openai_compat import OpenAIProvider

        return OpenAIProvider(
            api_key=config.api_key,
            model=config.model,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
            base_url=config.base_url,
            timeout_s=config.timeout_s,
            label="OpenAI" if kind == "openai" else "OpenAI-compatible",
        )

    if kind in ("claude", "anthropic"):
        from ai_cli.llm.claude import ClaudeProvider

        return ClaudeProvider(
            api_key=config.api_key,
            model=config.model,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
            timeout_s=config.timeout_s,
        )

    if kind == "custom":
        from ai_cli.llm.custom import CustomProvider

        return CustomProvider(
            url=config.base_url or DEFAULT_CUSTOM_URL,
            api_key=config.api_key,
            timeout_s=config.timeout_s,
        )

    if kind == "stub":
        from ai_cli.llm.stub import StubProvider

        return StubProvider(model=config.model)

    raise ValueError(
        f"Unknown provider: {config.provider!r}. "
        f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}."
    )
