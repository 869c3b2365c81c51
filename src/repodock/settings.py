"""Application settings and enrichment model selection."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="REPODOCK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    anthropic_api_key: str | None = None
    openai_api_key: str | None = None
    logfire_token: str | None = None

    # Enrichment service (Ollama-compatible). None disables the HTTP client.
    enrichment_url: str | None = None
    enrichment_model: str = "llama3"
    enrichment_timeout: float = 45.0
    enrichment_status_timeout: float = 5.0

    # Content source
    manifest_fetch_limit: int = 10
    source_fetch_limit: int = 50

    # Static analysis thresholds
    lint_max_line_length: int = 88
    max_file_lines: int = 500
    max_run_instructions: int = 5

    # Validation thresholds
    dependency_review_threshold: int = 50


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Model tiers for the agent-backed enrichment client
_ENRICHMENT_MODELS = ["anthropic:claude-sonnet-4-5-20250929", "openai:gpt-4o"]


class NoAPIKeyError(Exception):
    """Raised when no API keys are configured."""

    def __init__(self) -> None:
        super().__init__(
            "No API keys configured. Set REPODOCK_ANTHROPIC_API_KEY or "
            "REPODOCK_OPENAI_API_KEY environment variable."
        )


def _get_available_providers() -> set[str]:
    """Get set of available providers based on configured API keys."""
    settings = get_settings()
    providers = set()
    if settings.anthropic_api_key:
        providers.add("anthropic")
    if settings.openai_api_key:
        providers.add("openai")
    return providers


def _create_model(model_str: str):
    """Create a model instance with API key from settings.

    pydantic-ai providers read API keys from os.environ, but pydantic-settings
    loads .env into Settings without exporting to environ.
    """
    from pydantic_ai.models.anthropic import AnthropicModel
    from pydantic_ai.models.openai import OpenAIModel
    from pydantic_ai.providers.anthropic import AnthropicProvider
    from pydantic_ai.providers.openai import OpenAIProvider

    settings = get_settings()
    provider, model_name = model_str.split(":", 1)

    if provider == "anthropic":
        return AnthropicModel(
            model_name,
            provider=AnthropicProvider(api_key=settings.anthropic_api_key),
        )
    elif provider == "openai":
        return OpenAIModel(
            model_name,
            provider=OpenAIProvider(api_key=settings.openai_api_key),
        )
    else:
        raise ValueError(f"Unknown provider: {provider}")


def get_fallback_model():
    """Get model with fallback support for runtime use.

    Returns:
        FallbackModel if multiple providers are configured, otherwise a single model.

    Raises:
        NoAPIKeyError: If no API keys are configured.
    """
    from pydantic_ai.models.fallback import FallbackModel

    available_providers = _get_available_providers()
    available_models = [
        model for model in _ENRICHMENT_MODELS if model.split(":")[0] in available_providers
    ]
    if not available_models:
        raise NoAPIKeyError()

    model_instances = [_create_model(m) for m in available_models]
    if len(model_instances) == 1:
        return model_instances[0]
    return FallbackModel(model_instances[0], *model_instances[1:])
