"""Recommendation provider selection."""

from keyguard.ai.base import BaseAIProvider
from keyguard.ai.providers.anthropic import AnthropicProvider
from keyguard.ai.providers.openai import OpenAIProvider
from keyguard.ai.providers.ollama import OllamaProvider
from keyguard.core.config import ProviderName, get_settings
from keyguard.core.exceptions import ConfigurationError

PROVIDERS: dict[str, type[BaseAIProvider]] = {
    "anthropic": AnthropicProvider,
    "openai": OpenAIProvider,
    "ollama": OllamaProvider,
}


def get_recommender(provider: ProviderName | None = None) -> BaseAIProvider | None:
    """Build the configured remediation provider.

    Returns ``None`` when AI remediation is disabled, in which case the
    local fallback report is always used.
    """
    settings = get_settings()
    if not settings.ai_enabled:
        return None

    name = provider or settings.default_ai_provider
    provider_class = PROVIDERS.get(name)
    if provider_class is None:
        raise ConfigurationError(f"Unknown AI provider: {name}")
    return provider_class()
