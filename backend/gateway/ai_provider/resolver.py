"""Upstream provider selection.

Builds the single provider the gateway talks to from configuration.  A
missing credential for the selected provider is a startup error: the
application lifespan calls :func:`build_provider` and lets
:class:`ConfigError` abort the process.

Usage:
    from gateway.ai_provider.resolver import build_provider, set_provider
    from gateway.config import get_config

    set_provider(build_provider(get_config()))
"""
import logging
from enum import Enum
from typing import Optional

from gateway.config import AppConfig, ConfigError

from .base import AIProvider
from .claude_direct import ClaudeDirectProvider
from .gemini import GeminiProvider
from .openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)


class ProviderType(str, Enum):
    """Supported upstream provider types."""
    GEMINI = "gemini"
    ANTHROPIC = "anthropic"
    OPENAI = "openai"


_CREDENTIAL_ENV = {
    ProviderType.GEMINI: "GEMINI_API_KEY",
    ProviderType.ANTHROPIC: "ANTHROPIC_API_KEY",
    ProviderType.OPENAI: "OPENAI_API_KEY",
}


def build_provider(config: AppConfig) -> AIProvider:
    """Create the configured upstream provider.

    Raises:
        ConfigError: If the selected provider has no API key.
    """
    provider_type = ProviderType(config.upstream.provider)
    api_key = getattr(config.secrets, provider_type.value).api_key
    if not api_key:
        raise ConfigError(
            f"{provider_type.value} API key is not set "
            f"(set {_CREDENTIAL_ENV[provider_type]} or gateway.secrets.yaml)"
        )

    model = config.upstream.model
    if provider_type is ProviderType.GEMINI:
        provider: AIProvider = GeminiProvider(api_key=api_key, model=model)
    elif provider_type is ProviderType.ANTHROPIC:
        provider = ClaudeDirectProvider(api_key=api_key, model=model, max_tokens=config.upstream.max_tokens)
    else:
        provider = OpenAIProvider(api_key=api_key, model=model, max_tokens=config.upstream.max_tokens)

    logger.info("Upstream provider ready: provider=%s model=%s", provider.name, provider.model)
    return provider


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_provider: Optional[AIProvider] = None


def get_provider() -> Optional[AIProvider]:
    """Get the global upstream provider, or None before startup."""
    return _provider


def set_provider(provider: Optional[AIProvider]) -> None:
    """Set the global upstream provider."""
    global _provider
    _provider = provider
