"""Provider selection from configuration, reused across calls."""
import logging

from .. import config
from ..errors import ProviderError
from .base import AIProvider
from .claude import ClaudeProvider
from .openai_compatible import OpenAICompatibleProvider

logger = logging.getLogger(__name__)

PROVIDERS = {
    "qwen": OpenAICompatibleProvider,
    "deepseek": OpenAICompatibleProvider,
    "claude": ClaudeProvider,
}

_instance = None


def get_provider(name: str = None) -> AIProvider:
    """
    Return the configured provider, creating it on first use.

    Unknown names fall back to the OpenAI-compatible provider. A provider
    without credentials raises ProviderError.
    """
    global _instance
    if _instance is not None:
        return _instance

    name = (name or config.API_PROVIDER).lower()
    logger.info("Creating AI provider: %s", name)
    provider_cls = PROVIDERS.get(name)
    if provider_cls is None:
        logger.error("Unknown API provider: %s, falling back to qwen", name)
        provider_cls = OpenAICompatibleProvider

    provider = provider_cls()
    if not provider.is_ready():
        raise ProviderError(f"AI provider {name} is not properly configured")

    logger.info("AI provider %s initialized successfully", provider.name)
    _instance = provider
    return provider


def reset_provider():
    """Forget the cached provider so the next call re-reads configuration."""
    global _instance
    _instance = None
