"""
Analysis providers

Available providers:
- openai_compatible: Qwen / DeepSeek chat-completions endpoints
- claude: Anthropic Messages API
"""

from .base import AIProvider, AnalysisRequest, AnalysisResponse
from .claude import ClaudeProvider
from .factory import get_provider, reset_provider
from .openai_compatible import OpenAICompatibleProvider

__all__ = [
    "AIProvider",
    "AnalysisRequest",
    "AnalysisResponse",
    "ClaudeProvider",
    "OpenAICompatibleProvider",
    "get_provider",
    "reset_provider",
]
