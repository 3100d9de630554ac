"""Claude over the Anthropic Messages API."""
import logging

from .. import config
from ..errors import InvalidResponseShapeError
from .base import AIProvider, AnalysisRequest, AnalysisResponse, post_json

logger = logging.getLogger(__name__)


class ClaudeProvider(AIProvider):
    name = "Claude"

    def __init__(
        self,
        api_key: str = None,
        api_url: str = None,
        api_version: str = None,
        model: str = None,
        temperature: float = None,
        max_tokens: int = None,
        timeout: float = None,
    ):
        self.api_key = config.CLAUDE_API_KEY if api_key is None else api_key
        self.api_url = api_url or config.CLAUDE_API_URL
        self.api_version = api_version or config.CLAUDE_API_VERSION
        self.model = config.CLAUDE_MODEL if model is None else model
        self.temperature = config.CLAUDE_TEMPERATURE if temperature is None else temperature
        self.max_tokens = max_tokens or config.CLAUDE_MAX_TOKENS
        self.timeout = timeout or config.CLAUDE_TIMEOUT
        logger.info("ClaudeProvider initialized with model: %s", self.model)

    def build_payload(self, request: AnalysisRequest) -> dict:
        return {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "system": request.system_prompt,
            "messages": [{"role": "user", "content": request.user_prompt}],
        }

    def analyze(self, request: AnalysisRequest) -> AnalysisResponse:
        logger.info("Sending analysis request to Claude API for %s", request.game_id)
        body = post_json(
            self.api_url,
            self.build_payload(request),
            headers={
                "x-api-key": self.api_key,
                "anthropic-version": self.api_version,
                "content-type": "application/json",
            },
            timeout=self.timeout,
            provider_name=self.name,
        )

        blocks = body.get("content")
        if not isinstance(blocks, list):
            raise InvalidResponseShapeError("Claude API response has no content blocks")
        text = "\n".join(
            block.get("text", "")
            for block in blocks
            if isinstance(block, dict) and block.get("type") == "text"
        )
        if not text:
            raise InvalidResponseShapeError("No text content in Claude API response")

        logger.info("Successfully received response from Claude API")
        return AnalysisResponse(
            raw_content=text,
            provider_name=self.name,
            model=body.get("model") or self.model,
        )

    def is_ready(self) -> bool:
        ready = bool(self.api_key and self.model)
        if not ready:
            logger.warning("ClaudeProvider is not properly configured")
        return ready
