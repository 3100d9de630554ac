"""Qwen / DeepSeek over their OpenAI-compatible chat-completions endpoint."""
import logging

from .. import config
from ..errors import InvalidResponseShapeError
from .base import AIProvider, AnalysisRequest, AnalysisResponse, post_json

logger = logging.getLogger(__name__)


class OpenAICompatibleProvider(AIProvider):
    def __init__(
        self,
        api_key: str = None,
        api_url: str = None,
        model: str = None,
        timeout: float = None,
        temperature: float = None,
        max_tokens: int = None,
        top_p: float = None,
        presence_penalty: float = None,
    ):
        self.api_key = config.API_KEY if api_key is None else api_key
        self.api_url = api_url or config.API_URL
        self.model = model or config.API_MODEL
        self.timeout = timeout or config.API_TIMEOUT
        self.temperature = config.API_TEMPERATURE if temperature is None else temperature
        self.max_tokens = max_tokens or config.API_MAX_TOKENS
        self.top_p = config.API_TOP_P if top_p is None else top_p
        self.presence_penalty = (
            config.API_PRESENCE_PENALTY if presence_penalty is None else presence_penalty
        )
        self.name = "DeepSeek" if "deepseek" in self.model.lower() else "Qwen"
        logger.info("%sProvider initialized with model: %s", self.name, self.model)

    def build_payload(self, request: AnalysisRequest) -> dict:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": request.system_prompt},
                {"role": "user", "content": request.user_prompt},
            ],
        }
        # deepseek-r1 rejects sampling parameters
        if "deepseek-r1" not in self.model.lower():
            if self.temperature is not None:
                payload["temperature"] = self.temperature
            if self.top_p is not None:
                payload["top_p"] = self.top_p
            if self.presence_penalty is not None:
                payload["presence_penalty"] = self.presence_penalty
        payload["max_tokens"] = self.max_tokens
        return payload

    def analyze(self, request: AnalysisRequest) -> AnalysisResponse:
        logger.info("Sending analysis request to %s API for %s", self.name, request.game_id)
        body = post_json(
            self.api_url,
            self.build_payload(request),
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
            provider_name=self.name,
        )

        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        if not content:
            logger.error("Invalid %s API response structure: %.500s", self.name, body)
            raise InvalidResponseShapeError(f"Invalid response structure from {self.name} API")

        logger.info("Successfully received response from %s API", self.name)
        return AnalysisResponse(raw_content=content, provider_name=self.name, model=self.model)

    def is_ready(self) -> bool:
        ready = bool(self.api_key and self.model and self.api_url)
        if not ready:
            logger.warning("%sProvider is not properly configured", self.name)
        return ready
