"""Provider contract shared by every analysis backend."""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List

import requests

from ..errors import (
    InvalidResponseShapeError,
    ProviderAuthError,
    ProviderError,
    ProviderRateLimitError,
    ProviderTimeoutError,
)
from ..records import DrawRecord

logger = logging.getLogger(__name__)


@dataclass
class AnalysisRequest:
    game_id: str
    system_prompt: str
    user_prompt: str
    records: List[DrawRecord] = field(default_factory=list)


@dataclass
class AnalysisResponse:
    raw_content: str
    provider_name: str
    model: str


class AIProvider(ABC):
    """A text-generation backend that answers one analysis request."""

    name = "provider"

    @abstractmethod
    def analyze(self, request: AnalysisRequest) -> AnalysisResponse:
        """Send the prompts and return the raw reply text."""

    @abstractmethod
    def is_ready(self) -> bool:
        """True when the provider has the credentials it needs."""


def post_json(url: str, payload: dict, headers: dict, timeout: float, provider_name: str) -> dict:
    """
    POST a JSON body and return the decoded JSON reply.

    Transport failures are mapped onto the ProviderError hierarchy; a reply
    that is not a JSON object raises InvalidResponseShapeError.
    """
    try:
        resp = requests.post(url, json=payload, headers=headers, timeout=timeout)
    except requests.Timeout as exc:
        raise ProviderTimeoutError(
            f"{provider_name} API request timeout. Please try again or increase timeout setting."
        ) from exc
    except requests.RequestException as exc:
        raise ProviderError(f"{provider_name} API request failed: {exc}") from exc

    if resp.status_code == 401:
        raise ProviderAuthError(f"{provider_name} API authentication failed. Please check your API key.")
    if resp.status_code == 429:
        raise ProviderRateLimitError(f"{provider_name} API rate limit exceeded. Please try again later.")
    if resp.status_code >= 400:
        logger.error("%s API error %s: %s", provider_name, resp.status_code, resp.text[:500])
        raise ProviderError(f"{provider_name} API returned HTTP {resp.status_code}")

    try:
        body = resp.json()
    except ValueError as exc:
        raise InvalidResponseShapeError(f"{provider_name} API returned a non-JSON body") from exc
    if not isinstance(body, dict):
        raise InvalidResponseShapeError(f"Empty response from {provider_name} API")
    return body
