"""
Provider-backed structured analysis of a dataset.

The most recent draws are serialised into a per-game prompt, sent to the
configured provider, and the first ```json block of the reply is parsed.
Replies that cannot be parsed yield the game's zero-valued structure,
flagged fallback=True and never cached. Provider transport, auth and
rate-limit failures propagate to the caller.
"""
import json
import logging
import os
import re
from typing import List, Tuple

from . import config
from .cache import RESULT_CACHE
from .errors import InvalidResponseShapeError, ParseError
from .games import profile_for
from .prompts import default_result, system_prompt_for, template_for
from .providers import AnalysisRequest, get_provider
from .records import DrawRecord
from .scraper import load_dataset

logger = logging.getLogger(__name__)

JSON_BLOCK = re.compile(r"```json\s*([\s\S]*?)\s*```")


def extract_json_block(raw_content: str) -> dict:
    """Decode the first ```json fenced block; raise ParseError otherwise."""
    match = JSON_BLOCK.search(raw_content or "")
    if not match or not match.group(1):
        raise ParseError("No ```json block found in provider reply")
    try:
        return json.loads(match.group(1))
    except json.JSONDecodeError as exc:
        raise ParseError(f"Malformed JSON in provider reply: {exc}") from exc


def parse_structured_response(raw_content: str, game_id: str) -> dict:
    """
    Returns
    -------
    dict with keys:
        structured : parsed JSON object, or the game's default structure
        fallback   : True when the default structure was substituted
    """
    profile = profile_for(game_id)
    try:
        structured = extract_json_block(raw_content)
    except ParseError as exc:
        logger.error("Error parsing structured response: %s", exc)
        return {"structured": default_result(profile.game_id), "fallback": True}

    if not isinstance(structured, dict) or not structured:
        logger.error("Provider reply is not a non-empty JSON object")
        return {"structured": default_result(profile.game_id), "fallback": True}
    return {"structured": structured, "fallback": False}


class AIAnalysisService:
    def __init__(self, provider=None, cache=None, recent_count: int = None):
        self._provider = provider
        self.cache = RESULT_CACHE if cache is None else cache
        self.recent_count = config.RECENT_DATA_COUNT if recent_count is None else recent_count

    @property
    def provider(self):
        if self._provider is None:
            self._provider = get_provider()
        return self._provider

    def build_prompts(self, records: List[DrawRecord], game_id: str) -> Tuple[str, str]:
        """System and user prompts for the `recent_count` newest records."""
        profile = profile_for(game_id)
        recent = list(records)[-self.recent_count:] if self.recent_count > 0 else []
        logger.info("Building %s prompt with %d recent records", profile.game_id, len(recent))
        data = json.dumps([r.to_dict() for r in recent], ensure_ascii=False, indent=2)
        user_prompt = template_for(profile.game_id).replace("{data}", data)
        return system_prompt_for(profile.game_id), user_prompt

    def analyze(self, dataset_path: str, game_id: str) -> dict:
        """
        Returns
        -------
        dict with keys: game, structured, provider, model, fallback
        """
        profile = profile_for(game_id)
        key = ("analysis", os.path.abspath(dataset_path), profile.game_id)
        return self.cache.get_or_compute(
            key,
            lambda: self._run(dataset_path, profile.game_id),
            cacheable=lambda result: not result["fallback"],
        )

    def _run(self, dataset_path: str, game_id: str) -> dict:
        logger.info("Starting %s analysis for %s", game_id, dataset_path)
        records = load_dataset(dataset_path, game_id)
        system_prompt, user_prompt = self.build_prompts(records, game_id)

        provider = self.provider
        logger.info("Using AI provider: %s", provider.name)
        request = AnalysisRequest(
            game_id=game_id,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            records=records,
        )
        try:
            response = provider.analyze(request)
        except InvalidResponseShapeError as exc:
            logger.error("Provider reply had an unexpected shape: %s", exc)
            return {
                "game": game_id,
                "structured": default_result(game_id),
                "provider": provider.name,
                "model": getattr(provider, "model", ""),
                "fallback": True,
            }

        logger.info("Received response from %s (%s)", response.provider_name, response.model)
        parsed = parse_structured_response(response.raw_content, game_id)
        return {
            "game": game_id,
            "structured": parsed["structured"],
            "provider": response.provider_name,
            "model": response.model,
            "fallback": parsed["fallback"],
        }
