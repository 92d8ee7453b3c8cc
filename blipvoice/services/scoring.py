import json
import logging
import math
from typing import Any

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)

SCORING_PROMPT = (
    "You are a professional call quality evaluator. "
    "Score the call from 0 to 100. "
    'Return ONLY valid JSON like: {"score": number}'
)

FALLBACK_SCORE = 0


def parse_score(content: Any) -> int:
    """Read ``{"score": n}`` from a model reply.

    Raises ValueError for anything that is not a JSON object holding a
    number between 0 and 100.
    """
    if not isinstance(content, str) or not content.strip():
        raise ValueError("empty scoring response")
    parsed = json.loads(content.strip())
    if not isinstance(parsed, dict) or "score" not in parsed:
        raise ValueError("scoring response has no score field")
    value = parsed["score"]
    if isinstance(value, bool):
        raise ValueError("score must be numeric")
    if isinstance(value, str):
        value = float(value.strip())
    if not isinstance(value, (int, float)):
        raise ValueError("score must be numeric")
    if not math.isfinite(value):
        raise ValueError(f"score is not finite: {value}")
    score = int(round(value))
    if not 0 <= score <= 100:
        raise ValueError(f"score out of range: {value}")
    return score


class DisabledScorer:
    """Used when no LLM credentials are configured; every call scores 0."""

    async def score(self, transcript: str) -> int:
        logger.debug("Scoring disabled, returning fallback score")
        return FALLBACK_SCORE


class LLMScorer:
    def __init__(self, client: AsyncOpenAI, model: str = "gpt-4o-mini") -> None:
        self.client = client
        self.model = model

    async def score(self, transcript: str) -> int:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": SCORING_PROMPT},
                    {"role": "user", "content": transcript},
                ],
            )
            return parse_score(response.choices[0].message.content)
        except Exception as exc:
            logger.warning("Transcript scoring failed, using fallback score: %s: %s", type(exc).__name__, exc)
            return FALLBACK_SCORE


def build_scorer(api_key: str, model: str, timeout: float):
    if not api_key:
        return DisabledScorer()
    return LLMScorer(AsyncOpenAI(api_key=api_key, timeout=timeout), model=model)
