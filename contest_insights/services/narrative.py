# contest_insights/services/narrative.py

import re
import copy
import json
import asyncio
import logging
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from contest_insights import config
from contest_insights.services.prompts import NarrativeFallbacks

logger = logging.getLogger(__name__)

# first "{" through last "}"
_JSON_SPAN = re.compile(r"\{[\s\S]*\}")


class ParseOutcome(NamedTuple):
    ok: bool
    value: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


def parse_direct(text: str) -> ParseOutcome:
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        return ParseOutcome(False, error=f"invalid_json: {e}")
    if not isinstance(parsed, dict):
        return ParseOutcome(False, error="not_an_object")
    return ParseOutcome(True, value=parsed)


def parse_embedded(text: str) -> ParseOutcome:
    match = _JSON_SPAN.search(text)
    if not match:
        return ParseOutcome(False, error="no_json_span")
    outcome = parse_direct(match.group(0))
    if not outcome.ok:
        return ParseOutcome(False, error=f"span_{outcome.error}")
    return outcome


PARSE_STEPS: List[Callable[[str], ParseOutcome]] = [parse_direct, parse_embedded]


def parse_narrative(text: str, fallbacks: NarrativeFallbacks) -> Dict[str, Any]:
    """
    Turn a completion reply into a narrative object.
    Never raises: when both parse steps fail, a copy of the matching fallback is returned.
    """
    outcome = ParseOutcome(False, error="empty")
    for step in PARSE_STEPS:
        outcome = step(text)
        if outcome.ok:
            return outcome.value
        logger.warning("Narrative parse step %s failed: %s", step.__name__, outcome.error)

    logger.debug("Raw AI response: %r", text)
    if outcome.error == "no_json_span":
        return copy.deepcopy(fallbacks.missing)
    return copy.deepcopy(fallbacks.malformed)


class NarrativeGenerator:
    def __init__(
        self,
        llm_client,
        model: str = config.LLM_MODEL,
        max_tokens: int = config.LLM_MAX_TOKENS,
        temperature: float = config.LLM_TEMPERATURE,
    ):
        self.client = llm_client
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    def complete(self, prompt: str) -> str:
        # errors from the completion endpoint are not caught here
        resp = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        raw = resp.choices[0].message.content
        logger.debug("[LLM RAW RESPONSE]\n%r", raw)
        return (raw or "").strip()

    async def generate(self, prompt: str, fallbacks: NarrativeFallbacks) -> Dict[str, Any]:
        raw = await asyncio.to_thread(self.complete, prompt)
        return parse_narrative(raw, fallbacks)
