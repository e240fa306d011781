# geoquery/api/services/planner.py
"""Turns a user query into location requests via the language model."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List

from geoquery.api.models import MAX_LIMIT, LocationRequest
from geoquery.api.outcome import ErrorKind, Outcome, attempt
from geoquery.api.sanitizer import parse_structured

logger = logging.getLogger(__name__)

UNIT_KEYS = ("requests", "locations")

INSTRUCTIONS = f"""You are a geographic assistant. Analyze the user's query and output:
1. A list of specific searches to run on a map
2. Their types (e.g., "museum", "restaurant")
3. The ideal number of results per search
4. A short reason explaining why each search answers the query
5. Extra metadata to attach to each result, if the user asks for it

Rules:
- Every request MUST include a non-empty "query" string suitable for a place text search.
- "type", "reason", "limit" and "metadata" are optional.
- "limit" is an integer between 1 and {MAX_LIMIT}; omit it for a single place.
- "metadata" is a list; the only recognized value is "elevation".
- If the query names no places, return an empty "requests" list.

Respond ONLY with valid JSON in this format:
{{
  "requests": [
    {{
      "type": "museum",
      "query": "modern art museums in Manhattan",
      "reason": "Manhattan has the highest concentration of modern art museums",
      "limit": 3,
      "metadata": ["elevation"]
    }}
  ]
}}"""


@dataclass
class Plan:
    units: List[LocationRequest] = field(default_factory=list)
    raw_text: str = ""


def build_prompt(user_query: str) -> str:
    return f"{INSTRUCTIONS}\n\nUser query: {user_query}"


def extract_units(payload: Any) -> List[LocationRequest]:
    """Pull location requests out of a decoded payload.

    A missing or non-list ``requests``/``locations`` key yields no units, as
    does any item that cannot be turned into a request.
    """
    if isinstance(payload, dict):
        items = next((payload[key] for key in UNIT_KEYS if isinstance(payload.get(key), list)), None)
    else:
        items = payload

    if not isinstance(items, list):
        logger.info("Model payload has no list of requests; treating as empty")
        return []

    units = []
    for item in items:
        unit = LocationRequest.from_payload(item)
        if unit is not None:
            units.append(unit)

    dropped = len(items) - len(units)
    if dropped:
        logger.warning(f"Discarded {dropped} malformed request(s) from model output")
    return units


class QueryPlanner:
    """Asks the language model which places to search for."""

    def __init__(self, model, timeout: float):
        """
        Args:
            model: Object exposing ``generate(prompt: str) -> str``
            timeout: Seconds allowed for the model call
        """
        self.model = model
        self.timeout = timeout

    async def plan(self, user_query: str) -> Outcome[Plan]:
        prompt = build_prompt(user_query)
        generated = await attempt(self.model.generate, prompt, timeout=self.timeout, label="Language model call")
        if not generated.ok:
            return generated

        raw_text = generated.value
        if not isinstance(raw_text, str):
            return Outcome.failure(ErrorKind.MALFORMED_RESPONSE, "Model returned no text", raw="")

        parsed = parse_structured(raw_text, schema=extract_units)
        if not parsed.ok:
            logger.warning(f"Could not parse planner output for query '{user_query}'")
            return parsed

        logger.info(f"Planner proposed {len(parsed.value)} request(s) for '{user_query}'")
        return Outcome.success(Plan(units=parsed.value, raw_text=raw_text))


__all__ = ["INSTRUCTIONS", "Plan", "QueryPlanner", "build_prompt", "extract_units"]
