# geoquery/api/services/query_service.py
"""Service layer exposed to the HTTP routes."""

import logging
from typing import Any, List, Optional

from geoquery.api.config import get_example_query_count, get_google_maps_config, get_llm_config
from geoquery.api.geocoding import GoogleMapsClient
from geoquery.api.llm import OpenAIChatModel
from geoquery.api.models import QueryResult
from geoquery.api.outcome import attempt
from geoquery.api.sanitizer import parse_structured
from geoquery.api.services.orchestrator import ResolutionOrchestrator
from geoquery.api.services.place_resolver import PlaceResolver
from geoquery.api.services.planner import QueryPlanner

logger = logging.getLogger(__name__)

FALLBACK_EXAMPLE_QUERIES = [
    "3 museums and 2 cafes in Paris",
    "The 5 tallest mountains in the Alps with their elevation",
    "Best ramen shops in Tokyo",
    "National parks in Utah",
    "Historic lighthouses on the coast of Maine",
]


def build_examples_prompt(count: int) -> str:
    return (
        f"Suggest {count} short, varied example questions a user could ask a map assistant, "
        "such as finding several kinds of places in a city or natural landmarks with their elevation. "
        'Respond ONLY with valid JSON in this format: {"examples": ["<question>", ...]}'
    )


def _extract_examples(payload: Any) -> List[str]:
    if isinstance(payload, dict):
        payload = payload.get("examples")
    if not isinstance(payload, list):
        raise ValueError("examples is not a list")
    return [item.strip() for item in payload if isinstance(item, str) and item.strip()]


class QueryService:
    """Handles query processing and example-query generation."""

    def __init__(self, orchestrator: ResolutionOrchestrator, model, llm_timeout: float, example_count: int = 5):
        self.orchestrator = orchestrator
        self.model = model
        self.llm_timeout = llm_timeout
        self.example_count = example_count

    async def process_query(self, user_query: str) -> QueryResult:
        """Resolve a user query into mapped locations.

        Args:
            user_query: Free-form geographic question

        Returns:
            QueryResult, possibly empty

        Raises:
            InvalidQueryError: If the query is missing or blank
        """
        logger.info(f"Processing query: {user_query!r}")
        return await self.orchestrator.orchestrate(user_query)

    async def get_example_queries(self) -> List[str]:
        """Return model-suggested example queries, or the fixed fallback list."""
        generated = await attempt(
            self.model.generate,
            build_examples_prompt(self.example_count),
            timeout=self.llm_timeout,
            label="Example query generation",
        )
        if not generated.ok:
            return list(FALLBACK_EXAMPLE_QUERIES)

        parsed = parse_structured(generated.value, schema=_extract_examples)
        if not parsed.ok or not parsed.value:
            logger.warning("Model gave no usable example queries; using fallback list")
            return list(FALLBACK_EXAMPLE_QUERIES)

        return parsed.value[: self.example_count]


def build_query_service(
    model: Optional[Any] = None,
    maps: Optional[Any] = None,
) -> QueryService:
    """Wire planner, resolver and orchestrator around the given clients.

    Clients default to the OpenAI and Google Maps adapters configured from
    the environment. They are created once and shared by all requests.
    """
    llm_config = get_llm_config()
    maps_config = get_google_maps_config()

    model = model or OpenAIChatModel(llm_config)
    maps = maps or GoogleMapsClient(maps_config)

    planner = QueryPlanner(model, timeout=llm_config["timeout_seconds"])
    resolver = PlaceResolver(
        places=maps,
        elevation=maps,
        places_timeout=maps_config["places_timeout_seconds"],
        elevation_timeout=maps_config["elevation_timeout_seconds"],
    )
    orchestrator = ResolutionOrchestrator(planner, resolver)

    return QueryService(
        orchestrator,
        model,
        llm_timeout=llm_config["timeout_seconds"],
        example_count=get_example_query_count(),
    )


__all__ = ["FALLBACK_EXAMPLE_QUERIES", "QueryService", "build_query_service"]
