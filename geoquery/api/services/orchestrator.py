# geoquery/api/services/orchestrator.py
"""Fan-out/fan-in of place resolution over the planner's requests."""

import asyncio
import logging
from typing import List

from geoquery.api.models import LocationRequest, QueryResult, ResolvedLocation
from geoquery.api.outcome import ErrorKind, InvalidQueryError, Outcome
from geoquery.api.services.place_resolver import PlaceResolver
from geoquery.api.services.planner import QueryPlanner

logger = logging.getLogger(__name__)


class ResolutionOrchestrator:
    """Builds a :class:`QueryResult` from a user query.

    Every failure below this point is turned into data: unparseable model
    output gives an empty result with the raw text, a failed unit is left
    out of ``locations`` but kept in ``rationale``. Only a missing query is
    raised, as :class:`InvalidQueryError`.
    """

    def __init__(self, planner: QueryPlanner, resolver: PlaceResolver):
        self.planner = planner
        self.resolver = resolver

    async def orchestrate(self, user_query: str) -> QueryResult:
        if not isinstance(user_query, str) or not user_query.strip():
            raise InvalidQueryError("Missing required field: query")
        user_query = user_query.strip()

        try:
            return await self._orchestrate(user_query)
        except Exception as e:
            logger.exception(f"Query pipeline failed for '{user_query}'")
            return QueryResult(raw_model_text=f"{ErrorKind.TOTAL_PIPELINE_FAILURE.value}: {e}")

    async def _orchestrate(self, user_query: str) -> QueryResult:
        planned = await self.planner.plan(user_query)
        if not planned.ok:
            return self._result_for_failed_plan(planned)

        units = planned.value.units
        outcomes = await asyncio.gather(
            *(self.resolver.resolve_many(unit) for unit in units),
            return_exceptions=True,
        )

        locations = self._merge(units, outcomes)
        logger.info(f"Resolved {len(locations)} location(s) from {len(units)} request(s) for '{user_query}'")
        return QueryResult(locations=locations, rationale=list(units), raw_model_text=planned.value.raw_text)

    @staticmethod
    def _result_for_failed_plan(planned: Outcome) -> QueryResult:
        error = planned.error
        if error.kind is ErrorKind.MALFORMED_RESPONSE and error.raw is not None:
            return QueryResult(raw_model_text=error.raw)
        logger.error(f"Planning failed: {error.message}")
        return QueryResult(raw_model_text=f"{ErrorKind.TOTAL_PIPELINE_FAILURE.value}: {error.message}")

    @staticmethod
    def _merge(units: List[LocationRequest], outcomes) -> List[ResolvedLocation]:
        """Concatenate successful results, keeping the planner's unit order."""
        locations = []
        for unit, outcome in zip(units, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(f"Resolver raised for '{unit.query}': {outcome}")
                continue
            if not outcome.ok:
                logger.warning(f"Dropping '{unit.query}': {outcome.error.message}")
                continue
            locations.extend(outcome.value)
        return locations


__all__ = ["ResolutionOrchestrator"]
