# geoquery/api/services/place_resolver.py
"""Resolves a single location request into mapped places."""

import asyncio
import logging
from typing import List, Optional

from geoquery.api.models import (
    ELEVATION_UNAVAILABLE,
    LocationRequest,
    PlaceCandidate,
    ResolvedLocation,
    validate_coordinates,
)
from geoquery.api.outcome import Outcome, attempt

logger = logging.getLogger(__name__)


class PlaceResolver:
    """Runs place search and optional elevation lookups for one request."""

    def __init__(self, places, elevation, places_timeout: float, elevation_timeout: float):
        """
        Args:
            places: Object exposing ``text_search(query) -> list[PlaceCandidate]``
            elevation: Object exposing ``elevation(lat, lng) -> float``
            places_timeout: Seconds allowed for one text search
            elevation_timeout: Seconds allowed for one elevation lookup
        """
        self.places = places
        self.elevation = elevation
        self.places_timeout = places_timeout
        self.elevation_timeout = elevation_timeout

    async def resolve(self, unit: LocationRequest) -> Outcome[Optional[ResolvedLocation]]:
        """Resolve the first matching place, or None if the search is empty."""
        outcome = await self._resolve(unit, limit=1)
        if not outcome.ok:
            return outcome
        return Outcome.success(outcome.value[0] if outcome.value else None)

    async def resolve_many(self, unit: LocationRequest) -> Outcome[List[ResolvedLocation]]:
        """Resolve up to ``unit.limit`` places in the provider's order."""
        return await self._resolve(unit, limit=unit.limit)

    async def _resolve(self, unit: LocationRequest, limit: int) -> Outcome[List[ResolvedLocation]]:
        searched = await attempt(
            self.places.text_search,
            unit.query,
            timeout=self.places_timeout,
            label=f"Place search for '{unit.query}'",
        )
        if not searched.ok:
            return searched

        candidates = [c for c in searched.value if validate_coordinates(c.lat, c.lng)][:limit]
        if not candidates:
            logger.warning(f"No places found for '{unit.query}'")
            return Outcome.success([])

        if unit.wants_elevation:
            elevations = await asyncio.gather(*(self._lookup_elevation(c) for c in candidates))
        else:
            elevations = [None] * len(candidates)

        locations = [
            ResolvedLocation(
                name=candidate.name,
                lat=candidate.lat,
                lng=candidate.lng,
                address=candidate.address,
                elevation=elevation,
                reason=unit.reason,
            )
            for candidate, elevation in zip(candidates, elevations)
        ]
        logger.debug(f"Resolved {len(locations)} place(s) for '{unit.query}'")
        return Outcome.success(locations)

    async def _lookup_elevation(self, candidate: PlaceCandidate):
        outcome = await attempt(
            self.elevation.elevation,
            candidate.lat,
            candidate.lng,
            timeout=self.elevation_timeout,
            label=f"Elevation lookup for '{candidate.name}'",
        )
        if not outcome.ok:
            return ELEVATION_UNAVAILABLE
        try:
            return int(round(outcome.value))
        except (TypeError, ValueError):
            logger.warning(f"Unusable elevation value for '{candidate.name}': {outcome.value!r}")
            return ELEVATION_UNAVAILABLE


__all__ = ["PlaceResolver"]
