# geoquery/api/geocoding.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import googlemaps

from geoquery.api.config import get_google_maps_config
from geoquery.api.models import PlaceCandidate

logger = logging.getLogger(__name__)


class GoogleMapsClient:
    """Place text search and elevation lookups through ``googlemaps``.

    Both capabilities share one ``googlemaps.Client``; it is created on first
    use so a missing key surfaces as a per-call failure instead of a crash
    at import time.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, client: Optional[googlemaps.Client] = None):
        self.config = config or get_google_maps_config()
        self._gmaps = client

    @property
    def places_timeout_seconds(self) -> float:
        return self.config["places_timeout_seconds"]

    @property
    def elevation_timeout_seconds(self) -> float:
        return self.config["elevation_timeout_seconds"]

    def _get_client(self) -> googlemaps.Client:
        """Return a cached googlemaps.Client instance."""
        if self._gmaps is None:
            api_key = self.config.get("api_key", "")
            if not api_key:
                raise ValueError("GOOGLE_MAPS_API_KEY not set")
            logger.info("Initializing Google Maps client")
            timeout = max(self.places_timeout_seconds, self.elevation_timeout_seconds)
            # Quota errors are reported, not retried. 5xx retries stay within the call deadline.
            self._gmaps = googlemaps.Client(
                key=api_key,
                timeout=timeout,
                retry_timeout=timeout,
                retry_over_query_limit=False,
            )
        return self._gmaps

    def text_search(self, query: str) -> List[PlaceCandidate]:
        """Run a Places text search and return candidates in provider order.

        Results without a geometry are skipped. Raises on transport, quota
        or auth errors, and on a response that is not a results object.
        """
        logger.debug(f"Places text search: {query}")
        response = self._get_client().places(query=query, language="en")

        if not isinstance(response, dict) or not isinstance(response.get("results"), list):
            raise ValueError(f"Unexpected Places response for '{query}'")

        candidates = []
        for place in response["results"]:
            candidate = _to_candidate(place)
            if candidate is None:
                logger.debug(f"Skipping place without geometry for '{query}': {place!r}")
                continue
            candidates.append(candidate)

        logger.debug(f"Places text search '{query}' returned {len(candidates)} candidates")
        return candidates

    def elevation(self, lat: float, lng: float) -> float:
        """Return the elevation in metres at (lat, lng)."""
        results = self._get_client().elevation((lat, lng))
        if not results:
            raise LookupError(f"No elevation data for {lat},{lng}")
        return float(results[0]["elevation"])


def _to_candidate(place: Any) -> Optional[PlaceCandidate]:
    if not isinstance(place, dict):
        return None
    try:
        loc = place["geometry"]["location"]
        lat, lng = float(loc["lat"]), float(loc["lng"])
    except (KeyError, TypeError, ValueError):
        return None
    return PlaceCandidate(
        name=place.get("name") or "",
        address=place.get("formatted_address") or "",
        lat=lat,
        lng=lng,
    )


# Re-export for clean imports elsewhere
__all__ = ["GoogleMapsClient"]
