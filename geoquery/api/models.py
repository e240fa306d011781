"""Shared data structures for query resolution.

``LocationRequest`` is what the planner proposes, ``ResolvedLocation`` is
what the resolver produces, and ``QueryResult`` is the response handed to
the HTTP layer. All three are request-scoped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 1
MAX_LIMIT = 20  # Places text search returns at most 20 results per page
ELEVATION_METADATA = "elevation"
ELEVATION_UNAVAILABLE = "N/A"


def validate_coordinates(lat: float, lng: float) -> bool:
    """Return True if lat/lng are within valid ranges."""
    return -90 <= lat <= 90 and -180 <= lng <= 180


def _optional_text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _coerce_limit(value: Any) -> int:
    # bool is an int subclass; "true" is not a limit
    if isinstance(value, bool):
        return DEFAULT_LIMIT
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    elif isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            return DEFAULT_LIMIT
    if not isinstance(value, int) or value < 1:
        return DEFAULT_LIMIT
    return min(value, MAX_LIMIT)


def _coerce_metadata(value: Any) -> FrozenSet[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple, set, frozenset)):
        return frozenset()
    return frozenset(item.strip().lower() for item in value if isinstance(item, str) and item.strip())


@dataclass(frozen=True)
class LocationRequest:
    """One search unit proposed by the language model."""

    query: str  # e.g. "modern art museums in Manhattan"
    type: Optional[str] = None  # free-text category, e.g. "museum"
    reason: Optional[str] = None
    limit: int = DEFAULT_LIMIT
    metadata: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def wants_elevation(self) -> bool:
        return ELEVATION_METADATA in self.metadata

    @classmethod
    def from_payload(cls, item: Any) -> Optional["LocationRequest"]:
        """Build a request from one decoded JSON item.

        Returns None when the item is not an object or has no usable query.
        Wrong-typed optional fields fall back to their defaults.
        """
        if not isinstance(item, dict):
            logger.debug(f"Discarding non-object unit: {item!r}")
            return None

        query = _optional_text(item.get("query"))
        if query is None:
            logger.debug(f"Discarding unit without a query: {item!r}")
            return None

        return cls(
            query=query,
            type=_optional_text(item.get("type")),
            reason=_optional_text(item.get("reason")),
            limit=_coerce_limit(item.get("limit", DEFAULT_LIMIT)),
            metadata=_coerce_metadata(item.get("metadata")),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"query": self.query}
        if self.type:
            data["type"] = self.type
        if self.reason:
            data["reason"] = self.reason
        data["limit"] = self.limit
        if self.metadata:
            data["metadata"] = sorted(self.metadata)
        return data


@dataclass(frozen=True)
class PlaceCandidate:
    """A single place-search hit, normalized from the provider payload."""

    name: str
    address: str
    lat: float
    lng: float


@dataclass(frozen=True)
class ResolvedLocation:
    """A mapped place with coordinates and optional enrichment."""

    name: str
    lat: float
    lng: float
    address: str
    elevation: Optional[Union[int, str]] = None  # metres, or ELEVATION_UNAVAILABLE
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "lat": self.lat,
            "lng": self.lng,
            "address": self.address,
        }
        if self.elevation is not None:
            data["elevation"] = self.elevation
        if self.reason:
            data["reason"] = self.reason
        return data


@dataclass
class QueryResult:
    """Top-level response for one user query."""

    locations: List[ResolvedLocation] = field(default_factory=list)
    rationale: List[LocationRequest] = field(default_factory=list)
    raw_model_text: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "locations": [loc.to_dict() for loc in self.locations],
            "rationale": [unit.to_dict() for unit in self.rationale],
            "rawResponse": self.raw_model_text,
        }


__all__ = [
    "DEFAULT_LIMIT",
    "MAX_LIMIT",
    "ELEVATION_METADATA",
    "ELEVATION_UNAVAILABLE",
    "validate_coordinates",
    "LocationRequest",
    "PlaceCandidate",
    "ResolvedLocation",
    "QueryResult",
]
