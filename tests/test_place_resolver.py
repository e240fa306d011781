import threading

import pytest

from geoquery.api.models import ELEVATION_UNAVAILABLE, LocationRequest, PlaceCandidate
from geoquery.api.outcome import ErrorKind
from tests.conftest import make_resolver
from tests.fakes import EVEREST, K2, LOUVRE, ORSAY, POMPIDOU, RODIN, FakeMaps


@pytest.mark.asyncio
async def test_resolve_takes_first_candidate():
    maps = FakeMaps(places={"museums in Paris": [LOUVRE, ORSAY]})
    unit = LocationRequest(query="museums in Paris", reason="art")

    outcome = await make_resolver(maps).resolve(unit)

    assert outcome.ok
    assert outcome.value.name == "Louvre Museum"
    assert outcome.value.reason == "art"
    assert outcome.value.elevation is None


@pytest.mark.asyncio
async def test_resolve_with_no_candidates_is_not_an_error():
    outcome = await make_resolver(FakeMaps()).resolve(LocationRequest(query="atlantis"))
    assert outcome.ok
    assert outcome.value is None


@pytest.mark.asyncio
async def test_resolve_many_respects_limit_and_provider_order():
    maps = FakeMaps(places={"museums in Paris": [POMPIDOU, LOUVRE, RODIN, ORSAY]})
    unit = LocationRequest(query="museums in Paris", type="museum", limit=3)

    outcome = await make_resolver(maps).resolve_many(unit)

    assert outcome.ok
    assert [loc.name for loc in outcome.value] == ["Centre Pompidou", "Louvre Museum", "Musée Rodin"]
    assert maps.elevation_calls == []


@pytest.mark.asyncio
async def test_resolve_many_skips_out_of_range_coordinates():
    bogus = PlaceCandidate(name="Nowhere", address="", lat=123.0, lng=2.0)
    maps = FakeMaps(places={"museums": [bogus, LOUVRE]})

    outcome = await make_resolver(maps).resolve_many(LocationRequest(query="museums", limit=2))

    assert [loc.name for loc in outcome.value] == ["Louvre Museum"]


@pytest.mark.asyncio
async def test_elevation_is_attached_and_rounded():
    maps = FakeMaps(
        places={"highest peaks": [EVEREST, K2]},
        elevations={(EVEREST.lat, EVEREST.lng): 8729.4, (K2.lat, K2.lng): 8610.6},
    )
    unit = LocationRequest(query="highest peaks", limit=2, metadata=frozenset({"elevation"}))

    outcome = await make_resolver(maps).resolve_many(unit)

    assert [loc.elevation for loc in outcome.value] == [8729, 8611]
    assert sorted(maps.elevation_calls) == sorted([(EVEREST.lat, EVEREST.lng), (K2.lat, K2.lng)])


@pytest.mark.asyncio
async def test_elevation_failure_marks_not_available():
    maps = FakeMaps(places={"Mount Everest, Nepal": [EVEREST]})
    unit = LocationRequest(query="Mount Everest, Nepal", metadata=frozenset({"elevation"}))

    outcome = await make_resolver(maps).resolve(unit)

    assert outcome.ok
    assert outcome.value.name == "Mount Everest"
    assert outcome.value.elevation == ELEVATION_UNAVAILABLE


@pytest.mark.asyncio
async def test_place_search_failure_is_upstream_unavailable():
    maps = FakeMaps(failing_queries={"museums": RuntimeError("OVER_QUERY_LIMIT")})

    outcome = await make_resolver(maps).resolve_many(LocationRequest(query="museums"))

    assert not outcome.ok
    assert outcome.error.kind is ErrorKind.UPSTREAM_UNAVAILABLE
    assert "OVER_QUERY_LIMIT" in outcome.error.message


@pytest.mark.asyncio
async def test_elevation_lookups_run_concurrently():
    maps = FakeMaps(
        places={"highest peaks": [EVEREST, K2]},
        elevations={(EVEREST.lat, EVEREST.lng): 8849.0, (K2.lat, K2.lng): 8611.0},
        elevation_barrier=threading.Barrier(2, timeout=1),
    )
    unit = LocationRequest(query="highest peaks", limit=2, metadata=frozenset({"elevation"}))

    outcome = await make_resolver(maps).resolve_many(unit)

    assert [loc.elevation for loc in outcome.value] == [8849, 8611]
