import json

import pytest

from geoquery.api.services.orchestrator import ResolutionOrchestrator
from geoquery.api.services.place_resolver import PlaceResolver
from geoquery.api.services.planner import QueryPlanner
from geoquery.api.services.query_service import QueryService
from tests.fakes import FakeLanguageModel, FakeMaps


def plan_reply(*units, fenced: bool = False) -> str:
    text = json.dumps({"requests": list(units)})
    if fenced:
        return f"```json\n{text}\n```"
    return text


def make_resolver(maps: FakeMaps, timeout: float = 2.0) -> PlaceResolver:
    return PlaceResolver(places=maps, elevation=maps, places_timeout=timeout, elevation_timeout=timeout)


def make_orchestrator(model: FakeLanguageModel, maps: FakeMaps, timeout: float = 2.0) -> ResolutionOrchestrator:
    return ResolutionOrchestrator(QueryPlanner(model, timeout=timeout), make_resolver(maps, timeout))


def make_service(model: FakeLanguageModel, maps: FakeMaps, timeout: float = 2.0) -> QueryService:
    return QueryService(make_orchestrator(model, maps, timeout), model, llm_timeout=timeout, example_count=3)


@pytest.fixture
def maps():
    return FakeMaps()


@pytest.fixture
def app_factory():
    from geoquery.main import create_app

    def _factory(model: FakeLanguageModel, maps: FakeMaps, timeout: float = 2.0):
        app = create_app(make_service(model, maps, timeout))
        app.config.update(TESTING=True)
        return app

    return _factory
