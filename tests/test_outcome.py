import time

import pytest

from geoquery.api.outcome import ErrorKind, InvalidQueryError, Outcome, attempt


def test_outcome_success_and_failure():
    ok = Outcome.success([1])
    assert ok.ok and ok.value == [1] and ok.error is None

    failed = Outcome.failure(ErrorKind.MALFORMED_RESPONSE, "bad", raw="xx")
    assert not failed.ok
    assert failed.value is None
    assert failed.error.kind is ErrorKind.MALFORMED_RESPONSE
    assert failed.error.raw == "xx"


def test_invalid_query_error_is_a_value_error():
    assert issubclass(InvalidQueryError, ValueError)
    assert InvalidQueryError.kind is ErrorKind.INPUT_INVALID


@pytest.mark.asyncio
async def test_attempt_returns_value():
    outcome = await attempt(lambda a, b: a + b, 2, 3, timeout=1, label="add")
    assert outcome.ok
    assert outcome.value == 5


@pytest.mark.asyncio
async def test_attempt_converts_exceptions():
    def boom():
        raise ConnectionError("refused")

    outcome = await attempt(boom, timeout=1, label="Place search")
    assert outcome.error.kind is ErrorKind.UPSTREAM_UNAVAILABLE
    assert outcome.error.message == "Place search failed: refused"


@pytest.mark.asyncio
async def test_attempt_converts_timeouts():
    outcome = await attempt(time.sleep, 0.5, timeout=0.05, label="Elevation lookup")
    assert outcome.error.kind is ErrorKind.UPSTREAM_UNAVAILABLE
    assert outcome.error.message == "Elevation lookup timed out after 0.05s"
