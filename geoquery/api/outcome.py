# geoquery/api/outcome.py
"""Explicit success/failure values for every fallible collaborator call.

Each outbound call (language model, place search, elevation) is wrapped by
:func:`attempt` so that a timeout or an upstream exception turns into a
failed :class:`Outcome` instead of propagating. Callers compose outcomes
explicitly and decide what a failure means for the overall response.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Shared by all requests. Unlike the loop default executor it is not joined
# when a request loop closes, so an abandoned call cannot delay the response.
_EXECUTOR = ThreadPoolExecutor(max_workers=32, thread_name_prefix="geoquery-io")


class ErrorKind(str, Enum):
    """Failure taxonomy for the resolution pipeline."""

    MALFORMED_RESPONSE = "malformed_response"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    INPUT_INVALID = "input_invalid"
    TOTAL_PIPELINE_FAILURE = "total_pipeline_failure"


class InvalidQueryError(ValueError):
    """Raised when the inbound user query is missing or blank."""

    kind = ErrorKind.INPUT_INVALID


@dataclass(frozen=True)
class PipelineError:
    kind: ErrorKind
    message: str
    raw: Optional[str] = None


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a value or a :class:`PipelineError`, never both."""

    value: Optional[T] = None
    error: Optional[PipelineError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str, raw: Optional[str] = None) -> "Outcome[T]":
        return cls(error=PipelineError(kind=kind, message=message, raw=raw))


async def attempt(
    func: Callable[..., T],
    *args: Any,
    timeout: float,
    label: str,
) -> Outcome[T]:
    """Run a blocking collaborator call on a worker thread with a deadline.

    Args:
        func: Blocking callable (SDK call) to run
        *args: Positional arguments for ``func``
        timeout: Seconds before the call is abandoned
        label: Short description used in log lines and error messages

    Returns:
        ``Outcome.success`` with the call's return value, or an
        ``UPSTREAM_UNAVAILABLE`` failure on timeout or exception.
    """
    try:
        loop = asyncio.get_running_loop()
        value = await asyncio.wait_for(loop.run_in_executor(_EXECUTOR, func, *args), timeout=timeout)
    except asyncio.CancelledError:
        raise
    except asyncio.TimeoutError:
        logger.warning("%s timed out after %.1fs", label, timeout)
        return Outcome.failure(ErrorKind.UPSTREAM_UNAVAILABLE, f"{label} timed out after {timeout:g}s")
    except Exception as e:
        logger.warning("%s failed: %s", label, e)
        return Outcome.failure(ErrorKind.UPSTREAM_UNAVAILABLE, f"{label} failed: {e}")
    return Outcome.success(value)


__all__ = [
    "ErrorKind",
    "InvalidQueryError",
    "PipelineError",
    "Outcome",
    "attempt",
]
