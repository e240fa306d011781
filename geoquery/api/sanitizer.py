# geoquery/api/sanitizer.py
"""Clean-up and decoding of raw language-model text."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Optional

from geoquery.api.outcome import ErrorKind, Outcome

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```([\w+-]*)")
_TAG_END_RE = re.compile(r"[ \t]*(?:\r?\n|$)")


def _starts_line(text: str, pos: int) -> bool:
    return not text[text.rfind("\n", 0, pos) + 1 : pos].strip()


def sanitize(raw: str) -> str:
    """Remove Markdown code-fence markers, keeping every other character.

    Only an opening fence that begins a line may carry a language tag
    ("```json", "```python\\n"). "json" is dropped even when the payload
    follows on the same line; other tags only when the line ends there.
    Text after a closing fence is always kept.
    """
    opening = True

    def _strip(match: re.Match) -> str:
        nonlocal opening
        is_opening, opening = opening, not opening
        tag = match.group(1)
        if not tag or not is_opening or not _starts_line(raw, match.start()):
            return tag
        if tag == "json" or _TAG_END_RE.match(raw, match.end()):
            return ""
        return tag

    return _FENCE_RE.sub(_strip, raw)


def parse_structured(raw: str, schema: Optional[Callable[[Any], Any]] = None) -> Outcome[Any]:
    """Sanitize and strictly decode JSON from model output.

    Args:
        raw: Text returned by the language model
        schema: Optional callable applied to the decoded value; it may raise
            ``ValueError``, ``TypeError`` or ``KeyError`` to reject the shape

    Returns:
        ``Outcome.success`` with the decoded (and schema-mapped) value, or a
        ``MALFORMED_RESPONSE`` failure carrying the raw text.
    """
    if not isinstance(raw, str):
        return Outcome.failure(ErrorKind.MALFORMED_RESPONSE, "Model response is not text", raw=None)

    try:
        decoded = json.loads(sanitize(raw))
    except json.JSONDecodeError as e:
        logger.warning("Model response is not valid JSON: %s", e)
        return Outcome.failure(ErrorKind.MALFORMED_RESPONSE, f"Invalid JSON: {e}", raw=raw)

    if schema is None:
        return Outcome.success(decoded)

    try:
        return Outcome.success(schema(decoded))
    except (ValueError, TypeError, KeyError) as e:
        logger.warning("Model response has an unexpected shape: %s", e)
        return Outcome.failure(ErrorKind.MALFORMED_RESPONSE, f"Unexpected shape: {e}", raw=raw)


__all__ = ["sanitize", "parse_structured"]
