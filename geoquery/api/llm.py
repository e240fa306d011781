"""Language-model capability backed by OpenAI Chat Completions.

The planner only needs ``generate(prompt) -> str``. The OpenAI client is
created on first use so the service can start (and report the missing key)
without OPENAI_API_KEY being set.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from openai import OpenAI

from geoquery.api.config import get_llm_config, get_openai_api_key

logger = logging.getLogger(__name__)

SYSTEM_MESSAGE = "You are a geographic assistant. You reply with JSON only."


class OpenAIChatModel:
    """Thin synchronous wrapper around ``client.chat.completions.create``."""

    def __init__(self, config: Optional[Dict[str, Any]] = None, client: Optional[OpenAI] = None):
        self.config = config or get_llm_config()
        self._client = client

    @property
    def timeout_seconds(self) -> float:
        return self.config["timeout_seconds"]

    def _get_client(self) -> OpenAI:
        """Return the cached OpenAI client, creating it on first use."""
        if self._client is None:
            # No SDK-level retries; a failed call is reported once.
            self._client = OpenAI(
                api_key=get_openai_api_key(),
                timeout=self.timeout_seconds,
                max_retries=0,
            )
        return self._client

    def generate(self, prompt: str) -> str:
        """Send a single prompt and return the raw text of the reply."""
        messages = [
            {"role": "system", "content": SYSTEM_MESSAGE},
            {"role": "user", "content": prompt},
        ]

        logger.debug(
            "Calling OpenAI ChatCompletion: model=%s prompt_chars=%d",
            self.config["model"],
            len(prompt),
        )

        response = self._get_client().chat.completions.create(
            model=self.config["model"],
            messages=messages,
            temperature=self.config["temperature"],
            max_tokens=self.config["max_tokens"],
        )

        content = response.choices[0].message.content
        return content or ""


__all__ = ["OpenAIChatModel"]
