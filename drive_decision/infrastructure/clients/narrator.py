"""Narrative generator HTTP client with exponential backoff retry logic"""

import asyncio
import json
import logging
from typing import Any

import httpx

from drive_decision.config import settings
from drive_decision.domain.exceptions import NarratorError
from drive_decision.infrastructure.observability.metrics import (
    narrator_failure_counter,
    narrator_latency_histogram,
)

logger = logging.getLogger(__name__)


class NarratorClient:
    """Client for an OpenAI-compatible chat completions endpoint"""

    def __init__(
        self,
        api_base: str | None = None,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_base = (api_base or settings.narrator_api_base).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.narrator_api_key
        self.model = model or settings.narrator_model
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.narrator_max_retries
        self.backoff_base = backoff_base if backoff_base is not None else settings.narrator_backoff_base
        self.transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def generate(self, system_prompt: str, user_prompt: str) -> Any:
        """
        Request a JSON narrative and return the decoded object.

        Retry strategy:
        - Exponential backoff: base, 2*base, 4*base ...
        - Retries on 5xx errors and network failures, not on 4xx
        - Unparseable responses are not retried

        Raises:
            NarratorError: On exhausted retries, client errors, or invalid response
        """
        body = {
            "model": self.model,
            "temperature": 0,
            "response_format": {"type": "json_object"},
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }

        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while True:
                try:
                    with narrator_latency_histogram.time():
                        response = await client.post(
                            f"{self.api_base}/chat/completions",
                            json=body,
                            headers=self._headers(),
                        )
                        response.raise_for_status()
                    break

                except httpx.HTTPStatusError as e:
                    attempt += 1
                    narrator_failure_counter.inc()
                    if e.response.status_code < 500 or attempt >= self.max_retries:
                        raise NarratorError(f"Narrator error: {e.response.status_code}") from e

                except httpx.RequestError as e:
                    attempt += 1
                    narrator_failure_counter.inc()
                    if attempt >= self.max_retries:
                        raise NarratorError(f"Narrator unreachable after {attempt} attempts") from e

                backoff = self.backoff_base * (2 ** (attempt - 1))
                logger.warning("Narrator call failed, retrying", extra={"attempt": attempt, "backoff_s": backoff})
                await asyncio.sleep(backoff)

        try:
            content = response.json()["choices"][0]["message"]["content"]
            return json.loads(content)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            narrator_failure_counter.inc()
            raise NarratorError(f"Invalid narrator response: {e}") from e
