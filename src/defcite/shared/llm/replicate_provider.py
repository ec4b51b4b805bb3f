"""Replicate-hosted model provider (default: IBM Granite instruct).

Authentication: set REPLICATE_API_TOKEN, or pass ``api_token`` explicitly.

Predictions are created with ``Prefer: wait`` so short generations return
in a single round trip; anything still running afterwards is polled until it
reaches a terminal status or the timeout elapses.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any

import httpx

from defcite.errors import GenerationError

from .base import (
    DEFAULT_MAX_RETRIES,
    RETRYABLE_STATUS_CODES,
    GenerationOutput,
    LLMProvider,
    calculate_backoff,
    parse_retry_after,
)

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = {"succeeded", "failed", "canceled"}
POLL_INTERVAL = 1.0


class ReplicateProvider(LLMProvider):
    """Replicate predictions API provider."""

    API_BASE = "https://api.replicate.com/v1"

    def __init__(
        self,
        model: str = "ibm-granite/granite-3.3-8b-instruct",
        timeout: int = 90,
        api_token: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        super().__init__(model=model, timeout=timeout)
        self._api_token = api_token or os.environ.get("REPLICATE_API_TOKEN")
        self._client = client or httpx.Client(timeout=timeout)

    @property
    def name(self) -> str:
        return "replicate"

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_token}",
            "Content-Type": "application/json",
            "Prefer": f"wait={min(self.timeout, 60)}",
        }

    def _create_prediction(self, body: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.API_BASE}/models/{self.model}/predictions"
        start_time = time.time()

        for attempt in range(DEFAULT_MAX_RETRIES):
            try:
                response = self._client.post(url, json=body, headers=self._headers)
            except httpx.TimeoutException as e:
                if attempt < DEFAULT_MAX_RETRIES - 1:
                    backoff = calculate_backoff(attempt, None)
                    logger.info(
                        "[replicate] RETRY timeout | attempt=%d/%d | model=%s | wait=%.1fs",
                        attempt + 1, DEFAULT_MAX_RETRIES, self.model, backoff,
                    )
                    time.sleep(backoff)
                    continue
                raise GenerationError(f"Replicate request timed out: {e}") from e
            except httpx.TransportError as e:
                raise GenerationError(f"Replicate connection failed: {e}") from e

            elapsed = time.time() - start_time
            if response.status_code in RETRYABLE_STATUS_CODES and attempt < DEFAULT_MAX_RETRIES - 1:
                backoff = calculate_backoff(attempt, parse_retry_after(response))
                logger.info(
                    "[replicate] RETRY %d | attempt=%d/%d | model=%s | wait=%.1fs | elapsed=%.1fs",
                    response.status_code, attempt + 1, DEFAULT_MAX_RETRIES, self.model, backoff, elapsed,
                )
                time.sleep(backoff)
                continue

            if not response.is_success:
                logger.error(
                    "[replicate] FAILED %d | model=%s | elapsed=%.1fs | %s",
                    response.status_code, self.model, elapsed, response.text[:300],
                )
                raise GenerationError(f"Replicate returned {response.status_code}")

            return response.json()

        raise GenerationError(f"Replicate retries exhausted after {DEFAULT_MAX_RETRIES} attempts")

    def _wait_for(self, prediction: dict[str, Any]) -> dict[str, Any]:
        deadline = time.time() + self.timeout
        while prediction.get("status") not in TERMINAL_STATUSES:
            get_url = prediction.get("urls", {}).get("get")
            if not get_url or time.time() > deadline:
                raise GenerationError(
                    f"Prediction did not finish in {self.timeout}s (status={prediction.get('status')})"
                )
            time.sleep(POLL_INTERVAL)
            try:
                response = self._client.get(get_url, headers=self._headers)
                response.raise_for_status()
            except httpx.HTTPError as e:
                raise GenerationError(f"Polling prediction failed: {e}") from e
            prediction = response.json()
        return prediction

    def generate(
        self,
        prompt: str,
        max_tokens: int = 2000,
        temperature: float = 0.3,
        top_p: float = 0.85,
    ) -> GenerationOutput:
        """Run the model and return its output (string or list of fragments).

        Raises:
            GenerationError: missing token, HTTP failure, failed prediction
                or empty output.
        """
        if not self._api_token:
            raise GenerationError("REPLICATE_API_TOKEN is not set")

        logger.debug("[replicate] model=%s prompt_len=%d max_tokens=%d", self.model, len(prompt), max_tokens)
        body = {
            "input": {
                "prompt": prompt,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "top_p": top_p,
            }
        }

        prediction = self._wait_for(self._create_prediction(body))
        if prediction.get("status") != "succeeded":
            raise GenerationError(f"Prediction {prediction.get('status')}: {prediction.get('error')}")

        output = prediction.get("output")
        if not output:
            raise GenerationError("Prediction returned no output")
        return output
