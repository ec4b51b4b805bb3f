"""Anthropic (Claude) provider using the Messages API with an API key.

Authentication: set ANTHROPIC_API_KEY, or pass ``api_key`` explicitly.
"""

from __future__ import annotations

import json
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

# ---------------------------------------------------------------------------
# Model aliases
# ---------------------------------------------------------------------------

MODEL_MAP: dict[str, str] = {
    "claude-haiku": "claude-3-5-haiku-latest",
    "claude-3-5-haiku": "claude-3-5-haiku-latest",
    "claude-sonnet": "claude-sonnet-4-5-20250929",
    "claude-sonnet-4-5": "claude-sonnet-4-5-20250929",
    "haiku": "claude-3-5-haiku-latest",
    "sonnet": "claude-sonnet-4-5-20250929",
}


class AnthropicProvider(LLMProvider):
    """Anthropic Claude provider authenticated with ANTHROPIC_API_KEY."""

    API_ENDPOINT = "https://api.anthropic.com/v1/messages"

    def __init__(
        self,
        model: str = "haiku",
        timeout: int = 90,
        api_key: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        super().__init__(model=self._resolve_model(model), timeout=timeout)
        self._api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        self._client = client or httpx.Client(timeout=timeout)

    @property
    def name(self) -> str:
        return "anthropic"

    @staticmethod
    def _resolve_model(model: str) -> str:
        resolved = MODEL_MAP.get(model, model)
        if resolved != model:
            logger.debug("Model alias: %s -> %s", model, resolved)
        return resolved

    def generate(
        self,
        prompt: str,
        max_tokens: int = 2000,
        temperature: float = 0.3,
        top_p: float = 0.85,
    ) -> GenerationOutput:
        """Generate text using the Anthropic Messages API.

        Raises:
            GenerationError: missing key, HTTP failure or no text blocks.
        """
        if not self._api_key:
            raise GenerationError("ANTHROPIC_API_KEY is not set")

        logger.debug("[anthropic] model=%s prompt_len=%d timeout=%ds", self.model, len(prompt), self.timeout)

        request_body: dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "top_p": top_p,
            "messages": [{"role": "user", "content": prompt}],
        }
        headers = {
            "x-api-key": self._api_key,
            "anthropic-version": "2023-06-01",
            "Content-Type": "application/json",
        }

        start_time = time.time()
        for attempt in range(DEFAULT_MAX_RETRIES):
            try:
                response = self._client.post(self.API_ENDPOINT, json=request_body, headers=headers)
            except httpx.TimeoutException as e:
                if attempt < DEFAULT_MAX_RETRIES - 1:
                    backoff = calculate_backoff(attempt, None)
                    logger.info(
                        "[anthropic] RETRY timeout | attempt=%d/%d | model=%s | wait=%.1fs",
                        attempt + 1, DEFAULT_MAX_RETRIES, self.model, backoff,
                    )
                    time.sleep(backoff)
                    continue
                raise GenerationError(f"Anthropic request timed out: {e}") from e
            except httpx.TransportError as e:
                raise GenerationError(f"Anthropic connection failed: {e}") from e

            elapsed = time.time() - start_time
            if response.status_code in RETRYABLE_STATUS_CODES and attempt < DEFAULT_MAX_RETRIES - 1:
                backoff = calculate_backoff(attempt, parse_retry_after(response))
                logger.info(
                    "[anthropic] RETRY %d | attempt=%d/%d | model=%s | wait=%.1fs | elapsed=%.1fs",
                    response.status_code, attempt + 1, DEFAULT_MAX_RETRIES, self.model, backoff, elapsed,
                )
                time.sleep(backoff)
                continue

            if not response.is_success:
                logger.error(
                    "[anthropic] FAILED %d | model=%s | elapsed=%.1fs | %s",
                    response.status_code, self.model, elapsed, response.text[:300],
                )
                raise GenerationError(f"Anthropic returned {response.status_code}")

            data = response.json()
            usage = data.get("usage", {})
            logger.debug(
                "[anthropic] OK | model=%s | in=%d out=%d | %.1fs",
                self.model, usage.get("input_tokens", 0), usage.get("output_tokens", 0), elapsed,
            )

            text_parts = [
                block.get("text", "")
                for block in data.get("content", [])
                if block.get("type") == "text"
            ]
            if text_parts:
                return "\n".join(text_parts).strip()

            logger.warning("[anthropic] Unexpected response: %s", json.dumps(data)[:500])
            raise GenerationError("Anthropic response contained no text")

        raise GenerationError(f"Anthropic retries exhausted after {DEFAULT_MAX_RETRIES} attempts")
