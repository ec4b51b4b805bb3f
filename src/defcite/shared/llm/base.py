"""Text-generation collaborator interface and provider routing.

The paraphrase orchestrator only depends on :class:`TextGenerator`; concrete
HTTP providers implement :class:`LLMProvider` and are picked by model name
through :func:`get_provider`.
"""

from __future__ import annotations

import logging
import random
import re
from abc import ABC, abstractmethod
from typing import Any, Protocol, Sequence, runtime_checkable

from defcite.errors import GenerationError

logger = logging.getLogger(__name__)

GenerationOutput = str | Sequence[str]

# ---------------------------------------------------------------------------
# Retry configuration (transient HTTP failures inside a single generate call)
# ---------------------------------------------------------------------------

DEFAULT_MAX_RETRIES = 3
DEFAULT_INITIAL_BACKOFF = 1.0
DEFAULT_MAX_BACKOFF = 30.0
DEFAULT_BACKOFF_MULTIPLIER = 2.0
JITTER_FACTOR = 0.1
RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 529}


def calculate_backoff(attempt: int, retry_after: float | None) -> float:
    if retry_after is not None:
        return min(retry_after, DEFAULT_MAX_BACKOFF)
    backoff = DEFAULT_INITIAL_BACKOFF * (DEFAULT_BACKOFF_MULTIPLIER ** attempt)
    backoff = min(backoff, DEFAULT_MAX_BACKOFF)
    jitter = backoff * JITTER_FACTOR * random.random()
    return backoff + jitter


def parse_retry_after(response: Any) -> float | None:
    retry_after = response.headers.get("retry-after")
    if retry_after:
        try:
            return float(retry_after)
        except ValueError:
            pass
    return None


def join_output(output: GenerationOutput | None) -> str:
    """Concatenate fragment lists in order; pass strings through."""
    if output is None:
        return ""
    if isinstance(output, str):
        return output
    return "".join(str(part) for part in output)


# ---------------------------------------------------------------------------
# Interfaces
# ---------------------------------------------------------------------------


@runtime_checkable
class TextGenerator(Protocol):
    """Anything that turns a prompt into generated text."""

    def generate(
        self,
        prompt: str,
        max_tokens: int,
        temperature: float,
        top_p: float,
    ) -> GenerationOutput:
        """Generate a completion for *prompt*.

        Returns:
            Generated text, or a list of fragments to concatenate in order.

        Raises:
            Exception: any failure; callers decide how to recover.
        """
        ...


class LLMProvider(ABC):
    """Abstract base for HTTP generation providers (Replicate, Anthropic)."""

    def __init__(self, model: str, timeout: int = 90) -> None:
        self.model = model
        self.timeout = timeout

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider identifier (e.g. 'replicate', 'anthropic')."""
        ...

    @abstractmethod
    def generate(
        self,
        prompt: str,
        max_tokens: int = 2000,
        temperature: float = 0.3,
        top_p: float = 0.85,
    ) -> GenerationOutput:
        ...


class StaticGenerator:
    """Generator returning canned responses in order, repeating the last one.

    Used for offline runs and tests. Records every prompt it receives.
    """

    def __init__(self, responses: GenerationOutput | list[GenerationOutput] = "") -> None:
        if isinstance(responses, str):
            responses = [responses]
        self._responses = list(responses) or [""]
        self.calls: list[dict[str, Any]] = []

    def generate(
        self,
        prompt: str,
        max_tokens: int = 2000,
        temperature: float = 0.3,
        top_p: float = 0.85,
    ) -> GenerationOutput:
        self.calls.append(
            {"prompt": prompt, "max_tokens": max_tokens, "temperature": temperature, "top_p": top_p}
        )
        index = min(len(self.calls) - 1, len(self._responses) - 1)
        return self._responses[index]


class OfflineGenerator:
    """Generator that always fails, forcing the template fallbacks."""

    def generate(
        self,
        prompt: str,
        max_tokens: int = 2000,
        temperature: float = 0.3,
        top_p: float = 0.85,
    ) -> GenerationOutput:
        raise GenerationError("Text generation is disabled (offline mode)")


# ---------------------------------------------------------------------------
# Provider registry
# ---------------------------------------------------------------------------

_provider_cache: dict[str, LLMProvider] = {}

# Patterns that identify an Anthropic model name or alias
_ANTHROPIC_PATTERN = re.compile(r"^(claude|haiku|sonnet|opus)", re.IGNORECASE)


def _is_anthropic_model(model: str) -> bool:
    return bool(_ANTHROPIC_PATTERN.match(model))


def get_provider(model: str, timeout: int = 90) -> LLMProvider:
    """Return (cached) provider for *model*.

    Routing logic:
        - Model names starting with ``claude``/``haiku``/``sonnet``/``opus``
          → AnthropicProvider
        - Everything else (``owner/name`` ids) → ReplicateProvider
    """
    key = f"{model}:{timeout}"
    if key in _provider_cache:
        return _provider_cache[key]

    if _is_anthropic_model(model):
        from .anthropic_provider import AnthropicProvider
        logger.debug("Creating AnthropicProvider for model=%s", model)
        provider: LLMProvider = AnthropicProvider(model=model, timeout=timeout)
    else:
        from .replicate_provider import ReplicateProvider
        logger.debug("Creating ReplicateProvider for model=%s", model)
        provider = ReplicateProvider(model=model, timeout=timeout)

    _provider_cache[key] = provider
    return provider
