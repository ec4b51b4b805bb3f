"""Text-generation collaborator: interface, providers and routing."""
from .base import (
    GenerationOutput,
    LLMProvider,
    OfflineGenerator,
    StaticGenerator,
    TextGenerator,
    get_provider,
    join_output,
)
from .anthropic_provider import AnthropicProvider
from .replicate_provider import ReplicateProvider

__all__ = [
    "TextGenerator",
    "GenerationOutput",
    "LLMProvider",
    "StaticGenerator",
    "OfflineGenerator",
    "AnthropicProvider",
    "ReplicateProvider",
    "get_provider",
    "join_output",
]
