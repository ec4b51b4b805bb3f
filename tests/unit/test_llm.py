"""Tests for the text-generation collaborator and HTTP providers."""
import json

import httpx
import pytest

from defcite.errors import GenerationError
from defcite.shared.llm import (
    AnthropicProvider,
    OfflineGenerator,
    ReplicateProvider,
    StaticGenerator,
    TextGenerator,
    get_provider,
    join_output,
)
from defcite.shared.llm.base import calculate_backoff


@pytest.fixture
def no_sleep(monkeypatch):
    monkeypatch.setattr("defcite.shared.llm.replicate_provider.time.sleep", lambda _: None)
    monkeypatch.setattr("defcite.shared.llm.anthropic_provider.time.sleep", lambda _: None)


def _client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestGenerators:
    """Tests for the in-process generators."""

    def test_protocol(self):
        assert isinstance(StaticGenerator("x"), TextGenerator)
        assert isinstance(OfflineGenerator(), TextGenerator)

    def test_static_generator_repeats_last(self):
        generator = StaticGenerator(["a", "b"])
        outputs = [generator.generate("p", 10, 0.3, 0.85) for _ in range(3)]
        assert outputs == ["a", "b", "b"]
        assert [c["prompt"] for c in generator.calls] == ["p", "p", "p"]

    def test_offline_generator_raises(self):
        with pytest.raises(GenerationError):
            OfflineGenerator().generate("p", 10, 0.3, 0.85)

    def test_join_output(self):
        assert join_output(["Halo", " ", "dunia"]) == "Halo dunia"
        assert join_output("teks") == "teks"
        assert join_output(None) == ""

    def test_backoff_honours_retry_after(self):
        assert calculate_backoff(0, 2.5) == 2.5
        assert calculate_backoff(0, 999) == 30.0
        assert 1.0 <= calculate_backoff(0, None) <= 1.1


class TestReplicateProvider:
    """Tests for ReplicateProvider with a mocked transport."""

    def test_generate(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            seen["auth"] = request.headers["authorization"]
            return httpx.Response(201, json={"status": "succeeded", "output": ["Halo", " dunia"]})

        provider = ReplicateProvider(model="owner/model", api_token="tok", client=_client(handler))
        output = provider.generate("prompt", max_tokens=800, temperature=0.3, top_p=0.85)

        assert join_output(output) == "Halo dunia"
        assert seen["url"] == "https://api.replicate.com/v1/models/owner/model/predictions"
        assert seen["body"]["input"] == {"prompt": "prompt", "max_tokens": 800, "temperature": 0.3, "top_p": 0.85}
        assert seen["auth"] == "Bearer tok"

    def test_polls_until_finished(self, no_sleep):
        def handler(request):
            if request.method == "POST":
                return httpx.Response(
                    201,
                    json={"status": "processing", "urls": {"get": "https://api.replicate.com/v1/predictions/p1"}},
                )
            return httpx.Response(200, json={"status": "succeeded", "output": "selesai"})

        provider = ReplicateProvider(model="owner/model", api_token="tok", client=_client(handler))
        assert provider.generate("prompt") == "selesai"

    def test_retries_server_errors(self, no_sleep):
        attempts = []

        def handler(request):
            attempts.append(request)
            if len(attempts) < 2:
                return httpx.Response(503)
            return httpx.Response(201, json={"status": "succeeded", "output": "ok"})

        provider = ReplicateProvider(model="owner/model", api_token="tok", client=_client(handler))
        assert provider.generate("prompt") == "ok"
        assert len(attempts) == 2

    def test_failed_prediction(self):
        def handler(request):
            return httpx.Response(201, json={"status": "failed", "error": "oom"})

        provider = ReplicateProvider(model="owner/model", api_token="tok", client=_client(handler))
        with pytest.raises(GenerationError, match="oom"):
            provider.generate("prompt")

    def test_missing_token(self, monkeypatch):
        monkeypatch.delenv("REPLICATE_API_TOKEN", raising=False)
        provider = ReplicateProvider(model="owner/model", client=_client(lambda r: httpx.Response(500)))
        with pytest.raises(GenerationError, match="REPLICATE_API_TOKEN"):
            provider.generate("prompt")


class TestAnthropicProvider:
    """Tests for AnthropicProvider with a mocked transport."""

    def test_generate(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            seen["key"] = request.headers["x-api-key"]
            return httpx.Response(200, json={"content": [{"type": "text", "text": " Halo "}]})

        provider = AnthropicProvider(model="haiku", api_key="key", client=_client(handler))
        assert provider.generate("prompt", max_tokens=100) == "Halo"
        assert seen["body"]["model"] == "claude-3-5-haiku-latest"
        assert seen["body"]["messages"] == [{"role": "user", "content": "prompt"}]
        assert seen["key"] == "key"

    def test_client_error_is_not_retried(self, no_sleep):
        attempts = []

        def handler(request):
            attempts.append(request)
            return httpx.Response(400, json={"error": "bad request"})

        provider = AnthropicProvider(model="haiku", api_key="key", client=_client(handler))
        with pytest.raises(GenerationError):
            provider.generate("prompt")
        assert len(attempts) == 1


class TestGetProvider:
    """Tests for model-name routing."""

    def test_routes_claude_names_to_anthropic(self):
        assert isinstance(get_provider("claude-haiku"), AnthropicProvider)
        assert isinstance(get_provider("sonnet"), AnthropicProvider)

    def test_routes_other_names_to_replicate(self):
        assert isinstance(get_provider("ibm-granite/granite-3.3-8b-instruct"), ReplicateProvider)

    def test_cached(self):
        assert get_provider("owner/cached-model", 30) is get_provider("owner/cached-model", 30)
