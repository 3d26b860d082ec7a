"""Tests for embedding provider adapters."""

import asyncio
import json

import httpx
import openai
import pytest

from recipe_nutrition.adapters.http_embedding_client import HttpxEmbeddingClient
from recipe_nutrition.adapters.openai_embedding_client import OpenAIEmbeddingClient
from recipe_nutrition.services.embeddings import EmbeddingProviderError


def _client(handler, api_key_header: str = "x-api-key") -> HttpxEmbeddingClient:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    return HttpxEmbeddingClient(
        api_key="key",
        base_url="https://api.test/v1",
        model="embed-small",
        http_client=httpx.AsyncClient(transport=transport),
        api_key_header=api_key_header,
    )


def test_http_client_posts_model_and_input() -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["api_key"] = request.headers.get("x-api-key")
        seen["payload"] = json.loads(request.content.decode())
        return httpx.Response(200, json={"data": [{"embedding": [0.1, 0.2, 0.3]}]})

    vector = asyncio.run(_client(handler).embed("olive oil"))

    assert vector == [0.1, 0.2, 0.3]
    assert seen["path"] == "/v1/embeddings"
    assert seen["api_key"] == "key"
    assert seen["payload"] == {"model": "embed-small", "input": "olive oil"}


def test_http_client_uses_bearer_for_authorization_header() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["authorization"] == "Bearer key"
        return httpx.Response(200, json={"data": [{"embedding": [1.0]}]})

    assert asyncio.run(_client(handler, "Authorization").embed("rice")) == [1.0]


def test_http_client_raises_provider_error_on_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    with pytest.raises(EmbeddingProviderError) as excinfo:
        asyncio.run(_client(handler).embed("rice"))

    assert excinfo.value.status_code == 503


@pytest.mark.parametrize(
    "body", [{"data": []}, {"result": "ok"}, {"data": [{"embedding": "nope"}]}]
)
def test_http_client_raises_provider_error_on_malformed_body(body: object) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    with pytest.raises(EmbeddingProviderError):
        asyncio.run(_client(handler).embed("rice"))


def test_http_client_raises_provider_error_on_invalid_json() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>")

    with pytest.raises(EmbeddingProviderError):
        asyncio.run(_client(handler).embed("rice"))


def test_http_client_raises_provider_error_on_network_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(EmbeddingProviderError):
        asyncio.run(_client(handler).embed("rice"))


class _FakeEmbeddings:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        if self.error is not None:
            raise self.error
        item = type("Item", (), {"embedding": [0.5, 0.5]})()
        return type("Resp", (), {"data": [item]})()


class _FakeOpenAI:
    def __init__(self, error: Exception | None = None) -> None:
        self.embeddings = _FakeEmbeddings(error)


def test_openai_embedding_client_returns_vector() -> None:
    fake = _FakeOpenAI()
    client = OpenAIEmbeddingClient(client=fake, model="text-embedding-3-small")  # type: ignore[arg-type]

    vector = asyncio.run(client.embed("olive oil"))

    assert vector == [0.5, 0.5]
    assert fake.embeddings.last_payload == {
        "model": "text-embedding-3-small",
        "input": "olive oil",
    }


def test_openai_embedding_client_wraps_sdk_errors() -> None:
    request = httpx.Request("POST", "https://api.test/v1/embeddings")
    response = httpx.Response(429, request=request)
    error = openai.RateLimitError("slow down", response=response, body=None)
    client = OpenAIEmbeddingClient(client=_FakeOpenAI(error), model="m")  # type: ignore[arg-type]

    with pytest.raises(EmbeddingProviderError) as excinfo:
        asyncio.run(client.embed("olive oil"))

    assert excinfo.value.status_code == 429


def test_openai_embedding_client_create_and_close() -> None:
    client = OpenAIEmbeddingClient.create(
        api_key="key", model="m", base_url="https://api.test/v1", timeout_seconds=2
    )

    assert client.model == "m"
    asyncio.run(client.close())
