"""Plain HTTP client for OpenAI-style ``/embeddings`` endpoints."""

from dataclasses import dataclass

import httpx

from recipe_nutrition.services.embeddings import EmbeddingClient, EmbeddingProviderError


@dataclass
class HttpxEmbeddingClient(EmbeddingClient):
    """HTTPX-backed embedding client.

    Sends ``{"model", "input"}`` and reads ``data[0].embedding``. Useful for
    providers that authenticate with a custom header such as ``x-api-key``.
    """

    api_key: str
    base_url: str
    model: str
    http_client: httpx.AsyncClient
    api_key_header: str = "Authorization"
    timeout_seconds: float = 10.0

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        api_key: str,
        base_url: str,
        model: str,
        api_key_header: str = "Authorization",
        timeout_seconds: float = 10.0,
    ) -> "HttpxEmbeddingClient":
        """Create an embedding client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            model=model,
            http_client=httpx.AsyncClient(),
            api_key_header=api_key_header,
            timeout_seconds=timeout_seconds,
        )

    async def embed(self, text: str) -> list[float]:
        """Embed a single text."""
        url = f"{self.base_url}/embeddings"
        try:
            response = await self.http_client.post(
                url,
                headers=self._headers(),
                json={"model": self.model, "input": text},
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise EmbeddingProviderError(
                f"Embedding API error: {exc.response.text}",
                status_code=exc.response.status_code,
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise EmbeddingProviderError(f"Embedding request failed: {exc}") from exc
        return _extract_embedding(payload)

    def _headers(self) -> dict[str, str]:
        if self.api_key_header.lower() == "authorization":
            token = f"Bearer {self.api_key}"
        else:
            token = self.api_key
        return {self.api_key_header: token, "Accept": "application/json"}

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _extract_embedding(payload: object) -> list[float]:
    """Read ``data[0].embedding`` from an embeddings response."""
    try:
        embedding = payload["data"][0]["embedding"]  # type: ignore[index]
    except (KeyError, IndexError, TypeError) as exc:
        raise EmbeddingProviderError("Malformed embeddings response") from exc
    if not isinstance(embedding, list):
        raise EmbeddingProviderError("Malformed embeddings response")
    return embedding
