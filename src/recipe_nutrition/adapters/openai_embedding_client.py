"""OpenAI Embeddings API client."""

from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from recipe_nutrition.services.embeddings import EmbeddingClient, EmbeddingProviderError


@dataclass
class OpenAIEmbeddingClient(EmbeddingClient):
    """Embedding client backed by any OpenAI-compatible endpoint."""

    client: AsyncOpenAI
    model: str

    @classmethod
    def create(
        cls,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 10.0,
    ) -> "OpenAIEmbeddingClient":
        """Create an embedding client with its own SDK session."""
        client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
            max_retries=0,
        )
        return cls(client=client, model=model)

    async def embed(self, text: str) -> list[float]:
        """Embed a single text."""
        try:
            response = await self.client.embeddings.create(model=self.model, input=text)
        except OpenAIError as exc:
            status_code = getattr(exc, "status_code", None)
            raise EmbeddingProviderError(
                f"OpenAI embeddings request failed: {exc}",
                status_code=status_code if isinstance(status_code, int) else None,
            ) from exc
        if not response.data:
            raise EmbeddingProviderError("OpenAI returned no embeddings")
        return list(response.data[0].embedding)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
