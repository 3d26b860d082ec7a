"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from recipe_nutrition.adapters.http_embedding_client import HttpxEmbeddingClient
from recipe_nutrition.adapters.json_recipe_repository import JsonRecipeRepository
from recipe_nutrition.adapters.openai_embedding_client import OpenAIEmbeddingClient
from recipe_nutrition.app_logging import configure_logging
from recipe_nutrition.config import Settings
from recipe_nutrition.services.cache import InMemoryEmbeddingCache
from recipe_nutrition.services.catalog import FoodCatalog, load_food_catalog
from recipe_nutrition.services.embeddings import CachedEmbedder, SemanticMatcher
from recipe_nutrition.services.nutrition import MatchResolver, NutritionService
from recipe_nutrition.services.recipes import RecipeService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog: FoodCatalog
    embedding_cache: InMemoryEmbeddingCache
    nutrition_service: NutritionService
    recipe_service: RecipeService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    configure_logging(logging.DEBUG if resolved_settings.debug else logging.INFO)
    catalog = load_food_catalog(resolved_settings.food_catalog_path)
    embedding_cache = InMemoryEmbeddingCache()

    embedding_client = _build_embedding_client(resolved_settings)
    semantic_matcher = None
    if embedding_client is not None:
        semantic_matcher = SemanticMatcher(
            embedder=CachedEmbedder(client=embedding_client, cache=embedding_cache),
            threshold=resolved_settings.semantic_threshold,
            timeout_seconds=resolved_settings.embedding_timeout_seconds,
            query_prefix=resolved_settings.embedding_query_prefix,
            document_prefix=resolved_settings.embedding_document_prefix,
            debug=resolved_settings.debug,
        )
    resolver = MatchResolver(
        catalog=catalog,
        semantic_matcher=semantic_matcher,
        lexical_threshold=resolved_settings.lexical_threshold,
        candidate_limit=resolved_settings.candidate_limit,
        debug=resolved_settings.debug,
    )
    nutrition_service = NutritionService(resolver=resolver)
    recipe_service = RecipeService(
        repository=JsonRecipeRepository(Path(resolved_settings.recipes_path)),
        nutrition_service=nutrition_service,
    )

    async def close_resources() -> None:
        if embedding_client is not None:
            await embedding_client.close()

    return AppContainer(
        settings=resolved_settings,
        catalog=catalog,
        embedding_cache=embedding_cache,
        nutrition_service=nutrition_service,
        recipe_service=recipe_service,
        close_resources=close_resources,
    )


def _build_embedding_client(
    settings: Settings,
) -> OpenAIEmbeddingClient | HttpxEmbeddingClient | None:
    """Pick the embedding adapter; None disables the semantic layer."""
    if not settings.semantic_enabled or settings.embedding_api_key is None:
        return None
    if settings.embedding_provider == "http":
        return HttpxEmbeddingClient.create(
            api_key=settings.embedding_api_key,
            base_url=settings.embedding_base_url or "",
            model=settings.embedding_model,
            api_key_header=settings.embedding_api_key_header,
            timeout_seconds=settings.embedding_timeout_seconds,
        )
    return OpenAIEmbeddingClient.create(
        api_key=settings.embedding_api_key,
        model=settings.embedding_model,
        base_url=settings.embedding_base_url,
        timeout_seconds=settings.embedding_timeout_seconds,
    )
