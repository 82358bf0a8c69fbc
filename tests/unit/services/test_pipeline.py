"""Unit tests for the recommendation pipeline."""

import pytest

from petfeed_recommender.exceptions import (
    InvalidCategoryError,
    RecommendationUnavailableError,
)
from petfeed_recommender.models import Category, RecommendationRequest
from petfeed_recommender.services.embedding_cache import EmbeddingCache
from petfeed_recommender.services.pipeline import (
    RecommendationPipeline,
    build_prompt,
    clean_hints,
)


@pytest.fixture
def cache(clock) -> EmbeddingCache:
    return EmbeddingCache(ttl_seconds=300, clock=clock)


@pytest.fixture
def pipeline(cache, loader, embedder) -> RecommendationPipeline:
    return RecommendationPipeline(cache, loader, embedder, top_k=5)


class TestBuildPrompt:
    def test_without_hints(self) -> None:
        assert build_prompt(Category.PETS, []) == "Recommend me 5 pets"

    def test_pet_species(self) -> None:
        assert build_prompt(Category.PETS, ["dog", "cat"]) == (
            "Recommend me 5 pets (species: dog, cat)"
        )

    def test_article_topics(self) -> None:
        assert build_prompt(Category.ARTICLES, ["training"], limit=3) == (
            "Recommend me 3 articles (topics: training)"
        )

    def test_clean_hints_ignores_non_lists(self) -> None:
        assert clean_hints("dog") == []
        assert clean_hints(None) == []
        assert clean_hints(["dog", "", "  ", 3, " cat "]) == ["dog", "cat"]


class TestRecommend:
    @pytest.mark.asyncio
    async def test_pets_end_to_end(self, pipeline, loader, embedder) -> None:
        result = await pipeline.recommend(
            RecommendationRequest(category="pets"), {"pets": ["dog", "cat"]}
        )

        assert result.ids == ["pet-0", "pet-2", "pet-1"]
        assert loader.calls == ["adoptions"]
        assert embedder.prompts == ["Recommend me 5 pets (species: dog, cat)"]

    @pytest.mark.asyncio
    async def test_unrelated_preferences_ignored(self, pipeline, embedder) -> None:
        await pipeline.recommend(
            RecommendationRequest(category="articles"), {"pets": ["dog"]}
        )
        assert embedder.prompts == ["Recommend me 5 articles"]

    @pytest.mark.asyncio
    async def test_empty_preference_list_adds_no_clause(self, pipeline, embedder) -> None:
        await pipeline.recommend(RecommendationRequest(category="pets"), {"pets": []})
        assert embedder.prompts == ["Recommend me 5 pets"]

    @pytest.mark.asyncio
    async def test_request_hints_override_stored(self, pipeline, embedder) -> None:
        await pipeline.recommend(
            RecommendationRequest(category="pets", preference_hints=["rabbit"]),
            {"pets": ["dog"]},
        )
        assert embedder.prompts == ["Recommend me 5 pets (species: rabbit)"]

    @pytest.mark.asyncio
    async def test_second_request_uses_cache(self, pipeline, loader, embedder) -> None:
        request = RecommendationRequest(category="pets")
        await pipeline.recommend(request)
        await pipeline.recommend(request)
        assert loader.calls == ["adoptions"]
        assert len(embedder.prompts) == 2

    @pytest.mark.asyncio
    async def test_articles_pool_key(self, pipeline, loader) -> None:
        result = await pipeline.recommend(RecommendationRequest(category="articles"))
        assert loader.calls == ["articles"]
        assert result.ids == ["article-1", "article-0"]

    @pytest.mark.asyncio
    async def test_invalid_category_makes_no_calls(self, pipeline, loader, embedder) -> None:
        with pytest.raises(InvalidCategoryError):
            await pipeline.recommend(RecommendationRequest(category="fish"))
        assert loader.calls == []
        assert embedder.prompts == []

    @pytest.mark.asyncio
    async def test_loader_failure_is_opaque(
        self, pipeline, loader, embedder, cache, upstream_error
    ) -> None:
        loader.error = upstream_error
        with pytest.raises(RecommendationUnavailableError) as exc_info:
            await pipeline.recommend(RecommendationRequest(category="pets"))

        assert str(exc_info.value) == "Internal server error"
        assert exc_info.value.__cause__ is upstream_error
        assert embedder.prompts == []
        assert cache.snapshot.pools == {}

    @pytest.mark.asyncio
    async def test_embedder_failure_is_opaque(
        self, pipeline, embedder, embedding_error
    ) -> None:
        embedder.error = embedding_error
        with pytest.raises(RecommendationUnavailableError):
            await pipeline.recommend(RecommendationRequest(category="pets"))

    @pytest.mark.asyncio
    async def test_mismatched_query_dimension_returns_empty(self, pipeline, embedder) -> None:
        embedder.vector = [1.0, 0.0, 0.0]
        result = await pipeline.recommend(RecommendationRequest(category="pets"))
        assert result.ids == []
