"""Recommendation pipeline.

category -> pool key -> cached candidate pool -> prompt -> query embedding -> top-K ids
"""

from collections.abc import Mapping, Sequence
from typing import Any

import structlog

from petfeed_recommender.constants import DEFAULT_TOP_K
from petfeed_recommender.exceptions import RecommendationUnavailableError
from petfeed_recommender.models import (
    Category,
    RecommendationRequest,
    RecommendationResult,
)
from petfeed_recommender.services.candidate_loader import CandidateLoader
from petfeed_recommender.services.embedding_cache import EmbeddingCache
from petfeed_recommender.services.query_embedder import QueryEmbedder
from petfeed_recommender.services.ranker import Ranker

logger = structlog.get_logger()


def clean_hints(hints: Any) -> list[str]:
    """Keep non-blank string hints; anything that is not a list yields none."""
    if not isinstance(hints, (list, tuple)):
        return []
    return [h.strip() for h in hints if isinstance(h, str) and h.strip()]


def build_prompt(category: Category, hints: Sequence[str], limit: int = DEFAULT_TOP_K) -> str:
    """
    Build the natural-language query for a category.

    >>> build_prompt(Category.PETS, ["dog", "cat"])
    'Recommend me 5 pets (species: dog, cat)'
    """
    prompt = f"Recommend me {limit} {category.value}"
    if hints:
        prompt += f" ({category.preference_label}: {', '.join(hints)})"
    return prompt


class RecommendationPipeline:
    """Orchestrates cache lookup, query embedding and ranking for one request."""

    def __init__(
        self,
        cache: EmbeddingCache,
        loader: CandidateLoader,
        embedder: QueryEmbedder,
        top_k: int = DEFAULT_TOP_K,
    ):
        self.cache = cache
        self.loader = loader
        self.embedder = embedder
        self.top_k = top_k
        self.ranker = Ranker(top_k=top_k)

    def resolve_hints(
        self,
        category: Category,
        request: RecommendationRequest,
        user_preferences: Mapping[str, Any] | None,
    ) -> list[str]:
        """Hints on the request win over stored preferences for the same category."""
        hints = clean_hints(request.preference_hints)
        if hints:
            return hints
        return clean_hints((user_preferences or {}).get(category.value))

    async def recommend(
        self,
        request: RecommendationRequest,
        user_preferences: Mapping[str, Any] | None = None,
    ) -> RecommendationResult:
        """
        Produce up to ``top_k`` recommended ids for a request.

        Raises:
            InvalidCategoryError: before any external call, for an unsupported category
            RecommendationUnavailableError: if loading, embedding or ranking fails
        """
        category = Category.parse(request.category)
        pool_key = category.pool_key

        try:
            candidates = await self.cache.get(pool_key, self.loader.fetch)
            prompt = build_prompt(
                category,
                self.resolve_hints(category, request, user_preferences),
                self.top_k,
            )
            logger.info("Embedding recommendation prompt", prompt=prompt)
            query = await self.embedder.embed(prompt)
            ids = self.ranker.top_k(query, candidates, self.top_k)
        except Exception as e:
            logger.error(
                "Recommendation pipeline failed",
                category=category.value,
                pool=pool_key,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise RecommendationUnavailableError() from e

        logger.info(
            "Recommendations generated",
            category=category.value,
            candidates=len(candidates),
            recommendations=ids,
        )
        return RecommendationResult(ids=ids)
