"""Cosine-similarity ranking of an embedding pool against a query vector."""

from collections.abc import Sequence

import structlog

from petfeed_recommender.constants import DEFAULT_TOP_K
from petfeed_recommender.models import EmbeddingRecord, ScoredCandidate
from petfeed_recommender.services.vector_math import cosine_similarity_batch

logger = structlog.get_logger()


class Ranker:
    """Scores candidates by cosine similarity and keeps the top K identifiers."""

    def __init__(self, top_k: int = DEFAULT_TOP_K):
        self.top_k_default = top_k

    def score(
        self, query: Sequence[float], candidates: Sequence[EmbeddingRecord]
    ) -> list[ScoredCandidate]:
        """
        Score every candidate whose dimension matches the query.

        Mismatched candidates are skipped rather than raised. The returned
        list is sorted by descending score; ties keep input order.
        """
        dimension = len(query)
        valid = [c for c in candidates if len(c.embedding) == dimension]
        skipped = len(candidates) - len(valid)
        if skipped:
            logger.debug(
                "Skipping candidates with mismatched dimension",
                skipped=skipped,
                expected_dimension=dimension,
            )
        if not valid:
            return []

        similarities = cosine_similarity_batch(query, [c.embedding for c in valid])
        scored = [
            ScoredCandidate(id=c.id, score=float(s)) for c, s in zip(valid, similarities)
        ]
        # sorted() is stable, also with reverse=True
        scored.sort(key=lambda x: x.score, reverse=True)
        return scored

    def top_k(
        self,
        query: Sequence[float],
        candidates: Sequence[EmbeddingRecord],
        k: int | None = None,
    ) -> list[str]:
        """Return up to ``k`` candidate ids ordered by descending similarity."""
        if k is None:
            k = self.top_k_default
        if k < 0:
            raise ValueError(f"k must be non-negative, got {k}")
        if k == 0:
            return []
        return [c.id for c in self.score(query, candidates)[:k]]
