"""Business logic services."""

from petfeed_recommender.services.auth import PostgresTokenVerifier
from petfeed_recommender.services.candidate_loader import PostgresCandidateLoader
from petfeed_recommender.services.embedding_cache import EmbeddingCache
from petfeed_recommender.services.pipeline import RecommendationPipeline
from petfeed_recommender.services.preferences import PostgresPreferenceStore
from petfeed_recommender.services.query_embedder import SentenceTransformerEmbedder
from petfeed_recommender.services.ranker import Ranker

__all__ = [
    "EmbeddingCache",
    "PostgresCandidateLoader",
    "PostgresPreferenceStore",
    "PostgresTokenVerifier",
    "Ranker",
    "RecommendationPipeline",
    "SentenceTransformerEmbedder",
]
