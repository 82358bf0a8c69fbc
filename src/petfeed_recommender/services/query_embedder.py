"""Query embedding service.

Uses sentence-transformers to turn a recommendation prompt into one vector.
"""

import asyncio
from typing import Any, Protocol

import structlog

from petfeed_recommender.config import get_settings
from petfeed_recommender.exceptions import EmbeddingError

logger = structlog.get_logger()

# Lazy-loaded model to avoid loading on import
_embedding_model = None


class QueryEmbedder(Protocol):
    async def embed(self, prompt: str) -> list[float]: ...


def get_embedding_model(model_name: str | None = None):
    """Get or initialize the shared embedding model."""
    global _embedding_model
    if _embedding_model is None:
        from sentence_transformers import SentenceTransformer

        model_name = model_name or get_settings().embedding_model
        logger.info("Loading embedding model", model=model_name)
        _embedding_model = SentenceTransformer(model_name)
        logger.info(
            "Embedding model loaded",
            model=model_name,
            dimension=_embedding_model.get_sentence_embedding_dimension(),
        )
    return _embedding_model


class SentenceTransformerEmbedder:
    """Embeds prompts with a locally loaded sentence-transformers model."""

    def __init__(self, model: Any = None, model_name: str | None = None):
        self._model = model
        self.model_name = model_name

    @property
    def model(self) -> Any:
        """Lazy load the embedding model."""
        if self._model is None:
            self._model = get_embedding_model(self.model_name)
        return self._model

    def _encode(self, prompt: str) -> list[float]:
        embedding = self.model.encode(prompt, convert_to_numpy=True)
        return [float(x) for x in embedding.tolist()]

    async def embed(self, prompt: str) -> list[float]:
        """Generate the query embedding for a prompt in a worker thread."""
        try:
            return await asyncio.to_thread(self._encode, prompt)
        except Exception as e:
            logger.error("Error generating query embedding", error=str(e))
            raise EmbeddingError("Query embedding failed") from e
