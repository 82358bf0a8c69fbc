"""Domain types passed between pipeline stages."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from petfeed_recommender.constants import CATEGORY_POOL_KEYS, PREFERENCE_LABELS
from petfeed_recommender.exceptions import InvalidCategoryError


class Category(str, Enum):
    """Supported recommendation categories."""

    PETS = "pets"
    ARTICLES = "articles"

    @classmethod
    def parse(cls, value: object) -> "Category":
        """Resolve a caller-supplied value, raising InvalidCategoryError if unsupported."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidCategoryError(value) from None

    @property
    def pool_key(self) -> str:
        return CATEGORY_POOL_KEYS[self.value]

    @property
    def preference_label(self) -> str:
        return PREFERENCE_LABELS[self.value]


@dataclass(frozen=True)
class EmbeddingRecord:
    """An item identifier paired with its precomputed embedding."""

    id: str
    embedding: Sequence[float]

    @property
    def dimension(self) -> int:
        return len(self.embedding)


@dataclass(frozen=True)
class ScoredCandidate:
    id: str
    score: float


@dataclass(frozen=True)
class RecommendationRequest:
    """A "recommend me N items" request as received from the transport layer."""

    category: str
    preference_hints: Sequence[str] | None = None


@dataclass(frozen=True)
class RecommendationResult:
    ids: list[str] = field(default_factory=list)
