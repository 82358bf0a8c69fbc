"""Domain exceptions for the recommendation service."""


class RecommendationError(Exception):
    """Base class for all recommendation service errors."""


class InvalidCategoryError(RecommendationError):
    """The requested category is not one of the supported values."""

    def __init__(self, category: object):
        self.category = category
        super().__init__(f"Unsupported category: {category!r}")


class UpstreamLoadError(RecommendationError):
    """The backing store could not supply candidates or preferences."""


class EmbeddingError(RecommendationError):
    """The query embedder failed to produce a vector."""


class DimensionMismatchError(RecommendationError, ValueError):
    """Two vectors that must share a dimension do not."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Vector dimension mismatch: expected {expected}, got {actual}")


class AuthenticationError(RecommendationError):
    """A bearer token is unknown, revoked or expired."""


class RecommendationUnavailableError(RecommendationError):
    """Opaque failure surfaced to callers when the pipeline cannot complete."""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
