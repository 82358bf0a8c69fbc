"""Vector similarity routines used for ranking candidates."""

from collections.abc import Sequence

import numpy as np

from petfeed_recommender.constants import ZERO_NORM_EPSILON
from petfeed_recommender.exceptions import DimensionMismatchError


def cosine_similarity(vec1: Sequence[float], vec2: Sequence[float]) -> float:
    """
    Calculate cosine similarity between two vectors of equal length.

    A zero denominator (either vector all zeros) is replaced by a small
    epsilon, so the result is always finite. The result is not clamped.

    Raises:
        DimensionMismatchError: if the vectors differ in length
    """
    a = np.asarray(vec1, dtype=np.float64)
    b = np.asarray(vec2, dtype=np.float64)
    if a.shape != b.shape:
        raise DimensionMismatchError(a.size, b.size)

    denominator = float(np.linalg.norm(a) * np.linalg.norm(b))
    if denominator == 0:
        denominator = ZERO_NORM_EPSILON
    return float(np.dot(a, b) / denominator)


def cosine_similarity_batch(
    query: Sequence[float], vectors: Sequence[Sequence[float]] | np.ndarray
) -> np.ndarray:
    """
    Compute cosine similarity between a query and each row of a matrix.

    Same semantics as cosine_similarity, vectorized: (N, D) @ (D,) / (norms * query_norm).
    """
    query_vec = np.asarray(query, dtype=np.float64)
    if len(vectors) == 0:
        return np.zeros(0, dtype=np.float64)

    matrix = np.asarray(vectors, dtype=np.float64)
    if matrix.ndim != 2 or matrix.shape[1] != query_vec.size:
        actual = matrix.shape[1] if matrix.ndim == 2 else -1
        raise DimensionMismatchError(query_vec.size, actual)

    dots = matrix @ query_vec
    denominators = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query_vec)
    denominators = np.where(denominators == 0, ZERO_NORM_EPSILON, denominators)
    return dots / denominators
