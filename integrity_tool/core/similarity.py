"""Cosine similarity between embedding vectors."""

from typing import List, Sequence, Union

import numpy as np

from .errors import DimensionMismatchError

Vector = Union[np.ndarray, Sequence[float]]


def cosine_similarity(a: Vector, b: Vector) -> float:
    """
    Cosine similarity of two equal-length vectors.

    A zero vector has no similarity to anything, itself included, so 0.0 is
    returned whenever either norm is zero.

    Raises:
        DimensionMismatchError: either vector is missing or empty, or the
            lengths differ
    """
    if a is None or b is None:
        raise DimensionMismatchError("Vectors must be non-empty and of same length")

    vec_a = np.asarray(a, dtype=np.float64).ravel()
    vec_b = np.asarray(b, dtype=np.float64).ravel()

    if vec_a.size == 0 or vec_b.size == 0 or vec_a.size != vec_b.size:
        raise DimensionMismatchError(
            f"Vectors must be non-empty and of same length (got {vec_a.size} and {vec_b.size})"
        )

    norm_a = np.linalg.norm(vec_a)
    norm_b = np.linalg.norm(vec_b)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    return float(np.dot(vec_a, vec_b) / (norm_a * norm_b))


def batch_cosine_similarity(query: Vector, vectors: Sequence[Vector]) -> List[float]:
    """Similarity of one query vector against each vector in a list."""
    return [cosine_similarity(query, vector) for vector in vectors]
