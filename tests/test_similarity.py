"""Tests for cosine similarity."""

import math

import numpy as np
import pytest

from integrity_tool.core.errors import DimensionMismatchError
from integrity_tool.core.similarity import batch_cosine_similarity, cosine_similarity


def test_orthogonal_vectors():
    """Orthogonal unit vectors have zero similarity."""
    assert cosine_similarity([1, 0], [0, 1]) == 0.0


def test_identical_vectors():
    vector = [0.3, 0.1, 0.7, 0.2]
    assert cosine_similarity(vector, vector) == pytest.approx(1.0)


def test_opposite_vectors():
    assert cosine_similarity([1, 2, 3], [-1, -2, -3]) == pytest.approx(-1.0)


def test_known_value():
    assert cosine_similarity([1, 1], [1, 0]) == pytest.approx(1 / math.sqrt(2))


def test_symmetric():
    """Argument order never changes the result."""
    rng = np.random.default_rng(42)
    for _ in range(20):
        a = rng.normal(size=16)
        b = rng.normal(size=16)
        assert cosine_similarity(a, b) == cosine_similarity(b, a)


def test_zero_vector_is_zero():
    """A zero vector has no similarity to anything, itself included."""
    zero = [0.0, 0.0, 0.0]
    assert cosine_similarity(zero, [1.0, 2.0, 3.0]) == 0.0
    assert cosine_similarity([1.0, 2.0, 3.0], zero) == 0.0
    assert cosine_similarity(zero, zero) == 0.0


@pytest.mark.parametrize("len_a,len_b", [(1, 2), (2, 1), (3, 100), (100, 99)])
def test_dimension_mismatch(len_a, len_b):
    with pytest.raises(DimensionMismatchError):
        cosine_similarity([1.0] * len_a, [1.0] * len_b)


@pytest.mark.parametrize("a,b", [([], []), ([], [1.0]), (None, [1.0]), ([1.0], None)])
def test_missing_or_empty_vectors(a, b):
    with pytest.raises(DimensionMismatchError):
        cosine_similarity(a, b)


def test_accepts_numpy_arrays():
    a = np.array([0.5, 0.5], dtype=np.float32)
    b = np.array([0.5, 0.5], dtype=np.float64)
    assert cosine_similarity(a, b) == pytest.approx(1.0)


def test_batch():
    scores = batch_cosine_similarity([1, 0], [[1, 0], [0, 1], [0, 0]])
    assert scores == [pytest.approx(1.0), 0.0, 0.0]
