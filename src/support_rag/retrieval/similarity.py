"""
Similarity and ranking utilities shared by both scorers.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np

from support_rag.core.errors import DimensionMismatchError
from support_rag.retrieval.document import ScoredDocument

MAX_RESULTS = 5
DEFAULT_TOP_K = MAX_RESULTS


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """
    Cosine similarity of two equal-length vectors.

    Returns 0.0 when either vector has zero magnitude. Raises
    DimensionMismatchError when the lengths differ.
    """
    a = np.asarray(a, dtype=np.float64).ravel()
    b = np.asarray(b, dtype=np.float64).ravel()
    if a.shape != b.shape:
        raise DimensionMismatchError(expected=a.shape[0], actual=b.shape[0])

    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return float(np.dot(a, b) / (norm_a * norm_b))


def select_top(
    scored: Iterable[ScoredDocument],
    top_k: int = DEFAULT_TOP_K,
    min_score: float = 0.0,
) -> list[ScoredDocument]:
    """
    Keep scores strictly above min_score, sort descending, truncate to top_k.
    top_k is capped at MAX_RESULTS.

    sorted() is stable, so equal scores keep their input order.
    """
    kept = [item for item in scored if item.score > min_score]
    kept = sorted(kept, key=lambda item: item.score, reverse=True)
    return kept[:clamp_top_k(top_k)]


def clamp_top_k(top_k: int) -> int:
    """Bound a requested result count to 0..MAX_RESULTS."""
    return max(0, min(top_k, MAX_RESULTS))
