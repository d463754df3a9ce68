"""Similarity between normalized landmark sets.

Both inputs are expected to come out of ``signbank.normalize`` with the same
scale method. Points are compared index by index (point i of one set against
point i of the other), so landmark order matters.
"""

from __future__ import annotations

import math

import numpy as np

from signbank.types import DualHand, HandSet, SimilarityTransform, SingleHand

# Decay rate of the exponential transform; exp(-10 * avg_distance)
DEFAULT_DECAY = 10.0


def average_distance(a: np.ndarray, b: np.ndarray) -> float:
    """Mean Euclidean distance between corresponding points."""
    return float(np.linalg.norm(a - b, axis=1).mean())


def similarity(
    a: np.ndarray,
    b: np.ndarray,
    transform: SimilarityTransform = SimilarityTransform.EXPONENTIAL,
    decay: float = DEFAULT_DECAY,
) -> float:
    """Similarity of two normalized landmark sets.

    Args:
        a: Normalized set of shape (N, 3).
        b: Normalized set of shape (N, 3).
        transform: LINEAR gives ``max(0, 1 - avg)``; EXPONENTIAL gives
            ``exp(-decay * avg)`` clamped to [0, 1].
        decay: Decay rate for the exponential transform.

    Returns:
        Similarity in [0, 1]. 0 when either set is empty or the lengths
        differ.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.size == 0 or b.size == 0 or a.shape != b.shape:
        return 0.0

    avg = average_distance(a, b)

    if transform is SimilarityTransform.LINEAR:
        return max(0.0, 1.0 - avg)
    if transform is SimilarityTransform.EXPONENTIAL:
        return max(0.0, min(1.0, math.exp(-decay * avg)))
    raise ValueError(f"Unknown similarity transform: {transform!r}")


def hands_similarity(
    a: HandSet,
    b: HandSet,
    transform: SimilarityTransform = SimilarityTransform.EXPONENTIAL,
    decay: float = DEFAULT_DECAY,
) -> float:
    """Similarity of two normalized hand payloads.

    Dual-hand payloads are compared left-to-left and right-to-right and the
    two scores are averaged. Payloads with different hand counts score 0.
    """
    if isinstance(a, DualHand) and isinstance(b, DualHand):
        left = similarity(a.left, b.left, transform, decay)
        right = similarity(a.right, b.right, transform, decay)
        return (left + right) / 2
    if isinstance(a, SingleHand) and isinstance(b, SingleHand):
        return similarity(a.landmarks, b.landmarks, transform, decay)
    return 0.0


__all__ = [
    "DEFAULT_DECAY",
    "average_distance",
    "similarity",
    "hands_similarity",
]
