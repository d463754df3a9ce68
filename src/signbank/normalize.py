"""Landmark normalization.

Puts a 21-point hand into a translation- and scale-invariant form: the wrist
becomes the origin and every point is divided by one per-set scale factor.

Two scale definitions are in use and are kept apart on purpose:

- ``ScaleMethod.FINGERTIP``: wrist to middle fingertip distance. Live
  detection and training ingestion.
- ``ScaleMethod.BOUNDING_BOX``: largest x/y/z extent of the raw set. Admin
  sample comparison.

Example:
    >>> norm = normalize(raw_points)
    >>> norm.shape
    (21, 3)
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import numpy as np

from signbank.landmarks import NUM_LANDMARKS, HandLandmarkIndex, coerce_landmarks
from signbank.types import DualHand, HandSet, ScaleMethod, SingleHand, TrainingSample

logger = logging.getLogger(__name__)

# Scales below this are treated as a degenerate (zero-size) hand
MIN_SCALE = 0.001


def _empty() -> np.ndarray:
    return np.empty((0, 3), dtype=np.float64)


def hand_scale(points: np.ndarray, method: ScaleMethod = ScaleMethod.FINGERTIP) -> float:
    """Compute the scale factor of a (21, 3) landmark array.

    Degenerate scales (< 0.001) are clamped to 1.0.
    """
    if method is ScaleMethod.FINGERTIP:
        delta = points[HandLandmarkIndex.MIDDLE_FINGER_TIP] - points[HandLandmarkIndex.WRIST]
        scale = float(np.linalg.norm(delta))
    elif method is ScaleMethod.BOUNDING_BOX:
        scale = float(np.max(points.max(axis=0) - points.min(axis=0)))
    else:
        raise ValueError(f"Unknown scale method: {method!r}")

    if scale < MIN_SCALE:
        return 1.0
    return scale


def normalize(points: Any, method: ScaleMethod = ScaleMethod.FINGERTIP) -> np.ndarray:
    """Normalize one hand's landmarks.

    Args:
        points: 21 landmarks in any shape accepted by ``coerce_landmarks``.
        method: Scale definition to use.

    Returns:
        Array of shape (21, 3), wrist-relative and divided by the scale.
        An empty (0, 3) array when the input is not normalizable (fewer or
        more than 21 points, or not coercible to numeric x/y/z records).
    """
    arr = coerce_landmarks(points)
    if arr is None or len(arr) != NUM_LANDMARKS:
        return _empty()

    translated = arr - arr[HandLandmarkIndex.WRIST]
    scale = hand_scale(arr, method)
    return translated / scale


def normalize_hands(hands: HandSet, method: ScaleMethod = ScaleMethod.FINGERTIP) -> Optional[HandSet]:
    """Normalize every landmark set of a hand payload.

    Returns:
        A payload of the same variant with normalized arrays, or None if
        any of its sets is not normalizable.
    """
    if isinstance(hands, DualHand):
        left = normalize(hands.left, method)
        right = normalize(hands.right, method)
        if not len(left) or not len(right):
            return None
        return DualHand(left=left, right=right, confidence=hands.confidence)

    norm = normalize(hands.landmarks, method)
    if not len(norm):
        return None
    return SingleHand(landmarks=norm, handedness=hands.handedness, confidence=hands.confidence)


def comparison_form(
    sample: TrainingSample, method: ScaleMethod = ScaleMethod.FINGERTIP
) -> Optional[HandSet]:
    """Return the normalized form of a sample for comparison.

    Uses the cached ``sample.normalized`` when it was computed with the same
    method, otherwise normalizes the raw landmarks on demand. The cache is
    not written here; see ``GestureLibrary.add_sample`` for ingestion.
    """
    if sample.normalized is not None and sample.normalized_method is method:
        return sample.normalized

    normalized = normalize_hands(sample.landmarks, method)
    if normalized is None:
        logger.warning(
            "Sample %d of gesture %d has landmarks that cannot be normalized",
            sample.sample_id, sample.gesture_id,
        )
    return normalized


__all__ = [
    "MIN_SCALE",
    "hand_scale",
    "normalize",
    "normalize_hands",
    "comparison_form",
]
