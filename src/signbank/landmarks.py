"""Hand landmark layout and coercion helpers.

The external hand tracker (MediaPipe Hands) reports 21 landmarks per hand.
Payloads arrive in several shapes: ``{"x", "y", "z"}`` mappings, objects
with ``x/y/z`` attributes, ``[x, y, z]`` triples, or an ``(N, 3)`` array.
Everything is resolved here into a float64 array of shape ``(N, 3)`` so the
rest of the package only ever sees one representation.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Optional, Sequence

import numpy as np

from signbank.errors import LandmarkValidationError

NUM_LANDMARKS = 21


class HandLandmarkIndex:
    """MediaPipe hand landmark indices.

    The order is a fixed anatomical convention and is never re-sorted.

    Example:
        >>> wrist = landmarks[HandLandmarkIndex.WRIST]
        >>> middle_tip = landmarks[HandLandmarkIndex.MIDDLE_FINGER_TIP]
    """

    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_FINGER_MCP = 5
    INDEX_FINGER_PIP = 6
    INDEX_FINGER_DIP = 7
    INDEX_FINGER_TIP = 8
    MIDDLE_FINGER_MCP = 9
    MIDDLE_FINGER_PIP = 10
    MIDDLE_FINGER_DIP = 11
    MIDDLE_FINGER_TIP = 12
    RING_FINGER_MCP = 13
    RING_FINGER_PIP = 14
    RING_FINGER_DIP = 15
    RING_FINGER_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


# Tracker output range used by validate_landmarks()
_XY_RANGE = (-0.5, 1.5)
_Z_RANGE = (-1.0, 1.0)


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(result):
        return None
    return result


def _point_values(point: Any) -> Optional[tuple]:
    """Extract the raw (x, y, z) values of one landmark, or None."""
    if isinstance(point, Mapping):
        if not all(key in point for key in ("x", "y", "z")):
            return None
        return point["x"], point["y"], point["z"]
    if all(hasattr(point, attr) for attr in ("x", "y", "z")):
        return point.x, point.y, point.z
    if isinstance(point, (str, bytes)):
        return None
    if isinstance(point, (Sequence, np.ndarray)) and len(point) == 3:
        return tuple(point)
    return None


def _coerce(points: Any) -> tuple[Optional[np.ndarray], Optional[str]]:
    """Coerce a landmark payload to an (N, 3) array.

    Returns:
        Tuple of (array, None) on success or (None, error message).
    """
    if points is None:
        return None, "Hand landmark data is required"

    if isinstance(points, np.ndarray):
        if points.ndim == 1 and points.size % 3 == 0:
            points = points.reshape(-1, 3)
        if points.ndim != 2 or points.shape[1] != 3:
            return None, "Landmark array must have shape (N, 3)"
        try:
            arr = points.astype(np.float64)
        except (TypeError, ValueError):
            return None, "Landmark coordinates must be numeric"
        if not np.all(np.isfinite(arr)):
            return None, "Landmark coordinates must be finite numbers"
        return arr, None

    if isinstance(points, (str, bytes, Mapping)) or not isinstance(points, Sequence):
        return None, "Hand landmark data must be a list of points"

    coords = []
    for i, point in enumerate(points):
        values = _point_values(point)
        if values is None:
            return None, f"Landmark {i} must have x, y and z coordinates"
        floats = [_to_float(v) for v in values]
        if any(f is None for f in floats):
            return None, f"Landmark {i} coordinates must be numeric"
        coords.append(floats)

    if not coords:
        return np.empty((0, 3), dtype=np.float64), None
    return np.asarray(coords, dtype=np.float64), None


def coerce_landmarks(points: Any) -> Optional[np.ndarray]:
    """Coerce a landmark payload to a float64 ``(N, 3)`` array.

    Lenient: never raises. Returns None when the payload cannot be read as
    a list of numeric (x, y, z) points.
    """
    arr, _ = _coerce(points)
    return arr


def parse_landmark_set(points: Any, field: str = "landmarks") -> np.ndarray:
    """Parse one hand's landmarks strictly, for the input boundary.

    Args:
        points: Landmark payload in any supported shape.
        field: Field name used in validation messages.

    Returns:
        Array of shape (21, 3).

    Raises:
        LandmarkValidationError: If the payload is missing, has the wrong
            number of points, or contains non-numeric coordinates.
    """
    arr, error = _coerce(points)
    if arr is None:
        raise LandmarkValidationError.single(field, error)
    if len(arr) < NUM_LANDMARKS:
        raise LandmarkValidationError.single(
            field, f"At least {NUM_LANDMARKS} landmark points are required"
        )
    if len(arr) != NUM_LANDMARKS:
        raise LandmarkValidationError.single(
            field, f"Exactly {NUM_LANDMARKS} landmark points are expected per hand, got {len(arr)}"
        )
    return arr


def validate_landmarks(points: Any) -> bool:
    """Check that landmarks look like tracker output.

    21 numeric points with x/y in [-0.5, 1.5] and z in [-1, 1].
    """
    arr = coerce_landmarks(points)
    if arr is None or len(arr) != NUM_LANDMARKS:
        return False
    xy_ok = np.all((arr[:, :2] >= _XY_RANGE[0]) & (arr[:, :2] <= _XY_RANGE[1]))
    z_ok = np.all((arr[:, 2] >= _Z_RANGE[0]) & (arr[:, 2] <= _Z_RANGE[1]))
    return bool(xy_ok and z_ok)


def landmarks_to_records(landmarks: np.ndarray) -> list[dict[str, float]]:
    """Convert an (N, 3) array to the ``[{"x", "y", "z"}, ...]`` wire form."""
    return [
        {"x": float(x), "y": float(y), "z": float(z)}
        for x, y, z in np.asarray(landmarks, dtype=np.float64)
    ]


__all__ = [
    "NUM_LANDMARKS",
    "HandLandmarkIndex",
    "coerce_landmarks",
    "parse_landmark_set",
    "validate_landmarks",
    "landmarks_to_records",
]
