"""Shared fixtures for signbank tests.

All landmark sets are synthetic. NO hand tracker needed.
"""

import numpy as np
import pytest

from signbank.landmarks import landmarks_to_records
from signbank.library import GestureLibrary
from signbank.types import DualHand, SingleHand

# Open hand, fingers up, wrist at (0.5, 0.5)
_OPEN_HAND = [
    (0.5, 0.5, 0.0),
    (0.45, 0.4, -0.05), (0.42, 0.35, -0.08), (0.4, 0.3, -0.1), (0.38, 0.25, -0.12),
    (0.48, 0.35, -0.03), (0.46, 0.25, -0.05), (0.45, 0.15, -0.06), (0.44, 0.05, -0.07),
    (0.5, 0.33, -0.02), (0.49, 0.23, -0.04), (0.48, 0.13, -0.05), (0.47, 0.03, -0.06),
    (0.52, 0.32, -0.01), (0.51, 0.22, -0.03), (0.5, 0.12, -0.04), (0.49, 0.02, -0.05),
    (0.54, 0.31, 0.0), (0.53, 0.21, -0.02), (0.52, 0.11, -0.03), (0.51, 0.01, -0.04),
]


@pytest.fixture
def open_hand():
    """Canonical open-hand pose, shape (21, 3)."""
    return np.array(_OPEN_HAND, dtype=np.float64)


@pytest.fixture
def hello_pose(open_hand):
    """Open hand with the four fingers stretched a little further."""
    pose = open_hand.copy()
    pose[8:, 1] -= 0.05
    return pose


@pytest.fixture
def fist_pose(open_hand):
    """Fingers curled back toward the palm."""
    pose = open_hand.copy()
    for tip, dip in ((8, 7), (12, 11), (16, 15), (20, 19)):
        pose[tip, 1] = pose[tip - 3, 1] + 0.02
        pose[dip, 1] = pose[tip - 3, 1] - 0.01
    pose[4] = (0.46, 0.33, -0.06)
    return pose


@pytest.fixture
def hello_records(hello_pose):
    return landmarks_to_records(hello_pose)


@pytest.fixture
def make_library():
    """Factory fixture: library with one gesture per (name, label, poses) entry.

    Each pose becomes a validated sample. A tuple of two arrays is stored as a
    dual-hand sample on a dual-hand gesture.
    """
    def _make(*entries, confidence: float = 0.9) -> GestureLibrary:
        library = GestureLibrary()
        for name, label, poses in entries:
            dual = bool(poses) and isinstance(poses[0], tuple)
            gesture = library.add_gesture(name, label, supports_dual_hand=dual)
            for pose in poses:
                if dual:
                    hands = DualHand(left=pose[0], right=pose[1])
                else:
                    hands = SingleHand(landmarks=pose)
                library.add_sample(gesture.gesture_id, hands, confidence_score=confidence)
        return library
    return _make
