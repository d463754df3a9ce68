"""Persistence layer for GestureLibrary.

JSON save/load. Raw landmarks are stored in the ``{"x", "y", "z"}`` record
form the tracker produces; cached normalized forms are stored as plain
lists together with the scale method they were computed with.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np

from signbank import __version__
from signbank.payloads import hands_to_payload, parse_hands
from signbank.types import DualHand, Gesture, HandSet, ScaleMethod, SingleHand, TrainingSample

logger = logging.getLogger(__name__)


def save_library(library: Any, path: str | Path) -> None:
    """Save a GestureLibrary to JSON.

    Args:
        library: GestureLibrary instance to save.
        path: Output JSON file path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "gestures": [_gesture_to_dict(g) for g in library.gestures],
        "_config": {
            "scale_method": library.scale_method.value,
        },
        "_next_gesture_id": library._next_gesture_id,
        "_next_sample_id": library._next_sample_id,
        "_version": {
            "app": "signbank",
            "app_version": __version__,
            "created_at": datetime.now(timezone.utc).isoformat(),
        },
    }

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    logger.info("Saved %d gestures to %s", len(library), path)


def load_library(path: str | Path) -> Any:
    """Load a GestureLibrary from JSON.

    Args:
        path: Path to the library JSON file.

    Returns:
        GestureLibrary instance.

    Raises:
        FileNotFoundError: If the file does not exist.
        LandmarkValidationError: If stored landmarks are malformed.
    """
    from signbank.library import GestureLibrary

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Gesture library file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    config = data.get("_config", {})
    library = GestureLibrary(
        scale_method=ScaleMethod(config.get("scale_method", ScaleMethod.FINGERTIP.value)),
    )

    gestures = [_dict_to_gesture(g) for g in data.get("gestures", [])]
    library._gestures = {g.gesture_id: g for g in gestures}

    max_gesture_id = max((g.gesture_id for g in gestures), default=0)
    max_sample_id = max((s.sample_id for g in gestures for s in g.samples), default=0)
    library._next_gesture_id = data.get("_next_gesture_id", max_gesture_id + 1)
    library._next_sample_id = data.get("_next_sample_id", max_sample_id + 1)

    logger.info("Loaded %d gestures from %s", len(gestures), path)
    return library


def _normalized_to_payload(hands: HandSet) -> Any:
    if isinstance(hands, DualHand):
        return {"left": hands.left.tolist(), "right": hands.right.tolist()}
    return hands.landmarks.tolist()


def _payload_to_normalized(payload: Any) -> HandSet:
    if isinstance(payload, dict):
        return DualHand(
            left=np.asarray(payload["left"], dtype=np.float64),
            right=np.asarray(payload["right"], dtype=np.float64),
        )
    return SingleHand(landmarks=np.asarray(payload, dtype=np.float64))


def _sample_to_dict(sample: TrainingSample) -> dict:
    """Convert TrainingSample to JSON-serializable dict."""
    return {
        "id": sample.sample_id,
        "gesture_id": sample.gesture_id,
        "hand_count": sample.hand_count,
        "landmark_data": hands_to_payload(sample.landmarks),
        "normalized_data": (
            _normalized_to_payload(sample.normalized) if sample.normalized is not None else None
        ),
        "normalized_method": (
            sample.normalized_method.value if sample.normalized_method is not None else None
        ),
        "confidence_score": sample.confidence_score,
        "is_validated": sample.is_validated,
        "notes": sample.notes,
        "metadata": sample.metadata,
        "created_at": sample.created_at,
    }


def _dict_to_sample(data: dict, gesture_id: int) -> TrainingSample:
    """Convert dict from JSON to TrainingSample."""
    hands = parse_hands(data["landmark_data"], "landmark_data")

    normalized = None
    method = None
    if data.get("normalized_data") is not None and data.get("normalized_method"):
        normalized = _payload_to_normalized(data["normalized_data"])
        method = ScaleMethod(data["normalized_method"])

    return TrainingSample(
        sample_id=data["id"],
        gesture_id=gesture_id,
        landmarks=hands,
        confidence_score=float(data.get("confidence_score", 1.0)),
        is_validated=bool(data.get("is_validated", True)),
        normalized=normalized,
        normalized_method=method,
        notes=data.get("notes"),
        metadata=data.get("metadata", {}),
        created_at=data.get("created_at", ""),
    )


def _gesture_to_dict(gesture: Gesture) -> dict:
    """Convert Gesture (with its samples) to JSON-serializable dict."""
    return {
        "id": gesture.gesture_id,
        "name": gesture.name,
        "label": gesture.label,
        "description": gesture.description,
        "is_active": gesture.is_active,
        "supports_dual_hand": gesture.supports_dual_hand,
        "metadata": gesture.metadata,
        "training_data": [_sample_to_dict(s) for s in gesture.samples],
    }


def _dict_to_gesture(data: dict) -> Gesture:
    """Convert dict from JSON to Gesture."""
    gesture_id = data["id"]
    return Gesture(
        gesture_id=gesture_id,
        name=data["name"],
        label=data.get("label", data["name"]),
        description=data.get("description", ""),
        is_active=bool(data.get("is_active", True)),
        supports_dual_hand=bool(data.get("supports_dual_hand", False)),
        metadata=data.get("metadata", {}),
        samples=[_dict_to_sample(s, gesture_id) for s in data.get("training_data", [])],
    )


__all__ = ["save_library", "load_library"]
