"""Hand payload and detection request parsing.

Turns the JSON body of a detection call into a validated hand payload:

    {
        "landmarks": [{"x": ..., "y": ..., "z": ...}, ...],   # 21 points
        "confidence": 0.93,
        "handCount": 1,
        "handData": [{"landmarks": [...], "handedness": "Left", "confidence": 0.9}, ...]
    }

``landmarkData`` is accepted in place of ``landmarks``. All field problems
are collected and raised together as one LandmarkValidationError.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Union

from signbank.errors import LandmarkValidationError
from signbank.landmarks import landmarks_to_records, parse_landmark_set
from signbank.types import DualHand, HandSet, SingleHand


@dataclass
class DetectRequest:
    """A validated detection request.

    Attributes:
        hands: Parsed single- or dual-hand payload.
        confidence: Overall tracker confidence [0, 1].
        hand_count: 1 or 2, always equal to hands.hand_count.
    """

    hands: HandSet
    confidence: float
    hand_count: int


def _parse_confidence(value: Any, field: str, errors: dict[str, list[str]]) -> Optional[float]:
    if value is None:
        errors.setdefault(field, []).append("Confidence score is required")
        return None
    if isinstance(value, bool):
        errors.setdefault(field, []).append("Confidence must be a number")
        return None
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        errors.setdefault(field, []).append("Confidence must be a number")
        return None
    if not 0.0 <= confidence <= 1.0:
        errors.setdefault(field, []).append("Confidence must be between 0 and 1")
        return None
    return confidence


def _parse_hand_count(value: Any, errors: dict[str, list[str]]) -> Optional[int]:
    if value is None:
        return 1
    if isinstance(value, bool):
        errors.setdefault("handCount", []).append("Hand count must be an integer")
        return None
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        errors.setdefault("handCount", []).append("Hand count must be an integer")
        return None
    if value not in (1, 2):
        errors.setdefault("handCount", []).append("Hand count must be 1 or 2")
        return None
    return value


def parse_hands(payload: Any, field: str = "landmarks") -> HandSet:
    """Parse a stored or imported hand payload.

    A mapping with ``left`` and ``right`` keys is a dual-hand payload;
    anything else is read as one hand's landmark list.

    Raises:
        LandmarkValidationError: If any landmark set is invalid.
    """
    if isinstance(payload, Mapping) and "left" in payload and "right" in payload:
        return DualHand(
            left=parse_landmark_set(payload["left"], f"{field}.left"),
            right=parse_landmark_set(payload["right"], f"{field}.right"),
        )
    return SingleHand(landmarks=parse_landmark_set(payload, field))


def hands_to_payload(hands: HandSet) -> Union[list, dict]:
    """Inverse of parse_hands(): records form for JSON storage."""
    if isinstance(hands, DualHand):
        return {
            "left": landmarks_to_records(hands.left),
            "right": landmarks_to_records(hands.right),
        }
    return landmarks_to_records(hands.landmarks)


def _parse_dual_hands(
    hand_data: Any, confidence: float, errors: dict[str, list[str]]
) -> Optional[DualHand]:
    if not isinstance(hand_data, list) or len(hand_data) < 2:
        errors.setdefault("handData", []).append(
            "Two hands of landmark data are required when handCount is 2"
        )
        return None

    hands = hand_data[:2]
    if not all(isinstance(h, Mapping) for h in hands):
        errors.setdefault("handData", []).append("Each hand must be an object with landmarks")
        return None

    parsed = []
    for i, hand in enumerate(hands):
        try:
            parsed.append(parse_landmark_set(hand.get("landmarks"), f"handData.{i}.landmarks"))
        except LandmarkValidationError as e:
            for key, messages in e.errors.items():
                errors.setdefault(key, []).extend(messages)
    if len(parsed) != 2:
        return None

    labels = [str(h.get("handedness", "")).capitalize() for h in hands]
    if labels == ["Right", "Left"]:
        parsed.reverse()
    return DualHand(left=parsed[0], right=parsed[1], confidence=confidence)


def parse_detect_request(payload: Any) -> DetectRequest:
    """Validate a detection request body.

    Raises:
        LandmarkValidationError: With every field error found.
    """
    if not isinstance(payload, Mapping):
        raise LandmarkValidationError.single("request", "Request body must be a JSON object")

    errors: dict[str, list[str]] = {}
    confidence = _parse_confidence(payload.get("confidence"), "confidence", errors)
    hand_count = _parse_hand_count(payload.get("handCount"), errors)
    hand_data = payload.get("handData")
    if hand_data is not None and not isinstance(hand_data, list):
        errors.setdefault("handData", []).append("Hand data must be a list")
        hand_data = None

    hands: Optional[HandSet] = None
    if hand_count == 2:
        hands = _parse_dual_hands(hand_data, confidence if confidence is not None else 1.0, errors)
    elif hand_count == 1:
        landmarks = payload.get("landmarks", payload.get("landmarkData"))
        try:
            arr = parse_landmark_set(landmarks, "landmarks")
        except LandmarkValidationError as e:
            for key, messages in e.errors.items():
                errors.setdefault(key, []).extend(messages)
        else:
            handedness = ""
            if hand_data and isinstance(hand_data[0], Mapping):
                handedness = str(hand_data[0].get("handedness", ""))
            hands = SingleHand(
                landmarks=arr,
                handedness=handedness,
                confidence=confidence if confidence is not None else 1.0,
            )

    if errors or hands is None:
        raise LandmarkValidationError(errors or {"landmarks": ["Hand landmark data is required"]})

    return DetectRequest(hands=hands, confidence=confidence, hand_count=hand_count)


__all__ = [
    "DetectRequest",
    "parse_hands",
    "hands_to_payload",
    "parse_detect_request",
]
