"""signbank data types.

Landmark sets are float64 numpy arrays of shape (21, 3). A hand payload is
either a :class:`SingleHand` or a :class:`DualHand`; the variant is resolved
once at the parsing boundary and carried through normalization, comparison
and matching unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Optional, Union

import numpy as np


class ScaleMethod(Enum):
    """How the per-set scale factor is computed during normalization.

    FINGERTIP: distance from wrist (0) to middle fingertip (12). Used by live
        detection and by training ingestion.
    BOUNDING_BOX: largest x/y/z extent of the raw set. Used by the admin
        sample comparison.
    """

    FINGERTIP = "fingertip"
    BOUNDING_BOX = "bounding_box"


class SimilarityTransform(Enum):
    """How an average point distance is mapped to a similarity in [0, 1]."""

    LINEAR = "linear"
    EXPONENTIAL = "exponential"


@dataclass(eq=False)
class SingleHand:
    """One hand's landmark set.

    Attributes:
        landmarks: Array of shape (21, 3).
        handedness: "Left", "Right" or "" when unknown.
        confidence: Tracker detection confidence [0, 1].
    """

    landmarks: np.ndarray
    handedness: str = ""
    confidence: float = 1.0

    hand_count: ClassVar[int] = 1

    def hands(self) -> dict[str, np.ndarray]:
        return {"hand": self.landmarks}


@dataclass(eq=False)
class DualHand:
    """Left and right landmark sets observed together."""

    left: np.ndarray
    right: np.ndarray
    confidence: float = 1.0

    hand_count: ClassVar[int] = 2

    def hands(self) -> dict[str, np.ndarray]:
        return {"left": self.left, "right": self.right}


HandSet = Union[SingleHand, DualHand]


@dataclass(eq=False)
class TrainingSample:
    """A stored, labeled landmark set used as a matching reference.

    Attributes:
        sample_id: Library-unique identifier.
        gesture_id: Owning gesture.
        landmarks: Raw landmarks as captured or imported.
        confidence_score: How good the sample is [0, 1].
        is_validated: Only validated samples take part in matching.
        normalized: Cached normalized form of ``landmarks``, if computed.
        normalized_method: Scale method ``normalized`` was computed with.
        notes: Free-form notes.
        metadata: Free-form capture metadata.
        created_at: ISO timestamp.
    """

    sample_id: int
    gesture_id: int
    landmarks: HandSet
    confidence_score: float = 1.0
    is_validated: bool = True
    normalized: Optional[HandSet] = None
    normalized_method: Optional[ScaleMethod] = None
    notes: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: str = ""

    @property
    def hand_count(self) -> int:
        return self.landmarks.hand_count


@dataclass(eq=False)
class Gesture:
    """A named gesture category and the training samples it owns."""

    gesture_id: int
    name: str
    label: str
    description: str = ""
    is_active: bool = True
    supports_dual_hand: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)
    samples: list[TrainingSample] = field(default_factory=list)

    @property
    def required_hand_count(self) -> int:
        return 2 if self.supports_dual_hand else 1

    @property
    def validated_samples(self) -> list[TrainingSample]:
        return [s for s in self.samples if s.is_validated]

    def to_summary(self) -> dict[str, Any]:
        return {
            "id": self.gesture_id,
            "name": self.name,
            "label": self.label,
            "supports_dual_hand": self.supports_dual_hand,
        }


class MatchStatus(Enum):
    """Outcome of a match call.

    MATCHED: best score is above the threshold.
    BELOW_THRESHOLD: scores were computed but the best one did not clear it.
    NO_SCORE: candidates exist but none was comparable with the query.
    NO_CANDIDATES: no active gesture has any validated sample.
    """

    MATCHED = "matched"
    BELOW_THRESHOLD = "below_threshold"
    NO_SCORE = "no_score"
    NO_CANDIDATES = "no_candidates"


@dataclass
class MatchResult:
    """Result of GestureMatcher.match().

    ``gesture`` is the best-scoring candidate even when it stays below the
    threshold; use ``matched_gesture`` for the accepted match only.
    """

    status: MatchStatus
    gesture: Optional[Gesture]
    confidence: float
    threshold: float
    hand_count: int = 1
    scores: list[tuple[str, float]] = field(default_factory=list)  # [(name, best), ...]

    @property
    def meets_threshold(self) -> bool:
        return self.status is MatchStatus.MATCHED

    @property
    def matched_gesture(self) -> Optional[Gesture]:
        return self.gesture if self.meets_threshold else None

    def to_response(self) -> dict[str, Any]:
        """Build the detection endpoint response body."""
        if self.status is MatchStatus.NO_CANDIDATES:
            return {
                "success": False,
                "error": "No trained gestures available",
                "message": "Please train some gestures first.",
            }

        if not self.meets_threshold:
            return {
                "success": True,
                "gesture": None,
                "confidence": round(self.confidence, 4),
                "threshold": self.threshold,
                "meets_threshold": False,
                "message": "No gesture detected. Please try again.",
            }

        return {
            "success": True,
            "gesture": self.gesture.to_summary(),
            "confidence": round(self.confidence, 4),
            "threshold": self.threshold,
            "meets_threshold": True,
        }


class QualityLevel(Enum):
    """Coarse quality bucket of a single training sample."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def color(self) -> str:
        return {"high": "green", "medium": "yellow", "low": "red"}[self.value]


@dataclass
class QualityReport:
    """Training data quality of one gesture.

    Attributes:
        total_samples: All samples, validated or not.
        validated_samples: Samples with is_validated set.
        validation_rate: validated / total * 100.
        average_confidence: Mean confidence_score over all samples.
        best_confidence: Max confidence_score over all samples.
        quality_score: Weighted score in [0, 100].
        is_ready: Active and has enough validated samples.
    """

    total_samples: int
    validated_samples: int
    validation_rate: float
    average_confidence: float
    best_confidence: float
    quality_score: float
    is_ready: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_samples": self.total_samples,
            "validated_samples": self.validated_samples,
            "validation_rate": self.validation_rate,
            "average_confidence": self.average_confidence,
            "best_confidence": self.best_confidence,
            "quality_score": self.quality_score,
            "is_ready": self.is_ready,
        }


__all__ = [
    "ScaleMethod",
    "SimilarityTransform",
    "SingleHand",
    "DualHand",
    "HandSet",
    "TrainingSample",
    "Gesture",
    "MatchStatus",
    "MatchResult",
    "QualityLevel",
    "QualityReport",
]
