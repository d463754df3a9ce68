"""GestureLibrary: in-memory store of gestures and their training samples.

Provides the read-only candidate query used by matching (active gestures
with validated samples) and the ingestion path that normalizes samples
before storing them.

Example:
    >>> library = GestureLibrary()
    >>> hello = library.add_gesture("hello", "Hello")
    >>> library.add_sample(hello.gesture_id, SingleHand(landmarks), confidence_score=0.9)
    >>> result = GestureMatcher().match(SingleHand(query), library.candidates())
"""

from __future__ import annotations

import logging
import re
import unicodedata
from datetime import datetime, timezone
from typing import Any, Iterator, Optional

import numpy as np

from signbank.errors import (
    DuplicateGestureError,
    GestureNotFoundError,
    LandmarkValidationError,
    SampleNotFoundError,
)
from signbank.normalize import normalize_hands
from signbank.payloads import parse_hands
from signbank.quality import DEFAULT_MINIMUM_SAMPLES, is_ready
from signbank.types import Gesture, HandSet, ScaleMethod, SingleHand, TrainingSample

logger = logging.getLogger(__name__)


def slugify(label: str, separator: str = "_") -> str:
    """Turn a label into a gesture name, e.g. "Thank You" -> "thank_you"."""
    text = unicodedata.normalize("NFKD", label).encode("ascii", "ignore").decode("ascii")
    text = re.sub(r"[^a-zA-Z0-9]+", separator, text.lower())
    return text.strip(separator)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class GestureLibrary:
    """Gestures and the training samples they own.

    Args:
        scale_method: Normalization used when caching a sample's normalized
            form at ingestion (default: wrist to middle fingertip, the same
            as live detection).
    """

    def __init__(self, scale_method: ScaleMethod = ScaleMethod.FINGERTIP):
        self.scale_method = scale_method
        self._gestures: dict[int, Gesture] = {}
        self._next_gesture_id: int = 1
        self._next_sample_id: int = 1

    def __len__(self) -> int:
        return len(self._gestures)

    def __iter__(self) -> Iterator[Gesture]:
        return iter(self._gestures.values())

    @property
    def gestures(self) -> list[Gesture]:
        return list(self._gestures.values())

    @property
    def samples(self) -> list[TrainingSample]:
        return [s for g in self._gestures.values() for s in g.samples]

    # ========== Gestures ==========

    def add_gesture(
        self,
        name: str,
        label: str,
        description: str = "",
        is_active: bool = True,
        supports_dual_hand: bool = False,
        metadata: Optional[dict[str, Any]] = None,
    ) -> Gesture:
        """Create a gesture.

        Raises:
            ValueError: If name or label is empty.
            DuplicateGestureError: If the name is already taken.
        """
        if not name or not label:
            raise ValueError("Gesture name and label are required")
        if any(g.name == name for g in self._gestures.values()):
            raise DuplicateGestureError(f"Gesture name already exists: {name}")

        gesture = Gesture(
            gesture_id=self._next_gesture_id,
            name=name,
            label=label,
            description=description,
            is_active=is_active,
            supports_dual_hand=supports_dual_hand,
            metadata=dict(metadata or {}),
        )
        self._next_gesture_id += 1
        self._gestures[gesture.gesture_id] = gesture
        logger.debug("Added gesture %s (id=%d)", name, gesture.gesture_id)
        return gesture

    def get_gesture(self, gesture_id: int) -> Gesture:
        try:
            return self._gestures[gesture_id]
        except KeyError:
            raise GestureNotFoundError(f"Gesture not found: {gesture_id}") from None

    def find_gesture(self, name: str) -> Gesture:
        for gesture in self._gestures.values():
            if gesture.name == name:
                return gesture
        raise GestureNotFoundError(f"Gesture not found: {name}")

    def remove_gesture(self, gesture_id: int) -> Gesture:
        """Delete a gesture together with all of its samples."""
        gesture = self.get_gesture(gesture_id)
        del self._gestures[gesture_id]
        logger.info("Removed gesture %s with %d samples", gesture.name, len(gesture.samples))
        return gesture

    def set_active(self, gesture_id: int, is_active: bool) -> Gesture:
        gesture = self.get_gesture(gesture_id)
        gesture.is_active = is_active
        return gesture

    # ========== Samples ==========

    def add_sample(
        self,
        gesture_id: int,
        hands: HandSet,
        confidence_score: float,
        is_validated: bool = True,
        notes: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> TrainingSample:
        """Store a training sample with its normalized form cached.

        Args:
            gesture_id: Owning gesture.
            hands: Raw landmark payload.
            confidence_score: Sample quality [0, 1].
            is_validated: Whether the sample takes part in matching.
            notes: Free-form notes.
            metadata: Capture metadata; ``captured_at`` is added.

        Raises:
            GestureNotFoundError: If the gesture does not exist.
            LandmarkValidationError: If the confidence is not a number in [0, 1], the
                hand count does not fit the gesture, or the landmarks cannot
                be normalized.
        """
        gesture = self.get_gesture(gesture_id)

        if isinstance(confidence_score, bool):
            raise LandmarkValidationError.single("confidence_score", "Confidence must be a number")
        try:
            confidence_score = float(confidence_score)
        except (TypeError, ValueError):
            raise LandmarkValidationError.single(
                "confidence_score", "Confidence must be a number"
            ) from None
        if not 0.0 <= confidence_score <= 1.0:
            raise LandmarkValidationError.single(
                "confidence_score", "Confidence must be between 0 and 1"
            )
        if gesture.supports_dual_hand and hands.hand_count < 2:
            raise LandmarkValidationError.single(
                "hand_count",
                "This gesture requires dual hands. Please use both hands when capturing this gesture.",
            )
        if not gesture.supports_dual_hand and hands.hand_count > 1:
            raise LandmarkValidationError.single(
                "hand_count", "This gesture is single-handed. Please capture one hand only."
            )

        normalized = normalize_hands(hands, self.scale_method)
        if normalized is None:
            raise LandmarkValidationError.single(
                "landmarks", "Hand landmark data could not be normalized"
            )

        created_at = _now_iso()
        sample = TrainingSample(
            sample_id=self._next_sample_id,
            gesture_id=gesture_id,
            landmarks=hands,
            confidence_score=confidence_score,
            is_validated=is_validated,
            normalized=normalized,
            normalized_method=self.scale_method,
            notes=notes,
            metadata={**(metadata or {}), "captured_at": created_at},
            created_at=created_at,
        )
        self._next_sample_id += 1
        gesture.samples.append(sample)
        logger.debug(
            "Added %d-hand sample %d to gesture %s",
            sample.hand_count, sample.sample_id, gesture.name,
        )
        return sample

    def get_sample(self, sample_id: int) -> TrainingSample:
        for gesture in self._gestures.values():
            for sample in gesture.samples:
                if sample.sample_id == sample_id:
                    return sample
        raise SampleNotFoundError(f"Training sample not found: {sample_id}")

    def remove_sample(self, sample_id: int) -> TrainingSample:
        sample = self.get_sample(sample_id)
        self._gestures[sample.gesture_id].samples.remove(sample)
        return sample

    def set_validated(self, sample_id: int, is_validated: bool) -> TrainingSample:
        sample = self.get_sample(sample_id)
        sample.is_validated = is_validated
        return sample

    def update_notes(self, sample_id: int, notes: Optional[str]) -> TrainingSample:
        sample = self.get_sample(sample_id)
        sample.notes = notes
        return sample

    def duplicate_sample(self, sample_id: int) -> TrainingSample:
        """Copy a sample into the same gesture, unvalidated."""
        source = self.get_sample(sample_id)
        notes = f"{source.notes} (Duplicate)" if source.notes else "(Duplicate)"
        return self.add_sample(
            source.gesture_id,
            source.landmarks,
            source.confidence_score,
            is_validated=False,
            notes=notes,
            metadata={k: v for k, v in source.metadata.items() if k != "captured_at"},
        )

    def import_sample(self, label: str, landmarks: Any, confidence: float) -> TrainingSample:
        """Store a sample from an external dataset.

        The gesture is looked up by the slug of ``label`` and created (active,
        single-hand unless the payload holds two hands) on first use.

        Raises:
            ValueError: If the label has no usable characters.
            LandmarkValidationError: If the landmarks are invalid.
        """
        name = slugify(label)
        if not name:
            raise ValueError(f"Cannot derive a gesture name from label: {label!r}")

        hands = parse_hands(landmarks)
        try:
            gesture = self.find_gesture(name)
        except GestureNotFoundError:
            gesture = self.add_gesture(
                name,
                label,
                description="Imported from dataset",
                is_active=True,
                supports_dual_hand=hands.hand_count == 2,
            )

        return self.add_sample(
            gesture.gesture_id,
            hands,
            confidence,
            is_validated=True,
            notes="Imported from external dataset",
        )

    # ========== Queries ==========

    def candidates(self) -> list[Gesture]:
        """Active gestures that have at least one validated sample."""
        return [g for g in self._gestures.values() if g.is_active and g.validated_samples]

    def ready_for_detection(
        self, minimum_samples: int = DEFAULT_MINIMUM_SAMPLES
    ) -> list[Gesture]:
        """Active gestures with at least ``minimum_samples`` validated samples."""
        return [g for g in self._gestures.values() if is_ready(g, minimum_samples)]

    def mean_landmarks(self, gesture_id: int) -> Optional[np.ndarray]:
        """Per-index mean of a gesture's raw single-hand sample landmarks.

        Returns:
            Array of shape (21, 3), or None if the gesture has no
            single-hand samples.
        """
        gesture = self.get_gesture(gesture_id)
        sets = [s.landmarks.landmarks for s in gesture.samples if isinstance(s.landmarks, SingleHand)]
        if not sets:
            return None
        return np.mean(np.stack(sets), axis=0)


__all__ = ["GestureLibrary", "slugify"]
