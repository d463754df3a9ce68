"""Training data quality evaluation.

Quality Score Components:
    - Validation rate (0.4): share of samples that are validated
    - Sample count (0.3): validated samples, saturating at 10
    - Confidence (0.3): average sample confidence

All values are recomputed from the current samples on every call.
"""

from __future__ import annotations

from typing import Any, Iterable

from signbank.types import Gesture, QualityLevel, QualityReport, TrainingSample

# Validated samples considered enough for reliable matching
SATURATION_SAMPLES = 10
DEFAULT_MINIMUM_SAMPLES = 5

WEIGHT_VALIDATION = 0.4
WEIGHT_SAMPLES = 0.3
WEIGHT_CONFIDENCE = 0.3

HIGH_QUALITY_CONFIDENCE = 0.8
MEDIUM_QUALITY_CONFIDENCE = 0.6


def is_ready(gesture: Gesture, minimum_samples: int = DEFAULT_MINIMUM_SAMPLES) -> bool:
    """Active and has at least ``minimum_samples`` validated samples."""
    return gesture.is_active and len(gesture.validated_samples) >= minimum_samples


def evaluate_quality(
    gesture: Gesture, minimum_samples: int = DEFAULT_MINIMUM_SAMPLES
) -> QualityReport:
    """Aggregate a gesture's samples into a QualityReport.

    Averages run over all samples, validated or not.

    Args:
        gesture: Gesture with its samples.
        minimum_samples: Validated samples required for ``is_ready``.

    Returns:
        QualityReport with quality_score in [0, 100].
    """
    total = len(gesture.samples)
    validated = len(gesture.validated_samples)
    confidences = [s.confidence_score for s in gesture.samples]

    average_confidence = sum(confidences) / total if total else 0.0
    best_confidence = max(confidences) if confidences else 0.0

    validation_rate = validated / total * 100 if total else 0.0
    sample_score = min(100.0, validated / SATURATION_SAMPLES * 100)
    confidence_score = average_confidence * 100

    quality_score = (
        WEIGHT_VALIDATION * validation_rate
        + WEIGHT_SAMPLES * sample_score
        + WEIGHT_CONFIDENCE * confidence_score
    )

    return QualityReport(
        total_samples=total,
        validated_samples=validated,
        validation_rate=validation_rate,
        average_confidence=average_confidence,
        best_confidence=best_confidence,
        quality_score=quality_score,
        is_ready=is_ready(gesture, minimum_samples),
    )


def sample_quality_level(sample: TrainingSample) -> QualityLevel:
    """Bucket a sample as high, medium or low quality.

    High needs both confidence >= 0.8 and validation; medium is
    confidence in [0.6, 0.8). An unvalidated sample at >= 0.8 is low.
    """
    if sample.confidence_score >= HIGH_QUALITY_CONFIDENCE and sample.is_validated:
        return QualityLevel.HIGH
    if MEDIUM_QUALITY_CONFIDENCE <= sample.confidence_score < HIGH_QUALITY_CONFIDENCE:
        return QualityLevel.MEDIUM
    return QualityLevel.LOW


def library_statistics(gestures: Iterable[Gesture]) -> dict[str, Any]:
    """Summary counts over a set of gestures."""
    gestures = list(gestures)
    samples = [s for g in gestures for s in g.samples]
    validated = [s for s in samples if s.is_validated]

    total_gestures = len(gestures)
    average_validated_confidence = (
        sum(s.confidence_score for s in validated) / len(validated) if validated else 0.0
    )

    return {
        "total_gestures": total_gestures,
        "active_gestures": sum(1 for g in gestures if g.is_active),
        "dual_hand_gestures": sum(1 for g in gestures if g.supports_dual_hand),
        "total_training_samples": len(samples),
        "average_samples_per_gesture": (
            round(len(samples) / total_gestures, 2) if total_gestures else 0
        ),
        "validated_samples": len(validated),
        "single_hand_samples": sum(1 for s in validated if s.hand_count == 1),
        "dual_hand_samples": sum(1 for s in validated if s.hand_count == 2),
        "average_confidence": average_validated_confidence,
        "high_quality_samples": sum(
            1 for s in validated if s.confidence_score >= HIGH_QUALITY_CONFIDENCE
        ),
        "ready_gestures": sum(1 for g in gestures if is_ready(g)),
    }


__all__ = [
    "SATURATION_SAMPLES",
    "DEFAULT_MINIMUM_SAMPLES",
    "is_ready",
    "evaluate_quality",
    "sample_quality_level",
    "library_statistics",
]
