"""GestureMatcher: nearest-sample gesture matching.

A query hand payload is normalized once and compared against every
validated sample of every eligible gesture. Each gesture scores its single
best-matching sample; the best gesture overall wins if its score is above
the confidence threshold.

Example:
    >>> matcher = GestureMatcher()
    >>> result = matcher.match(SingleHand(landmarks), library.gestures)
    >>> if result.meets_threshold:
    ...     print(result.gesture.label, result.confidence)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Union
import logging

from signbank.errors import LandmarkValidationError
from signbank.normalize import comparison_form, normalize_hands
from signbank.similarity import DEFAULT_DECAY, hands_similarity
from signbank.types import (
    Gesture,
    HandSet,
    MatchResult,
    MatchStatus,
    ScaleMethod,
    SimilarityTransform,
    TrainingSample,
)

logger = logging.getLogger(__name__)

# A match must score strictly above this to count
CONFIDENCE_THRESHOLD = 0.7

Comparator = Callable[[HandSet, HandSet], float]


@dataclass
class MatcherConfig:
    """Configuration for GestureMatcher.

    Attributes:
        threshold: Score a match must exceed (default: 0.7).
        scale_method: Normalization scale (default: wrist to middle fingertip).
        transform: Distance to similarity mapping (default: exponential).
        decay: Decay rate of the exponential transform (default: 10).
    """

    threshold: float = CONFIDENCE_THRESHOLD
    scale_method: ScaleMethod = ScaleMethod.FINGERTIP
    transform: SimilarityTransform = SimilarityTransform.EXPONENTIAL
    decay: float = DEFAULT_DECAY


class GestureMatcher:
    """Stateless matcher of hand payloads against gesture samples.

    Args:
        config: Matcher configuration (default: live detection settings).
        comparator: Optional replacement for the similarity function. Called
            with (normalized query, normalized sample) and must return a
            score in [0, 1].
    """

    def __init__(
        self,
        config: Optional[MatcherConfig] = None,
        comparator: Optional[Comparator] = None,
    ):
        self.config = config or MatcherConfig()
        self._comparator = comparator

    def compare(self, query: HandSet, reference: HandSet) -> float:
        """Score two normalized payloads with the configured comparator."""
        if self._comparator is not None:
            return float(self._comparator(query, reference))
        return hands_similarity(query, reference, self.config.transform, self.config.decay)

    def match(
        self,
        query: HandSet,
        gestures: Iterable[Gesture],
        hand_count: Optional[int] = None,
    ) -> MatchResult:
        """Find the best matching gesture for a query.

        Logic:
        0. The query is normalized first; malformed input raises even when
           there is nothing to match against.
        1. Candidates: active gestures with at least one validated sample.
           None at all is reported as NO_CANDIDATES.
        2. Gestures whose hand count differs from the query are not scored.
        3. Each gesture scores the max similarity over its validated samples.
        4. The best gesture (first seen on ties) is a match only if its
           score is strictly above the threshold.

        Args:
            query: Raw (not normalized) hand payload.
            gestures: Gestures with their samples.
            hand_count: Expected hand count; must agree with the query.

        Returns:
            MatchResult. Below-threshold results still carry the best
            candidate and its raw score.

        Raises:
            LandmarkValidationError: If the query cannot be normalized or
                hand_count disagrees with the query payload.
        """
        if hand_count is None:
            hand_count = query.hand_count
        elif hand_count != query.hand_count:
            raise LandmarkValidationError.single(
                "handCount",
                f"Hand count {hand_count} does not match the {query.hand_count}-hand data provided",
            )

        query_norm = normalize_hands(query, self.config.scale_method)
        if query_norm is None:
            raise LandmarkValidationError.single(
                "landmarks", "Hand landmark data could not be normalized"
            )

        threshold = self.config.threshold
        candidates = [g for g in gestures if g.is_active and g.validated_samples]
        if not candidates:
            logger.debug("No active gesture has validated samples")
            return MatchResult(
                status=MatchStatus.NO_CANDIDATES,
                gesture=None,
                confidence=0.0,
                threshold=threshold,
                hand_count=hand_count,
            )

        best_gesture: Optional[Gesture] = None
        best_score = 0.0
        scores: list[tuple[str, float]] = []

        for gesture in candidates:
            if gesture.required_hand_count != hand_count:
                continue

            gesture_score = self._best_sample_score(query_norm, gesture.validated_samples, hand_count)
            if gesture_score is None:
                continue

            scores.append((gesture.name, gesture_score))
            if best_gesture is None or gesture_score > best_score:
                best_gesture = gesture
                best_score = gesture_score

        if best_gesture is None:
            status = MatchStatus.NO_SCORE
        elif best_score > threshold:
            status = MatchStatus.MATCHED
        else:
            status = MatchStatus.BELOW_THRESHOLD

        scores.sort(key=lambda x: -x[1])
        logger.debug(
            "Match %s: best=%s score=%.4f (%d gestures scored)",
            status.value,
            best_gesture.name if best_gesture else None,
            best_score,
            len(scores),
        )

        return MatchResult(
            status=status,
            gesture=best_gesture,
            confidence=best_score,
            threshold=threshold,
            hand_count=hand_count,
            scores=scores,
        )

    def _best_sample_score(
        self,
        query_norm: HandSet,
        samples: list[TrainingSample],
        hand_count: int,
    ) -> Optional[float]:
        """Max similarity over samples; None if no sample had the right hand count."""
        best: Optional[float] = None
        for sample in samples:
            if sample.hand_count != hand_count:
                continue
            reference = comparison_form(sample, self.config.scale_method)
            score = self.compare(query_norm, reference) if reference is not None else 0.0
            if best is None or score > best:
                best = score
        return best


def match(
    query: HandSet,
    gestures: Iterable[Gesture],
    hand_count: Optional[int] = None,
    config: Optional[MatcherConfig] = None,
) -> MatchResult:
    """Match with a one-off GestureMatcher."""
    return GestureMatcher(config).match(query, gestures, hand_count)


def compare_samples(
    a: Union[HandSet, TrainingSample],
    b: Union[HandSet, TrainingSample],
    scale_method: ScaleMethod = ScaleMethod.BOUNDING_BOX,
    transform: SimilarityTransform = SimilarityTransform.LINEAR,
) -> float:
    """Compare two raw samples the way the admin tooling does.

    Defaults to bounding-box normalization with linear similarity, unlike
    the fingertip scale and exponential decay used by live detection.

    Returns:
        Similarity in [0, 1]; 0 if either side cannot be normalized or the
        hand counts differ.
    """
    if isinstance(a, TrainingSample):
        a = a.landmarks
    if isinstance(b, TrainingSample):
        b = b.landmarks

    norm_a = normalize_hands(a, scale_method)
    norm_b = normalize_hands(b, scale_method)
    if norm_a is None or norm_b is None:
        return 0.0
    return hands_similarity(norm_a, norm_b, transform)


__all__ = [
    "CONFIDENCE_THRESHOLD",
    "MatcherConfig",
    "GestureMatcher",
    "match",
    "compare_samples",
]
