"""signbank - Hand gesture library and nearest-sample sign matching.

Stores labeled 21-point hand landmark samples per gesture and matches
live observations against them in a wrist-relative, scale-free form.

Quick Start:
    >>> from signbank import GestureLibrary, GestureMatcher, SingleHand
    >>> library = GestureLibrary()
    >>> hello = library.add_gesture("hello", "Hello")
    >>> library.add_sample(hello.gesture_id, SingleHand(landmarks), confidence_score=0.9)
    >>> result = GestureMatcher().match(SingleHand(query), library.gestures)
    >>> print(f"{result.status.value}: {result.confidence:.2f}")
"""

__version__ = "0.1.0"

from signbank.errors import (
    SignbankError,
    LandmarkValidationError,
    GestureNotFoundError,
    SampleNotFoundError,
    DuplicateGestureError,
)
from signbank.types import (
    ScaleMethod,
    SimilarityTransform,
    SingleHand,
    DualHand,
    HandSet,
    TrainingSample,
    Gesture,
    MatchStatus,
    MatchResult,
    QualityLevel,
    QualityReport,
)
from signbank.normalize import normalize, normalize_hands
from signbank.similarity import similarity, hands_similarity
from signbank.matcher import GestureMatcher, MatcherConfig, match, compare_samples
from signbank.library import GestureLibrary
from signbank.quality import evaluate_quality, sample_quality_level, library_statistics
from signbank.persistence import save_library, load_library

__all__ = [
    "__version__",
    "SignbankError",
    "LandmarkValidationError",
    "GestureNotFoundError",
    "SampleNotFoundError",
    "DuplicateGestureError",
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
    "normalize",
    "normalize_hands",
    "similarity",
    "hands_similarity",
    "GestureMatcher",
    "MatcherConfig",
    "match",
    "compare_samples",
    "GestureLibrary",
    "evaluate_quality",
    "sample_quality_level",
    "library_statistics",
    "save_library",
    "load_library",
]
