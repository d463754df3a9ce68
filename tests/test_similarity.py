"""Tests for landmark set similarity."""

import math

import numpy as np
import pytest

from signbank.normalize import normalize
from signbank.similarity import average_distance, hands_similarity, similarity
from signbank.types import DualHand, SimilarityTransform, SingleHand


class TestAverageDistance:
    def test_identical_is_zero(self, open_hand):
        assert average_distance(open_hand, open_hand) == 0.0

    def test_uniform_offset(self, open_hand):
        moved = open_hand + np.array([0.3, 0.4, 0.0])
        assert average_distance(open_hand, moved) == pytest.approx(0.5)


class TestSimilarity:
    @pytest.mark.parametrize("transform", list(SimilarityTransform))
    def test_self_similarity_is_one(self, open_hand, transform):
        norm = normalize(open_hand)
        assert similarity(norm, norm, transform) == pytest.approx(1.0)

    def test_exponential(self, open_hand):
        moved = open_hand + np.array([0.03, 0.04, 0.0])
        assert similarity(open_hand, moved) == pytest.approx(math.exp(-0.5))

    def test_exponential_custom_decay(self, open_hand):
        moved = open_hand + np.array([0.03, 0.04, 0.0])
        result = similarity(open_hand, moved, SimilarityTransform.EXPONENTIAL, decay=2.0)
        assert result == pytest.approx(math.exp(-0.1))

    def test_linear(self, open_hand):
        moved = open_hand + np.array([0.3, 0.4, 0.0])
        assert similarity(open_hand, moved, SimilarityTransform.LINEAR) == pytest.approx(0.5)

    def test_linear_floors_at_zero(self, open_hand):
        moved = open_hand + np.array([3.0, 4.0, 0.0])
        assert similarity(open_hand, moved, SimilarityTransform.LINEAR) == 0.0

    def test_exponential_stays_in_range(self, open_hand):
        moved = open_hand + 100.0
        result = similarity(open_hand, moved)
        assert 0.0 <= result < 1e-10

    def test_empty_is_zero(self, open_hand):
        empty = np.empty((0, 3))
        assert similarity(empty, open_hand) == 0.0
        assert similarity(open_hand, empty) == 0.0

    def test_length_mismatch_is_zero(self, open_hand):
        assert similarity(open_hand, open_hand[:20]) == 0.0

    def test_symmetric(self, open_hand, hello_pose):
        a, b = normalize(open_hand), normalize(hello_pose)
        assert similarity(a, b) == pytest.approx(similarity(b, a))

    def test_order_matters(self, open_hand):
        norm = normalize(open_hand)
        assert similarity(norm, norm[::-1]) < 1.0


class TestHandsSimilarity:
    def test_single(self, open_hand, hello_pose):
        a = SingleHand(normalize(open_hand))
        b = SingleHand(normalize(hello_pose))
        assert hands_similarity(a, b) == pytest.approx(similarity(a.landmarks, b.landmarks))

    def test_dual_averages_left_and_right(self, open_hand, fist_pose):
        a = DualHand(left=normalize(open_hand), right=normalize(open_hand))
        b = DualHand(left=normalize(open_hand), right=normalize(fist_pose))
        right = similarity(a.right, b.right)
        assert hands_similarity(a, b) == pytest.approx((1.0 + right) / 2)

    def test_dual_is_not_cross_matched(self, open_hand, fist_pose):
        a = DualHand(left=normalize(open_hand), right=normalize(fist_pose))
        swapped = DualHand(left=normalize(fist_pose), right=normalize(open_hand))
        assert hands_similarity(a, swapped) < 1.0

    def test_hand_count_mismatch_is_zero(self, open_hand):
        single = SingleHand(normalize(open_hand))
        dual = DualHand(left=normalize(open_hand), right=normalize(open_hand))
        assert hands_similarity(single, dual) == 0.0
        assert hands_similarity(dual, single) == 0.0

    def test_linear_transform(self, open_hand):
        a = SingleHand(normalize(open_hand))
        assert hands_similarity(a, a, SimilarityTransform.LINEAR) == pytest.approx(1.0)
