"""Tests for detection request and hand payload parsing."""

import numpy as np
import pytest

from signbank.errors import LandmarkValidationError
from signbank.landmarks import landmarks_to_records
from signbank.payloads import hands_to_payload, parse_detect_request, parse_hands
from signbank.types import DualHand, SingleHand


@pytest.fixture
def right_pose(open_hand):
    pose = open_hand.copy()
    pose[:, 0] = 1.0 - pose[:, 0]
    return pose


class TestParseDetectRequest:
    def test_single_hand(self, hello_records, hello_pose):
        request = parse_detect_request({"landmarks": hello_records, "confidence": 0.93})

        assert request.hand_count == 1
        assert request.confidence == pytest.approx(0.93)
        assert isinstance(request.hands, SingleHand)
        assert request.hands.confidence == pytest.approx(0.93)
        np.testing.assert_allclose(request.hands.landmarks, hello_pose)

    def test_landmark_data_alias(self, hello_records):
        request = parse_detect_request({"landmarkData": hello_records, "confidence": 0.9})
        assert isinstance(request.hands, SingleHand)

    def test_handedness_from_hand_data(self, hello_records):
        request = parse_detect_request({
            "landmarks": hello_records,
            "confidence": 0.9,
            "handCount": 1,
            "handData": [{"landmarks": hello_records, "handedness": "Right"}],
        })
        assert request.hands.handedness == "Right"

    @pytest.mark.parametrize("hand_count", ["1", 1.0])
    def test_hand_count_coerced(self, hello_records, hand_count):
        request = parse_detect_request({
            "landmarks": hello_records, "confidence": 0.9, "handCount": hand_count,
        })
        assert request.hand_count == 1

    def test_missing_landmarks(self):
        with pytest.raises(LandmarkValidationError) as exc_info:
            parse_detect_request({"confidence": 0.9})
        assert exc_info.value.errors == {"landmarks": ["Hand landmark data is required"]}

    def test_too_few_landmarks(self, hello_records):
        with pytest.raises(LandmarkValidationError) as exc_info:
            parse_detect_request({"landmarks": hello_records[:20], "confidence": 0.9})
        assert exc_info.value.errors["landmarks"] == ["At least 21 landmark points are required"]

    def test_confidence_required(self, hello_records):
        with pytest.raises(LandmarkValidationError) as exc_info:
            parse_detect_request({"landmarks": hello_records})
        assert "confidence" in exc_info.value.errors

    @pytest.mark.parametrize("confidence", [1.2, -0.1, "high", True])
    def test_confidence_invalid(self, hello_records, confidence):
        with pytest.raises(LandmarkValidationError) as exc_info:
            parse_detect_request({"landmarks": hello_records, "confidence": confidence})
        assert "confidence" in exc_info.value.errors

    @pytest.mark.parametrize("hand_count", [0, 3, "two", True, 1.5])
    def test_hand_count_invalid(self, hello_records, hand_count):
        with pytest.raises(LandmarkValidationError) as exc_info:
            parse_detect_request({
                "landmarks": hello_records, "confidence": 0.9, "handCount": hand_count,
            })
        assert "handCount" in exc_info.value.errors

    def test_all_errors_collected(self):
        with pytest.raises(LandmarkValidationError) as exc_info:
            parse_detect_request({"landmarks": [], "confidence": 5, "handCount": 7})
        assert set(exc_info.value.errors) == {"confidence", "handCount"}

    def test_hand_data_must_be_list(self, hello_records):
        with pytest.raises(LandmarkValidationError) as exc_info:
            parse_detect_request({
                "landmarks": hello_records, "confidence": 0.9, "handData": "both",
            })
        assert "handData" in exc_info.value.errors

    @pytest.mark.parametrize("payload", [None, [], "landmarks"])
    def test_body_must_be_object(self, payload):
        with pytest.raises(LandmarkValidationError) as exc_info:
            parse_detect_request(payload)
        assert "request" in exc_info.value.errors


class TestDualHandRequest:
    def test_assigned_by_handedness(self, open_hand, right_pose):
        request = parse_detect_request({
            "landmarks": landmarks_to_records(open_hand),
            "confidence": 0.9,
            "handCount": 2,
            "handData": [
                {"landmarks": landmarks_to_records(right_pose), "handedness": "Right"},
                {"landmarks": landmarks_to_records(open_hand), "handedness": "Left"},
            ],
        })
        assert request.hand_count == 2
        assert isinstance(request.hands, DualHand)
        np.testing.assert_allclose(request.hands.left, open_hand)
        np.testing.assert_allclose(request.hands.right, right_pose)

    def test_falls_back_to_order(self, open_hand, right_pose):
        request = parse_detect_request({
            "confidence": 0.9,
            "handCount": 2,
            "handData": [
                {"landmarks": landmarks_to_records(open_hand)},
                {"landmarks": landmarks_to_records(right_pose)},
            ],
        })
        np.testing.assert_allclose(request.hands.left, open_hand)
        np.testing.assert_allclose(request.hands.right, right_pose)

    def test_needs_two_hands(self, hello_records):
        with pytest.raises(LandmarkValidationError) as exc_info:
            parse_detect_request({
                "landmarks": hello_records,
                "confidence": 0.9,
                "handCount": 2,
                "handData": [{"landmarks": hello_records}],
            })
        assert "handData" in exc_info.value.errors

    def test_bad_second_hand(self, hello_records):
        with pytest.raises(LandmarkValidationError) as exc_info:
            parse_detect_request({
                "confidence": 0.9,
                "handCount": 2,
                "handData": [{"landmarks": hello_records}, {"landmarks": hello_records[:3]}],
            })
        assert "handData.1.landmarks" in exc_info.value.errors


class TestParseHands:
    def test_single(self, open_hand):
        hands = parse_hands(landmarks_to_records(open_hand))
        assert isinstance(hands, SingleHand)
        np.testing.assert_allclose(hands.landmarks, open_hand)

    def test_dual(self, open_hand, right_pose):
        payload = {
            "left": landmarks_to_records(open_hand),
            "right": landmarks_to_records(right_pose),
        }
        hands = parse_hands(payload)
        assert isinstance(hands, DualHand)
        np.testing.assert_allclose(hands.right, right_pose)

    def test_field_name_in_errors(self):
        with pytest.raises(LandmarkValidationError) as exc_info:
            parse_hands({"left": [], "right": []}, field="landmark_data")
        assert "landmark_data.left" in exc_info.value.errors

    def test_payload_inverse(self, open_hand, right_pose):
        dual = DualHand(left=open_hand, right=right_pose)
        restored = parse_hands(hands_to_payload(dual))
        np.testing.assert_allclose(restored.left, open_hand)
        np.testing.assert_allclose(restored.right, right_pose)
