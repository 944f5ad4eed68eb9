"""
Pytest configuration and shared fixtures.
"""

import os
import sys
import threading

import numpy as np
import pytest

# Add repo root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from yolov5_coreml.bbox_detectors.base import Detection, LabelCandidate
from yolov5_coreml.errors import InferenceEngineError
from yolov5_coreml.geometry import Rect


def make_detection(confidence, label_confidence=None, identifier="person",
                   box=(0.25, 0.25, 0.5, 0.5)):
    """Build a raw detection; label_confidence=None means no label candidates."""
    labels = ()
    if label_confidence is not None:
        labels = (LabelCandidate(identifier, label_confidence),)
    return Detection(bounding_box=Rect(*box), confidence=confidence, labels=labels)


class FakeEngine:
    """Engine double returning canned detections."""

    def __init__(self, detections=None, error=None):
        self.detections = list(detections or [])
        self.error = error
        self.images = []
        self.started = threading.Event()
        self.release = None

    def block_until_released(self):
        self.release = threading.Event()

    def perform(self, image):
        self.images.append(image)
        self.started.set()
        if self.release is not None:
            self.release.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return list(self.detections)


@pytest.fixture
def sample_detections():
    return [
        make_detection(0.9, 0.9, "dog", box=(0.1, 0.1, 0.2, 0.2)),
        make_detection(0.5, 0.5, "cat", box=(0.3, 0.3, 0.2, 0.2)),
        make_detection(0.7, 0.7, "car", box=(0.5, 0.5, 0.2, 0.2)),
    ]


@pytest.fixture
def fake_engine(sample_detections):
    return FakeEngine(sample_detections)


@pytest.fixture
def failing_engine():
    return FakeEngine(error=InferenceEngineError("malformed input"))


@pytest.fixture
def bgr_frame():
    return np.zeros((480, 640, 3), dtype=np.uint8)
