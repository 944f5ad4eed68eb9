# Inference engines
#
# Engine pattern for swappable detection runtimes.
# All engines implement the InferenceEngine protocol and return Detection objects.

from .base import InferenceEngine, Detection, LabelCandidate, Result
from .yolo import YOLOv5Engine

__all__ = [
    'InferenceEngine',
    'Detection',
    'LabelCandidate',
    'Result',
    'YOLOv5Engine',
]
