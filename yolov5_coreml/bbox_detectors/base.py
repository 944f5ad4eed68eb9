# Base protocol for inference engines
#
# Engines report detections in the framework convention:
#   bounding box normalized to the input image, origin bottom-left,
#   label candidates ranked by confidence (highest first)

from typing import Protocol, runtime_checkable
from dataclasses import dataclass, field
import numpy as np

from ..geometry import Rect


@dataclass(frozen=True)
class LabelCandidate:
    """One ranked class guess for a detection."""
    identifier: str
    confidence: float


@dataclass(frozen=True)
class Detection:
    """Raw detection as reported by an engine."""
    bounding_box: Rect
    confidence: float
    labels: tuple[LabelCandidate, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Result:
    """Detection placed in destination pixel space."""
    bounding_box: Rect
    confidence: float
    labels: tuple[LabelCandidate, ...] = field(default_factory=tuple)

    @property
    def top_label(self) -> LabelCandidate | None:
        return self.labels[0] if self.labels else None


@runtime_checkable
class InferenceEngine(Protocol):
    """Protocol for inference engines.

    All implementations must provide:
        - perform(image) -> list of Detection

    Implementations are used sequentially; callers serialize access.
    """

    def perform(self, image: np.ndarray) -> list[Detection]:
        """
        Run the model on an upright image.

        Args:
            image: BGR numpy array (OpenCV format)

        Returns:
            List of Detection objects, normalized, bottom-left origin

        Raises:
            InferenceEngineError: the runtime failed on this request
        """
        ...
