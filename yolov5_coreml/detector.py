# Detector facade
#
# Owns the engine and the thresholds, and guards the pipeline so that at most
# one inference runs per instance. Overlapping calls are dropped, not queued:
# for a live stream it is better to skip a frame than to stall capture.
#
# Usage:
#   from yolov5_coreml import Detector, PixelBuffer, Orientation, fit_frame
#   detector = Detector("models/yolov5s.mlpackage")
#   frame_rect = fit_frame(image_size=(720, 1280), dest_size=(390, 844))
#   results = detector.inference(PixelBuffer(frame), frame_rect, orientation=Orientation.RIGHT)

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from .bbox_detectors import InferenceEngine, Result, YOLOv5Engine
from .config import DEFAULT_MODEL_PATH, DetectorConfig
from .errors import ModelUnavailableError
from .geometry import Rect
from .inference import run_inference
from .sources import ImageSource, Orientation

logger = logging.getLogger(__name__)


class InferenceGuard:
    """Non-blocking try-lock around one inference at a time."""

    def __init__(self):
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def hold(self) -> Iterator[bool]:
        """Try to take the guard without waiting.

        Yields True when acquired (released on exit), False when another
        inference is in flight.
        """
        acquired = self._lock.acquire(blocking=False)
        try:
            yield acquired
        finally:
            if acquired:
                self._lock.release()


class Detector:
    """
    YOLOv5 detector returning boxes placed in the caller's view geometry.

    If the model cannot be loaded the instance stays usable but unavailable:
    every inference call returns an empty list.
    """

    def __init__(
        self,
        model_path: Optional[str] = None,
        config: Optional[DetectorConfig] = None,
        engine: Optional[InferenceEngine] = None,
    ):
        """
        Initialize the detector.

        Args:
            model_path: Path to the model artifact (default models/yolov5s.mlpackage)
            config: Thresholds and engine settings
            engine: Pre-built engine (overrides model_path)
        """
        self.config = config or DetectorConfig()
        self._guard = InferenceGuard()

        if engine is None:
            engine = self._load_engine(model_path or DEFAULT_MODEL_PATH)
        self._engine = engine
        self._available = engine is not None

    def _load_engine(self, model_path: str) -> Optional[InferenceEngine]:
        try:
            return YOLOv5Engine(
                model_path,
                confidence=self.config.engine_confidence,
                half=self.config.allow_low_precision,
            )
        except ModelUnavailableError as exc:
            logger.error("Detector unavailable: %s", exc)
            return None

    @classmethod
    def from_config(cls, config: dict) -> "Detector":
        """Create a detector from a configuration dict."""
        return cls(
            model_path=config.get("model_path"),
            config=DetectorConfig.from_config(config),
        )

    @property
    def available(self) -> bool:
        return self._available

    @property
    def busy(self) -> bool:
        return self._guard.busy

    @property
    def label_confidence_threshold(self) -> float:
        return self.config.label_confidence_threshold

    @label_confidence_threshold.setter
    def label_confidence_threshold(self, value: float) -> None:
        self.config.label_confidence_threshold = value

    @property
    def result_confidence_threshold(self) -> float:
        return self.config.result_confidence_threshold

    @result_confidence_threshold.setter
    def result_confidence_threshold(self, value: float) -> None:
        self.config.result_confidence_threshold = value

    def inference(
        self,
        source: ImageSource,
        frame: Rect,
        orientation: Orientation = Orientation.UP,
    ) -> list[Result]:
        """
        Detect objects in `source` and place them in `frame`.

        Args:
            source: StillImage, PixelBuffer or SampleBuffer
            frame: Fit frame, where the image is drawn in destination pixels
            orientation: Upright transform for the source (RIGHT for the back camera)

        Returns:
            Results in model order; empty when unavailable, busy or failed
        """
        if not self._available:
            return []

        with self._guard.hold() as acquired:
            if not acquired:
                return []

            return run_inference(
                self._engine,
                source,
                frame,
                orientation=orientation,
                label_threshold=self.config.label_confidence_threshold,
                result_threshold=self.config.result_confidence_threshold,
            )
