# Background detection for live previews
#
# One detection runs at a time on a single worker thread. A frame submitted
# while the previous one is still being detected is dropped, and the last
# finished results stay available to the drawing loop.
#
# Usage:
#   worker = DetectionWorker(detector)
#   while capturing:
#       worker.submit(SampleBuffer(PixelBuffer(frame)), frame_rect, orientation)
#       frame = draw_results(frame, worker.latest())
#   worker.close()

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from .bbox_detectors.base import Result
from .detector import Detector
from .geometry import Rect
from .sources import ImageSource, Orientation

logger = logging.getLogger(__name__)


class DetectionWorker:
    def __init__(self, detector: Detector):
        """
        Args:
            detector: Detector shared with nobody else; the worker is its only caller
        """
        self._detector = detector
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="detect")
        self._pending: Optional[Future] = None
        self._lock = threading.Lock()
        self._latest: list[Result] = []
        self._latest_at: float = 0.0

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._pending is not None and not self._pending.done()

    def submit(
        self,
        source: ImageSource,
        frame: Rect,
        orientation: Orientation = Orientation.UP,
    ) -> bool:
        """Start detecting `source` unless a detection is still running.

        Returns:
            True when the frame was accepted, False when it was dropped
        """
        with self._lock:
            if self._pending is not None and not self._pending.done():
                return False
            self._pending = self._executor.submit(self._detect, source, frame, orientation)
            return True

    def _detect(self, source: ImageSource, frame: Rect, orientation: Orientation) -> None:
        results = self._detector.inference(source, frame, orientation=orientation)
        with self._lock:
            self._latest = results
            self._latest_at = time.time()

    def latest(self) -> list[Result]:
        """Results of the most recent finished detection."""
        with self._lock:
            return list(self._latest)

    @property
    def latest_at(self) -> float:
        """Wall-clock time the latest results were stored (0.0 before the first)."""
        with self._lock:
            return self._latest_at

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until the running detection, if any, has finished."""
        with self._lock:
            pending = self._pending
        if pending is not None:
            pending.result(timeout=timeout)

    def close(self) -> None:
        self._executor.shutdown(wait=True)
        logger.debug("Detection worker stopped")
