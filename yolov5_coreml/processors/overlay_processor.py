# YOLOv5 overlay frame processor
# Runs the detector on camera frames and draws labelled boxes

from typing import Any
from numpy.typing import NDArray

from ..bbox_detectors.base import Result
from ..detector import Detector
from ..geometry import Rect
from ..overlay import draw_results
from ..sources import (
    CameraPosition,
    PixelBuffer,
    apply_orientation,
    orientation_for_camera,
    oriented_size,
)

DEFAULT_FRAME_STRIDE = 1


class OverlayProcessor:
    """Runs the detector on a stream of frames and draws the results.

    Frames are returned upright: back-camera frames come out rotated.

    Config options:
        model_path: Path to the model (.mlpackage, .mlmodel or .pt)
        label_confidence_threshold: Top-label threshold (default: 0.2)
        result_confidence_threshold: Object threshold (default: 0.4)
        pixel_format: Channel order of incoming frames (default: "BGR")
        frame_stride: Run inference every Nth frame (default: 1)
        camera_position: "back" or "front" for all cameras (default: "front")
        cameras: List of camera IDs to enable, or dict with per-camera settings
                 Example: {"OpenCVCamera(0)": {"camera_position": "back"}}
    """

    def __init__(
        self,
        detector: Detector,
        pixel_format: str = "BGR",
        frame_stride: int = DEFAULT_FRAME_STRIDE,
        camera_position: CameraPosition = CameraPosition.FRONT,
        enabled_cameras: list[str] | None = None,
        camera_positions: dict[str, CameraPosition] | None = None,
    ):
        if frame_stride < 1:
            raise ValueError(f"frame_stride must be >= 1, got {frame_stride}")
        self.detector = detector
        self.pixel_format = pixel_format
        self.frame_stride = frame_stride
        self.camera_position = camera_position
        self.enabled_cameras = enabled_cameras
        self.camera_positions = camera_positions or {}

        # Per-camera state: keyed by camera_id
        self._frame_counts: dict[str, int] = {}
        self._cached_results: dict[str, list[Result]] = {}

    def process(self, frame: NDArray[Any], camera_id: str = "default") -> NDArray[Any]:
        """Detect on frame (every `frame_stride` frames) and draw results."""
        if self.enabled_cameras is not None and camera_id not in self.enabled_cameras:
            return frame

        position = self.camera_positions.get(camera_id, self.camera_position)
        orientation = orientation_for_camera(position)

        frame_count = self._frame_counts.get(camera_id, 0)
        self._frame_counts[camera_id] = frame_count + 1

        if frame_count % self.frame_stride == 0:
            height, width = frame.shape[:2]
            upright_w, upright_h = oriented_size((width, height), orientation)
            results = self.detector.inference(
                PixelBuffer(frame, self.pixel_format),
                Rect(0, 0, upright_w, upright_h),
                orientation=orientation,
            )
            self._cached_results[camera_id] = results
        else:
            results = self._cached_results.get(camera_id, [])

        return draw_results(apply_orientation(frame, orientation), results)

    def get_results(self, camera_id: str = "default") -> list[Result]:
        """Get the most recent results for a camera."""
        return self._cached_results.get(camera_id, [])

    def reset(self, camera_id: str | None = None) -> None:
        """Reset per-camera state; all cameras when camera_id is None."""
        if camera_id is None:
            self._frame_counts.clear()
            self._cached_results.clear()
        else:
            self._frame_counts.pop(camera_id, None)
            self._cached_results.pop(camera_id, None)

    @classmethod
    def from_config(cls, config: dict) -> "OverlayProcessor":
        """Create processor from configuration dict."""
        # Parse cameras config (can be list or dict with per-camera settings)
        cameras_config = config.get("cameras", None)
        enabled_cameras = None
        camera_positions = {}

        if cameras_config is not None:
            if isinstance(cameras_config, list):
                enabled_cameras = cameras_config
            elif isinstance(cameras_config, dict):
                enabled_cameras = list(cameras_config.keys())
                for cam_id, cam_config in cameras_config.items():
                    if isinstance(cam_config, dict) and "camera_position" in cam_config:
                        camera_positions[cam_id] = CameraPosition(cam_config["camera_position"])

        return cls(
            detector=Detector.from_config(config),
            pixel_format=config.get("pixel_format", "BGR"),
            frame_stride=config.get("frame_stride", DEFAULT_FRAME_STRIDE),
            camera_position=CameraPosition(config.get("camera_position", "front")),
            enabled_cameras=enabled_cameras,
            camera_positions=camera_positions,
        )
