# yolov5_coreml package
# YOLOv5 detection with results placed in the displayed image geometry

from .bbox_detectors import InferenceEngine, Detection, LabelCandidate, Result, YOLOv5Engine
from .config import DetectorConfig
from .detector import Detector, InferenceGuard
from .errors import (
    DetectionError,
    ImageConversionError,
    InferenceEngineError,
    ModelUnavailableError,
)
from .filtering import filter_detections, top_label_confidence
from .geometry import Rect, fit_frame, map_normalized_rect
from .inference import run_inference
from .overlay import draw_results, format_caption, letterbox
from .processors import OverlayProcessor
from .sources import (
    CameraPosition,
    ImageSource,
    Orientation,
    PixelBuffer,
    SampleBuffer,
    StillImage,
    orientation_for_camera,
)
from .worker import DetectionWorker

__all__ = [
    "InferenceEngine",
    "Detection",
    "LabelCandidate",
    "Result",
    "YOLOv5Engine",
    "DetectorConfig",
    "Detector",
    "InferenceGuard",
    "DetectionError",
    "ImageConversionError",
    "InferenceEngineError",
    "ModelUnavailableError",
    "filter_detections",
    "top_label_confidence",
    "Rect",
    "fit_frame",
    "map_normalized_rect",
    "run_inference",
    "draw_results",
    "format_caption",
    "letterbox",
    "OverlayProcessor",
    "DetectionWorker",
    "CameraPosition",
    "ImageSource",
    "Orientation",
    "PixelBuffer",
    "SampleBuffer",
    "StillImage",
    "orientation_for_camera",
]
