# YOLOv5 inference engine implementation
#
# Runs a CoreML export of YOLOv5 through Ultralytics (Apple Neural Engine on
# Apple Silicon). A .pt checkpoint is exported to .mlpackage on first load.

import logging
from pathlib import Path

import numpy as np
from ultralytics import YOLO

from ..errors import InferenceEngineError, ModelUnavailableError
from ..geometry import Rect
from .base import Detection, LabelCandidate

logger = logging.getLogger(__name__)

DEFAULT_MODEL_NAME = "yolov5s"
# Floor handed to predict(); the facade thresholds do the real filtering.
# A model exported with nms=True carries its own confidence cut-off, which
# this floor cannot lower.
DEFAULT_ENGINE_CONFIDENCE = 0.01


def _to_numpy(values) -> np.ndarray:
    return values.cpu().numpy() if hasattr(values, "cpu") else np.asarray(values)


class YOLOv5Engine:
    """YOLOv5 engine backed by an Ultralytics CoreML model."""

    def __init__(
        self,
        model_path: str,
        confidence: float = DEFAULT_ENGINE_CONFIDENCE,
        half: bool = True,
    ):
        """Load the model.

        Letterboxing to the network input size ("scale fit") happens inside
        Ultralytics; reported boxes are normalized to the image passed in.

        Args:
            model_path: Path to .mlpackage / .mlmodel, or .pt (converted once)
            confidence: Minimum confidence the runtime reports
            half: Allow half precision on accelerators

        Raises:
            ModelUnavailableError: artifact missing or failed to load
        """
        self._confidence = confidence
        self._half = half
        self._model_path = model_path

        logger.info("Loading YOLOv5 model from: %s", model_path)
        self._model = self._load_yolo_coreml(model_path)
        logger.info("YOLOv5 loaded successfully")

    @property
    def model_path(self) -> str:
        return self._model_path

    def _load_yolo_coreml(self, model_path: str):
        """Load YOLO model, converting to CoreML if needed."""
        model_path_obj = Path(model_path)
        if not model_path_obj.exists():
            raise ModelUnavailableError(f"Model artifact not found: {model_path}")

        try:
            # If .pt file, convert to CoreML
            if model_path_obj.suffix == '.pt':
                coreml_path = model_path_obj.with_suffix('.mlpackage')
                if not coreml_path.exists():
                    logger.info("Converting %s to CoreML...", model_path)
                    pt_model = YOLO(str(model_path_obj), task='detect')
                    pt_model.export(format='coreml', nms=True, half=self._half)
                    logger.info("CoreML model saved to: %s", coreml_path)
                model_path_obj = coreml_path

            return YOLO(str(model_path_obj), task='detect')
        except Exception as exc:
            raise ModelUnavailableError(f"Failed to load model {model_path}: {exc}") from exc

    def perform(self, image: np.ndarray) -> list[Detection]:
        """Run YOLOv5 on an upright image.

        Args:
            image: BGR numpy array (OpenCV format)

        Returns:
            List of Detection objects, normalized, bottom-left origin
        """
        try:
            results = self._model.predict(
                image,
                conf=self._confidence,
                half=self._half,
                verbose=False,
            )
            return self._parse_results(results)
        except Exception as exc:
            raise InferenceEngineError(f"YOLOv5 inference failed: {exc}") from exc

    def _parse_results(self, results) -> list[Detection]:
        detections = []
        for r in results or []:
            boxes = getattr(r, "boxes", None)
            if boxes is None:
                continue
            names = getattr(r, "names", None) or {}

            xyxyn = _to_numpy(boxes.xyxyn)
            conf = _to_numpy(boxes.conf)
            cls = _to_numpy(boxes.cls)

            for (x1, y1, x2, y2), c, k in zip(xyxyn, conf, cls):
                class_id = int(k)
                confidence = float(c)
                # xyxyn is top-left origin; report bottom-left like the framework
                box = Rect(
                    x=float(x1),
                    y=1.0 - float(y2),
                    width=float(x2 - x1),
                    height=float(y2 - y1),
                )
                detections.append(Detection(
                    bounding_box=box,
                    confidence=confidence,
                    labels=(LabelCandidate(names.get(class_id, str(class_id)), confidence),),
                ))

        return detections

