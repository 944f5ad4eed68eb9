# Inference adapter
#
# One entry point for every input kind: normalize the source into an upright
# BGR image, run the engine, then filter and place the detections.
# Failures never escape; they yield an empty result list.

import logging

import numpy as np

from .bbox_detectors.base import InferenceEngine, Result
from .errors import ImageConversionError, InferenceEngineError
from .filtering import (
    DEFAULT_LABEL_CONFIDENCE_THRESHOLD,
    DEFAULT_RESULT_CONFIDENCE_THRESHOLD,
    filter_detections,
)
from .geometry import Rect, map_normalized_rect
from .sources import (
    ImageSource,
    Orientation,
    PixelBuffer,
    SampleBuffer,
    StillImage,
    apply_orientation,
)

logger = logging.getLogger(__name__)


def prepare_image(source: ImageSource, orientation: Orientation = Orientation.UP) -> np.ndarray:
    """
    Turn any supported source into the upright BGR image the engine expects.

    Raises:
        ImageConversionError: the source holds no usable pixels
    """
    if isinstance(source, SampleBuffer):
        if source.image_buffer is None:
            raise ImageConversionError("Sample buffer carries no image buffer")
        source = source.image_buffer

    if isinstance(source, (StillImage, PixelBuffer)):
        return apply_orientation(source.to_bgr(), orientation)

    raise TypeError(f"Unsupported image source: {type(source).__name__}")


def run_inference(
    engine: InferenceEngine,
    source: ImageSource,
    fit_frame: Rect,
    *,
    orientation: Orientation = Orientation.UP,
    label_threshold: float = DEFAULT_LABEL_CONFIDENCE_THRESHOLD,
    result_threshold: float = DEFAULT_RESULT_CONFIDENCE_THRESHOLD,
) -> list[Result]:
    """
    Run the full detection pipeline on one input.

    Args:
        engine: Model runtime
        source: Still image, pixel buffer or sample buffer
        fit_frame: Where the image is drawn, in destination pixels
        orientation: How the source pixels must be turned to be upright
        label_threshold: Minimum top-label confidence
        result_threshold: Minimum object confidence

    Returns:
        Results in engine order, boxes in destination pixel space
    """
    try:
        image = prepare_image(source, orientation)
    except ImageConversionError as exc:
        logger.warning("Skipping detection, input conversion failed: %s", exc)
        return []

    try:
        detections = engine.perform(image)
    except InferenceEngineError as exc:
        logger.error("Inference failed: %s", exc)
        return []
    except Exception:
        logger.exception("Inference engine raised an unexpected error")
        return []

    return [
        Result(
            bounding_box=map_normalized_rect(d.bounding_box, fit_frame),
            confidence=d.confidence,
            labels=d.labels,
        )
        for d in filter_detections(detections, label_threshold, result_threshold)
    ]
