# Confidence filtering for raw engine detections
#
# Two independent gates: object confidence and top-label confidence.
# Surviving detections keep their original order.

from .bbox_detectors.base import Detection

DEFAULT_LABEL_CONFIDENCE_THRESHOLD = 0.2
DEFAULT_RESULT_CONFIDENCE_THRESHOLD = 0.4


def top_label_confidence(detection: Detection) -> float:
    """Confidence of the best label candidate, -1 when there are none."""
    return detection.labels[0].confidence if detection.labels else -1.0


def filter_detections(
    detections: list[Detection],
    label_threshold: float = DEFAULT_LABEL_CONFIDENCE_THRESHOLD,
    result_threshold: float = DEFAULT_RESULT_CONFIDENCE_THRESHOLD,
) -> list[Detection]:
    """
    Keep detections passing both confidence gates.

    Args:
        detections: Raw detections in engine order
        label_threshold: Minimum confidence of the top label candidate
        result_threshold: Minimum object confidence

    Returns:
        Surviving detections, same relative order
    """
    return [
        d for d in detections
        if d.confidence >= result_threshold
        and top_label_confidence(d) >= label_threshold
    ]
