# Detector configuration

from dataclasses import dataclass

from .bbox_detectors.yolo import DEFAULT_ENGINE_CONFIDENCE, DEFAULT_MODEL_NAME
from .filtering import (
    DEFAULT_LABEL_CONFIDENCE_THRESHOLD,
    DEFAULT_RESULT_CONFIDENCE_THRESHOLD,
)

DEFAULT_MODEL_PATH = f"models/{DEFAULT_MODEL_NAME}.mlpackage"


@dataclass
class DetectorConfig:
    """Thresholds and model settings for a Detector.

    Thresholds are read at the start of every inference call, so changes
    apply from the next call on.
    """
    label_confidence_threshold: float = DEFAULT_LABEL_CONFIDENCE_THRESHOLD
    result_confidence_threshold: float = DEFAULT_RESULT_CONFIDENCE_THRESHOLD
    engine_confidence: float = DEFAULT_ENGINE_CONFIDENCE
    allow_low_precision: bool = True

    @classmethod
    def from_config(cls, config: dict) -> "DetectorConfig":
        """Create from a configuration dict; missing keys keep defaults."""
        for key in ("label_confidence_threshold", "result_confidence_threshold", "engine_confidence"):
            if key in config and not isinstance(config[key], (int, float)):
                raise ValueError(f"'{key}' must be a number, got {config[key]!r}")

        return cls(
            label_confidence_threshold=float(config.get(
                "label_confidence_threshold", DEFAULT_LABEL_CONFIDENCE_THRESHOLD)),
            result_confidence_threshold=float(config.get(
                "result_confidence_threshold", DEFAULT_RESULT_CONFIDENCE_THRESHOLD)),
            engine_confidence=float(config.get("engine_confidence", DEFAULT_ENGINE_CONFIDENCE)),
            allow_low_precision=bool(config.get("allow_low_precision", True)),
        )
