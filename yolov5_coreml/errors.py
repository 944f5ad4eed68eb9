# Error types for the detection pipeline
#
# None of these reach callers of Detector.inference: every failure degrades
# to "no detections for this call".


class DetectionError(Exception):
    """Base class for detection pipeline errors."""


class ModelUnavailableError(DetectionError):
    """Model artifact is missing or failed to load/compile."""


class InferenceEngineError(DetectionError):
    """The inference runtime reported an error for one request."""


class ImageConversionError(DetectionError):
    """Input could not be turned into an upright RGB working image."""
