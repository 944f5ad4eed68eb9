# Frame processors
from .overlay_processor import OverlayProcessor

__all__ = ["OverlayProcessor"]
