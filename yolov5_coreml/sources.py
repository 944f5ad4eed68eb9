# Input sources for the detector
#
# Three kinds of input share one pipeline:
#   StillImage   - decoded photo (PIL image), color-space normalized to sRGB
#   PixelBuffer  - raw camera pixels (numpy array) with a pixel format
#   SampleBuffer - captured frame: optional PixelBuffer plus timing info
#
# Orientation values follow EXIF / CGImagePropertyOrientation (1-8) and say how
# the stored pixels must be transformed to appear upright.

import io
from dataclasses import dataclass
from enum import Enum, IntEnum
from pathlib import Path
from typing import Union

import cv2
import numpy as np
from PIL import Image, ImageCms

from .errors import ImageConversionError


class Orientation(IntEnum):
    UP = 1
    UP_MIRRORED = 2
    DOWN = 3
    DOWN_MIRRORED = 4
    LEFT_MIRRORED = 5
    RIGHT = 6
    RIGHT_MIRRORED = 7
    LEFT = 8

    @property
    def swaps_axes(self) -> bool:
        return self >= Orientation.LEFT_MIRRORED


class CameraPosition(Enum):
    BACK = "back"
    FRONT = "front"


def orientation_for_camera(position: CameraPosition) -> Orientation:
    """Orientation of portrait capture for a camera position.

    The back sensor is mounted rotated relative to the device and needs a
    clockwise turn; front camera frames are used as delivered.
    """
    return Orientation.RIGHT if position == CameraPosition.BACK else Orientation.UP


def apply_orientation(frame: np.ndarray, orientation: Orientation) -> np.ndarray:
    """Return `frame` transformed so it appears upright."""
    orientation = Orientation(orientation)
    if orientation == Orientation.UP:
        return frame
    if orientation == Orientation.UP_MIRRORED:
        return cv2.flip(frame, 1)
    if orientation == Orientation.DOWN:
        return cv2.rotate(frame, cv2.ROTATE_180)
    if orientation == Orientation.DOWN_MIRRORED:
        return cv2.flip(frame, 0)
    if orientation == Orientation.LEFT_MIRRORED:
        return cv2.transpose(frame)
    if orientation == Orientation.RIGHT:
        return cv2.rotate(frame, cv2.ROTATE_90_CLOCKWISE)
    if orientation == Orientation.RIGHT_MIRRORED:
        return cv2.rotate(cv2.transpose(frame), cv2.ROTATE_180)
    return cv2.rotate(frame, cv2.ROTATE_90_COUNTERCLOCKWISE)


def oriented_size(
    size: tuple[int, int],
    orientation: Orientation,
) -> tuple[int, int]:
    """(width, height) of a buffer once `orientation` is applied."""
    width, height = size
    if Orientation(orientation).swaps_axes:
        return (height, width)
    return (width, height)


# Pixel format -> (channel count, cv2 conversion to BGR); GRAY is 2-D,
# None means already BGR
PIXEL_FORMATS = {
    "BGR": (3, None),
    "RGB": (3, cv2.COLOR_RGB2BGR),
    "BGRA": (4, cv2.COLOR_BGRA2BGR),
    "RGBA": (4, cv2.COLOR_RGBA2BGR),
    "GRAY": (1, cv2.COLOR_GRAY2BGR),
}


@dataclass(frozen=True)
class PixelBuffer:
    """Raw pixels from a camera."""
    data: np.ndarray
    pixel_format: str = "BGR"

    def __post_init__(self):
        if self.pixel_format not in PIXEL_FORMATS:
            raise ValueError(
                f"Unknown pixel format '{self.pixel_format}'. "
                f"Available: {', '.join(PIXEL_FORMATS)}"
            )

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) as stored."""
        height, width = self.data.shape[:2]
        return (width, height)

    @property
    def channels(self) -> int:
        return 1 if self.data.ndim == 2 else self.data.shape[2]

    def to_bgr(self) -> np.ndarray:
        expected, code = PIXEL_FORMATS[self.pixel_format]
        if self.data.ndim not in (2, 3) or self.channels != expected:
            raise ImageConversionError(
                f"{self.pixel_format} buffer needs {expected} channel(s), "
                f"got shape {self.data.shape}"
            )
        if code is None:
            return self.data
        try:
            return cv2.cvtColor(self.data, code)
        except cv2.error as exc:
            raise ImageConversionError(
                f"Cannot convert {self.pixel_format} buffer of shape {self.data.shape}: {exc}"
            ) from exc


@dataclass(frozen=True)
class SampleBuffer:
    """Captured frame as delivered by a capture pipeline."""
    image_buffer: PixelBuffer | None
    presentation_timestamp: float = 0.0


@dataclass(frozen=True)
class StillImage:
    """Decoded photo."""
    image: Image.Image

    @classmethod
    def open(cls, path: str | Path) -> "StillImage":
        image = Image.open(path)
        image.load()
        return cls(image)

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size

    def to_bgr(self) -> np.ndarray:
        rgb = normalize_color_space(self.image)
        return cv2.cvtColor(np.asarray(rgb), cv2.COLOR_RGB2BGR)


ImageSource = Union[StillImage, PixelBuffer, SampleBuffer]


def _is_srgb(profile: ImageCms.ImageCmsProfile) -> bool:
    return "srgb" in ImageCms.getProfileDescription(profile).lower()


def normalize_color_space(image: Image.Image) -> Image.Image:
    """Re-render `image` as RGB in the sRGB working space.

    Images already in RGB without a foreign ICC profile are returned as is.

    Raises:
        ImageConversionError: the image or its profile cannot be converted
    """
    icc_profile = image.info.get("icc_profile")
    try:
        if icc_profile:
            source = ImageCms.ImageCmsProfile(io.BytesIO(icc_profile))
            if image.mode == "RGB" and _is_srgb(source):
                return image
            if image.mode not in ("RGB", "CMYK", "L"):
                image = image.convert("RGB")
            return ImageCms.profileToProfile(
                image,
                source,
                ImageCms.createProfile("sRGB"),
                outputMode="RGB",
            )
        if image.mode != "RGB":
            return image.convert("RGB")
        return image
    except (OSError, ValueError, ImageCms.PyCMSError) as exc:
        raise ImageConversionError(f"Cannot render {image.mode} image into sRGB: {exc}") from exc
