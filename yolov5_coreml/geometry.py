# Geometry helpers for placing detections on screen
#
# Model output is normalized to the source image with a bottom-left origin.
# Everything downstream works in pixel space with a top-left origin, offset
# into the "fit frame": the rectangle where the image is actually drawn after
# aspect-preserving letterboxing.

from dataclasses import dataclass


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle as origin plus size.

    Used both for normalized rects (values in [0, 1]) and pixel rects.
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def min_x(self) -> float:
        return min(self.x, self.x + self.width)

    @property
    def min_y(self) -> float:
        return min(self.y, self.y + self.height)

    @property
    def max_x(self) -> float:
        return max(self.x, self.x + self.width)

    @property
    def max_y(self) -> float:
        return max(self.y, self.y + self.height)

    def standardized(self) -> "Rect":
        """Return the same rect with non-negative width and height."""
        return Rect(
            x=self.min_x,
            y=self.min_y,
            width=abs(self.width),
            height=abs(self.height),
        )

    def offset(self, dx: float, dy: float) -> "Rect":
        return Rect(x=self.x + dx, y=self.y + dy, width=self.width, height=self.height)

    def as_xyxy(self) -> tuple[float, float, float, float]:
        """Return as (x1, y1, x2, y2)."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def as_int_xyxy(self) -> tuple[int, int, int, int]:
        """Return as integer (x1, y1, x2, y2), for OpenCV drawing."""
        x1, y1, x2, y2 = self.as_xyxy()
        return (int(round(x1)), int(round(y1)), int(round(x2)), int(round(y2)))

    @classmethod
    def from_xyxy(cls, x1: float, y1: float, x2: float, y2: float) -> "Rect":
        return cls(x=x1, y=y1, width=x2 - x1, height=y2 - y1)


def flip_vertical(box: Rect) -> Rect:
    """Convert a normalized rect between bottom-left and top-left origin."""
    return Rect(x=box.x, y=1 - box.y - box.height, width=box.width, height=box.height)


def image_rect_for_normalized_rect(box: Rect, width: int, height: int) -> Rect:
    """Scale a normalized rect to an image of `width` x `height` pixels."""
    return Rect(
        x=box.x * width,
        y=box.y * height,
        width=box.width * width,
        height=box.height * height,
    )


def map_normalized_rect(box: Rect, fit_frame: Rect) -> Rect:
    """Map a model-space rect into destination pixel space.

    Order matters: the flip is defined in normalized space, and the rect must
    be standardized before it is translated.

    Args:
        box: Normalized rect, bottom-left origin (model convention)
        fit_frame: Where the source image is drawn, in destination pixels

    Returns:
        Rect in destination pixels, top-left origin
    """
    flipped = flip_vertical(box)
    # fit frame size is taken in whole pixels
    scaled = image_rect_for_normalized_rect(
        flipped,
        int(fit_frame.width),
        int(fit_frame.height),
    ).standardized()
    return scaled.offset(fit_frame.x, fit_frame.y)


def fit_frame(
    image_size: tuple[float, float],
    dest_size: tuple[float, float],
) -> Rect:
    """Letterbox an image of `image_size` into `dest_size`, centered.

    Args:
        image_size: (width, height) of the displayed image
        dest_size: (width, height) of the destination view

    Returns:
        Rect where the image lands inside the destination
    """
    img_w, img_h = image_size
    dest_w, dest_h = dest_size
    if img_w <= 0 or img_h <= 0:
        raise ValueError(f"Image size must be positive, got {image_size}")

    scale = min(dest_w / img_w, dest_h / img_h)
    w = img_w * scale
    h = img_h * scale
    return Rect(x=(dest_w - w) / 2, y=(dest_h - h) / 2, width=w, height=h)
