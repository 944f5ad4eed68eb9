# Drawing detection results on frames

import cv2
import numpy as np

from .bbox_detectors.base import Result
from .geometry import Rect

DEFAULT_BOX_COLOR = (255, 255, 255)  # White (BGR)
DEFAULT_TEXT_COLOR = (255, 255, 255)
DEFAULT_BOX_THICKNESS = 3
DEFAULT_ALPHA = 0.6


def format_caption(result: Result) -> str:
    """Caption shown on a box: "<top label>: <confidence>"."""
    top = result.top_label
    identifier = top.identifier if top is not None else ""
    return f"{identifier}: {result.confidence:.2f}"


def draw_results(
    frame: np.ndarray,
    results: list[Result],
    box_color: tuple[int, int, int] = DEFAULT_BOX_COLOR,
    text_color: tuple[int, int, int] = DEFAULT_TEXT_COLOR,
    thickness: int = DEFAULT_BOX_THICKNESS,
    alpha: float = DEFAULT_ALPHA,
) -> np.ndarray:
    """
    Draw result boxes with centered captions.

    Args:
        frame: BGR numpy array, results must be in its pixel space
        results: Results from Detector.inference
        box_color: BGR border color
        text_color: BGR caption color
        thickness: Border thickness in pixels
        alpha: Opacity of the boxes and captions

    Returns:
        Annotated frame (copy of input)
    """
    output = frame.copy()
    if not results:
        return output

    overlay = output.copy()
    for result in results:
        x1, y1, x2, y2 = result.bounding_box.as_int_xyxy()
        cv2.rectangle(overlay, (x1, y1), (x2, y2), box_color, thickness)

        caption = format_caption(result)
        (text_w, text_h), _ = cv2.getTextSize(caption, cv2.FONT_HERSHEY_SIMPLEX, 0.5, 1)
        text_x = x1 + max(0, (x2 - x1 - text_w) // 2)
        text_y = y1 + (y2 - y1 + text_h) // 2
        cv2.putText(overlay, caption, (text_x, text_y),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, text_color, 1)

    cv2.addWeighted(overlay, alpha, output, 1 - alpha, 0, output)
    return output


def letterbox(
    image: np.ndarray,
    frame: Rect,
    dest_size: tuple[int, int],
) -> np.ndarray:
    """
    Draw `image` into `frame` on a black canvas of `dest_size`.

    Args:
        image: BGR numpy array, upright
        frame: Fit frame from geometry.fit_frame
        dest_size: (width, height) of the canvas

    Returns:
        Canvas with the image scaled into the fit frame
    """
    dest_w, dest_h = dest_size
    canvas = np.zeros((dest_h, dest_w, 3), dtype=np.uint8)

    x1, y1, x2, y2 = frame.as_int_xyxy()
    x1, y1 = max(0, x1), max(0, y1)
    x2, y2 = min(dest_w, x2), min(dest_h, y2)
    if x2 <= x1 or y2 <= y1:
        return canvas

    canvas[y1:y2, x1:x2] = cv2.resize(image, (x2 - x1, y2 - y1), interpolation=cv2.INTER_AREA)
    return canvas
