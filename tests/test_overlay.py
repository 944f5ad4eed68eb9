"""
Tests for captions and drawing helpers.
"""

import numpy as np

from yolov5_coreml.bbox_detectors.base import LabelCandidate, Result
from yolov5_coreml.geometry import Rect, fit_frame
from yolov5_coreml.overlay import draw_results, format_caption, letterbox


class TestCaption:
    def test_top_label_and_confidence(self):
        result = Result(
            bounding_box=Rect(0, 0, 10, 10),
            confidence=0.876,
            labels=(LabelCandidate("dog", 0.9), LabelCandidate("cat", 0.1)),
        )
        assert format_caption(result) == "dog: 0.88"

    def test_no_labels(self):
        result = Result(bounding_box=Rect(0, 0, 10, 10), confidence=0.5)
        assert result.top_label is None
        assert format_caption(result) == ": 0.50"


class TestDrawing:
    def test_draw_returns_copy(self, bgr_frame):
        result = Result(Rect(100, 100, 200, 150), 0.9, (LabelCandidate("car", 0.9),))
        output = draw_results(bgr_frame, [result])

        assert output is not bgr_frame
        assert output.shape == bgr_frame.shape
        assert bgr_frame.sum() == 0
        assert output.sum() > 0
        # border drawn at the box edge
        assert output[100, 150].sum() > 0

    def test_no_results(self, bgr_frame):
        output = draw_results(bgr_frame, [])
        assert np.array_equal(output, bgr_frame)

    def test_letterbox_places_image_in_fit_frame(self):
        image = np.full((100, 200, 3), 255, dtype=np.uint8)
        frame = fit_frame((200, 100), (400, 400))
        canvas = letterbox(image, frame, (400, 400))

        assert canvas.shape == (400, 400, 3)
        assert canvas[50, 200].sum() == 0
        assert canvas[200, 200].tolist() == [255, 255, 255]
        assert canvas[350, 200].sum() == 0
