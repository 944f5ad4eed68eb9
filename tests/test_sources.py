"""
Tests for input sources: orientation, pixel formats and color normalization.
"""

import io

import numpy as np
import pytest
from PIL import Image, ImageCms

from yolov5_coreml.errors import ImageConversionError
from yolov5_coreml.sources import (
    CameraPosition,
    Orientation,
    PixelBuffer,
    SampleBuffer,
    StillImage,
    apply_orientation,
    normalize_color_space,
    orientation_for_camera,
    oriented_size,
)


@pytest.fixture
def grid():
    # 2 rows x 3 columns
    return np.array([[1, 2, 3], [4, 5, 6]], dtype=np.uint8)


class TestOrientation:
    def test_camera_positions(self):
        assert orientation_for_camera(CameraPosition.BACK) == Orientation.RIGHT
        assert orientation_for_camera(CameraPosition.FRONT) == Orientation.UP

    def test_up_is_identity(self, grid):
        assert apply_orientation(grid, Orientation.UP) is grid

    @pytest.mark.parametrize("orientation, expected", [
        (Orientation.UP_MIRRORED, lambda a: a[:, ::-1]),
        (Orientation.DOWN, lambda a: np.rot90(a, 2)),
        (Orientation.DOWN_MIRRORED, lambda a: a[::-1, :]),
        (Orientation.LEFT_MIRRORED, lambda a: a.T),
        (Orientation.RIGHT, lambda a: np.rot90(a, -1)),
        (Orientation.RIGHT_MIRRORED, lambda a: np.rot90(a.T, 2)),
        (Orientation.LEFT, lambda a: np.rot90(a, 1)),
    ])
    def test_apply(self, grid, orientation, expected):
        np.testing.assert_array_equal(apply_orientation(grid, orientation), expected(grid))

    def test_right_rotates_clockwise(self, grid):
        np.testing.assert_array_equal(
            apply_orientation(grid, Orientation.RIGHT),
            np.array([[4, 1], [5, 2], [6, 3]], dtype=np.uint8),
        )

    def test_accepts_raw_exif_value(self, grid):
        assert apply_orientation(grid, 6).shape == (3, 2)

    def test_oriented_size(self):
        assert oriented_size((1920, 1080), Orientation.RIGHT) == (1080, 1920)
        assert oriented_size((1920, 1080), Orientation.DOWN) == (1920, 1080)


class TestPixelBuffer:
    def test_rgb_to_bgr(self):
        data = np.zeros((2, 2, 3), dtype=np.uint8)
        data[..., 0] = 255
        bgr = PixelBuffer(data, "RGB").to_bgr()
        assert bgr[0, 0].tolist() == [0, 0, 255]

    def test_rgba_drops_alpha(self):
        data = np.full((2, 2, 4), 7, dtype=np.uint8)
        assert PixelBuffer(data, "RGBA").to_bgr().shape == (2, 2, 3)

    def test_gray(self):
        data = np.full((4, 5), 9, dtype=np.uint8)
        assert PixelBuffer(data, "GRAY").to_bgr().shape == (4, 5, 3)

    def test_bgr_passthrough(self, bgr_frame):
        assert PixelBuffer(bgr_frame).to_bgr() is bgr_frame

    def test_size(self, bgr_frame):
        assert PixelBuffer(bgr_frame).size == (640, 480)

    def test_unknown_format(self, bgr_frame):
        with pytest.raises(ValueError):
            PixelBuffer(bgr_frame, "YUV")

    @pytest.mark.parametrize("shape, pixel_format", [
        ((2, 2, 3), "RGBA"),
        ((2, 2, 3), "BGRA"),
        ((2, 2, 4), "BGR"),
        ((2, 2, 4), "RGB"),
        ((2, 2, 3), "GRAY"),
        ((2, 2), "BGR"),
        ((2, 2, 1, 3), "BGR"),
    ])
    def test_mismatched_channels(self, shape, pixel_format):
        buffer = PixelBuffer(np.zeros(shape, dtype=np.uint8), pixel_format)
        with pytest.raises(ImageConversionError, match=pixel_format):
            buffer.to_bgr()

    def test_channels(self, bgr_frame):
        assert PixelBuffer(bgr_frame).channels == 3
        assert PixelBuffer(np.zeros((2, 2), dtype=np.uint8), "GRAY").channels == 1

    def test_sample_buffer_defaults(self):
        assert SampleBuffer(None).presentation_timestamp == 0.0


class TestColorSpace:
    def test_rgb_without_profile_untouched(self):
        image = Image.new("RGB", (4, 4), (10, 20, 30))
        assert normalize_color_space(image) is image

    @pytest.mark.parametrize("mode", ["RGBA", "L", "P", "CMYK"])
    def test_other_modes_become_rgb(self, mode):
        image = Image.new(mode, (4, 4))
        assert normalize_color_space(image).mode == "RGB"

    def test_srgb_profile_untouched(self):
        profile = ImageCms.ImageCmsProfile(ImageCms.createProfile("sRGB"))
        image = Image.new("RGB", (4, 4), (10, 20, 30))
        image.info["icc_profile"] = profile.tobytes()
        assert normalize_color_space(image) is image

    def test_rgba_with_srgb_profile_converted(self):
        profile = ImageCms.ImageCmsProfile(ImageCms.createProfile("sRGB"))
        image = Image.new("RGBA", (4, 4), (10, 20, 30, 255))
        image.info["icc_profile"] = profile.tobytes()
        assert normalize_color_space(image).mode == "RGB"

    def test_corrupt_profile(self):
        image = Image.new("RGB", (4, 4))
        image.info["icc_profile"] = b"not a profile"
        with pytest.raises(ImageConversionError):
            normalize_color_space(image)

    def test_still_image_to_bgr(self):
        image = Image.new("RGBA", (3, 2), (255, 0, 0, 255))
        bgr = StillImage(image).to_bgr()
        assert bgr.shape == (2, 3, 3)
        assert bgr[0, 0].tolist() == [0, 0, 255]

    def test_still_image_open(self, tmp_path):
        path = tmp_path / "photo.png"
        Image.new("RGB", (8, 6), (0, 255, 0)).save(path)
        still = StillImage.open(path)
        assert still.size == (8, 6)
        assert still.to_bgr()[0, 0].tolist() == [0, 255, 0]
