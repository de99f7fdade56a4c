"""Tests for image I/O functionality."""

import numpy as np
import pytest
from PIL import Image

from levels_curve.io import (
    decode_data_uri,
    encode_data_uri,
    load_pixel_buffer,
    save_pixel_buffer,
)
from levels_curve.utils.errors import AppError, ProcessingError
from levels_curve.utils.imaging import PixelBuffer


class TestImageLoader:
    """Tests for loading images as pixel buffers."""

    def test_load_nonexistent_file(self):
        assert load_pixel_buffer("/nonexistent/path/to/image.png") is None

    def test_load_invalid_path(self):
        assert load_pixel_buffer("") is None
        assert load_pixel_buffer(None) is None

    def test_load_rgb_adds_opaque_alpha(self, tmp_path):
        path = tmp_path / "rgb.png"
        Image.new("RGB", (3, 2), (10, 20, 30)).save(path)
        buf = load_pixel_buffer(str(path))
        assert buf.shape == (2, 3, 4)
        assert buf.as_array()[1, 2].tolist() == [10, 20, 30, 255]

    def test_load_corrupt_file(self, tmp_path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"not an image")
        assert load_pixel_buffer(str(path)) is None


class TestImageSaver:
    """Tests for saving and encoding pixel buffers."""

    def test_png_roundtrip_is_lossless(self, tmp_path, sample_buffer):
        path = tmp_path / "out" / "image.png"
        assert save_pixel_buffer(sample_buffer, str(path))
        assert load_pixel_buffer(str(path)) == sample_buffer

    def test_jpeg_drops_alpha(self, tmp_path, sample_buffer):
        path = tmp_path / "image.jpg"
        assert save_pixel_buffer(sample_buffer, str(path), quality=90)
        loaded = load_pixel_buffer(str(path))
        assert loaded.shape == sample_buffer.shape
        assert (loaded.as_array()[..., 3] == 255).all()

    def test_save_empty_buffer(self, tmp_path):
        assert not save_pixel_buffer(PixelBuffer.from_bytes(b"", 0, 0), str(tmp_path / "x.png"))

    def test_save_invalid_path(self, sample_buffer):
        assert not save_pixel_buffer(sample_buffer, "")

    def test_data_uri_roundtrip(self, sample_buffer):
        uri = encode_data_uri(sample_buffer)
        assert uri.startswith("data:image/png;base64,")
        assert decode_data_uri(uri) == sample_buffer

    def test_data_uri_jpeg(self, sample_buffer):
        assert encode_data_uri(sample_buffer, "jpeg").startswith("data:image/jpeg;base64,")

    def test_unsupported_format(self, sample_buffer):
        with pytest.raises(ProcessingError):
            encode_data_uri(sample_buffer, "gif")

    def test_encode_empty_buffer(self):
        with pytest.raises(AppError):
            encode_data_uri(PixelBuffer.from_bytes(b"", 0, 0))

    def test_decode_malformed_uri(self):
        with pytest.raises(ProcessingError):
            decode_data_uri("http://example.com/image.png")
        with pytest.raises(ProcessingError):
            decode_data_uri("data:image/png;base64,!!!")
        with pytest.raises(ProcessingError):
            decode_data_uri("data:image/png;base64,aGVsbG8=")
