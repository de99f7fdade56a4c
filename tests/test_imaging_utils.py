import numpy as np
import pytest

from levels_curve.utils.errors import PixelBufferError
from levels_curve.utils.imaging import PixelBuffer, coerce_buffer, validate_buffer_length


class TestPixelBuffer:
    """Tests for the RGBA pixel buffer container."""

    def test_from_bytes_shape(self):
        """Raw bytes should be exposed as an HxWx4 array."""
        buf = PixelBuffer.from_bytes(bytes(range(24)), 3, 2)
        assert buf.shape == (2, 3, 4)
        assert buf.pixel_count == 6
        assert len(buf) == 24
        assert buf.as_array()[1, 2].tolist() == [20, 21, 22, 23]

    def test_from_array_roundtrip_bytes(self, sample_rgba_array):
        """to_bytes should return the row-major RGBA layout."""
        buf = PixelBuffer.from_array(sample_rgba_array)
        assert buf.to_bytes() == sample_rgba_array.tobytes()

    def test_length_not_multiple_of_four(self):
        """A buffer with a partial pixel should fail fast."""
        with pytest.raises(PixelBufferError):
            PixelBuffer.from_bytes(bytes(7), 1, 2)

    def test_length_dimension_mismatch(self):
        """Dimensions must account for every byte."""
        with pytest.raises(PixelBufferError) as excinfo:
            PixelBuffer.from_bytes(bytes(16), 3, 1)
        assert excinfo.value.length == 16
        assert excinfo.value.width == 3

    def test_rejects_non_uint8_array(self):
        """Only 8-bit data is accepted."""
        with pytest.raises(PixelBufferError):
            PixelBuffer.from_array(np.zeros((2, 2, 4), dtype=np.float32))

    def test_rejects_wrong_channel_count(self):
        """from_array needs exactly four channels."""
        with pytest.raises(PixelBufferError):
            PixelBuffer.from_array(np.zeros((2, 2, 3), dtype=np.uint8))

    def test_buffer_is_read_only(self, sample_buffer):
        """Stored pixels cannot be modified in place."""
        with pytest.raises(ValueError):
            sample_buffer.as_array()[0, 0, 0] = 1

    def test_buffer_does_not_alias_source(self, sample_rgba_array):
        """Mutating the source array must not leak into the buffer."""
        buf = PixelBuffer.from_array(sample_rgba_array)
        sample_rgba_array[0, 0] = [1, 2, 3, 4]
        assert buf.as_array()[0, 0].tolist() == [255, 0, 0, 255]

    def test_equality(self, sample_rgba_array):
        """Buffers compare by dimensions and content."""
        a = PixelBuffer.from_array(sample_rgba_array)
        b = PixelBuffer.from_bytes(sample_rgba_array.tobytes(), 100, 100)
        c = PixelBuffer.from_bytes(sample_rgba_array.tobytes(), 50, 200)
        assert a == b
        assert a != c

    def test_empty_buffer_allowed(self):
        """A 0x0 buffer is well formed."""
        buf = PixelBuffer.from_bytes(b"", 0, 0)
        assert buf.pixel_count == 0


class TestCoerceBuffer:
    """Tests for coerce_buffer and validate_buffer_length."""

    def test_passthrough(self, sample_buffer):
        assert coerce_buffer(sample_buffer) is sample_buffer

    def test_raw_bytes_without_dimensions(self):
        """Raw data without dimensions becomes a single row."""
        buf = coerce_buffer(bytearray(12))
        assert (buf.width, buf.height) == (3, 1)

    def test_raw_bytes_with_dimensions(self):
        buf = coerce_buffer(bytes(16), 2, 2)
        assert buf.shape == (2, 2, 4)

    def test_single_dimension_rejected(self):
        """Giving only width or only height is a caller bug, not a row hint."""
        with pytest.raises(PixelBufferError):
            coerce_buffer(bytes(16), width=2)
        with pytest.raises(PixelBufferError):
            coerce_buffer(bytes(16), width=3)
        with pytest.raises(PixelBufferError):
            coerce_buffer(bytes(16), height=2)

    def test_none_rejected(self):
        with pytest.raises(PixelBufferError):
            coerce_buffer(None)

    def test_validate_length(self):
        validate_buffer_length(8)
        validate_buffer_length(8, 2, 1)
        with pytest.raises(PixelBufferError):
            validate_buffer_length(9)
        with pytest.raises(PixelBufferError):
            validate_buffer_length(8, -2, -1)
