"""Tests for Bitmap invariants and the decoder adapters."""

import numpy as np
import pytest

from conftest import encoded_qr
from qrscan.qr_scanner import decoder as decoder_module
from qrscan.qr_scanner.bitmap import Bitmap, DecodeResult, Point
from qrscan.qr_scanner.decoder import OpenCVDecoder, PatternDecoder, ZbarDecoder, get_decoder
from qrscan.qr_scanner.pipeline import run_strategies

GEO_PAYLOAD = "geo:37.7749,-122.4194"


class TestBitmap:
    def test_length_invariant(self):
        with pytest.raises(ValueError):
            Bitmap.from_bytes(b"\x00" * 15, width=2, height=2)

    def test_non_positive_size(self):
        with pytest.raises(ValueError):
            Bitmap(width=0, height=2, pixels=np.zeros(0, dtype=np.uint8))

    def test_from_bytes_round_trip(self):
        raw = bytes(range(24))
        bitmap = Bitmap.from_bytes(raw, width=3, height=2)

        assert bitmap.pixels.shape == (2, 3, 4)
        assert bitmap.data == raw
        # row-major: second row starts at byte 12
        assert bitmap.pixels[1, 0].tolist() == [12, 13, 14, 15]

    def test_from_array_adds_alpha(self):
        rgb = np.full((2, 2, 3), 7, dtype=np.uint8)
        bitmap = Bitmap.from_array(rgb)

        assert bitmap.pixels[:, :, 3].tolist() == [[255, 255], [255, 255]]

    def test_from_array_gray(self):
        bitmap = Bitmap.from_array(np.array([[1, 2]], dtype=np.uint8))

        assert bitmap.pixels[0, 1].tolist() == [2, 2, 2, 255]

    def test_copy_is_independent(self):
        bitmap = Bitmap.from_bytes(bytes(16), width=2, height=2)
        clone = bitmap.copy()
        clone.pixels[0, 0, 0] = 99

        assert bitmap.pixels[0, 0, 0] == 0


class TestDecodeResult:
    def test_from_polygon_orders_corners(self):
        result = DecodeResult.from_polygon("x", [(90, 10), (10, 90), (10, 10), (90, 90)])

        assert result.top_left == Point(10, 10)
        assert result.top_right == Point(90, 10)
        assert result.bottom_left == Point(10, 90)
        assert result.bottom_right == Point(90, 90)

    def test_from_polygon_needs_four_points(self):
        with pytest.raises(ValueError):
            DecodeResult.from_polygon("x", [(0, 0), (1, 1)])

    def test_location(self):
        result = DecodeResult.from_polygon("x", [(0, 0), (4, 0), (4, 4), (0, 4)])

        assert result.location()["bottom_right"] == {"x": 4.0, "y": 4.0}


class TestOpenCVDecoder:
    def test_satisfies_protocol(self):
        assert isinstance(OpenCVDecoder(), PatternDecoder)

    def test_blank_image_has_no_result(self):
        pixels = np.full((64, 64, 4), 255, dtype=np.uint8)

        assert OpenCVDecoder().decode(pixels.tobytes(), 64, 64) is None

    def test_rejects_wrong_buffer_length(self):
        with pytest.raises(ValueError):
            OpenCVDecoder().decode(b"\x00" * 10, 2, 2)


class TestOpenCVRealDecode:
    def test_decodes_rendered_code(self):
        bitmap = encoded_qr(GEO_PAYLOAD)

        result = OpenCVDecoder().decode(bitmap.data, bitmap.width, bitmap.height)

        assert result is not None
        assert result.text == GEO_PAYLOAD

    def test_corners_are_oriented(self):
        bitmap = encoded_qr(GEO_PAYLOAD)

        result = OpenCVDecoder().decode(bitmap.data, bitmap.width, bitmap.height)

        tl, tr, bl, br = result.top_left, result.top_right, result.bottom_left, result.bottom_right
        assert tl.x < tr.x and bl.x < br.x
        assert tl.y < bl.y and tr.y < br.y
        assert tl.x == pytest.approx(bl.x, abs=2)
        assert tl.y == pytest.approx(tr.y, abs=2)

    def test_pipeline_direct_detection(self):
        outcome = run_strategies(encoded_qr(GEO_PAYLOAD), OpenCVDecoder())

        assert outcome.found
        assert outcome.strategy == "Direct Detection"
        assert outcome.result.text == GEO_PAYLOAD

    def test_dark_background_found_by_inversion(self):
        outcome = run_strategies(encoded_qr(GEO_PAYLOAD, invert=True), OpenCVDecoder())

        assert outcome.found
        assert outcome.strategy == "Color Inversion"
        assert outcome.result.text == GEO_PAYLOAD


class TestGetDecoder:
    def test_default_is_opencv(self):
        assert isinstance(get_decoder(), OpenCVDecoder)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            get_decoder("nope")

    def test_zbar_without_library(self, monkeypatch):
        monkeypatch.setattr(decoder_module, "decode_zbar", None)

        with pytest.raises(RuntimeError):
            ZbarDecoder()
