"""End-to-end tests for process_qr_image with scripted decoders."""

import json
import logging

from conftest import ScriptedDecoder, make_result
from qrscan.qr_scanner.qr_engine import process_qr_image


class TestProcessQrImage:
    def test_decoded_and_parsed(self, png_bytes):
        decoder = ScriptedDecoder([None, make_result("mailto:a@b.com")])
        progress = []

        result = process_qr_image(png_bytes, decoder=decoder, on_progress=lambda p, s: progress.append(p))

        assert result["qr_found"] is True
        assert result["error"] is None
        assert result["strategy"] == "Enhanced Contrast"
        assert result["content"]["type"] == "email"
        assert result["content"]["data"] == {"email": "a@b.com"}
        assert result["content"]["actions"][0]["kind"] == "email"
        assert result["location"]["top_left"] == {"x": 1.0, "y": 1.0}
        assert progress == [65, 70]
        assert [a["decoded"] for a in result["attempts"]] == [False, True]

    def test_result_is_json_serialisable(self, png_bytes):
        decoder = ScriptedDecoder([make_result("BEGIN:VCARD\nFN:Jane\nEND:VCARD")])

        json.dumps(process_qr_image(png_bytes, decoder=decoder))

    def test_not_found(self, png_bytes):
        result = process_qr_image(png_bytes, decoder=ScriptedDecoder([]))

        assert result["qr_found"] is False
        assert result["error"] is None
        assert result["content"] is None
        assert len(result["attempts"]) == 7

    def test_rejected_upload(self):
        decoder = ScriptedDecoder([make_result()])

        result = process_qr_image(b"%PDF-1.4", mime="application/pdf", decoder=decoder)

        assert result["qr_found"] is False
        assert result["error"].startswith("Invalid file type")
        assert decoder.calls == []

    def test_logs_structured_events(self, png_bytes, caplog):
        with caplog.at_level(logging.INFO, logger="qrscan"):
            process_qr_image(png_bytes, decoder=ScriptedDecoder([make_result("hello")]))

        events = [json.loads(r.getMessage())["event"] for r in caplog.records]
        assert "qr_decoded" in events
        assert "qr_classification" in events

    def test_faulty_decoder_never_raises(self, png_bytes):
        decoder = ScriptedDecoder([RuntimeError("decoder crashed")] * 7)

        result = process_qr_image(png_bytes, decoder=decoder)

        assert result["qr_found"] is False
        assert all(a["error"] for a in result["attempts"])

    def test_real_decoder_on_blank_image(self, png_bytes, monkeypatch):
        monkeypatch.setattr("qrscan.config.DECODER_BACKEND", "opencv")

        result = process_qr_image(png_bytes)

        assert result["qr_found"] is False

    def test_oversized_dimensions_become_error_string(self, png_bytes, monkeypatch):
        # 16x16 is more than twice this limit, which Pillow treats as a bomb
        monkeypatch.setattr("PIL.Image.MAX_IMAGE_PIXELS", 100)

        result = process_qr_image(png_bytes, mime="image/png", decoder=ScriptedDecoder([make_result()]))

        assert result["qr_found"] is False
        assert result["error"].startswith("Image dimensions too large")
