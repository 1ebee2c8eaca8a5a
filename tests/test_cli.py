"""Tests for the click command line."""

import json

from click.testing import CliRunner

from conftest import ScriptedDecoder, make_result
from qrscan import cli


class TestParseCommand:
    def test_human_output(self):
        result = CliRunner().invoke(cli.main, ["parse", "tel:+15550100"])

        assert result.exit_code == 0
        assert "Type: phone" in result.output
        assert "[call] Call Number: +15550100" in result.output

    def test_json_output(self):
        result = CliRunner().invoke(cli.main, ["parse", "geo:1,2", "--json"])

        payload = json.loads(result.output)
        assert payload["type"] == "location"
        assert payload["actions"][0]["value"] == "https://maps.google.com/maps?q=1,2"


class TestScanCommand:
    def _write_png(self, tmp_path, png_bytes, name="code.png"):
        path = tmp_path / name
        path.write_bytes(png_bytes)
        return path

    def test_found(self, tmp_path, png_bytes, monkeypatch):
        monkeypatch.setattr(cli, "get_decoder", lambda name: ScriptedDecoder([make_result("https://example.com")]))
        path = self._write_png(tmp_path, png_bytes)

        result = CliRunner().invoke(cli.main, ["scan", str(path), "--quiet"])

        assert result.exit_code == 0
        assert "Decoded with: Direct Detection" in result.output
        assert "[open] Open Website: https://example.com" in result.output

    def test_progress_ends_with_done(self, tmp_path, png_bytes, monkeypatch):
        monkeypatch.setattr(cli, "get_decoder", lambda name: ScriptedDecoder([None, make_result("hello")]))
        path = self._write_png(tmp_path, png_bytes)

        result = CliRunner().invoke(cli.main, ["scan", str(path)])

        assert "[ 70%] Enhanced Contrast" in result.output
        assert "[100%] Done" in result.output

    def test_no_done_line_when_nothing_found(self, tmp_path, png_bytes, monkeypatch):
        monkeypatch.setattr(cli, "get_decoder", lambda name: ScriptedDecoder([]))
        path = self._write_png(tmp_path, png_bytes)

        result = CliRunner().invoke(cli.main, ["scan", str(path)])

        assert result.exit_code == cli.EXIT_NOT_FOUND
        assert "[ 95%] Morphological" in result.output
        assert "[100%] Done" not in result.output

    def test_not_found_exit_code(self, tmp_path, png_bytes, monkeypatch):
        monkeypatch.setattr(cli, "get_decoder", lambda name: ScriptedDecoder([]))
        path = self._write_png(tmp_path, png_bytes)

        result = CliRunner().invoke(cli.main, ["scan", str(path), "--json"])

        assert result.exit_code == cli.EXIT_NOT_FOUND
        assert '"qr_found": false' in result.output

    def test_rejected_extension(self, tmp_path, png_bytes, monkeypatch):
        monkeypatch.setattr(cli, "get_decoder", lambda name: ScriptedDecoder([]))
        path = self._write_png(tmp_path, png_bytes, name="code.txt")

        result = CliRunner().invoke(cli.main, ["scan", str(path), "--quiet"])

        assert result.exit_code == cli.EXIT_REJECTED

    def test_unknown_decoder_backend(self, tmp_path, png_bytes, monkeypatch):
        def fail(name):
            raise RuntimeError("pyzbar missing")

        monkeypatch.setattr(cli, "get_decoder", fail)
        path = self._write_png(tmp_path, png_bytes)

        result = CliRunner().invoke(cli.main, ["scan", str(path), "--decoder", "zbar"])

        assert result.exit_code == 1
        assert "pyzbar missing" in result.output
