"""Tests for the command-line interface."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

from typer.testing import CliRunner

from pokescan.cli import app
from pokescan.utils.error_handler import ScanError

runner = CliRunner()


class TestParseCommand:

    def test_parse_prints_fields(self, tmp_path, sample_card_text):
        text_file = tmp_path / "ocr.txt"
        text_file.write_text(sample_card_text, encoding="utf-8")

        result = runner.invoke(app, ["parse", str(text_file)])

        assert result.exit_code == 0
        assert "Pikachu" in result.stdout
        assert "58/102" in result.stdout

    def test_parse_missing_file(self, tmp_path):
        result = runner.invoke(app, ["parse", str(tmp_path / "nope.txt")])
        assert result.exit_code != 0


class TestConfigCommand:

    def test_config_lists_settings(self):
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "OCR backend" in result.stdout
        assert "Mock prices" in result.stdout


class TestScanCommand:

    def test_scan_prints_result(self, tmp_path, sample_scan_result):
        image = tmp_path / "card.jpg"
        image.write_bytes(b"placeholder")

        with patch('pokescan.cli._run_scan', new=AsyncMock(return_value=sample_scan_result)):
            result = runner.invoke(app, ["scan", str(image), "--no-save"])

        assert result.exit_code == 0
        assert "Pikachu" in result.stdout
        assert "$12.00" in result.stdout
        assert "$10.20" in result.stdout

    def test_scan_failure_exits_nonzero(self, tmp_path):
        image = tmp_path / "card.jpg"
        image.write_bytes(b"placeholder")

        failing = AsyncMock(side_effect=ScanError("Could not read card information."))
        with patch('pokescan.cli._run_scan', new=failing):
            result = runner.invoke(app, ["scan", str(image)])

        assert result.exit_code == 1
        assert "Could not read card information." in result.stdout

    def test_scan_end_to_end_with_mocks(self, tmp_path, png_base64, mock_settings):
        import base64
        image = tmp_path / "card.png"
        image.write_bytes(base64.b64decode(png_base64))

        from pokescan.utils.config import Settings
        offline = Settings(_env_file=None, OCR_BACKEND="mock", USE_MOCK_PRICES=True,
                           OUTPUT_DIR=mock_settings.OUTPUT_DIR)
        resolver_validate = AsyncMock(return_value=None)
        with patch('pokescan.cli.settings', offline), \
             patch('pokescan.resolve.poketcg.PokemonTCGResolver.validate', new=resolver_validate):
            result = runner.invoke(app, ["scan", str(image)])

        assert result.exit_code == 0
        assert "Not found" in result.stdout
        assert list(Path(mock_settings.OUTPUT_DIR).glob("cards_*.csv"))
