"""Tests for configuration loading and validation."""

from pathlib import Path

import yaml

from src.utils.config import (
    AppConfig,
    ExtractionConfig,
    FulfillmentConfig,
    OCRConfig,
    load_config,
)


class TestOCRConfig:
    """Tests for OCRConfig defaults and overrides."""

    def test_defaults(self) -> None:
        cfg = OCRConfig()
        assert cfg.default_lang == "eng"
        assert cfg.oem == 1
        assert cfg.psm == 3
        assert cfg.pdf_dpi == 300
        assert cfg.first_page_only is True
        assert cfg.tesseract_cmd is None
        assert cfg.tessdata_dir is None

    def test_override(self) -> None:
        cfg = OCRConfig(psm=6, tessdata_dir="/usr/share/tesseract-ocr/4.00/tessdata")
        assert cfg.psm == 6
        assert cfg.tessdata_dir == "/usr/share/tesseract-ocr/4.00/tessdata"


class TestExtractionConfig:
    """Tests for ExtractionConfig defaults."""

    def test_defaults(self) -> None:
        assert ExtractionConfig().filename_fallback is True


class TestFulfillmentConfig:
    """Tests for FulfillmentConfig defaults."""

    def test_defaults(self) -> None:
        cfg = FulfillmentConfig()
        assert cfg.carrier_code == "usps"
        assert cfg.awaiting_status == "awaiting_shipment"
        assert cfg.notify_customer is True
        assert cfg.notify_sales_channel is True
        assert cfg.assign_user_id is None
        assert cfg.timeout == 30.0


class TestAppConfig:
    """Tests for the top-level AppConfig."""

    def test_defaults(self) -> None:
        cfg = AppConfig()
        assert isinstance(cfg.ocr, OCRConfig)
        assert isinstance(cfg.extraction, ExtractionConfig)
        assert isinstance(cfg.fulfillment, FulfillmentConfig)
        assert cfg.log_level == "INFO"
        assert cfg.log_dir == "logs"

    def test_nested_override(self) -> None:
        cfg = AppConfig(
            extraction=ExtractionConfig(filename_fallback=False),
            log_level="DEBUG",
        )
        assert cfg.extraction.filename_fallback is False
        assert cfg.log_level == "DEBUG"


class TestLoadConfig:
    """Tests for the load_config function."""

    def test_load_shipped_config(self, config_dir: Path) -> None:
        cfg = load_config(config_dir / "config.yaml")
        assert isinstance(cfg, AppConfig)
        assert cfg.ocr.default_lang == "eng"
        assert cfg.fulfillment.carrier_code == "usps"

    def test_load_missing_file_returns_defaults(self) -> None:
        cfg = load_config(Path("/nonexistent/path/config.yaml"))
        assert isinstance(cfg, AppConfig)
        assert cfg.ocr.default_lang == "eng"

    def test_load_custom_yaml(self, tmp_path: Path) -> None:
        config_data = {
            "ocr": {"psm": 6, "first_page_only": False},
            "fulfillment": {"assign_user_id": "user-1", "carrier_code": "ups"},
            "log_level": "DEBUG",
            "log_dir": None,
        }
        config_file = tmp_path / "config.yaml"
        with open(config_file, "w") as f:
            yaml.dump(config_data, f)

        cfg = load_config(config_file)
        assert cfg.ocr.psm == 6
        assert cfg.ocr.first_page_only is False
        assert cfg.fulfillment.assign_user_id == "user-1"
        assert cfg.fulfillment.carrier_code == "ups"
        assert cfg.log_level == "DEBUG"
        assert cfg.log_dir is None

    def test_load_empty_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        cfg = load_config(config_file)
        assert isinstance(cfg, AppConfig)

    def test_load_none_defaults_to_standard_path(self) -> None:
        cfg = load_config()
        assert isinstance(cfg, AppConfig)
