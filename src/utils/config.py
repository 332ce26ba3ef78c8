"""Configuration management for the shipping label processor.

Loads and validates YAML configuration with sensible defaults
for OCR, identifier extraction, and order fulfillment settings.
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class OCRConfig(BaseModel):
    """Configuration for PDF rendering and Tesseract OCR."""

    tesseract_cmd: str | None = None
    tessdata_dir: str | None = None
    default_lang: str = "eng"
    oem: int = 1
    psm: int = 3
    pdf_dpi: int = 300
    first_page_only: bool = True


class ExtractionConfig(BaseModel):
    """Configuration for identifier extraction."""

    filename_fallback: bool = True


class FulfillmentConfig(BaseModel):
    """Configuration for the order fulfillment API."""

    base_url: str = "https://shipstation-proxy.info-ba2.workers.dev"
    timeout: float = 30.0
    carrier_code: str = "usps"
    awaiting_status: str = "awaiting_shipment"
    notify_customer: bool = True
    notify_sales_channel: bool = True
    assign_user_id: str | None = None


class AppConfig(BaseModel):
    """Top-level application configuration."""

    ocr: OCRConfig = Field(default_factory=OCRConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    fulfillment: FulfillmentConfig = Field(default_factory=FulfillmentConfig)
    log_level: str = "INFO"
    log_dir: str | None = "logs"


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.
            Defaults to configs/config.yaml.

    Returns:
        Validated application configuration.
    """
    if path is None:
        path = Path("configs/config.yaml")

    if path.exists():
        logger.info("Loading configuration from %s", path)
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        return AppConfig(**raw)

    logger.info("No config file found at %s, using defaults", path)
    return AppConfig()
