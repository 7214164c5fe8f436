"""
Configuration settings loaded from environment variables.
"""
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import Optional, Any, List
from dotenv import load_dotenv
from pathlib import Path

# Determine .env file path (backend/.env)
_env_path = Path(__file__).parent.parent / ".env"

# Values from backend/.env override variables already set in the environment
load_dotenv(dotenv_path=_env_path, override=True)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # OCR settings
    ocr_language: str = Field(
        default="deu+eng",
        alias="OCR_LANGUAGE",
        description="Tesseract language hint (e.g. deu, eng, deu+eng)"
    )
    tesseract_cmd: Optional[str] = Field(
        default=None,
        alias="TESSERACT_CMD",
        description="Absolute path to the tesseract executable (optional, PATH lookup otherwise)"
    )
    contrast_factor: float = Field(
        default=1.5,
        alias="CONTRAST_FACTOR",
        description="Contrast stretch around mid-gray applied before OCR"
    )

    # Extraction settings
    rule_set: str = Field(
        default="default",
        alias="RULE_SET",
        description="Rule set id (file name under receipt_tally/rule_sets without .json)"
    )
    min_price: float = Field(
        default=0.0,
        alias="MIN_PRICE",
        description="Prices must be strictly greater than this value"
    )
    max_price: float = Field(
        default=1000.0,
        alias="MAX_PRICE",
        description="Prices must be strictly less than this value (rejects garbled totals)"
    )

    # Aggregation settings
    similarity_scorer: str = Field(
        default="ratio",
        alias="SIMILARITY_SCORER",
        description="rapidfuzz scorer: ratio, partial_ratio, token_sort_ratio, token_set_ratio, WRatio"
    )
    similarity_threshold: float = Field(
        default=80.0,
        alias="SIMILARITY_THRESHOLD",
        description="Names merge only when the score is strictly greater than this (0-100 scale)"
    )

    # Batch settings
    image_extensions: str = Field(
        default="jpg,jpeg,png,tiff,bmp",
        alias="IMAGE_EXTENSIONS",
        description="Comma-separated allow-list of image extensions (case-insensitive)"
    )
    max_workers: int = Field(
        default=1,
        alias="MAX_WORKERS",
        description="OCR worker threads; aggregation always happens in input order"
    )

    # Presentation settings
    currency_symbol: str = Field(
        default="€",
        alias="CURRENCY_SYMBOL",
        description="Currency symbol used when rendering totals"
    )

    # Application settings
    log_level: str = Field(
        default="info",
        alias="LOG_LEVEL",
        description="Logging level"
    )
    log_ocr_text: bool = Field(
        default=False,
        alias="LOG_OCR_TEXT",
        description="Log raw OCR text of every image at debug level"
    )

    @property
    def image_extension_list(self) -> List[str]:
        """Extension allow-list without dots, lower-cased."""
        return [
            ext.strip().lstrip(".").lower()
            for ext in self.image_extensions.split(",")
            if ext.strip()
        ]

    @field_validator('log_ocr_text', mode='before')
    @classmethod
    def parse_bool_from_string(cls, v: Any) -> bool:
        """Parse boolean from string environment variable."""
        if isinstance(v, bool):
            return v
        if isinstance(v, str):
            return v.lower() in ('true', '1', 'yes', 'on', 'y', 't')
        return bool(v)

    @field_validator('max_workers')
    @classmethod
    def check_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError("MAX_WORKERS must be at least 1")
        return v

    model_config = {
        "env_file": str(_env_path),
        "case_sensitive": False,
        "env_file_encoding": "utf-8",
        "populate_by_name": True,
    }


# Create a singleton settings instance
settings = Settings()
