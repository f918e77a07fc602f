"""Configuration and settings management."""

from typing import Literal, Optional
from pydantic_settings import BaseSettings
from pydantic import field_validator
from pathlib import Path
import shutil

from ..core.constants import API_TIMEOUT_S


class Settings(BaseSettings):
    # External APIs; a missing key means "not configured"
    GOOGLE_VISION_API_KEY: Optional[str] = None
    POKEMON_TCG_API_KEY: Optional[str] = None
    TCGPLAYER_API_KEY: Optional[str] = None
    POKEMON_PRICE_TRACKER_API_KEY: Optional[str] = None

    # Collaborator selection
    OCR_BACKEND: Literal["auto", "vision", "tesseract", "mock"] = "auto"
    USE_MOCK_PRICES: Optional[bool] = None

    # Network
    API_TIMEOUT_SECONDS: float = API_TIMEOUT_S

    # Logging
    LOG_LEVEL: str = "INFO"

    # Scan history output
    OUTPUT_DIR: str = "output"

    # OCR settings
    TESSERACT_PATH: Optional[str] = None

    @field_validator(
        'GOOGLE_VISION_API_KEY',
        'POKEMON_TCG_API_KEY',
        'TCGPLAYER_API_KEY',
        'POKEMON_PRICE_TRACKER_API_KEY',
        'TESSERACT_PATH',
        mode='before',
    )
    @classmethod
    def validate_optional_str(cls, v):
        """Convert empty/whitespace strings to None."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator('USE_MOCK_PRICES', mode='before')
    @classmethod
    def validate_mock_flag(cls, v):
        """Treat an empty flag as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator('LOG_LEVEL', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        """Convert empty/whitespace strings to default."""
        if isinstance(v, str) and not v.strip():
            return "INFO"
        return v

    @field_validator('OUTPUT_DIR', mode='before')
    @classmethod
    def validate_output_dir(cls, v):
        """Convert empty/whitespace strings to default."""
        if isinstance(v, str) and not v.strip():
            return "output"
        return v

    @field_validator('API_TIMEOUT_SECONDS')
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("API_TIMEOUT_SECONDS must be positive")
        return v

    @property
    def vision_configured(self) -> bool:
        return bool(self.GOOGLE_VISION_API_KEY)

    @property
    def tcgplayer_configured(self) -> bool:
        return bool(self.TCGPLAYER_API_KEY)

    @property
    def price_tracker_configured(self) -> bool:
        return bool(self.POKEMON_PRICE_TRACKER_API_KEY)

    @property
    def mock_prices_enabled(self) -> bool:
        """Mock pricing unless forced off, or when no pricing API is configured."""
        if self.USE_MOCK_PRICES is not None:
            return self.USE_MOCK_PRICES
        return not (self.tcgplayer_configured or self.price_tracker_configured)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"
    }

# Global settings instance
settings = Settings()


def ensure_output_dir(config: Optional[Settings] = None) -> Path:
    """Ensure the scan history directory exists and return it."""
    output_dir = Path((config or settings).OUTPUT_DIR)
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def resolve_tesseract_path(config: Optional[Settings] = None) -> str:
    """Get Tesseract path, with fallback to common locations."""
    config = config or settings
    if config.TESSERACT_PATH and Path(config.TESSERACT_PATH).exists():
        return config.TESSERACT_PATH

    # Try to find tesseract in PATH
    tesseract_path = shutil.which("tesseract")
    if tesseract_path:
        return tesseract_path

    common_paths = [
        "/opt/homebrew/bin/tesseract",  # Apple Silicon Homebrew
        "/usr/local/bin/tesseract",     # Intel Homebrew
        "/usr/bin/tesseract",           # System package
    ]

    for path in common_paths:
        if Path(path).exists():
            return path

    raise FileNotFoundError(
        "Tesseract not found. Please install with: brew install tesseract"
    )


def ensure_tesseract(config: Optional[Settings] = None) -> str:
    """Get Tesseract path, with fallback to common locations."""
    return resolve_tesseract_path(config)
