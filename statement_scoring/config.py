"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "statement-scoring"
    log_level: str = "INFO"

    # Text recognition
    ocr_service_url: str | None = None  # Remote OCR endpoint; local tesseract when unset
    ocr_timeout_seconds: float = 30.0
    ocr_language: str = "eng"

    # Eligibility policy overrides
    currency_symbol: str = "₹"
    savings_threshold: float = 10_000.0
    loan_cap: float = 100_000.0
    min_eligible_score: int = 60
    min_savings_rate: float = 5.0


settings = Settings()
