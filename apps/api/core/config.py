"""Centralized application configuration via Pydantic Settings.

Loads all env vars into a typed Settings instance so the ingestion
router and OCR client never read os.environ directly.
"""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # OCR.space
    OCR_SPACE_API_KEY: str = Field(
        default="helloworld",
        description="OCR.space API key (the default is the public demo key)",
    )
    OCR_SPACE_URL: str = Field(
        default="https://api.ocr.space/parse/image",
        description="OCR.space parse endpoint",
    )
    OCR_ENGINE: str = Field(default="2", description="OCR.space engine number")
    OCR_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        description="Upper bound for one OCR round trip",
    )

    # Uploads
    MAX_UPLOAD_BYTES: int = Field(
        default=10 * 1024 * 1024,
        description="Largest accepted upload in bytes",
    )

    # CORS
    ALLOWED_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Comma-separated allowed origins for CORS",
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Python log level")
    ENVIRONMENT: str = Field(
        default="development",
        description="Runtime environment: development, staging, production",
    )

    # App
    APP_VERSION: str = Field(default="0.1.0", description="Application version")

    @property
    def allowed_origins(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    @property
    def log_level(self) -> str:
        return self.LOG_LEVEL

    @property
    def json_logs(self) -> bool:
        return self.ENVIRONMENT == "production"

    model_config = {"env_file": ".env", "extra": "ignore"}


def get_settings() -> Settings:
    """Factory for Settings: allows test override."""
    return Settings()


settings = get_settings()
