"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MEGABYTE = 1024 * 1024


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App settings
    app_name: str = "Peakbook API"
    debug: bool = False
    secret_key: str  # Required, no default

    # Storage
    data_dir: Path = Path("./data")
    media_root: Path = Path(".")

    # JWT Authentication
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 60 * 24 * 30

    # Uploads
    max_profile_image_bytes: int = 5 * MEGABYTE
    max_mountain_image_bytes: int = 10 * MEGABYTE
    max_images_per_request: int = 5

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v: str, info) -> str:
        """Validate that secret_key is secure."""
        if not v:
            raise ValueError("SECRET_KEY is required")

        # In production mode, ensure secret key is strong
        debug = info.data.get("debug", False)
        if not debug:
            if len(v) < 32:
                raise ValueError("SECRET_KEY must be at least 32 characters in production mode")
            if v in ("change-me-in-production", "secret", "password", "changeme"):
                raise ValueError("SECRET_KEY must not be a common weak value")

        return v

    @property
    def uploads_dir(self) -> Path:
        """Directory served under the /uploads static prefix."""
        return self.media_root / "uploads"

    def validate_runtime_config(self) -> list[str]:
        """Validate runtime configuration and return warnings."""
        warnings = []

        if not self.data_dir.exists():
            warnings.append(f"DATA_DIR {self.data_dir} does not exist yet - it will be created")

        if not self.uploads_dir.exists():
            warnings.append(
                f"Upload directory {self.uploads_dir} does not exist yet - it will be created"
            )

        if self.max_profile_image_bytes != self.max_mountain_image_bytes:
            warnings.append(
                "Profile and mountain image size limits differ "
                f"({self.max_profile_image_bytes} vs {self.max_mountain_image_bytes} bytes)"
            )

        # Warn about debug mode in production
        if self.debug:
            warnings.append("DEBUG mode is enabled - should be disabled in production")

        return warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
