"""
Application Configuration — Environment & Settings
Centralizes all config from .env with Pydantic Settings for validation.
"""
from pathlib import Path
from functools import lru_cache
from pydantic_settings import BaseSettings

# Resolve paths relative to backend/ directory
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # --- Core ---
    APP_NAME: str = "Marriage Bureau API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # --- Database ---
    DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'data' / 'bureau.db'}"

    # --- Security ---
    SECRET_KEY: str = "bureau-secret-key-change-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24
    BCRYPT_ROUNDS: int = 12
    CORS_ORIGINS: list[str] = ["*"]

    # --- Bootstrap admin (created at startup when both are set) ---
    ADMIN_EMAIL: str = ""
    ADMIN_PASSWORD: str = ""
    ADMIN_NAME: str = "Bureau Admin"

    # --- Access requests ---
    UTR_MIN_LENGTH: int = 12
    DEFAULT_ACCESS_FEE: float = 500
    DEFAULT_UPI_ID: str = "example@upi"
    DEFAULT_QR_CODE_URL: str = "https://via.placeholder.com/300x300?text=QR+Code"

    # --- Asset store (S3) ---
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    AWS_REGION: str = "ap-south-1"
    AWS_S3_BUCKET: str = ""
    UPLOAD_MAX_BYTES: int = 5 * 1024 * 1024
    UPLOAD_ALLOWED_TYPES: list[str] = ["image/jpeg", "image/jpg", "image/png", "image/webp", "image/gif"]

    # --- Rate limits: (requests, window seconds) ---
    LOGIN_RATE_LIMIT: tuple[int, int] = (10, 60)
    CLAIM_RATE_LIMIT: tuple[int, int] = (5, 60)

    # --- Logging ---
    LOG_DIR: str = str(BASE_DIR / "logs")

    class Config:
        env_file = str(BASE_DIR / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()
