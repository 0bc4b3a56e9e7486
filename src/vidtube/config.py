import os
from typing import List


def _split_env_list(value: str) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item and item.strip()]


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default) in {"1", "true", "True", "yes"}


class Settings:
    """Centralized application settings loaded from environment variables.

    This keeps security-sensitive values (like JWT secrets) and cross-cutting
    config (like CORS and rate limits) in one place.
    """

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./vidtube.db")
    DB_AUTO_CREATE: bool = _env_flag(
        "DB_AUTO_CREATE", "1" if DATABASE_URL.startswith("sqlite") else "0"
    )
    DB_ECHO: bool = _env_flag("DB_ECHO", "0")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # JWT / Auth
    SECRET_KEY: str = os.getenv("SECRET_KEY", "")
    REFRESH_SECRET_KEY: str = os.getenv("REFRESH_SECRET_KEY", "") or SECRET_KEY
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
    REFRESH_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("REFRESH_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 10)))
    JWT_ISSUER: str | None = os.getenv("JWT_ISSUER") or None
    JWT_AUDIENCE: str | None = os.getenv("JWT_AUDIENCE") or None

    # CORS
    # Comma-separated list, e.g. "http://localhost:3000,http://localhost:5173"
    _cors_origins_env: str = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://localhost:5173,http://localhost:8000",
    )
    CORS_ORIGINS: List[str] = _split_env_list(_cors_origins_env)

    # Rate limiting
    RATE_LIMIT: str = os.getenv("RATE_LIMIT", "100/minute")
    RATE_LIMIT_ENABLED: bool = _env_flag("RATE_LIMIT_ENABLED", "1")

    # Media storage
    MEDIA_UPLOAD_DIR: str = os.getenv("MEDIA_UPLOAD_DIR", "./uploads")
    MEDIA_URL_PREFIX: str = os.getenv("MEDIA_URL_PREFIX", "/media")


settings = Settings()
