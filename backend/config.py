"""
Settings for the ministry backend.

Values come from the environment (a local .env is loaded first). Required
settings are checked when this module is imported unless VALIDATE_CONFIG
is false; outside development a missing value stops the process.
"""
import logging
import os
from typing import List
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _env_flag(name: str, default: bool) -> bool:
    return os.getenv(name, "true" if default else "false").strip().lower() in ("1", "true", "yes")


def _env_list(name: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, "").split(",") if item.strip()]


class Settings:
    """Environment-backed settings, read once at import."""

    # Supabase / PostgREST. SUPABASE_API_KEY is accepted for setups without RLS
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_SERVICE_ROLE_KEY: str = os.getenv(
        "SUPABASE_SERVICE_ROLE_KEY",
        os.getenv("SUPABASE_API_KEY", "")
    )

    # Tokens (HS256). No default: signing and verification fail until set.
    JWT_SECRET: str = os.getenv("JWT_SECRET", "")
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_DAYS: int = int(os.getenv("JWT_EXPIRES_DAYS", "7"))

    # Passwords
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "10"))
    MIN_PASSWORD_LENGTH: int = 6

    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Only consulted when ENVIRONMENT=production
    CORS_ALLOWED_ORIGINS: List[str] = _env_list("CORS_ALLOWED_ORIGINS")

    @classmethod
    def missing(cls) -> List[str]:
        """Names of required settings that are empty."""
        required = {
            "SUPABASE_URL": cls.SUPABASE_URL,
            "SUPABASE_SERVICE_ROLE_KEY": cls.SUPABASE_SERVICE_ROLE_KEY,
            "JWT_SECRET": cls.JWT_SECRET,
        }
        return [name for name, value in required.items() if not value]

    @classmethod
    def validate(cls) -> None:
        """
        Raises:
            ValueError: If any required setting is missing.
        """
        missing = cls.missing()
        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}. "
                "Check your .env file."
            )

    @classmethod
    def is_production(cls) -> bool:
        return cls.ENVIRONMENT.lower() == "production"

    @classmethod
    def is_development(cls) -> bool:
        return cls.ENVIRONMENT.lower() == "development"


settings = Settings()

if _env_flag("VALIDATE_CONFIG", True):
    try:
        settings.validate()
    except ValueError as e:
        if not settings.is_development():
            raise
        logger.warning(f"{e} The API will fail on first use until this is fixed.")
