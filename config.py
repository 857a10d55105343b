import logging
import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel

logger = logging.getLogger(__name__)

# Fallbacks used when the environment leaves a value unset. The last three
# are only acceptable while developing locally.
DEFAULT_MONGODB_URI = "mongodb://localhost:27017/"
DEFAULT_SESSION_SECRET = "fallback-secret"
DEFAULT_ADMIN_EMAIL = "a@gmail.com"
DEFAULT_ADMIN_PASSWORD = "12345"

DEVELOPMENT_ENVS = ("development", "test")


class ConfigurationError(RuntimeError):
    pass


class Settings(BaseModel):
    mongodb_uri: str = DEFAULT_MONGODB_URI
    database_name: str = "pdf_management"
    session_secret: str = DEFAULT_SESSION_SECRET
    admin_email: str = DEFAULT_ADMIN_EMAIL
    admin_password: str = DEFAULT_ADMIN_PASSWORD
    port: int = 3000
    app_env: str = "development"
    max_upload_bytes: int = 10 * 1024 * 1024
    session_max_age: int = 24 * 60 * 60
    cookie_secure: bool = False
    cors_origins: List[str] = [
        "http://localhost:5173",   # Vite dev server
        "http://127.0.0.1:5173",
    ]
    seed_sample_data: bool = True

    @property
    def is_development(self) -> bool:
        return self.app_env in DEVELOPMENT_ENVS

    def insecure_defaults(self) -> List[str]:
        """Names of the variables still holding their published fallback value."""
        insecure = []
        if self.session_secret == DEFAULT_SESSION_SECRET:
            insecure.append("SESSION_SECRET")
        if self.admin_email == DEFAULT_ADMIN_EMAIL:
            insecure.append("ADMIN_EMAIL")
        if self.admin_password == DEFAULT_ADMIN_PASSWORD:
            insecure.append("ADMIN_PASSWORD")
        return insecure


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


def _env_list(name: str, default: List[str]) -> List[str]:
    value = os.getenv(name)
    if value is None:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


def check_settings(settings: Settings) -> Settings:
    """Refuse the insecure fallbacks anywhere but a development environment."""
    insecure = settings.insecure_defaults()
    if not insecure:
        return settings

    if not settings.is_development:
        raise ConfigurationError(
            f"Refusing to start in '{settings.app_env}' with default values for: "
            + ", ".join(insecure)
        )

    logger.warning(
        "Using insecure default values for %s (APP_ENV=%s)",
        ", ".join(insecure),
        settings.app_env,
    )
    return settings


def load_settings() -> Settings:
    load_dotenv()

    defaults = Settings()
    settings = Settings(
        mongodb_uri=os.getenv("MONGODB_URI") or DEFAULT_MONGODB_URI,
        database_name=os.getenv("MONGODB_DB") or defaults.database_name,
        session_secret=os.getenv("SESSION_SECRET") or DEFAULT_SESSION_SECRET,
        admin_email=os.getenv("ADMIN_EMAIL") or DEFAULT_ADMIN_EMAIL,
        admin_password=os.getenv("ADMIN_PASSWORD") or DEFAULT_ADMIN_PASSWORD,
        port=_env_int("PORT", defaults.port),
        app_env=(os.getenv("APP_ENV") or defaults.app_env).strip().lower(),
        max_upload_bytes=_env_int("MAX_UPLOAD_MB", 10) * 1024 * 1024,
        session_max_age=_env_int("SESSION_MAX_AGE", defaults.session_max_age),
        cookie_secure=_env_bool("COOKIE_SECURE", defaults.cookie_secure),
        cors_origins=_env_list("CORS_ORIGINS", defaults.cors_origins),
        seed_sample_data=_env_bool("SEED_SAMPLE_DATA", defaults.seed_sample_data),
    )
    return check_settings(settings)
