"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'


# Load .env during development (no-op when the file is absent)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


def parse_instant(value: str | datetime) -> datetime:
    """Parse an ISO-8601 date or datetime into an aware UTC ``datetime``.

    Parameters
    ----------
    value: str | datetime
        ``"2025-07-01"``, ``"2025-07-01T09:00:00+01:00"`` or a ``datetime``.
        Naive values are interpreted as UTC.

    Returns
    -------
    datetime
        Timezone-aware instant normalised to UTC.
    """
    parsed = value if isinstance(value, datetime) else datetime.fromisoformat(value.strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret used for session signing.
    JWT_SECRET_KEY: str
        Key used by ``flask-jwt-extended`` to sign administrator tokens.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.
    EVENT_ID_PREFIX: str
        Constant prefix of issued event identifiers (``edo-ahapn-``).
    EVENT_ID_WIDTH: int
        Zero-padding width of the numeric suffix.
    LATE_REGISTRATION_START: str
        Instant from which a late registration code is mandatory.
    CERTIFICATE_RELEASE_DATE: str
        Instant from which certificates may be downloaded.
    ADMISSION_MAX_ATTEMPTS: int
        Identifier allocation attempts before giving up on a race.
    ADMISSION_TIMEOUT_SECONDS: float
        Execution budget of a single admission.
    UPLOAD_FOLDER: str
        Directory receiving registrant photos.
    MAX_PHOTO_BYTES: int
        Upper bound for an uploaded photo.
    MAIL_*:
        SMTP settings used by the notifier.
    SEED_CODES_ON_STARTUP: bool
        Seed registration code pools when the server boots.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "CHANGE_ME_JWT")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "https://ahapnng.org")

    # Reverse proxy
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)
    PROXY_HOPS = env_int("PROXY_HOPS", 1)

    # Event
    EVENT_ID_PREFIX = os.getenv("EVENT_ID_PREFIX", "edo-ahapn-")
    EVENT_ID_WIDTH = env_int("EVENT_ID_WIDTH", 4)
    EVENT_TITLE = os.getenv("EVENT_TITLE", "EDO 2025")
    EVENT_SUBTITLE = os.getenv("EVENT_SUBTITLE", "26TH ANNUAL NATIONAL SCIENTIFIC CONFERENCE")
    EVENT_DATE_RANGE = os.getenv("EVENT_DATE_RANGE", "Aug 4-9, 2025")
    ORGANISATION_NAME = os.getenv("ORGANISATION_NAME", "AHAPN")
    ORGANISATION_FOOTER = os.getenv(
        "ORGANISATION_FOOTER", "AHAPN | ahapn2021@gmail.com | 08079238160"
    )
    LATE_REGISTRATION_START = os.getenv("LATE_REGISTRATION_START", "2025-07-01")
    CERTIFICATE_RELEASE_DATE = os.getenv("CERTIFICATE_RELEASE_DATE", "2025-08-09")

    # Admission workflow
    ADMISSION_MAX_ATTEMPTS = env_int("ADMISSION_MAX_ATTEMPTS", 3)
    ADMISSION_TIMEOUT_SECONDS = float(os.getenv("ADMISSION_TIMEOUT_SECONDS", "30"))

    # Uploads & artwork
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "uploads")
    MAX_PHOTO_BYTES = env_int("MAX_PHOTO_BYTES", 5 * 1024 * 1024)
    LOGO_PATH = os.getenv("LOGO_PATH", "assets/ahapn-logo.png")
    ACCENT_IMAGE_PATH = os.getenv("ACCENT_IMAGE_PATH", "assets/benin-mask.png")
    CERTIFICATE_TEMPLATE_PATH = os.getenv(
        "CERTIFICATE_TEMPLATE_PATH", "assets/certificate-template.jpeg"
    )

    # Mail
    MAIL_ENABLED = env_bool("MAIL_ENABLED", True)
    MAIL_SERVER = os.getenv("MAIL_SERVER", "smtp.gmail.com")
    MAIL_PORT = env_int("MAIL_PORT", 587)
    MAIL_USE_TLS = env_bool("MAIL_USE_TLS", True)
    MAIL_USERNAME = os.getenv("MAIL_USERNAME", os.getenv("EMAIL_USER", ""))
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD", os.getenv("EMAIL_PASS", ""))
    MAIL_DEFAULT_SENDER = os.getenv("MAIL_DEFAULT_SENDER", MAIL_USERNAME)
    MAIL_TIMEOUT = float(os.getenv("MAIL_TIMEOUT", "20"))

    # Seed data
    REGISTRATION_CODES_FILE = os.getenv("REGISTRATION_CODES_FILE")
    LATE_REGISTRATION_CODES_FILE = os.getenv("LATE_REGISTRATION_CODES_FILE")
    SEED_CODES_ON_STARTUP = env_bool("SEED_CODES_ON_STARTUP", True)

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and prints emails to the log instead of
    sending them unless ``MAIL_ENABLED`` is explicitly set.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    CORS_MAX_AGE = 600  # 10 minutes
    MAIL_ENABLED = env_bool("MAIL_ENABLED", False)


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Never talks to an SMTP server.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    PROPAGATE_EXCEPTIONS = True
    MAIL_ENABLED = False
    SEED_CODES_ON_STARTUP = False


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled while relying on WSGI-level log
    configuration for noise control.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
