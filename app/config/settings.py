"""Application configuration classes.

Supports multiple environments via class inheritance.
DATABASE_URL can be set via environment variable; defaults to SQLite for local dev.
"""

import os


class BaseConfig:
    """Base configuration shared across all environments."""

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JSON_SORT_KEYS = False
    RESTX_MASK_SWAGGER = False

    # --- Credentials ---
    JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me")
    JWT_ALGORITHM = "HS256"
    JWT_EXPIRES_IN = int(os.getenv("JWT_EXPIRES_IN", str(60 * 60 * 24)))

    # --- Workflows ---
    SERVER_URL = os.getenv("SERVER_URL", "http://localhost:5000")
    WORKFLOW_BACKEND = os.getenv("WORKFLOW_BACKEND", "local")
    WORKFLOW_URL = os.getenv("WORKFLOW_URL", "")
    WORKFLOW_TOKEN = os.getenv("WORKFLOW_TOKEN", "")
    WORKFLOW_TIMEOUT_SECONDS = 10
    WORKFLOW_STEP_MAX_ATTEMPTS = int(os.getenv("WORKFLOW_STEP_MAX_ATTEMPTS", "3"))
    WORKFLOW_RETRY_BACKOFF_SECONDS = int(os.getenv("WORKFLOW_RETRY_BACKOFF_SECONDS", "60"))
    REMINDER_TIMEZONE = os.getenv("REMINDER_TIMEZONE", "UTC")

    # --- Mail ---
    MAIL_SERVER = os.getenv("MAIL_SERVER", "")
    MAIL_PORT = int(os.getenv("MAIL_PORT", "587"))
    MAIL_USERNAME = os.getenv("MAIL_USERNAME", "")
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD", "")
    MAIL_USE_TLS = os.getenv("MAIL_USE_TLS", "true").lower() == "true"
    MAIL_DEFAULT_SENDER = os.getenv("MAIL_DEFAULT_SENDER", "reminders@subtracker.local")


class DevelopmentConfig(BaseConfig):
    """Development configuration, SQLite fallback for local testing."""

    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///dev.db",
    )


class TestingConfig(BaseConfig):
    """Testing configuration, in-memory SQLite for fast tests."""

    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    JWT_SECRET = "testing-secret-key-with-enough-length"
    WORKFLOW_BACKEND = "local"
    WORKFLOW_TOKEN = "testing-workflow-token"
    MAIL_SERVER = ""


class ProductionConfig(BaseConfig):
    """Production configuration, requires DATABASE_URL and JWT_SECRET to be set."""

    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "")
    JWT_SECRET = os.getenv("JWT_SECRET", "")


CONFIG_MAP = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}
