import os
from pathlib import Path


BASE_DIR = Path(__file__).resolve().parent.parent


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class BaseConfig:
    """Base application configuration shared across environments."""

    # Security
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret-key-change-me")

    # Storage backend: "memory", "redis" or "sql"
    KV_BACKEND: str = os.getenv("KV_BACKEND", "memory")
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    REDIS_SOCKET_TIMEOUT: float = float(os.getenv("REDIS_SOCKET_TIMEOUT", "2.0"))

    # Database (only used by the "sql" backend)
    SQLALCHEMY_DATABASE_URI: str = os.getenv(
        "DATABASE_URL",
        "sqlite+pysqlite:///" + str(BASE_DIR / "pastebin.db"),
    )
    SQLALCHEMY_ECHO: bool = False
    SQLALCHEMY_FUTURE: bool = True
    # Create tables on startup instead of running Alembic migrations.
    SQLALCHEMY_CREATE_TABLES: bool = _env_flag("SQLALCHEMY_CREATE_TABLES")

    # Pastes
    PUBLIC_BASE_URL: str = os.getenv("PUBLIC_BASE_URL", "http://localhost:5000")
    PASTE_ID_LENGTH: int = int(os.getenv("PASTE_ID_LENGTH", "8"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Accept the X-Test-Now-Ms header as the current instant.
    TEST_MODE: bool = _env_flag("TEST_MODE")

    # Other Flask-style config flags
    TESTING: bool = False
    DEBUG: bool = False


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SQLALCHEMY_ECHO = False
    SQLALCHEMY_CREATE_TABLES = True


class ProductionConfig(BaseConfig):
    DEBUG = False


class TestingConfig(BaseConfig):
    TESTING = True
    TEST_MODE = True
    KV_BACKEND = "memory"
    SQLALCHEMY_CREATE_TABLES = True
    SQLALCHEMY_ECHO = False

    SQLALCHEMY_DATABASE_URI: str = os.getenv(
        "TEST_DATABASE_URL",
        "sqlite+pysqlite:///:memory:",
    )


CONFIG_BY_NAME = {
    "development": DevelopmentConfig,
    "dev": DevelopmentConfig,
    "production": ProductionConfig,
    "prod": ProductionConfig,
    "testing": TestingConfig,
    "test": TestingConfig,
}


def get_config(env_name: str | None) -> type[BaseConfig]:
    """Return a config class for the given environment name."""
    if not env_name:
        return DevelopmentConfig
    return CONFIG_BY_NAME.get(env_name, DevelopmentConfig)
