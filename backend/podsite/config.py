"""
Podsite Configuration Module

This module implements a hierarchical configuration system:
1. Secrets are retrieved from environment variables (never from config.yaml)
2. Other settings are loaded from the config.yaml file in backend/

Environment Variables:
    - ADMIN_PASSWORD: Password for the admin account (login is refused when unset)
    - SESSION_SECRET: HMAC key used to sign admin session tokens
    - DATABASE_URL: Optional override for database.url

Usage:
    export ADMIN_PASSWORD="your_password_here"
    export SESSION_SECRET="$(openssl rand -hex 32)"
"""
import os
from pathlib import Path
from typing import Optional

import yaml


# ==================== Path Configuration ====================
# Get the project root directory (backend/)
BASE_DIR = Path(__file__).resolve().parent.parent
CONFIG_PATH = BASE_DIR / "config.yaml"


# ==================== Load YAML Configuration ====================
def _load_yaml_config():
    """Load configuration from config.yaml file."""
    if not CONFIG_PATH.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {CONFIG_PATH}\n"
            "Please create config.yaml in the backend directory."
        )

    with open(CONFIG_PATH, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


# Load config at module import time
_config = _load_yaml_config()


def get_config(key: str, default=None):
    """
    Get configuration value by dot-notation key.

    Args:
        key: Dot-separated key path (e.g., 'storage.backend')
        default: Default value if key not found

    Returns:
        Configuration value or default
    """
    keys = key.split(".")
    value = _config

    for k in keys:
        if isinstance(value, dict):
            value = value.get(k)
        else:
            return default

    return value if value is not None else default


# ==================== Secrets from Environment Variables ====================
def _get_env_key(key: str, required: bool = True) -> Optional[str]:
    """
    Get a secret from an environment variable.

    Args:
        key: Environment variable name
        required: If True, raises error when key is not set

    Returns:
        Secret value or None

    Raises:
        ValueError: If required key is not set
    """
    value = os.environ.get(key)
    if required and not value:
        raise ValueError(
            f"Required environment variable '{key}' is not set.\n"
            f"Please set it before starting the server:\n"
            f"  export {key}=\"your_value_here\""
        )
    return value


def _resolve_path(relative: str) -> str:
    """Resolve a config path relative to BASE_DIR (absolute paths pass through)."""
    path = Path(relative)
    if path.is_absolute():
        return str(path)
    return str((BASE_DIR / path).resolve())


def _resolve_database_url(url: str) -> str:
    """Anchor relative SQLite file URLs at BASE_DIR."""
    prefix = "sqlite:///"
    if url.startswith(prefix) and not url.startswith("sqlite:////"):
        relative = url[len(prefix):]
        if relative and relative != ":memory:":
            return prefix + _resolve_path(relative)
    return url


# ==================== Public Configuration Constants ====================

# Application Settings
APP_NAME = get_config("app.name", "Podsite")
APP_VERSION = get_config("app.version", "1.0.0")
DEBUG = get_config("app.debug", False)
ENVIRONMENT = get_config("app.environment", "development")
IS_PRODUCTION = ENVIRONMENT == "production"

# Database Settings
DATABASE_URL = _resolve_database_url(
    _get_env_key("DATABASE_URL", required=False)
    or get_config("database.url", "sqlite:///./data/episodes.db")
)
DATABASE_ECHO = get_config("database.echo", False)

# Episode Store Settings
STORAGE_BACKEND = get_config("storage.backend", "database")
LOCAL_STORE_PATH = _resolve_path(get_config("storage.local_path", "./data/episodes-local.json"))
FALLBACK_ENABLED = get_config("storage.fallback_enabled", True)

# ==================== Media Configuration ====================
MEDIA_ROOT = _resolve_path(get_config("media.root", "./data/media"))
MEDIA_BASE_URL = get_config("media.base_url", "/media/")
MAX_UPLOAD_BYTES = get_config("media.max_upload_bytes", 20 * 1024 * 1024)
COMPRESS_THRESHOLD_BYTES = get_config("media.compress_threshold_bytes", 1024 * 1024)
IMAGE_MAX_WIDTH = get_config("media.max_width", 1200)
IMAGE_QUALITY = get_config("media.quality", 80)

# ==================== Admin Authentication ====================
ADMIN_USERNAME = get_config("auth.username", "admin-1")
SESSION_COOKIE = get_config("auth.session_cookie", "admin_session")
SESSION_DURATION = get_config("auth.session_duration", 60 * 60 * 24)

ADMIN_PASSWORD = _get_env_key("ADMIN_PASSWORD", required=False)
SESSION_SECRET = _get_env_key("SESSION_SECRET", required=False)

# ==================== Catalog Configuration ====================
PAGE_SIZE = get_config("catalog.page_size", 9)
MAX_FEATURED = get_config("catalog.max_featured", 6)
SHOWCASE_MIN = get_config("catalog.showcase_min", 4)

# ==================== Logging Configuration ====================
LOG_LEVEL = get_config("logging.level", "INFO")
LOG_FILE = _resolve_path(get_config("logging.file", "./logs/app.log"))
LOG_ROTATION = get_config("logging.rotation", "10 MB")
LOG_RETENTION = get_config("logging.retention", "7 days")

# ==================== API Server Configuration ====================
API_HOST = get_config("api.host", "127.0.0.1")
API_PORT = get_config("api.port", 8000)
CORS_ORIGINS = get_config("api.cors_origins", ["http://localhost:3000"])


# ==================== Utility Functions ====================
def print_config_summary():
    """Print a summary of current configuration (without exposing secrets)."""
    print(f"\n{'='*60}")
    print(f"Application: {APP_NAME} v{APP_VERSION}")
    print(f"Environment: {ENVIRONMENT}")
    print(f"Debug Mode: {DEBUG}")
    print(f"{'='*60}")
    print(f"\n[Storage]")
    print(f"  Backend: {STORAGE_BACKEND}")
    print(f"  Database URL: {DATABASE_URL}")
    print(f"  Local Store: {LOCAL_STORE_PATH}")
    print(f"  Fallback Enabled: {FALLBACK_ENABLED}")

    print(f"\n[Media]")
    print(f"  Root: {MEDIA_ROOT}")
    print(f"  Base URL: {MEDIA_BASE_URL}")

    print(f"\n[Admin]")
    print(f"  Username: {ADMIN_USERNAME}")
    print(f"  Password: {'*** Set ***' if ADMIN_PASSWORD else 'NOT SET'}")
    print(f"  Session Secret: {'*** Set ***' if SESSION_SECRET else 'NOT SET (ephemeral)'}")

    print(f"\n[API Server]")
    print(f"  Host: {API_HOST}")
    print(f"  Port: {API_PORT}")
    print(f"{'='*60}\n")


if __name__ == "__main__":
    # Test configuration loading
    print_config_summary()
