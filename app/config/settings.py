"""
Settings for the media upload client.

This is the single settings file for all environments. Configuration is driven
by environment variables using django-environ, following the 12-factor app
methodology.

Environment files:
    - .env.development: Development settings (local API, verbose logging)
    - .env.production: Production settings (production API origin)

Upload limits here are the production defaults. They are read once and turned
into an immutable ``uploads.config.UploadConfig`` by
``UploadConfig.from_settings()``; nothing mutates them at runtime.
"""

import os
from pathlib import Path

import environ

# =============================================================================
# Path Configuration
# =============================================================================
BASE_DIR = Path(__file__).resolve().parent.parent

# =============================================================================
# Environment Configuration
# =============================================================================
env = environ.Env(
    UPLOAD_PLATFORM=(str, "ios"),
    LOG_LEVEL=(str, "INFO"),
)

# Note: On device builds env vars are injected at build time; .env files are for local dev
env_file = os.environ.get("ENV_FILE", BASE_DIR.parent / ".env.development")
if Path(env_file).exists():
    environ.Env.read_env(env_file)

# =============================================================================
# API Configuration
# =============================================================================
# Origin of the application server (sign, upload, and status endpoints)
UPLOAD_API_BASE_URL = env("UPLOAD_API_BASE_URL", default="http://localhost:5000")

# Host platform: "ios", "android" or "web"
UPLOAD_PLATFORM = env("UPLOAD_PLATFORM")

# Device cache directory used when materializing asset references
UPLOAD_CACHE_DIR = env(
    "UPLOAD_CACHE_DIR", default=str(BASE_DIR.parent / "cache")
)

# =============================================================================
# Upload Limits
# =============================================================================
# Must match the server values
UPLOAD_MAX_IMAGE_SIZE = env.int("UPLOAD_MAX_IMAGE_SIZE", default=100 * 1024 * 1024)  # 100MB
UPLOAD_MAX_VIDEO_SIZE = env.int(
    "UPLOAD_MAX_VIDEO_SIZE", default=2 * 1024 * 1024 * 1024
)  # 2GB
UPLOAD_MAX_AUDIO_SIZE = env.int("UPLOAD_MAX_AUDIO_SIZE", default=100 * 1024 * 1024)  # 100MB

# Files strictly larger than this go straight to the storage provider
UPLOAD_DIRECT_THRESHOLD = env.int(
    "UPLOAD_DIRECT_THRESHOLD", default=20 * 1024 * 1024
)  # 20MB

# Hard transport timeouts in seconds
UPLOAD_PROXIED_TIMEOUT = env.float("UPLOAD_PROXIED_TIMEOUT", default=600.0)  # 10 min
UPLOAD_DIRECT_TIMEOUT = env.float("UPLOAD_DIRECT_TIMEOUT", default=900.0)  # 15 min

# Reject uploads whose asset reference could not be copied to the cache
UPLOAD_STRICT_NORMALIZATION = env.bool("UPLOAD_STRICT_NORMALIZATION", default=False)

# =============================================================================
# Logging Configuration
# =============================================================================
LOG_LEVEL = env("LOG_LEVEL")

LOG_FILE_NAME = env("LOG_FILE_NAME", default="uploads.log")
LOG_DIR = Path(env("LOG_DIR", default=str(BASE_DIR / "logs")))

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{levelname} {asctime} {module} {process:d} {thread:d} {message}",
            "style": "{",
        },
        "simple": {
            "format": "{levelname} {message}",
            "style": "{",
        },
        "file": {
            "format": "[{asctime}] {levelname} {name} {module}:{lineno} - {message}",
            "style": "{",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
        "file": {
            # Max 10MB per file, keeps 5 backups
            "level": "DEBUG",
            "class": "logging.handlers.RotatingFileHandler",
            "filename": LOG_DIR / LOG_FILE_NAME,
            "maxBytes": 10 * 1024 * 1024,  # 10MB
            "backupCount": 5,
            "formatter": "file",
            "encoding": "utf-8",
        },
    },
    "root": {
        "handlers": ["console", "file"],
        "level": LOG_LEVEL,
    },
    "loggers": {
        "uploads": {
            "handlers": ["console", "file"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
        "httpx": {
            "handlers": ["console", "file"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}
