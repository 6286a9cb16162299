# backend/app_config.py

import os
from datetime import timedelta


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def load_config(app, overrides=None):
    """
    Load all Flask configuration in a clean centralized way.
    `overrides` wins over the environment (tests pass their settings here).
    """
    # ------------------------------
    # Mongo
    # ------------------------------
    app.config["MONGO_URI"] = os.getenv(
        "MONGO_URI",
        "mongodb://localhost:27017/nguza"
    )
    app.config["MONGO_ENSURE_INDEXES"] = _env_bool("MONGO_ENSURE_INDEXES", True)

    # ------------------------------
    # Security Keys / JWT
    # ------------------------------
    app.config["SECRET_KEY"] = os.getenv("SECRET_KEY", os.urandom(24))
    app.config["JWT_SECRET_KEY"] = os.getenv("JWT_SECRET_KEY", "change-me")
    app.config["JWT_TOKEN_LOCATION"] = ["headers"]
    app.config["JWT_HEADER_TYPE"] = "Bearer"
    app.config["SIGNIN_TOKEN_EXPIRES"] = timedelta(hours=_env_int("SIGNIN_TOKEN_EXPIRES_H", 24))
    app.config["OAUTH_TOKEN_EXPIRES"] = timedelta(hours=_env_int("OAUTH_TOKEN_EXPIRES_H", 1))
    app.config["JWT_ACCESS_TOKEN_EXPIRES"] = app.config["SIGNIN_TOKEN_EXPIRES"]
    app.config["BCRYPT_LOG_ROUNDS"] = _env_int("BCRYPT_LOG_ROUNDS", 12)
    app.config["PROMOTE_WEBHOOK_SECRET"] = os.getenv("PROMOTE_WEBHOOK_SECRET")

    # ------------------------------
    # Response cache
    # ------------------------------
    app.config["RESPONSE_CACHE_ENABLED"] = _env_bool("RESPONSE_CACHE_ENABLED", True)
    app.config["RESPONSE_CACHE_TTL"] = _env_int("RESPONSE_CACHE_TTL", 300)
    app.config["RESPONSE_CACHE_SWEEP_INTERVAL"] = _env_int("RESPONSE_CACHE_SWEEP_INTERVAL", 600)
    app.config["RESPONSE_CACHE_BYPASS_PREFIXES"] = ("/api/admin",)

    # ------------------------------
    # Background work / media
    # ------------------------------
    app.config["BACKGROUND_WORKERS"] = _env_int("BACKGROUND_WORKERS", 4)
    app.config["BACKGROUND_TASKS_INLINE"] = False
    app.config["CLOUDINARY_URL"] = os.getenv("CLOUDINARY_URL")

    # ------------------------------
    # Site / CORS
    # ------------------------------
    app.config["SITE_NAME"] = os.getenv("SITE_NAME", "Nguza")
    app.config["SITE_URL"] = os.getenv("SITE_URL", "https://nguza.example.com")
    app.config["CORS_ORIGINS"] = os.getenv("CORS_ORIGINS", "*")

    if overrides:
        app.config.update(overrides)

    print("✓ Config Loaded Successfully")
