"""
Settings read from the environment.

``.env`` is loaded first, so local development needs no exported variables.
"""

import os
from typing import Optional

from dotenv import load_dotenv

from devcamper.core.models import TranslatorConfig

load_dotenv()

# Environment
APP_ENV = os.getenv("APP_ENV", "development").strip().lower()
IS_DEV_ENV = APP_ENV in {"dev", "development", "local", "test"}
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if IS_DEV_ENV else "INFO").upper()

# Store
STORE_BACKEND = os.getenv("STORE_BACKEND", "mongodb").strip().lower()
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
MONGO_DATABASE = os.getenv("MONGO_DATABASE", "devcamper")

# Auth / JWT
JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRE_MINUTES = int(os.getenv("JWT_EXPIRE_MINUTES", str(30 * 24 * 60)))

# Query translation
DEFAULT_PAGE_LIMIT = int(os.getenv("DEFAULT_PAGE_LIMIT", "25"))
MAX_PAGE_LIMIT: Optional[int] = int(os.environ["MAX_PAGE_LIMIT"]) if os.getenv("MAX_PAGE_LIMIT") else None
OPERATOR_REWRITE = os.getenv("OPERATOR_REWRITE", "structural").strip().lower()

# Server
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "5000"))


def translator_config_from_env() -> TranslatorConfig:
    """Translator settings from the environment."""
    return TranslatorConfig(
        default_limit=DEFAULT_PAGE_LIMIT,
        max_limit=MAX_PAGE_LIMIT,
        operator_rewrite=OPERATOR_REWRITE,
    )
