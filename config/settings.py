"""
LavaJato Gestão application settings.

Reads from environment variables (or .env file).
All config lives here — no magic strings scattered through the codebase.
"""

import os
from pathlib import Path

# Paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATABASE_PATH = os.getenv("DATABASE_PATH", str(PROJECT_ROOT / "data" / "lavajato.db"))
TEMPLATE_PATH = str(PROJECT_ROOT / "dashboard" / "templates")

# Application
APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
APP_PORT = int(os.getenv("APP_PORT", "5000"))
APP_DEBUG = os.getenv("APP_DEBUG", "false").lower() == "true"
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
SESSION_LIFETIME_DAYS = int(os.getenv("SESSION_LIFETIME_DAYS", "30"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Branding shown in page titles and report headers
BUSINESS_DISPLAY_NAME = os.getenv("BUSINESS_DISPLAY_NAME", "Lava Jato Gestão")
