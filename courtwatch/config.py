"""
Application configuration from environment variables.

All settings have sensible defaults for local development.
A .env file in the project root is loaded automatically (if present).
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file before reading any env vars
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

# ── Environment ───────────────────────────────────────────────────────────

ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

VERSION = "0.1.0"

# ── Paths ─────────────────────────────────────────────────────────────────

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"

# SQLite database file (snapshot + preferences)
DB_PATH: str = os.getenv("DB_PATH", str(DATA_DIR / "courtwatch.db"))

# ── SMTP ──────────────────────────────────────────────────────────────────

SMTP_HOST: str = os.getenv("SMTP_HOST", "")
SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))
SMTP_USERNAME: str = os.getenv("SMTP_USERNAME", "")
SMTP_PASSWORD: str = os.getenv("SMTP_PASSWORD", "")
SMTP_FROM_EMAIL: str = os.getenv("SMTP_FROM_EMAIL", "no-reply@courtwatch.local")
SMTP_USE_TLS: bool = os.getenv("SMTP_USE_TLS", "true").lower() == "true"

# Set to "false" to force console-only mode even when SMTP credentials are present.
_SMTP_ENABLED_OVERRIDE: str = os.getenv("SMTP_ENABLED", "auto")


def smtp_enabled() -> bool:
    """True when SMTP should actually send emails.

    Controlled by SMTP_ENABLED env var:
      • "auto" (default) — send if credentials are configured
      • "true"  — always send (will fail if credentials are missing)
      • "false" — never send, log to console instead
    """
    if _SMTP_ENABLED_OVERRIDE.lower() == "false":
        return False
    if _SMTP_ENABLED_OVERRIDE.lower() == "true":
        return True
    return bool(SMTP_HOST and SMTP_USERNAME and SMTP_PASSWORD)


# ── Upstream providers ────────────────────────────────────────────────────

# Better: JSON admin API plus the public booking site (used for links/referer).
BETTER_ADMIN_API_URL: str = os.getenv("BETTER_ADMIN_API_URL", "").rstrip("/")
BETTER_BOOKINGS_URL: str = os.getenv("BETTER_BOOKINGS_URL", "").rstrip("/")

# LTA ClubSpark venue pages.
LTA_BOOKINGS_URL: str = os.getenv(
    "LTA_BOOKINGS_URL", "https://clubspark.lta.org.uk"
).rstrip("/")

# Tower Hamlets park tennis booking pages (HTML).
TOWER_HAMLETS_BOOKINGS_URL: str = os.getenv("TOWER_HAMLETS_BOOKINGS_URL", "").rstrip("/")

# Client-side give-up for a single upstream request (seconds).
HTTP_TIMEOUT: float = float(os.getenv("HTTP_TIMEOUT", "30"))

# ── Pipeline ──────────────────────────────────────────────────────────────

# Default number of days ahead (including today) to fetch per run.
PIPELINE_DAYS: int = int(os.getenv("PIPELINE_DAYS", "6"))

# Pause between two successive Better requests (seconds).
BETTER_REQUEST_DELAY: float = float(os.getenv("BETTER_REQUEST_DELAY", "0.5"))
