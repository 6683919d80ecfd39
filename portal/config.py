"""Environment-driven settings for the portal client."""
from __future__ import annotations

import os

API_BASE_PATH = "/api/v1"
DEFAULT_API_ORIGIN = "http://localhost:8000"

_FALSY = {"0", "false", "no", "off"}


def api_base_url() -> str:
    """Versioned API root. ``PORTAL_API_BASE_URL`` replaces it entirely."""
    override = os.environ.get("PORTAL_API_BASE_URL", "").strip()
    if override:
        return override.rstrip("/")
    origin = os.environ.get("PORTAL_API_ORIGIN", "").strip() or DEFAULT_API_ORIGIN
    return origin.rstrip("/") + API_BASE_PATH


def load_profiles_on_refresh() -> bool:
    return os.environ.get("PORTAL_LOAD_PROFILES", "1").strip().lower() not in _FALSY
