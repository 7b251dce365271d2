"""Centralized environment configuration for PatchTrim.

All environment variables are read through this module using the PATCHTRIM_
prefix for consistency.

Usage:
    from patchtrim.settings import settings

    token = settings.boundary_token()
"""

from __future__ import annotations

import os


def _get(name: str, default: str = "") -> str:
    """Get an environment variable value."""
    return os.environ.get(name, "").strip() or default


class Settings:
    """Centralized settings for PatchTrim.

    Environment variables use the PATCHTRIM_ prefix.
    """

    @staticmethod
    def boundary_token() -> str:
        """Line prefix that starts each file's block in a multi-file patch.

        "auto" picks "diff" when the patch has diff lines, otherwise "---".

        Env: PATCHTRIM_BOUNDARY_TOKEN (default: diff)
        """
        return _get("PATCHTRIM_BOUNDARY_TOKEN", default="diff")

    @staticmethod
    def log_level() -> str:
        """Logging level name.

        Env: PATCHTRIM_LOG_LEVEL (default: INFO)
        """
        return _get("PATCHTRIM_LOG_LEVEL", default="INFO").upper()

    @staticmethod
    def log_format() -> str:
        """Log renderer: console or json.

        Env: PATCHTRIM_LOG_FORMAT (default: console)
        """
        value = _get("PATCHTRIM_LOG_FORMAT", default="console").lower()
        return value if value in ("console", "json") else "console"


settings = Settings()
