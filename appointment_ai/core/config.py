"""
Environment configuration.

Settings are properties read from the environment on every access, so a
test can change one with monkeypatch.setenv and the next call sees it.

    from appointment_ai.core.config import settings
    settings.DATA_SERVICE_URL
"""

import os
from typing import List, Optional


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


def _env_bool(name: str, default: bool) -> bool:
    return os.getenv(name, "true" if default else "false").strip().lower() == "true"


class Settings:
    """Application settings backed by environment variables."""

    # ==================== Application ====================

    @property
    def APP_ENV(self) -> str:
        """dev, staging or production"""
        return os.getenv("APP_ENV", "dev")

    @property
    def LOG_LEVEL(self) -> str:
        return os.getenv("LOG_LEVEL", "INFO")

    # ==================== Data Service ====================

    @property
    def DATA_SERVICE_URL(self) -> str:
        """Base URL of the PostgREST-compatible backend"""
        return os.getenv("DATA_SERVICE_URL", "http://localhost:54321")

    @property
    def DATA_SERVICE_API_KEY(self) -> Optional[str]:
        """Service key sent as apikey, and as bearer when the caller sends none"""
        return os.getenv("DATA_SERVICE_API_KEY")

    @property
    def DATA_CLIENT_TIMEOUT(self) -> float:
        return _env_float("DATA_CLIENT_TIMEOUT", 10.0)

    @property
    def DATA_CLIENT_MAX_CONNECTIONS(self) -> int:
        return _env_int("DATA_CLIENT_MAX_CONNECTIONS", 50)

    @property
    def DATA_CLIENT_MAX_KEEPALIVE(self) -> int:
        return _env_int("DATA_CLIENT_MAX_KEEPALIVE", 10)

    # ==================== Recommendations ====================

    @property
    def RECOMMENDATION_LIMIT(self) -> int:
        """Recommendations returned when the caller gives no limit"""
        return _env_int("RECOMMENDATION_LIMIT", 3)

    @property
    def MAX_RECOMMENDATION_LIMIT(self) -> int:
        return _env_int("MAX_RECOMMENDATION_LIMIT", 20)

    @property
    def HISTORY_LIMIT(self) -> int:
        """Most recent completed appointments used as history"""
        return _env_int("HISTORY_LIMIT", 5)

    @property
    def CANDIDATE_LIMIT(self) -> int:
        """Open sessions fetched per recommendation request"""
        return _env_int("CANDIDATE_LIMIT", 50)

    @property
    def LOOKAHEAD_DAYS(self) -> int:
        """Days ahead of today searched for open sessions"""
        return _env_int("LOOKAHEAD_DAYS", 14)

    # ==================== CORS ====================

    @property
    def CORS_ORIGINS(self) -> List[str]:
        origins = os.getenv("CORS_ORIGINS", "*")
        if origins == "*":
            return ["*"]
        return [origin.strip() for origin in origins.split(",") if origin.strip()]

    @property
    def CORS_ALLOW_CREDENTIALS(self) -> bool:
        return _env_bool("CORS_ALLOW_CREDENTIALS", True)


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Process-wide Settings instance."""
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


settings = get_settings()
