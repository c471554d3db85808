# amc_portal/config/settings.py
# Environment driven settings for the API server and the client layer

import os
from functools import lru_cache
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


class Settings:
    """Server settings, read once from the environment (and .env)"""

    def __init__(self):
        self.app_name = os.getenv("APP_NAME", "AMC Portal API")
        self.app_env = os.getenv("APP_ENV", "development")
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        # Database
        self.database_url = os.getenv("DATABASE_URL", "sqlite:///./amc_portal.db")
        self.database_echo = _env_bool("DB_ECHO", "false")
        self.database_sslmode = os.getenv("DB_SSLMODE")
        self.auto_create_tables = _env_bool("AUTO_CREATE_TABLES", "true")

        # Tokens
        self.secret_key = os.getenv("SECRET_KEY", "dev-secret-change-me")
        self.refresh_secret_key = os.getenv("REFRESH_SECRET_KEY", self.secret_key + "-refresh")
        self.algorithm = os.getenv("ALGORITHM", "HS256")
        self.access_token_expire_minutes = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 15))
        self.refresh_token_expire_days = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", 7))
        self.bcrypt_rounds = int(os.getenv("BCRYPT_ROUNDS", 12))

        # HTTP
        self.frontend_urls = _env_list("FRONTEND_URLS", "http://localhost:8080,http://localhost:3000")

        # Background jobs
        self.scheduler_enabled = _env_bool("SCHEDULER_ENABLED", "false")
        self.overdue_sweep_minutes = int(os.getenv("OVERDUE_SWEEP_MINUTES", 5))
        self.reminder_check_minutes = int(os.getenv("REMINDER_CHECK_MINUTES", 60))

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


class ClientSettings:
    """Settings for the client data access layer"""

    def __init__(self):
        self.api_base_url = os.getenv("AMC_API_BASE_URL", "http://localhost:3001").rstrip("/")
        self.ws_url = os.getenv("AMC_WS_URL", "ws://localhost:3001/ws")
        # anything but an explicit "false" keeps the client offline
        self.mock_mode = os.getenv("AMC_MOCK_MODE", "true").lower() != "false"
        self.storage_dir = os.getenv("AMC_STORAGE_DIR", ".amc_storage")
        self.health_timeout = float(os.getenv("AMC_HEALTH_TIMEOUT", 3))
        self.request_timeout = float(os.getenv("AMC_REQUEST_TIMEOUT", 10))
        self.max_reconnect_attempts = int(os.getenv("AMC_WS_MAX_RECONNECT_ATTEMPTS", 5))
        self.reconnect_delay = float(os.getenv("AMC_WS_RECONNECT_DELAY", 1))


@lru_cache()
def get_settings() -> Settings:
    return Settings()


@lru_cache()
def get_client_settings() -> ClientSettings:
    return ClientSettings()
