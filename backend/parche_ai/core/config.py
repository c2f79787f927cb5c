"""
Core configuration module for the Parche AI recommendation service.
Settings come from environment variables (or a local .env file).
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict
import logging

logger = logging.getLogger(__name__)

_PACKAGE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Defaults are safe for local development.
    """

    # Application
    app_name: str = "Parche AI"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False
    city_name: str = "Medellín"

    # Database (plan catalog)
    database_url: str = "sqlite:///./parche_ai.db"
    database_pool_size: int = 10
    database_max_overflow: int = 20
    database_pool_recycle: int = 1800
    database_pool_pre_ping: bool = True

    # Catalog seeding
    seed_catalog_on_startup: bool = True
    catalog_seed_path: str = str(_PACKAGE_DIR / "data" / "plans.json")

    # API Configuration
    api_prefix: str = "/api"
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    api_workers: int = 1

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # text | json

    # CORS
    cors_origins: list = ["http://localhost:8081", "http://localhost:19006", "http://localhost:3000"]
    cors_allow_credentials: bool = False
    cors_allow_methods: list = ["GET", "POST", "OPTIONS"]
    cors_allow_headers: list = ["Content-Type", "Accept", "X-Request-ID"]

    # Remote language-model completion endpoint. Empty disables the remote
    # call and every request is answered by the local pipeline.
    remote_completion_url: str = ""
    remote_timeout_seconds: float = 10.0

    # Recommendation engine
    history_window: int = 10
    max_recommendations: int = 3
    max_plan_references: int = 4
    typing_delay_min_seconds: float = 0.5
    typing_delay_max_seconds: float = 1.5

    # Minimum gap between two messages from the same client
    message_throttle_seconds: float = 1.5

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )


# Global settings instance
settings = Settings()
