"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Session store
    database_url: str = "sqlite:///./card_portal.db"

    # Remote card-management API
    portal_api_base: str = "http://localhost:8080"

    # Service
    service_name: str = "card-portal-gateway"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 10.0
    api_max_retries: int = 3
    api_backoff_base: float = 0.5  # Exponential backoff base in seconds

    # Fetch policy: statistics walk every page, display lists fetch one page
    stats_page_size: int = 1000
    admin_stats_page_size: int = 10000
    max_stats_pages: int = 50
    display_page_size: int = 10
    recent_items: int = 5


settings = Settings()
