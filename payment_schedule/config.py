"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "payment-schedule"
    log_level: str = "INFO"

    # Display
    bank_debit_label: str = "bank debit"

    # Schedule cache (keyed by year, month and caller-supplied version/content hash)
    schedule_cache_enabled: bool = True
    schedule_cache_max_entries: int = 128


settings = Settings()
