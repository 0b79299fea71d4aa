"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./finsight.db"

    # Service
    service_name: str = "finsight"
    log_level: str = "INFO"

    # Analytics defaults
    baseline_income: float = 0.0  # Fallback monthly income when no income transactions exist
    forecast_months: int = 3
    max_forecast_months: int = 12


settings = Settings()
