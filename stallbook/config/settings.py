"""
Stallbook - Fruit Stall Record Keeping
Centralized Configuration Management

Pydantic settings with environment variable support for the storage backend,
logging, and the business defaults used when new daily entries are created.
"""

from functools import lru_cache
from typing import Optional
from pydantic import Field, field_validator, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Key-value storage configuration"""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    backend: str = Field(default="json", description="Storage backend: json, memory or redis")
    data_dir: str = Field(default="./data", description="Directory for the JSON file backend")
    daily_key: str = Field(default="bhoomish_daily_entries", description="Key of the daily records collection")
    fixed_key: str = Field(default="bhoomish_fixed_expenses", description="Key of the fixed expenses collection")

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Validate backend name"""
        allowed = ["json", "memory", "redis"]
        if v.lower() not in allowed:
            raise ValueError(f"Storage backend must be one of: {allowed}")
        return v.lower()


class RedisSettings(BaseSettings):
    """Redis Storage Configuration"""

    model_config = SettingsConfigDict(env_prefix="REDIS_")

    host: str = Field(default="localhost", description="Redis host")
    port: int = Field(default=6379, description="Redis port")
    password: Optional[SecretStr] = Field(default=None, description="Redis password")
    db: int = Field(default=0, description="Redis database number")
    socket_timeout: int = Field(default=5, description="Socket timeout in seconds")
    namespace: str = Field(default="stallbook", description="Key namespace")
    url: Optional[str] = Field(default=None, alias="REDIS_URL", description="Redis URL (overrides host/port)")

    def get_url(self) -> str:
        """Redis connection URL - uses REDIS_URL if set, otherwise builds from host/port"""
        if self.url:
            return self.url
        if self.password:
            return f"redis://:{self.password.get_secret_value()}@{self.host}:{self.port}/{self.db}"
        return f"redis://{self.host}:{self.port}/{self.db}"


class MonitoringSettings(BaseSettings):
    """Logging Configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: str = Field(default="json", description="Log format: json or text")

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format"""
        if v.lower() not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()


class BusinessSettings(BaseSettings):
    """Stall defaults"""

    model_config = SettingsConfigDict(env_prefix="STALL_")

    big_combo_price: float = Field(default=59, description="Default big combo price")
    medium_combo_price: float = Field(default=39, description="Default medium combo price")
    small_box_price: float = Field(default=29, description="Default small box price")
    juice_only_price: float = Field(default=20, description="Default juice price")

    chart_window_weeks: int = Field(default=4, description="Dashboard chart window")
    analytics_window_weeks: int = Field(default=8, description="Analytics chart window")
    recent_entries_limit: int = Field(default=5, description="Entries shown on the dashboard")
    currency_symbol: str = Field(default="₹", description="Currency symbol")


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="stallbook", alias="APP_NAME", description="Application name")
    app_env: str = Field(default="development", alias="APP_ENV", description="Environment")
    debug: bool = Field(default=False, alias="DEBUG", description="Debug mode")

    # API Server
    api_host: str = Field(default="0.0.0.0", alias="API_HOST", description="API host")
    api_port: int = Field(default=8000, alias="API_PORT", description="API port")

    # Version
    version: str = Field(default="1.0.0", description="Application version")

    # Subsystem configurations
    storage: StorageSettings = Field(default_factory=StorageSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)
    business: BusinessSettings = Field(default_factory=BusinessSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development"""
        return self.app_env == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
