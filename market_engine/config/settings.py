"""
Process-level configuration for the Market Signal Engine.

Code defaults live here and can be overridden through environment variables
or a local ``.env`` file. Component tuning (thresholds, periods) lives in
``market_engine.config.signal_generation``; this module only covers how the
engine runs: logging, the recomputation loop and the result cache.

This module uses pydantic-settings to manage configuration from environment
variables and .env files.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """
    Configuration for structured logging.
    """
    model_config = SettingsConfigDict(env_prefix='LOG_')

    LEVEL: str = "INFO"
    JSON: bool = False  # Force JSON output even on a TTY


class SchedulerSettings(BaseSettings):
    """
    Configuration for the recomputation loop.
    """
    model_config = SettingsConfigDict(env_prefix='SCHEDULER_')

    INTERVAL_SECONDS: float = 60.0
    CYCLE_TIMEOUT_SECONDS: float = 10.0  # Per-symbol computation budget
    MIN_REFRESH_SECONDS: float = 5.0  # Skip cycles requested closer together than this


class CacheSettings(BaseSettings):
    """
    Configuration for the per-symbol result cache.
    """
    model_config = SettingsConfigDict(env_prefix='CACHE_')

    MAX_ENTRIES: int = 500


class Settings(BaseSettings):
    """
    Main settings object that aggregates all other settings.
    """
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

    logging: LoggingSettings = LoggingSettings()
    scheduler: SchedulerSettings = SchedulerSettings()
    cache: CacheSettings = CacheSettings()


settings = Settings()
