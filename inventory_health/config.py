from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class AppConfig(BaseSettings):
    """Settings for the service, the dashboard and the seed CLI.

    Values come from environment variables (e.g. API_BASE_URL, DERIVE_STATUS)
    and an optional .env file; everything has a local-development default.
    """
    # Query boundary the dashboard fetches the latest snapshot from
    api_base_url: str = "http://127.0.0.1:8000"
    fetch_timeout_seconds: float = 10.0

    # Application
    app_env: str = "local"
    log_level: str = "DEBUG"

    # Dashboard behaviour
    search_debounce_ms: int = 300
    critical_by_store_cap: int = 6
    top_critical_limit: int = 5
    top_critical_descending: bool = True
    export_filename: str = "inventory_export.csv"

    # Status re-derivation (off: the producer's status is trusted verbatim)
    derive_status: bool = False
    critical_days_threshold: float = 3.0
    warning_days_threshold: float = 7.0

    # Seed data settings
    default_seed_stores: int = 5
    default_seed_skus: int = 40
    default_seed_value: int = 42

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

_config: Optional[AppConfig] = None

def get_config() -> AppConfig:
    """Return the process-wide AppConfig, created on first use."""
    global _config
    if _config is None:
        _config = AppConfig()
    return _config

def set_config_for_test(**kwargs):
    """Replace the process-wide AppConfig; tests use this instead of env vars."""
    global _config
    _config = AppConfig(**kwargs)
