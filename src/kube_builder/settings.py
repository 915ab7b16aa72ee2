from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Builder configuration loaded from KUBE_BUILDER_* environment variables.
    Default values mirror the Kubernetes controller defaults.
    """

    HISTORY_LIMIT_FALLBACK: int = 10
    DEPLOY_MAX_TIME_FALLBACK: int = 600

    RICH_LOGGING: bool = False  # Opt-in: render package logs through rich
    LOG_LEVEL: str = "WARNING"
    RICH_TRACEBACKS: bool = False

    model_config = SettingsConfigDict(env_prefix="KUBE_BUILDER_", extra="ignore")


@lru_cache
def get_settings() -> AppSettings:
    """
    Builder settings, read from KUBE_BUILDER_* variables on first use.
    Call get_settings.cache_clear() to pick up changed variables.
    """
    return AppSettings()
