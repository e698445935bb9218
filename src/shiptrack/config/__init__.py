"""Application configuration helpers."""

from __future__ import annotations

from .carriers import HmmConfig, MaerskConfig, get_hmm_config, get_maersk_config
from .env import env_flag, env_int, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import NO_RETRY, CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .mail import MailConfig, get_mail_config
from .reconciliation import ReconciliationConfig, get_reconciliation_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .trigger import ScheduleConfig, get_cron_secret, get_schedule_config

__all__ = [
    "NO_RETRY",
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "HmmConfig",
    "MaerskConfig",
    "MailConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ReconciliationConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "ScheduleConfig",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "env_int",
    "get_cron_secret",
    "get_database_config",
    "get_hmm_config",
    "get_maersk_config",
    "get_mail_config",
    "get_reconciliation_config",
    "get_schedule_config",
    "get_storage_config",
    "require_env_var",
    "require_env_vars",
]
