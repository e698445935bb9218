"""Reconciliation job defaults."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_flag, env_int

DEFAULT_MAX_CONCURRENCY = 8
DEFAULT_STORE_CONCURRENCY = 1


@dataclass(frozen=True, slots=True)
class ReconciliationConfig:
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    store_concurrency: int = DEFAULT_STORE_CONCURRENCY
    reject_regressive: bool = False


def get_reconciliation_config() -> ReconciliationConfig:
    return ReconciliationConfig(
        max_concurrency=env_int("SHIPTRACK_MAX_CONCURRENCY", DEFAULT_MAX_CONCURRENCY),
        store_concurrency=env_int("SHIPTRACK_STORE_CONCURRENCY", DEFAULT_STORE_CONCURRENCY),
        reject_regressive=env_flag("SHIPTRACK_REJECT_REGRESSIVE"),
    )
