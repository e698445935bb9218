"""Carrier tracking API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import NO_RETRY, RateLimit, ResilienceConfig, get_http_cache_config

MAERSK_BASE_URL = "https://api.maersk.com/track/v1/"
HMM_BASE_URL = "https://api.hmm21.com/"
CARRIER_TIMEOUT_SECONDS = 10.0
# Cached tracking responses must not outlive a poll interval.
CARRIER_CACHE_TTL_SECONDS = 300.0

_JSON_HEADERS = {"Accept": "application/json"}


@dataclass(frozen=True, slots=True)
class MaerskConfig:
    """Holds Maersk Track & Trace API configuration values."""

    api_key: str
    resilience: ResilienceConfig


@dataclass(frozen=True, slots=True)
class HmmConfig:
    """Holds HMM tracking API configuration values."""

    api_key: str
    resilience: ResilienceConfig


def get_maersk_config(*, resilience: ResilienceConfig | None = None) -> MaerskConfig:
    values = require_env_vars(("MAERSK_API_KEY",))
    return MaerskConfig(
        api_key=values["MAERSK_API_KEY"],
        resilience=resilience
        or ResilienceConfig(
            name="maersk",
            base_url=MAERSK_BASE_URL,
            timeout_seconds=CARRIER_TIMEOUT_SECONDS,
            retry=NO_RETRY,
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
            cache=get_http_cache_config(ttl_seconds=CARRIER_CACHE_TTL_SECONDS),
            default_headers=_JSON_HEADERS,
        ),
    )


def get_hmm_config(*, resilience: ResilienceConfig | None = None) -> HmmConfig:
    values = require_env_vars(("HMM_API_KEY",))
    return HmmConfig(
        api_key=values["HMM_API_KEY"],
        resilience=resilience
        or ResilienceConfig(
            name="hmm",
            base_url=HMM_BASE_URL,
            timeout_seconds=CARRIER_TIMEOUT_SECONDS,
            retry=NO_RETRY,
            ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
            cache=get_http_cache_config(ttl_seconds=CARRIER_CACHE_TTL_SECONDS),
            default_headers=_JSON_HEADERS,
        ),
    )
