"""Remote record store configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, positive_int_env_var, require_env_vars
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_REMOTE_TIMEOUT_SECONDS = 15.0
DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


@dataclass(frozen=True, slots=True)
class RemoteConfig:
    """Holds the remote store endpoint and client behaviour."""

    base_url: str
    resilience: ResilienceConfig


def get_remote_config(*, resilience: ResilienceConfig | None = None) -> RemoteConfig:
    values = require_env_vars(("RECORDSYNC_REMOTE_URL",))
    base_url = values["RECORDSYNC_REMOTE_URL"].strip().rstrip("/")
    if not base_url.startswith(("http://", "https://")):
        msg = f"RECORDSYNC_REMOTE_URL must be an http(s) URL, got {base_url!r}"
        raise ConfigurationError(msg, variable="RECORDSYNC_REMOTE_URL")

    timeout_raw = optional_env_var("RECORDSYNC_REMOTE_TIMEOUT", str(DEFAULT_REMOTE_TIMEOUT_SECONDS))
    try:
        timeout = float(timeout_raw)
    except ValueError as exc:
        msg = f"RECORDSYNC_REMOTE_TIMEOUT must be a number, got {timeout_raw!r}"
        raise ConfigurationError(msg, variable="RECORDSYNC_REMOTE_TIMEOUT") from exc

    ratelimit = None
    if optional_env_var("RECORDSYNC_REMOTE_RATE_LIMIT", ""):
        ratelimit = RateLimit(max_calls=positive_int_env_var("RECORDSYNC_REMOTE_RATE_LIMIT", 1))

    return RemoteConfig(
        base_url=base_url,
        resilience=resilience
        or ResilienceConfig(
            name="remote",
            base_url=base_url,
            timeout_seconds=timeout,
            retry=RetryPolicy(),
            ratelimit=ratelimit,
            default_headers=DEFAULT_HEADERS,
        ),
    )
