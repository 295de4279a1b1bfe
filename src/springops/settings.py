from __future__ import annotations

import os
from dataclasses import dataclass


DEFAULT_API_URL = "http://localhost:8000/api"


@dataclass(frozen=True)
class Settings:
    api_base_url: str = DEFAULT_API_URL
    host: str = "0.0.0.0"
    port: int = 8080
    title: str = "Spring Ops"
    storage_secret: str = "springops-dev-secret"
    poll_interval_seconds: float = 60.0
    supervisor_poll_interval_seconds: float = 30.0
    notification_limit: int = 10
    request_timeout: float = 15.0
    log_level: str = "INFO"


def default_api_url() -> str:
    # Trailing slash is stripped so paths can always start with "/".
    return (os.environ.get("SPRINGOPS_API_URL") or DEFAULT_API_URL).rstrip("/")


def settings_from_env(**overrides) -> Settings:
    """Build settings from SPRINGOPS_* environment variables plus explicit overrides."""
    values: dict = {
        "api_base_url": default_api_url(),
        "storage_secret": os.environ.get("SPRINGOPS_STORAGE_SECRET") or Settings.storage_secret,
        "log_level": os.environ.get("SPRINGOPS_LOG_LEVEL") or Settings.log_level,
    }
    poll_raw = os.environ.get("SPRINGOPS_POLL_SECONDS")
    if poll_raw:
        values["poll_interval_seconds"] = max(5.0, float(poll_raw))
    values.update({k: v for k, v in overrides.items() if v is not None})
    if "api_base_url" in values:
        values["api_base_url"] = str(values["api_base_url"]).rstrip("/")
    return Settings(**values)
