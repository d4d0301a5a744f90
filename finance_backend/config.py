from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

STORE_KINDS = ("local", "memory", "remote")


@dataclass(frozen=True)
class Settings:
    data_dir: str = "user_data"
    store: str = "local"
    remote_url: str = ""
    remote_token: str = ""
    remote_timeout: float = 5.0
    min_password_length: int = 6
    log_level: str = "INFO"
    port: int = 8000
    default_scenario: str = "moderate"

    @property
    def users_path(self) -> str:
        return os.path.join(self.data_dir, "users.json")

    @property
    def snapshots_dir(self) -> str:
        return os.path.join(self.data_dir, "snapshots")


def _env(key: str, default):
    # Empty variables count as unset
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    return value.strip()


def load_settings(dotenv: bool = True) -> Settings:
    """Build settings from the environment, optionally reading `.env` first."""
    if dotenv:
        load_dotenv()

    store = str(_env("FINANCE_STORE", "local")).lower()
    if store not in STORE_KINDS:
        raise ValueError(f"FINANCE_STORE must be one of {', '.join(STORE_KINDS)}; got {store!r}")

    return Settings(
        data_dir=_env("FINANCE_DATA_DIR", "user_data"),
        store=store,
        remote_url=_env("FINANCE_REMOTE_URL", ""),
        remote_token=_env("FINANCE_REMOTE_TOKEN", ""),
        remote_timeout=float(_env("FINANCE_REMOTE_TIMEOUT", 5.0)),
        min_password_length=int(_env("FINANCE_MIN_PASSWORD_LENGTH", 6)),
        log_level=str(_env("LOG_LEVEL", "INFO")).upper(),
        port=int(_env("FINANCE_PORT", 8000)),
        default_scenario=str(_env("FINANCE_DEFAULT_SCENARIO", "moderate")).lower(),
    )
