"""Runtime settings for the ordering service, read from the environment."""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    notification_gateway: str = "legacy"
    notifications_base_url: str = "http://localhost:8081"
    notifications_timeout_ms: int = 5000
    notification_workers: int = 4
    order_store_url: str = "memory"

    @property
    def notifications_timeout(self) -> float:
        """Timeout in seconds, as ``concurrent.futures`` expects it."""
        return self.notifications_timeout_ms / 1000

    @classmethod
    def from_env(cls, environ=None):
        env = os.environ if environ is None else environ
        return cls(
            notification_gateway=env.get("NOTIFICATION_GATEWAY", cls.notification_gateway).lower(),
            notifications_base_url=env.get("NOTIFICATIONS_BASE_URL", cls.notifications_base_url).rstrip("/"),
            notifications_timeout_ms=_positive_int(env, "NOTIFICATIONS_TIMEOUT_MS", cls.notifications_timeout_ms),
            notification_workers=_positive_int(env, "NOTIFICATION_WORKERS", cls.notification_workers),
            order_store_url=env.get("ORDER_STORE_URL", cls.order_store_url),
        )


def _positive_int(env, name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings (loaded on first use)."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the environment is read again (useful for testing)."""
    global _settings
    _settings = None
