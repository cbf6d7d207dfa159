"""
Runtime configuration for skycast.

Settings are read from environment variables; the API key is always
supplied by the caller or the environment and never hard-coded.
"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from skycast.core.exceptions import ConfigurationError


def _default_recent_path() -> Path:
    return Path.home() / ".skycast" / "recent.json"


def _env_number(name: str, kind: type, default: float) -> Any:
    """Read a numeric environment variable.

    Raises:
        ConfigurationError: If the variable is set but not a valid number.
    """
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return kind(raw)
    except ValueError:
        raise ConfigurationError(
            name, f"Expected a number, got {raw!r}.", problem="Invalid configuration"
        ) from None


@dataclass(frozen=True)
class Settings:
    """Configuration for a weather lookup session."""

    api_key: str = ""
    base_url: str = "https://api.openweathermap.org/data/2.5"
    timeout: float = 10.0  # seconds, per attempt
    max_retries: int = 3
    cache_ttl: float = 600.0  # 10 minutes
    recent_path: Path = field(default_factory=_default_recent_path)

    @classmethod
    def from_env(cls, **overrides) -> "Settings":
        """Build settings from ``OPENWEATHER_API_KEY`` and ``SKYCAST_*`` variables.

        Keyword overrides that are not None win over the environment.
        """
        settings = cls(
            api_key=os.environ.get("OPENWEATHER_API_KEY", ""),
            base_url=os.environ.get("SKYCAST_BASE_URL", cls.base_url),
            timeout=_env_number("SKYCAST_TIMEOUT", float, cls.timeout),
            max_retries=_env_number("SKYCAST_MAX_RETRIES", int, cls.max_retries),
            cache_ttl=_env_number("SKYCAST_CACHE_TTL", float, cls.cache_ttl),
        )
        if os.environ.get("SKYCAST_RECENT_PATH"):
            settings = replace(settings, recent_path=Path(os.environ["SKYCAST_RECENT_PATH"]))
        return replace(settings, **{k: v for k, v in overrides.items() if v is not None})

    def require_api_key(self) -> str:
        """Return the API key.

        Raises:
            ConfigurationError: If no key is configured.
        """
        if not self.api_key:
            raise ConfigurationError(
                "api_key",
                "Set OPENWEATHER_API_KEY or pass --api-key.",
            )
        return self.api_key
