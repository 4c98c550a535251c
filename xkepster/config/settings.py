"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import enum
import logging
import os
import platform
import threading
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

from xkepster.version import __version__

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.xkepster.com"
DEFAULT_TIMEOUT = 30.0
DEFAULT_OPEN_TIMEOUT = 5.0


class LogLevel(str, enum.Enum):
    """Threshold for request logging."""
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"

    @property
    def logging_level(self) -> int:
        return {
            LogLevel.DEBUG: logging.DEBUG,
            LogLevel.INFO: logging.INFO,
            LogLevel.WARN: logging.WARNING,
            LogLevel.ERROR: logging.ERROR,
            LogLevel.FATAL: logging.CRITICAL,
        }[self]

    @classmethod
    def parse(cls, value: "LogLevel | str") -> "LogLevel":
        """Coerce a level name (``"info"``, ``"WARNING"``...) into a LogLevel.

        Unknown names fall back to INFO.
        """
        if isinstance(value, LogLevel):
            return value
        name = str(value).strip().lower()
        if name == "warning":
            name = "warn"
        if name == "critical":
            name = "fatal"
        try:
            return cls(name)
        except ValueError:
            return cls.INFO


def _default_user_agent() -> str:
    return f"xkepster-python {__version__} Python {platform.python_version()}"


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                logger.debug(f"Loaded {secret_name} from /run/secrets")
                return secret_value
        except OSError as e:
            logger.warning(f"Failed to read /run/secrets/{secret_name}: {e}")

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            return secret_value

    return None


def _env_float(var_name: str, default: float) -> float:
    """Read a numeric environment variable, failing loudly on garbage."""
    raw = os.environ.get(var_name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"Environment variable {var_name} must be a number, got {raw!r}") from None


def _env_flag(var_name: str, default: bool = False) -> bool:
    raw = os.environ.get(var_name)
    if raw is None:
        return default
    return raw.strip().lower() == "true"


@dataclass(frozen=True)
class Configuration:
    """Client configuration snapshot.

    Timeouts are expressed in seconds, as ``requests`` expects them.
    Instances are immutable; use :meth:`with_overrides` to derive a copy.
    """
    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    open_timeout: float = DEFAULT_OPEN_TIMEOUT
    user_agent: str = field(default_factory=_default_user_agent)
    machine_token: Optional[str] = None
    webhook_secret: Optional[str] = None
    logging_enabled: bool = False
    log_level: LogLevel = LogLevel.INFO
    logger: Optional[logging.Logger] = field(default=None, compare=False)

    def __post_init__(self):
        # Frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "log_level", LogLevel.parse(self.log_level))

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key and str(self.api_key).strip())

    def with_overrides(self, **overrides: Any) -> "Configuration":
        """Return a copy with every non-None override applied.

        Raises:
            TypeError: If an override does not name a configuration field
        """
        unknown = set(overrides) - set(self.__dataclass_fields__)
        if unknown:
            raise TypeError(f"Unknown configuration option(s): {', '.join(sorted(unknown))}")
        changes = {key: value for key, value in overrides.items() if value is not None}
        if not changes:
            return self
        return replace(self, **changes)

    def __repr__(self) -> str:
        return (
            "Configuration("
            "api_key=[REDACTED], "
            f"base_url={self.base_url!r}, "
            f"timeout={self.timeout!r}, "
            f"open_timeout={self.open_timeout!r}, "
            f"user_agent={self.user_agent!r}, "
            f"machine_token={'[REDACTED]' if self.machine_token else None}, "
            "webhook_secret=[REDACTED], "
            f"logging_enabled={self.logging_enabled!r}, "
            f"log_level={self.log_level.value!r})"
        )


def load_settings() -> Configuration:
    """Load client settings from /run/secrets and the environment."""
    api_key = _load_secret_from_file("xkepster_api_key", "XKEPSTER_API_KEY")
    webhook_secret = _load_secret_from_file("xkepster_webhook_secret", "XKEPSTER_WEBHOOK_SECRET")
    machine_token = _load_secret_from_file("xkepster_machine_token", "XKEPSTER_MACHINE_TOKEN")

    base_url = os.environ.get("XKEPSTER_BASE_URL") or DEFAULT_BASE_URL
    timeout = _env_float("XKEPSTER_TIMEOUT", DEFAULT_TIMEOUT)
    open_timeout = _env_float("XKEPSTER_OPEN_TIMEOUT", DEFAULT_OPEN_TIMEOUT)
    log_level = LogLevel.parse(os.environ.get("XKEPSTER_LOG_LEVEL", "info"))
    logging_enabled = _env_flag("XKEPSTER_LOGGING_ENABLED")

    if not api_key:
        logger.debug("XKEPSTER_API_KEY not set; requests will fail until an API key is configured")

    return Configuration(
        api_key=api_key,
        base_url=base_url,
        timeout=timeout,
        open_timeout=open_timeout,
        machine_token=machine_token,
        webhook_secret=webhook_secret,
        logging_enabled=logging_enabled,
        log_level=log_level,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Process-wide default (loaded lazily on first use)
# ─────────────────────────────────────────────────────────────────────────────
_default_config: Optional[Configuration] = None
_default_lock = threading.Lock()


def get_config() -> Configuration:
    """Return the process default configuration, loading it on first use."""
    global _default_config

    if _default_config is None:
        with _default_lock:
            if _default_config is None:
                _default_config = load_settings()
    return _default_config


def configure(**overrides: Any) -> Configuration:
    """Replace the process default with a copy carrying ``overrides``.

    Clients created afterwards pick up the new default; existing clients keep
    the snapshot they were built with.
    """
    global _default_config

    current = get_config()
    with _default_lock:
        _default_config = current.with_overrides(**overrides)
        return _default_config


def reset_configuration() -> None:
    """Forget the process default so the next get_config() reloads the environment."""
    global _default_config

    with _default_lock:
        _default_config = None
