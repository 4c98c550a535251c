"""xkepster Python client.

To call the API:
    from xkepster import XkepsterClient

To verify webhooks:
    from xkepster import WebhookVerifier

Process-wide defaults come from XKEPSTER_* environment variables and can be
adjusted with ``xkepster.configure(...)``.
"""
from .version import __version__
from .config import Configuration, LogLevel, configure, get_config, load_settings, reset_configuration
from .core import *  # noqa: F401,F403
from .core import __all__ as _core_all

__all__ = [
    "__version__",
    "Configuration",
    "LogLevel",
    "configure",
    "get_config",
    "load_settings",
    "reset_configuration",
    *_core_all,
]
