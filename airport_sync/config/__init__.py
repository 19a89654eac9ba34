"""Configuration package exports."""

from .loader import ConfigLocator, ConfigRepository, require_api_key
from .models import DEFAULT_API_URL, DEFAULT_SORT, SyncConfig

__all__ = [
    "ConfigLocator",
    "ConfigRepository",
    "DEFAULT_API_URL",
    "DEFAULT_SORT",
    "SyncConfig",
    "require_api_key",
]
