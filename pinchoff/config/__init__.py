"""
Configuration module for runtime parameters and driver settings.

Provides:
- ParamStore: key/value storage loaded from `key=value` files
- Params: typed accessors with default fallback
- DriverSettings and its TOML loader
"""

from .store import (
    ParamStore,
    parse_line,
    find_first_value,
    DEFAULT_PARAMS_FILE,
    DEFAULT_MAX_ENTRIES,
)

from .accessors import Params, init_from_args

from .schema import DriverSettings

from .loader import load_settings, find_settings, SETTINGS_FILENAME

__all__ = [
    # Storage
    "ParamStore",
    "parse_line",
    "find_first_value",
    "DEFAULT_PARAMS_FILE",
    "DEFAULT_MAX_ENTRIES",
    # Typed accessors
    "Params",
    "init_from_args",
    # Driver settings
    "DriverSettings",
    "load_settings",
    "find_settings",
    "SETTINGS_FILENAME",
]
