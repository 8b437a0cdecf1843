"""
TOML loading of the optional driver settings file.

Uses tomllib (Python 3.11+) or tomli (backport) for reading.
"""

import sys
from pathlib import Path

# Import tomllib or backport
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from .schema import DriverSettings


SETTINGS_FILENAME = "pinchoff.toml"


def load_settings(path: str | Path) -> DriverSettings:
    """
    Load the `[driver]` table of a TOML file and return a DriverSettings object.

    Raises
    ------
    ValueError
        If the file is not valid TOML or holds unknown or mistyped settings.
    """
    path = Path(path)
    with open(path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {path}: {e}") from e

    return DriverSettings.from_dict(data.get("driver", {}))


def find_settings(project_root: str | Path) -> DriverSettings:
    """Load `pinchoff.toml` from the project root, or return the defaults."""
    path = Path(project_root) / SETTINGS_FILENAME
    if not path.is_file():
        return DriverSettings()
    return load_settings(path)
