"""
Key/value parameter storage for `key=value` text files.

Parsing rules:
- comments begin with `#` and run to the end of the line,
- each valid line is `key=value`, split at the first `=`,
- key and value are trimmed of ASCII whitespace,
- lines without `=`, or with an empty key or value, are ignored,
- the last occurrence of a duplicate key wins.

The store never raises on bad input. A missing file or an entry over the
capacity limit is reported through the logger and the store keeps going, so
callers can fall back to their defaults.
"""

import logging
from pathlib import Path
from typing import Iterator


logger = logging.getLogger(__name__)

DEFAULT_PARAMS_FILE = "case.params"
DEFAULT_MAX_ENTRIES = 256

_ASCII_WHITESPACE = " \t\n\r\v\f"


def parse_line(line: str) -> tuple[str, str] | None:
    """Return the `(key, value)` pair held by one physical line, or None."""
    line = line.split("#", 1)[0]
    if "=" not in line:
        return None
    key, value = line.split("=", 1)
    key = key.strip(_ASCII_WHITESPACE)
    value = value.strip(_ASCII_WHITESPACE)
    if not key or not value:
        return None
    return key, value


def find_first_value(path: str | Path, key: str) -> str | None:
    """
    Scan a parameter file for the first line assigning `key`.

    Unlike `ParamStore`, the first match wins. Lines whose first non-blank
    character is `#` are skipped. Returns None when the key is absent or the
    first line naming it has no value.
    """
    with open(path, "r", encoding="utf-8", errors="replace") as fp:
        for line in fp:
            if line.lstrip(_ASCII_WHITESPACE).startswith("#"):
                continue
            name, sep, value = line.partition("=")
            if name.strip(_ASCII_WHITESPACE) != key:
                continue
            # a bare key line ends the scan with no value
            if not sep:
                return None
            value = value.split("#", 1)[0].split("=", 1)[0]
            return value.strip(_ASCII_WHITESPACE) or None
    return None


class ParamStore:
    """
    In-memory mapping of parameter names to raw string values.

    The store is bound to one source file at a time. It loads lazily on the
    first lookup, and every `load` fully replaces the previous contents.
    """

    def __init__(self, path: str | Path = DEFAULT_PARAMS_FILE,
                 max_entries: int | None = DEFAULT_MAX_ENTRIES,
                 log: logging.Logger | None = None):
        self.path = Path(path)
        self.max_entries = max_entries
        self.log = log if log is not None else logger
        self._entries: dict[str, str] = {}
        self._loaded = False
        self._warned_missing = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self, path: str | Path | None = None) -> bool:
        """
        (Re)load entries from `path`, or from the current source path.

        Returns False when the file cannot be opened; the store is then left
        empty but still counts as loaded.
        """
        if path is not None:
            self.path = Path(path)
        self._entries.clear()
        self._loaded = True

        try:
            fp = open(self.path, "r", encoding="utf-8", errors="replace")
        except OSError:
            if not self._warned_missing:
                self.log.warning(f"Parameter file '{self.path}' not found. Using defaults.")
                self._warned_missing = True
            return False

        with fp:
            for line in fp:
                entry = parse_line(line)
                if entry is not None:
                    self.set(*entry)

        self._warned_missing = False
        return True

    def init_from_args(self, args: list[str]) -> bool:
        """Select the source file from `args[1]` (argv style) and load it."""
        if len(args) > 1 and args[1]:
            path = args[1]
        else:
            path = DEFAULT_PARAMS_FILE
        return self.load(path)

    def set(self, key: str, value: str) -> bool:
        """
        Insert or update one entry. A new key beyond capacity is dropped.

        A store filled by hand counts as loaded, so lookups will not replace
        its contents with the source file.
        """
        self._loaded = True
        if key not in self._entries and self.max_entries is not None \
                and len(self._entries) >= self.max_entries:
            self.log.warning(f"Parameter entry limit reached ({self.max_entries}), skipping '{key}'")
            return False
        self._entries[key] = value
        return True

    def _ensure_loaded(self):
        if not self._loaded:
            self.load()

    def get(self, key: str) -> str | None:
        self._ensure_loaded()
        return self._entries.get(key)

    def keys(self) -> list[str]:
        self._ensure_loaded()
        return list(self._entries.keys())

    def items(self) -> list[tuple[str, str]]:
        self._ensure_loaded()
        return list(self._entries.items())

    def __contains__(self, key) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        self._ensure_loaded()
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())
