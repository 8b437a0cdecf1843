"""
Typed accessors with defaults on top of `ParamStore`.

Usage in a simulation case:

    params = init_from_args(sys.argv)
    max_level = params.get_int("MAXlevel", 12)
    tmax = params.get_double("tmax", 200.)
    use_feature = params.get_bool("use_feature", False)

Invalid values do not abort; a warning is logged and the provided default is
returned instead.
"""

import logging
import math
import re

from .store import ParamStore


logger = logging.getLogger(__name__)

INT_MIN = -2**31
INT_MAX = 2**31 - 1

TRUE_LITERALS = frozenset({"1", "true", "yes", "on"})
FALSE_LITERALS = frozenset({"0", "false", "no", "off"})

_int_pattern = re.compile(r"[+-]?[0-9]+")
_double_pattern = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


class Params:
    """Read-only typed view of a parameter store."""

    def __init__(self, store: ParamStore | None = None, log: logging.Logger | None = None):
        self.store = store if store is not None else ParamStore()
        self.log = log if log is not None else logger

    def get_string(self, key: str, default: str | None = None) -> str | None:
        value = self.store.get(key)
        return default if value is None else value

    def get_int(self, key: str, default: int) -> int:
        raw = self.store.get(key)
        if raw is None:
            return default
        if _int_pattern.fullmatch(raw):
            value = int(raw)
            if INT_MIN <= value <= INT_MAX:
                return value
        self._warn_invalid("int", key, raw, default)
        return default

    def get_double(self, key: str, default: float) -> float:
        raw = self.store.get(key)
        if raw is None:
            return default
        if _double_pattern.fullmatch(raw):
            value = float(raw)
            mantissa = re.split("[eE]", raw, maxsplit=1)[0]
            underflow = value == 0.0 and any(c in "123456789" for c in mantissa)
            if math.isfinite(value) and not underflow:
                return value
        self._warn_invalid("double", key, raw, f"{default:g}")
        return default

    def get_bool(self, key: str, default: bool) -> bool:
        """
        Parse boolean-like values:
        - true: `1`, `true`, `yes`, `on`
        - false: `0`, `false`, `no`, `off`

        All matches are case-insensitive.
        """
        raw = self.store.get(key)
        if raw is None:
            return default
        literal = raw.lower()
        if literal in TRUE_LITERALS:
            return True
        if literal in FALSE_LITERALS:
            return False
        self._warn_invalid("bool", key, raw, int(default))
        return default

    def _warn_invalid(self, kind, key, raw, default):
        self.log.warning(f"Invalid {kind} for '{key}' ('{raw}'), using default {default}")


def init_from_args(args: list[str], log: logging.Logger | None = None) -> Params:
    """Build accessors over a store loaded from `args[1]`, or `case.params`."""
    store = ParamStore(log=log)
    store.init_from_args(args)
    return Params(store, log=log)
