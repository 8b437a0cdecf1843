"""
Case descriptor and the pre-flight checks that produce it.
"""

import re
from dataclasses import dataclass
from pathlib import Path

from pinchoff.engine import MIN_CASE_NO
from pinchoff.runtime.dirs import case_log_name


SOURCE_SUFFIX = ".c"

_positive_int = re.compile(r"[1-9][0-9]*")
_unsigned_int = re.compile(r"[0-9]+")


class PreflightError(RuntimeError):
    """A check before staging failed; the driver exits with status 1."""


@dataclass
class CaseDescriptor:
    """Everything the driver resolved for one invocation. All paths are absolute."""
    case_no: int
    source_file: Path
    params_file: Path
    threads: int
    case_dir: Path

    @property
    def source_name(self) -> str:
        return self.source_file.name

    @property
    def executable_name(self) -> str:
        return self.source_file.stem

    @property
    def log_name(self) -> str:
        return case_log_name(self.case_no)


def source_file_name(name: str) -> str:
    """Append the `.c` suffix when it is missing."""
    return name if name.endswith(SOURCE_SUFFIX) else name + SOURCE_SUFFIX


def validate_threads(raw, source="--threads") -> int:
    """`source` names where the value came from, for the error message."""
    text = str(raw)
    if not _positive_int.fullmatch(text):
        raise PreflightError(f"{source} must be a positive integer, got: {text}")
    return int(text)


def validate_case_no(raw: str | None, params_file) -> int:
    if not raw:
        raise PreflightError(f"CaseNo not found in parameter file: {params_file}")
    if not _unsigned_int.fullmatch(raw):
        raise PreflightError(f"CaseNo must be numeric, got: {raw}")
    case_no = int(raw)
    if case_no < MIN_CASE_NO:
        raise PreflightError(f"CaseNo must be >= {MIN_CASE_NO} for consistent sorting, got: {raw}")
    return case_no
