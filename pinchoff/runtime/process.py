"""
Thin seam over external processes.

Commands are always argument lists; nothing goes through a shell. The case
driver only talks to `ProcessRunner`, so tests can swap in a fake.
"""

import os
import shutil
import subprocess
from pathlib import Path


def exit_status(returncode: int) -> int:
    """Map a child return code to a shell-style exit status (signal N -> 128+N)."""
    if returncode < 0:
        return 128 - returncode
    return returncode


def search_path(extra: list[str] | None = None, base: str | None = None) -> str:
    """Return a PATH string with `extra` entries in front of `base` (default: $PATH)."""
    if base is None:
        base = os.environ.get("PATH", "")
    entries = [str(Path(p).expanduser()) for p in (extra or [])]
    if base:
        entries.append(base)
    return os.pathsep.join(entries)


class ProcessRunner:
    """Interface used by the case driver to reach the outside world."""

    def which(self, name: str, path: str | None = None) -> str | None:
        raise NotImplementedError

    def run(self, args: list[str], cwd: str | Path, env: dict[str, str] | None = None) -> int:
        """Run `args` to completion with inherited stdio and return its exit status."""
        raise NotImplementedError


class SubprocessRunner(ProcessRunner):
    """Default runner backed by `shutil.which` and `subprocess.run`."""

    def which(self, name, path=None):
        return shutil.which(name, path=path)

    def run(self, args, cwd, env=None):
        completed = subprocess.run([str(a) for a in args], cwd=cwd, env=env, check=False)
        return exit_status(completed.returncode)
