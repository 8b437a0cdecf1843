import logging
from pathlib import Path

import pytest

from pinchoff.runtime.process import ProcessRunner


class FakeRunner(ProcessRunner):
    """
    Stands in for the compiler and the engine.

    Compiling creates the executable; running it writes the engine log and
    returns `engine_status`.
    """

    def __init__(self, tools=("qcc",), compile_status=0, engine_status=0, write_log=True):
        self.tools = set(tools)
        self.compile_status = compile_status
        self.engine_status = engine_status
        self.write_log = write_log
        self.calls = []

    def which(self, name, path=None):
        return f"/fake/bin/{name}" if name in self.tools else None

    def run(self, args, cwd, env=None):
        cwd = Path(cwd)
        self.calls.append({"args": list(args), "cwd": cwd, "env": dict(env or {}),
                           "files": sorted(p.name for p in cwd.iterdir())})
        if args[0] in self.tools:
            if self.compile_status == 0:
                (cwd / args[args.index("-o") + 1]).write_text("binary")
            return self.compile_status
        if self.write_log:
            (cwd / f"c{cwd.name}-log").write_text("i dt t ke\n")
        return self.engine_status


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def make_runner():
    return FakeRunner


@pytest.fixture
def project(tmp_path):
    """A project root holding an engine source and a parameter file."""
    root = tmp_path.resolve()
    cases = root / "simulationCases"
    cases.mkdir()
    (cases / "LiquidOutThinning.c").write_text("int main() { return 0; }\n")
    (root / "default.params").write_text(
        "CaseNo=1000\nMAXlevel=10\nOh=0.5\ntmax=1.0\ndtmax=0.0001\n"
    )
    return root


@pytest.fixture(autouse=True)
def restore_root_logger():
    """The CLI installs its own handlers on the root logger; drop them after each test."""
    root = logging.getLogger()
    level = root.level
    yield
    for h in list(root.handlers):
        if type(h) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(h)
            h.close()
    root.setLevel(level)
