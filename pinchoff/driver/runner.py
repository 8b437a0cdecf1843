"""
Single-case runner.

Stages one simulation case in `<cases_dir>/<CaseNo>/`, compiles the engine
there and runs it. Every pre-flight check happens in `prepare`, before the
filesystem is touched; a failing check raises `PreflightError`. After that,
the exit status of the compiler or of the engine is handed back unchanged.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from pinchoff.config import DriverSettings, find_first_value
from pinchoff.runtime.dirs import CaseDir, timestamp
from pinchoff.runtime.logging import switch_log_file, close_log_file
from pinchoff.runtime.process import ProcessRunner, SubprocessRunner, search_path

from .case import (
    CaseDescriptor,
    PreflightError,
    source_file_name,
    validate_case_no,
    validate_threads,
)


logger = logging.getLogger(__name__)

CASE_NO_KEY = "CaseNo"


@dataclass
class CaseRequest:
    """Raw inputs of one invocation; None means "use the configured default"."""
    params_file: str | None = None
    exec_name: str | None = None
    threads: str | int | None = None


class CaseDriver:

    def __init__(self, project_root, settings: DriverSettings | None = None,
                 runner: ProcessRunner | None = None):
        self.project_root = Path(project_root).resolve()
        self.settings = settings if settings is not None else DriverSettings()
        self.runner = runner if runner is not None else SubprocessRunner()

    @property
    def cases_root(self) -> Path:
        return self.project_root / self.settings.cases_dir

    def resolve_params_file(self, name: str | None) -> Path:
        """Relative parameter paths are taken from the project root, not the cwd."""
        path = Path(name or self.settings.params).expanduser()
        if not path.is_absolute():
            path = self.project_root / path
        return path.resolve()

    def prepare(self, request: CaseRequest) -> CaseDescriptor:
        """Resolve and check all inputs without side effects."""
        settings = self.settings
        if request.threads is None:
            threads = validate_threads(settings.threads, source="threads in pinchoff.toml")
        else:
            threads = validate_threads(request.threads)
        exec_name = settings.exec if request.exec_name is None else request.exec_name
        if not exec_name:
            raise PreflightError("--exec requires a file name.")
        source_name = source_file_name(exec_name)
        params_file = self.resolve_params_file(request.params_file)

        if self.runner.which(settings.compiler, search_path(settings.search_path)) is None:
            raise PreflightError(
                f"{settings.compiler} not found in PATH.\n"
                f"Hint: load the solver environment or set search_path in pinchoff.toml."
            )

        if not params_file.is_file():
            raise PreflightError(f"Parameter file not found: {params_file}")

        source_file = self.cases_root / source_name
        if not source_file.is_file():
            raise PreflightError(f"Source file not found: {source_file}")

        case_no = validate_case_no(find_first_value(params_file, CASE_NO_KEY), params_file)

        return CaseDescriptor(
            case_no=case_no,
            source_file=source_file,
            params_file=params_file,
            threads=threads,
            case_dir=self.cases_root / str(case_no),
        )

    def compile_command(self, case: CaseDescriptor) -> list[str]:
        settings = self.settings
        return [
            settings.compiler,
            *[f"-I{d}" for d in settings.include_dirs],
            *settings.cflags,
            settings.openmp_flag,
            case.source_name,
            "-o",
            case.executable_name,
            *settings.libs,
        ]

    def child_env(self, case: CaseDescriptor | None = None) -> dict[str, str]:
        env = dict(os.environ)
        env.update(self.settings.env)
        env["PATH"] = search_path(self.settings.search_path, env.get("PATH", ""))
        if case is not None:
            env[self.settings.thread_env] = str(case.threads)
        return env

    def run(self, request: CaseRequest) -> int:
        """
        Stage, build and execute one case.

        Returns
        -------
        int
            The compiler's exit status if the build fails, else the engine's.

        Raises
        ------
        PreflightError
            If any check fails; nothing has been written at that point.
        """
        case = self.prepare(request)

        case_dir = CaseDir(case.case_dir, case.case_no,
                           local_params=self.settings.local_params,
                           checkpoint=self.settings.checkpoint)
        case_dir.stage(case.params_file, case.source_file)
        switch_log_file(case_dir.driver_log_file)
        try:
            self._print_banner(case)
            return self._build_and_execute(case, case_dir)
        finally:
            close_log_file()

    def _build_and_execute(self, case: CaseDescriptor, case_dir: CaseDir) -> int:
        settings = self.settings
        relative_dir = f"{settings.cases_dir}/{case.case_no}"

        command = self.compile_command(case)
        case_dir.update_metadata({
            "case_no": case.case_no,
            "time": timestamp(),
            "source": str(case.source_file),
            "parameters": str(case.params_file),
            "threads": case.threads,
            "compile_command": command,
        })

        logger.info(f"Compiling {case.source_name} ...")
        status = self.runner.run(command, cwd=case_dir.path, env=self.child_env())
        if status != 0:
            logger.error(f"Compilation of {case.source_name} failed with exit code: {status}")
            case_dir.update_metadata({"exit_code": status, "stage": "compile"})
            return status
        logger.info(f"Compilation successful: {case.executable_name}")
        logger.info("")

        if case_dir.has_checkpoint():
            logger.info("Restart file found - simulation will resume from checkpoint.")

        executable = case_dir.path / case.executable_name
        logger.info(f"Running: {settings.thread_env}={case.threads} ./{case.executable_name} {settings.local_params}")
        status = self.runner.run([str(executable), settings.local_params],
                                 cwd=case_dir.path, env=self.child_env(case))
        case_dir.update_metadata({"exit_code": status, "stage": "run"})

        logger.info("")
        if status == 0:
            logger.info("Simulation completed successfully.")
            logger.info(f"Output location: {relative_dir}/")
            if case_dir.log_file.is_file():
                logger.info(f"Log file: {relative_dir}/{case.log_name}")
        else:
            logger.error(f"Simulation failed with exit code: {status}")
        return status

    def _print_banner(self, case: CaseDescriptor):
        rule = "=" * 41
        for line in [
            rule,
            "ElasticPinchOff - Single Case Runner",
            rule,
            f"Source file: {case.source_name}",
            f"Parameter file: {case.params_file}",
            f"CaseNo: {case.case_no}",
            f"Case directory: {case.case_dir}",
            f"Run mode: OpenMP (threads={case.threads})",
            f"Expected log file: {case.log_name}",
            rule,
            "",
        ]:
            logger.info(line)
