"""
Command line entry point of the single-case runner.

Usage:
    pinchoff-run [params_file] [--exec FILE] [--threads N]

Exit status is 0 on success, 1 for usage or pre-flight errors, and otherwise
the status of the compiler or the engine.
"""

import argparse
import logging
import sys
from pathlib import Path

from pinchoff.config import find_settings
from pinchoff.runtime.dirs import get_project_root
from pinchoff.runtime.logging import reset_logging

from .case import PreflightError
from .runner import CaseDriver, CaseRequest


logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """Usage errors exit with status 1 instead of argparse's 2."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"ERROR: {message}\n")


def _file_name(value):
    if not value:
        raise argparse.ArgumentTypeError("--exec requires a file name.")
    return value


class _ThreadsAction(argparse.Action):
    """Store the thread count; the last of --threads/--CPUs on the line wins."""

    def __call__(self, parser, namespace, values, option_string=None):
        namespace.threads = values
        if option_string in ("--CPUs", "--cpus"):
            namespace.legacy_cpus = True


def build_parser(settings) -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="pinchoff-run",
        description="Stage, compile and run a single simulation case in "
                    f"{settings.cases_dir}/<CaseNo>/.",
    )
    parser.add_argument("params_file", nargs="?", default=None,
                        help=f"parameter file path (default: {settings.params})")
    parser.add_argument("--exec", dest="exec_name", metavar="FILE", type=_file_name,
                        help=f"C source in {settings.cases_dir}/ (default: {settings.exec})")
    parser.add_argument("--threads", action=_ThreadsAction, metavar="N",
                        help=f"OpenMP thread count (default: {settings.threads})")
    parser.add_argument("--CPUs", "--cpus", action=_ThreadsAction, metavar="N",
                        help="deprecated alias for --threads")
    parser.add_argument("--mpi", action="store_true",
                        help="deprecated; ignored (OpenMP is always used)")
    parser.set_defaults(threads=None, legacy_cpus=False)
    return parser


def main(argv=None, project_root=None, runner=None) -> int:
    reset_logging()
    project_root = Path(project_root) if project_root is not None else get_project_root()

    try:
        settings = find_settings(project_root)
    except (OSError, ValueError) as e:
        logger.error(str(e))
        return 1

    args = build_parser(settings).parse_args(argv)

    if args.mpi:
        logger.warning("--mpi is deprecated and ignored; using OpenMP.")
    if args.legacy_cpus:
        logger.warning("--CPUs/--cpus is deprecated; use --threads.")

    driver = CaseDriver(project_root, settings, runner=runner)
    request = CaseRequest(params_file=args.params_file, exec_name=args.exec_name, threads=args.threads)
    try:
        return driver.run(request)
    except (PreflightError, OSError) as e:
        logger.error(str(e))
        return 1


def run():
    sys.exit(main())
