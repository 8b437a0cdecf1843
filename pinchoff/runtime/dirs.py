import os
import time
import shutil
import json
from pathlib import Path


root_env_var = "PINCHOFF_ROOT"


def get_project_root() -> Path:
    """Project root from the environment, else the current directory."""
    return Path(os.getenv(root_env_var) or os.getcwd()).resolve()


def case_log_name(case_no: int) -> str:
    """Name of the log file written by the engine for one case."""
    return f"c{case_no}-log"


class CaseDir:
    """
    Dedicated working folder of one simulation case, keyed by its CaseNo.

    Layout:
        <cases_dir>/<CaseNo>/
            case.params        copy of the input parameter file
            <source>.c         copy of the engine source
            <source>           compiled engine
            restart            checkpoint, written by the engine
            c<CaseNo>-log      engine log
            intermediate/      snapshots, written by the engine
            METADATA.json      record of the driver invocations
            driver.log         driver messages
    """

    def __init__(self, path, case_no: int, local_params="case.params", checkpoint="restart"):
        self.path = Path(path)
        self.case_no = case_no
        self.local_params = local_params
        self.checkpoint = checkpoint

    def setup_directory(self):
        # re-running a case must not fail
        self.path.mkdir(parents=True, exist_ok=True)
        if not self.metadata_file.exists():
            with open(self.metadata_file, "w", encoding="utf-8") as fp:
                json.dump({}, fp)

    def stage(self, params_path, source_path):
        """
        Create the folder and copy the inputs in; safe to call again.
        ---
        params_path: copied under the fixed local name.
        source_path: copied under its own name.
        """
        self.setup_directory()
        # re-running from the staged copy itself
        if not (self.params_file.exists() and os.path.samefile(params_path, self.params_file)):
            shutil.copyfile(params_path, self.params_file)
        source_copy = self.path / Path(source_path).name
        if not (source_copy.exists() and os.path.samefile(source_path, source_copy)):
            shutil.copyfile(source_path, source_copy)

    @property
    def params_file(self):
        return self.path / self.local_params

    @property
    def intermediate_dir(self):
        return self.path / "intermediate"

    @property
    def checkpoint_file(self):
        return self.path / self.checkpoint

    @property
    def log_file(self):
        return self.path / case_log_name(self.case_no)

    @property
    def driver_log_file(self):
        return self.path / "driver.log"

    @property
    def metadata_file(self):
        return self.path / "METADATA.json"

    def has_checkpoint(self) -> bool:
        return self.checkpoint_file.is_file()

    def read_metadata(self) -> dict:
        with open(self.metadata_file, "r", encoding="utf-8") as fp:
            return json.load(fp)

    def update_metadata(self, new_info):
        metadata = self.read_metadata()
        metadata.update(new_info)
        with open(self.metadata_file, "w", encoding="utf-8") as fp:
            json.dump(metadata, fp, indent=2, sort_keys=True)


def timestamp() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%S", time.localtime())
