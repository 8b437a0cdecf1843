from .logging import reset_logging, switch_log_file, close_log_file
from .dirs import CaseDir, case_log_name, get_project_root
from .process import ProcessRunner, SubprocessRunner, exit_status, search_path
