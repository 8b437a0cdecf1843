from .case import CaseDescriptor, PreflightError, source_file_name, validate_case_no, validate_threads
from .runner import CaseDriver, CaseRequest
from .cli import main
