import sys
import logging


class _MaxLevelFilter(logging.Filter):

    def __init__(self, level):
        super().__init__()
        self.level = level

    def filter(self, record):
        return record.levelno < self.level


def reset_logging():
    """
    Config the logger such that logging.info(...) works like print(...)
    and warnings or errors go to stderr as "LEVEL: message".
    """
    root_logger = logging.getLogger()

    # clear any existing handlers
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    # config logging to console as if calling print(...)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter('%(message)s'))
    console_handler.addFilter(_MaxLevelFilter(logging.WARNING))
    root_logger.addHandler(console_handler)

    # diagnostics on stderr
    error_handler = logging.StreamHandler(sys.stderr)
    error_handler.setLevel(logging.WARNING)
    error_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    root_logger.addHandler(error_handler)

    # set logging level
    root_logger.setLevel(logging.INFO)


def switch_log_file(log_file):
    root_logger = logging.getLogger()

    # remove all existing file handler
    close_log_file()

    # add its own file hander
    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    root_logger.addHandler(file_handler)


def close_log_file():
    root_logger = logging.getLogger()
    for h in list(root_logger.handlers):
        if isinstance(h, logging.FileHandler):
            root_logger.removeHandler(h)
            h.close()
