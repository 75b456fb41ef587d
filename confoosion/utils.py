import logging
import os.path
import sys
from typing import Optional


class LogLevelFilter(logging.Filter):
    def __init__(self, min_level: Optional[int] = None, max_level: Optional[int] = None):
        self.min_level = min_level
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return (self.min_level is None or (record.levelno >= self.min_level)) and (
            self.max_level is None or (record.levelno <= self.max_level)
        )


class ContextFilter(logging.Filter):
    """Tag records with the basename of the file being converted."""

    def __init__(self, srcfile: Optional[str] = None):
        self.srcfile = os.path.basename(srcfile) if srcfile else "-"

    def filter(self, record: logging.LogRecord) -> bool:
        record.srcfile = self.srcfile  # type: ignore
        return True


def set_console_handlers(
    logger: logging.Logger,
    verbose: bool = False,
    debug: bool = False,
    srcfile: Optional[str] = None,
):
    if verbose:
        stdout_handler = logging.StreamHandler(sys.stdout)
        level = logging.DEBUG if debug else logging.INFO
        logger.setLevel(level)
        stdout_handler.setLevel(level)
        stdout_handler.addFilter(LogLevelFilter(max_level=logging.INFO))
        logger.addHandler(stdout_handler)

    error_formatter = logging.Formatter(fmt="%(srcfile)s: [%(levelname)s] %(message)s")
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(error_formatter)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.addFilter(LogLevelFilter(min_level=logging.WARNING))
    stderr_handler.addFilter(ContextFilter(srcfile))
    logger.addHandler(stderr_handler)
