import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(name)s: %(message)s"
FILE_LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(level=logging.WARNING, log_file=None, color_logs=True):
    """Configures logging for the teletext package.

    Console output goes to stderr through rich so it never mixes with the
    rendered map on stdout.
    """
    root_logger = logging.getLogger("teletext")
    if root_logger.hasHandlers():
        for h in root_logger.handlers[:]:
            root_logger.removeHandler(h)
            h.close()

    console_handler = RichHandler(
        console=Console(stderr=True, no_color=not color_logs),
        show_time=False,
        show_path=False,
    )
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(console_handler)
    root_logger.setLevel(level)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="w")
            file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
            root_logger.addHandler(file_handler)
            root_logger.info("Logging to file: %s", log_file)
        except OSError as e:
            root_logger.error("Could not open log file %s: %s", log_file, e)

    return root_logger
