"""
Logging setup shared by the CLI and embedding applications.
"""

import logging
import sys

from pythonjsonlogger.json import JsonFormatter


def setup_logging(level=logging.INFO, json_output: bool = True):
    """
    Configures root logging, as structured JSON by default.
    """
    handler = logging.StreamHandler(sys.stdout)

    if json_output:
        # Pipeline records carry mode, size and timing as extra fields
        fmt = (
            "%(asctime)s %(name)s %(levelname)s %(message)s "
            "%(mode)s %(width)s %(height)s %(elapsed_ms)s"
        )
        formatter: logging.Formatter = JsonFormatter(
            fmt=fmt, datefmt="%Y-%m-%dT%H:%M:%S"
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)s [%(name)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )

    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    # Remove existing handlers to avoid duplicate logs
    for h in root_logger.handlers[:]:
        root_logger.removeHandler(h)

    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in ("PIL",):
        logging.getLogger(name).setLevel(logging.WARNING)
