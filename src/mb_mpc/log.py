"""Logging for mb-mpc: a rotating file log, echoed to stderr when verbose."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "mb_mpc"


def setup_logging(log_path: Path, *, verbose: bool = False) -> None:
    """Attach handlers to the package logger once per process.

    Everything from DEBUG up goes to the rotating file at ``log_path``.
    With ``verbose``, INFO and above are also written to stderr.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return

    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    file_handler.setFormatter(
        logging.Formatter(fmt="%(asctime)s %(levelname)-8s %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
    )
    logger.addHandler(file_handler)

    if verbose:
        console = logging.StreamHandler()
        console.setLevel(logging.INFO)
        console.setFormatter(logging.Formatter(fmt="%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(console)

    logger.setLevel(logging.DEBUG)
