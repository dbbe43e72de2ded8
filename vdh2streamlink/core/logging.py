import logging
import random
import re
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from vdh2streamlink.config.settings import config

# Messages for the user; log records go through the handlers below
console = Console(stderr=True)
# Progress of the download itself
status_console = Console(highlight=False)

LOGGER_NAME = "vdh2streamlink"

STREAMLINK_LOG_LEVELS = {0: "warning", 1: "info", 2: "all"}

def setup_logging(verbosity: int, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger.
    Verbosity 0 shows warnings only, 1 and 2 show debug messages.
    A log file, when given, receives every record regardless of verbosity.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if config.logging.enable_rich:
        console_handler: logging.Handler = RichHandler(
            console=console,
            show_time=False,
            show_path=False,
            markup=False
        )
    else:
        console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if verbosity > 0 else logging.WARNING)
    console_handler.setFormatter(logging.Formatter(config.logging.format))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(config.logging.file_format))
        logger.addHandler(file_handler)

    return logger

def streamlink_log_level(verbosity: int) -> str:
    """Map DEBUG=0/1/2 to Streamlink's --loglevel"""
    try:
        return STREAMLINK_LOG_LEVELS[verbosity]
    except KeyError:
        raise ValueError(f"unrecognized verbosity {verbosity}") from None

def log_file_path(output_path: str, rng: Optional[random.Random] = None) -> Path:
    """
    Log file next to the output: <dir>/SL_logs/<name>_<0..32767>.log.
    Whitespace runs in the name become underscores. Creates the log directory.
    """
    rng = rng or random.Random()
    output = Path(output_path)
    log_dir = output.parent / config.output.log_dir_name
    log_dir.mkdir(exist_ok=True)
    base = re.sub(r" +", "_", output.name)
    return log_dir / f"{base}_{rng.randint(0, 32767)}.log"
