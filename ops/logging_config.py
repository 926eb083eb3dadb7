"""Loguru sink configuration shared by library consumers and scripts."""

import os
import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger

from .config_loader import Config, load_config

VERBOSE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | <level>{message}</level>"
)
DEFAULT_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"


def setup_logging(
    verbose: bool = False,
    enable_trace: bool = False,
    log_file: Optional[Union[str, Path]] = None,
    config: Optional[Config] = None,
) -> str:
    """
    Configure loguru logging with appropriate levels.

    Args:
        verbose: If True, set log level to DEBUG
        enable_trace: If True, enable TRACE level logging for deep debugging
        log_file: Optional path of an additional rotating log file
        config: Configuration supplying `logging.level` when neither flag is
                set (loaded with `load_config` when omitted)

    Returns:
        The log level that was installed
    """
    # Remove default logger
    logger.remove()

    if enable_trace:
        log_level = "TRACE"
        log_format = VERBOSE_FORMAT
    elif verbose:
        log_level = "DEBUG"
        log_format = VERBOSE_FORMAT
    else:
        config = config or load_config()
        log_level = config.get_log_level()
        log_format = DEFAULT_FORMAT

    logger.add(
        sys.stderr,
        format=log_format,
        level=log_level,
        colorize=True,
        backtrace=enable_trace,
        diagnose=enable_trace,
    )

    if log_file:
        logger.add(
            str(log_file),
            level=log_level,
            format=FILE_FORMAT,
            rotation="10 MB",
            retention="7 days",
        )
        logger.info(f"📄 Also logging to file: {log_file}")

    os.environ["LOGURU_LEVEL"] = log_level

    if verbose:
        logger.debug("🔧 Verbose logging enabled (DEBUG level)")
        (config or load_config()).print_config_summary()
    if enable_trace:
        logger.trace("🔍 Trace logging enabled - maximum detail mode")

    return log_level
