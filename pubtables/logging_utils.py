"""
Logging utilities for consistent logging across the package and example scripts.

This module provides a centralized logging setup to ensure consistent log
formatting, file output, and console output.

Usage
-----
>>> from pubtables.logging_utils import setup_logging
>>> logger = setup_logging(output_dir / "tables.log")
>>> logger.info("Saving tables...")
"""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path


def _get_log_level_from_env():
    """
    Get logging level from PUBTABLES_LOG_LEVEL environment variable.

    Returns
    -------
    int
        logging.DEBUG, logging.INFO, logging.WARNING, or logging.ERROR
        Defaults to logging.INFO if not set or invalid

    Examples
    --------
    export PUBTABLES_LOG_LEVEL=DEBUG    # Verbose build details
    export PUBTABLES_LOG_LEVEL=INFO     # Normal operation (default)
    export PUBTABLES_LOG_LEVEL=WARNING  # Quiet mode
    """
    level_str = os.environ.get('PUBTABLES_LOG_LEVEL', 'INFO').upper()
    level_map = {
        'DEBUG': logging.DEBUG,
        'INFO': logging.INFO,
        'WARNING': logging.WARNING,
        'ERROR': logging.ERROR,
    }
    return level_map.get(level_str, logging.INFO)


def setup_logging(log_file=None, level=None, console=True):
    """
    Set up logging with consistent formatting for file and console output.

    Parameters
    ----------
    log_file : str or Path, optional
        Path to log file. If None, only console logging is used.
    level : int, optional
        Logging level (e.g., logging.DEBUG, logging.INFO, logging.WARNING)
        If None, reads from PUBTABLES_LOG_LEVEL environment variable (default: INFO)
    console : bool, default=True
        Whether to also log to console (in addition to file)

    Returns
    -------
    logging.Logger
        Configured logger instance

    Notes
    -----
    - Log format: "YYYY-MM-DD HH:MM:SS - LEVEL - message"
    - Creates parent directories for log_file if they don't exist
    - Logger name is set to 'pubtables'
    - Calling again replaces the handlers of the previous call
    """
    if level is None:
        level = _get_log_level_from_env()

    logger = logging.getLogger('pubtables')
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    logger.handlers = []

    formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode='w')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    logger.propagate = False

    return logger


def log_script_start(logger, script_path, config_dict=None):
    """
    Log the start of a script with configuration information.

    Logs a concise header at INFO level. Full configuration is logged at DEBUG
    level; use PUBTABLES_LOG_LEVEL=DEBUG to see it.
    """
    logger.info("=" * 80)
    logger.info(f"{Path(script_path).name}")
    logger.info("=" * 80)

    if config_dict is not None:
        logger.debug(f"Started: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        logger.debug("-" * 80)
        logger.debug("Full configuration:")
        for key, value in config_dict.items():
            logger.debug(f"  {key}: {value}")
        logger.debug("-" * 80)


def log_script_end(logger):
    """Log the end of a script."""
    logger.info("=" * 80)
    logger.info(f"Completed: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    logger.info("=" * 80)


def log_table_summary(logger, built, formats=0, merges=0):
    """
    Log the resolved shape of a built table at DEBUG level.

    Rows, visible columns, row groups, spanner levels and the number of
    formats and merges applied, then one line per row group.
    """
    n_rows = sum(len(g.rows) for g in built.groups)
    name = f" {built.table_id!r}" if built.table_id else ""
    logger.debug(
        f"Built table{name}: "
        f"{n_rows} rows x {len(built.columns)} columns, "
        f"{len(built.groups) if built.has_groups else 0} row groups, "
        f"{len(built.spanner_rows)} spanner levels, "
        f"{formats} formats, {merges} merges"
    )
    if built.has_groups:
        for group in built.groups:
            logger.debug(f"  group {group.label!r}: {len(group.rows)} rows")


__all__ = [
    'setup_logging',
    'log_script_start',
    'log_script_end',
    'log_table_summary',
]
