#!/usr/bin/env python3
"""
Script utilities for standardized setup across example scripts.

Centralizes the boilerplate every example script repeats:
 - Resolve the results directory next to the script (examples/results/)
 - Create standard output subdirectories (e.g., html/, latex/)
 - Set up logging to a file in the results directory and to the console
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .constants import CONFIG
from .logging_utils import log_script_start, setup_logging


def setup_script(
    script_file: str,
    output_subdirs: Optional[List[str]] = None,
    results_dir: Optional[Path] = None,
    log_name: Optional[str] = None,
) -> Tuple[Path, logging.Logger, Dict[str, Path]]:
    """
    Standard setup for scripts that WRITE tables.

    Parameters
    ----------
    script_file : str
        Pass __file__ from the calling script.
    output_subdirs : list of str, optional
        Subdirectories to create in the results directory (e.g., ['html', 'latex']).
    results_dir : Path, optional
        Results directory; defaults to 'results/' next to the script.
    log_name : str, optional
        Name of the log file to create inside the results directory. Defaults to '<script>.log'.

    Returns
    -------
    results_dir : Path
        The resolved (and created) results directory.
    logger : logging.Logger
        Configured logger writing inside the results directory.
    output_dirs : dict[str, Path]
        Mapping of requested output subdirectories to their Paths (created if missing).
    """
    script_path = Path(script_file).resolve()
    if results_dir is None:
        results_dir = script_path.parent / 'results'
    results_dir = Path(results_dir)
    results_dir.mkdir(parents=True, exist_ok=True)

    if log_name is None:
        log_name = f"{script_path.stem}.log"
    logger = setup_logging(log_file=results_dir / log_name)
    log_script_start(logger, script_path, config_dict={**CONFIG, 'RESULTS_DIR': str(results_dir)})

    output_dirs: Dict[str, Path] = {}
    if output_subdirs:
        for sub in output_subdirs:
            out_p = results_dir / sub
            out_p.mkdir(parents=True, exist_ok=True)
            output_dirs[sub] = out_p

    return results_dir, logger, output_dirs


__all__ = [
    'setup_script',
]
