# tripcarbon/infra/logging.py
# -*- coding: utf-8 -*-

"""
Central logging configuration for the report pipeline.

Usage
-----
    from tripcarbon.infra.logging import init_logging, get_logger

    init_logging(level="INFO", write_output=True)
    log = get_logger(__name__)
    log.info("Consolidating trips")

Environment
-----------
- TRIPCARBON_LOG_LEVEL, if set, overrides the `level` parameter.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

# ────────────────────────────────────────────────────────────────────────────────
# Globals
# ────────────────────────────────────────────────────────────────────────────────

_DEFAULT_LOGS_DIR = Path("logs")
_ENV_LEVEL = "TRIPCARBON_LOG_LEVEL"

_current_log_file: Optional[Path] = None


# ────────────────────────────────────────────────────────────────────────────────
# Public helpers
# ────────────────────────────────────────────────────────────────────────────────

def get_current_log_path() -> Optional[Path]:
    """
    Return the path to the per-run log file, or None when logging only to stdout.
    """
    return _current_log_file


def init_logging(
      level: str = "INFO"
    , *
    , force: bool = True
    , write_output: bool = False
    , log_file: Optional[Path] = None
    , logs_dir: Optional[Path] = None
) -> None:
    """
    Configure root logging.

    Parameters
    ----------
    level : str, default "INFO"
        Logging level name. TRIPCARBON_LOG_LEVEL overrides it when set.
    force : bool, default True
        Remove existing root handlers before installing ours.
    write_output : bool, default False
        When True and `log_file` is not given, create a per-run file under
        `logs_dir` (default `logs/`).
    log_file : Optional[Path]
        Explicit log file, written in addition to stdout.
    logs_dir : Optional[Path]
        Base directory for per-run log files.
    """
    global _current_log_file

    env_level = os.getenv(_ENV_LEVEL)
    if env_level:
        level = env_level

    numeric_level = getattr(logging, str(level).upper(), logging.INFO)

    root = logging.getLogger()
    if force:
        for handler in list(root.handlers):
            root.removeHandler(handler)

    root.setLevel(numeric_level)

    # [YYYY-MM-DD HH:MM:SS][LEVEL][logger.name] message
    formatter = logging.Formatter(
          fmt="[{asctime}][{levelname}][{name}] {message}"
        , datefmt="%Y-%m-%d %H:%M:%S"
        , style="{"
    )

    stream_handler = logging.StreamHandler(stream=sys.stdout)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    _current_log_file = None

    if write_output or log_file is not None:
        if log_file is None:
            base_dir = Path(logs_dir) if logs_dir is not None else _DEFAULT_LOGS_DIR
            base_dir.mkdir(parents=True, exist_ok=True)

            script_name = Path(sys.argv[0] or "app").stem or "app"
            if script_name in {"-m", ""}:
                script_name = "app"
            ts = datetime.now().strftime("%Y%m%d-%H%M%S")
            log_file = base_dir / f"{script_name}__{ts}.log"
        else:
            log_file = Path(log_file)
            log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

        _current_log_file = log_file.resolve()

    get_logger(__name__).debug("Logging configured (level=%s)", logging.getLevelName(numeric_level))


def log_banner(
      log: logging.Logger
    , msg: str
    , *
    , char: str = "="
    , width: int = 60
) -> None:
    """
    Print a bar, the message, and another bar.
    """
    bar = char * width
    log.info(bar)
    log.info(msg)
    log.info(bar)


def get_logger(
    name: Optional[str] = None
) -> logging.Logger:
    """
    Thin wrapper around logging.getLogger so modules never configure logging themselves.
    """
    return logging.getLogger(name if name is not None else __name__)
