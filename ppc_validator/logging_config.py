"""
Centralized logging configuration for the PPC rule validator.

Usage:
    from ppc_validator.logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("Validated rule")
    logger.warning("Predictor unavailable, using heuristic")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from .settings import get_settings


def setup_logging(
    module_name: str,
    log_level: str = "INFO",
    log_dir: str = "logs",
    console_output: bool = True
) -> logging.Logger:
    """
    Set up logging for a module with both file and console output.

    Args:
        module_name: Name of the module (use __name__)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_dir: Directory for log files (default: logs/)
        console_output: Whether to output to console (default: True)

    Returns:
        Configured logger instance

    Log Levels:
        DEBUG: Per-campaign matching and impact detail
        INFO: Validation runs (rule, affected count, score)
        WARNING: Predictor fallbacks, conflicting rules
        ERROR: Unreadable payloads, CLI failures

    Log Files:
        Format: logs/{module}_{date}.log
        Example: logs/engine_2026-10-17.log
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(module_name)
    logger.setLevel(getattr(logging, log_level.upper()))

    # Prevent duplicate handlers if setup_logging called multiple times
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        fmt='%(asctime)s | %(name)s | %(levelname)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    today = datetime.now().strftime("%Y-%m-%d")
    simple_module = module_name.split('.')[-1]
    log_file = log_path / f"{simple_module}_{today}.log"

    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setLevel(getattr(logging, log_level.upper()))
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, log_level.upper()))
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger


def get_logger(module_name: str) -> logging.Logger:
    """
    Get an existing logger or create one using PPC_LOG_LEVEL / PPC_LOG_DIR.

    Args:
        module_name: Name of the module (use __name__)

    Returns:
        Logger instance
    """
    logger = logging.getLogger(module_name)

    if not logger.handlers:
        settings = get_settings()
        return setup_logging(module_name, log_level=settings.log_level, log_dir=settings.log_dir)

    return logger
