"""
Logger utility for the weather edge service
Configures console and optional file output for the weather_edge namespace
"""

import logging
import sys
from pathlib import Path
from typing import Dict, Optional

ROOT_LOGGER_NAME = "weather_edge"


def setup_logging(config: Optional[Dict] = None) -> logging.Logger:
    """
    Configure the service logger

    Args:
        config: Logging settings with 'level', 'file' and 'console' keys

    Returns:
        The configured package-level logger
    """
    if config is None:
        config = {
            'level': 'INFO',
            'file': None,
            'console': True
        }

    logger = logging.getLogger(ROOT_LOGGER_NAME)

    level = getattr(logging, str(config.get('level', 'INFO')).upper(), logging.INFO)
    logger.setLevel(level)

    # Remove existing handlers so repeated setup does not duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    simple_formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(name)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    log_file = config.get('file')
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(detailed_formatter)
        logger.addHandler(file_handler)

    if config.get('console', True):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(simple_formatter)
        logger.addHandler(console_handler)

    return logger
