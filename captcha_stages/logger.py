"""
Logging configuration for the CAPTCHA reader command line.

Library modules only create loggers; handlers are attached here.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from captcha_config import PipelineConfig


def setup_logging(log_level=None, log_file: Optional[Union[str, Path]] = None, config: dict = None):
    """
    Set up logging for the pipeline.

    Args:
        log_level: The logging level (default: PipelineConfig.LOGGING['LEVEL'])
        log_file: Optional path for a rotating log file
        config: Optional config dict, uses PipelineConfig.LOGGING if None

    Returns:
        logging.Logger: The pipeline driver's logger
    """
    config = config or PipelineConfig.LOGGING
    level = log_level if log_level is not None else config['LEVEL']
    names = config['LOGGER_NAMES']

    loggers = [logging.getLogger(name) for name in names]
    for logger in loggers:
        logger.setLevel(level)

    # Prevent adding handlers multiple times
    pending = [logger for logger in loggers if not logger.handlers]
    if not pending:
        return loggers[0]

    formatter = logging.Formatter(config['FORMAT'], datefmt=config['DATEFMT'])

    handlers = []
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if log_file:
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=config['MAX_BYTES'],
            backupCount=config['BACKUP_COUNT'],
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    for logger in pending:
        for handler in handlers:
            logger.addHandler(handler)

    return loggers[0]
