"""Logging configuration for the application."""

import logging
import sys
from typing import Optional

from ..config.environment import LOG_LEVEL

def setup_logging(level: Optional[str] = None):
    """Configure logging for the application.

    Safe to call more than once: the stdout handler is only attached the first time.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level or LOG_LEVEL)

    if not any(getattr(handler, '_campus_events', False) for handler in root_logger.handlers):
        # Create a formatter
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        # Create a console handler
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler._campus_events = True
        root_logger.addHandler(console_handler)

    # Set higher log levels for noisy components
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
    logging.getLogger('multipart').setLevel(logging.WARNING)
    logging.getLogger('python_multipart').setLevel(logging.WARNING)
    logging.getLogger('PIL').setLevel(logging.WARNING)
