"""Environment configuration module.

This module MUST be imported before any other project modules that depend on environment variables.
It loads the .env file and exposes the settings used by the API server and the operator scripts.

Usage:
    from campus_events.config.environment import IS_PRODUCTION_ENVIRONMENT, DATABASE_URL

Note:
    In production, environment variables should be set directly in the platform's
    environment configuration; the .env file is a development convenience.
"""

import os
import logging
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables - this must happen before any other imports
load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

# Environment configuration
env_setting = os.environ.get('ENVIRONMENT', '').lower()
IS_PRODUCTION_ENVIRONMENT = env_setting == 'production'

if env_setting not in ['development', 'production']:
    logging.warning(
        f"Environment setting '{env_setting}' is invalid or not specified. "
        "Expected 'development' or 'production'. Defaulting to development environment."
    )

# Storage connection string; required in production (see DatabaseConfig)
DATABASE_URL = os.environ.get('DATABASE_URL')

# Server
PORT = int(os.environ.get('PORT', '5002'))
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

# Blob store directory
UPLOAD_DIR = Path(os.environ.get('UPLOAD_DIR', str(PROJECT_ROOT / 'uploads')))

__all__ = [
    'IS_PRODUCTION_ENVIRONMENT',
    'PROJECT_ROOT',
    'DATABASE_URL',
    'PORT',
    'LOG_LEVEL',
    'UPLOAD_DIR',
]
