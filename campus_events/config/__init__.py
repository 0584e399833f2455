"""Configuration package.

`environment` must be imported before anything that reads environment variables.
"""

from .environment import IS_PRODUCTION_ENVIRONMENT

__all__ = ['IS_PRODUCTION_ENVIRONMENT']
