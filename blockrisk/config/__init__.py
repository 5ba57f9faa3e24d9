"""
Configuration Module
====================

Environment-driven settings for the simulation engine and its HTTP adapter.
"""

from .settings import (
    ApplicationSettings,
    LoggingSettings,
    MonteCarloSettings,
    get_settings,
)

__all__ = [
    'ApplicationSettings',
    'LoggingSettings',
    'MonteCarloSettings',
    'get_settings',
]
