"""
Configuration module for timebill.
"""
from .logging_config import LoggingConfig, configure_logging, reset_logging
from .settings import TimebillConfig, get_config, load_config, reload_config

__all__ = [
    'TimebillConfig',
    'get_config',
    'load_config',
    'reload_config',
    'LoggingConfig',
    'configure_logging',
    'reset_logging',
]
