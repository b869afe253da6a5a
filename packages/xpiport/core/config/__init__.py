"""Configuration management for xpiport."""

from xpiport.core.config.loader import detect_format, load_app_config, load_config
from xpiport.core.config.models import AppConfig, ConversionConfig, LoggingConfig

__all__ = [
    # Loaders
    "detect_format",
    "load_config",
    "load_app_config",
    # Models
    "AppConfig",
    "ConversionConfig",
    "LoggingConfig",
]
