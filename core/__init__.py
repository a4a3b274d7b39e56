#!/usr/bin/env python3
"""
Core Module

Shared components for the pricing engine services.

COMPONENTS:
    - config/: Environment-sourced configuration (pricing, logging)

USAGE:
    from core.config import get_settings, get_logging_config

    settings = get_settings()
    get_logging_config().setup_logging()
"""

from .config import PricingConfig, LoggingConfig, get_settings, get_logging_config

__all__ = [
    "PricingConfig",
    "LoggingConfig",
    "get_settings",
    "get_logging_config",
]

__version__ = "1.0.0"
