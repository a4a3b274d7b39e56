#!/usr/bin/env python3
"""Configuration system for the pricing engine

Configuration hierarchy:
- logging_config: Logging configuration
- pricing_config: Seller identity, checkout thresholds, exemption rules
"""
import os
from typing import Optional

from dotenv import load_dotenv
from .logging_config import LoggingConfig
from .pricing_config import PricingConfig, ConfigurationError

# Load environment file based on ENV
env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
env_files = {
    "development": "deployment/environments/dev.env",
    "dev": "deployment/environments/dev.env",
    "testing": "deployment/environments/test.env",
    "test": "deployment/environments/test.env",
    "staging": "deployment/environments/staging.env",
    "production": "deployment/environments/production.env",
}
env_file = env_files.get(env, "deployment/environments/dev.env")
load_dotenv(env_file, override=False)

# Seller settings are required, so the instance is built on first access
settings: Optional[PricingConfig] = None

def get_settings() -> PricingConfig:
    """Get global settings instance"""
    global settings
    if settings is None:
        settings = PricingConfig.from_env()
    return settings

def reload_settings() -> PricingConfig:
    """Reload settings from environment"""
    global settings
    settings = PricingConfig.from_env()
    return settings

def get_logging_config() -> LoggingConfig:
    """Get logging configuration from environment"""
    return LoggingConfig.from_env()

__all__ = [
    'PricingConfig',
    'LoggingConfig',
    'ConfigurationError',
    'get_settings',
    'reload_settings',
    'get_logging_config',
    'settings',
]
