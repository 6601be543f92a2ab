"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- game_settings.py: Game rules, constants and the seed term catalog
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import (
    TERM_CATALOG, MAX_ATTEMPTS, MAX_HINTS, DIFFICULTY_MULTIPLIERS, DIFFICULTY_DESCRIPTIONS,
    validate_term_catalog_integrity, get_catalog_statistics
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'TERM_CATALOG', 'MAX_ATTEMPTS', 'MAX_HINTS', 'DIFFICULTY_MULTIPLIERS', 'DIFFICULTY_DESCRIPTIONS',
    'validate_term_catalog_integrity', 'get_catalog_statistics'
]
