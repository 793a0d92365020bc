"""Configuration management."""
from .config_manager import ConfigManager, get_config, initialize_config
from .settings import (
    WirelengthSettings, ClassificationSettings, RepairSettings,
    LoggingSettings, ApplicationSettings
)

__all__ = [
    'ConfigManager', 'get_config', 'initialize_config',
    'WirelengthSettings', 'ClassificationSettings', 'RepairSettings',
    'LoggingSettings', 'ApplicationSettings'
]
