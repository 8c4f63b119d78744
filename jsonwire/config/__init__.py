"""Configuration module for jsonwire."""

from jsonwire.config.loader import load_config, save_config, get_config_path
from jsonwire.config.schema import Config, FaultsConfig, LoggingConfig
from jsonwire.config.access import get_config, get_fault_adapter, clear_config_cache

__all__ = [
    "Config",
    "FaultsConfig",
    "LoggingConfig",
    "load_config",
    "save_config",
    "get_config_path",
    "get_config",
    "get_fault_adapter",
    "clear_config_cache",
]
