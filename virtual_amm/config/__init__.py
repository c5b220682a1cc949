"""Configuration loading."""

from .config_manager import ConfigManager, Config, MarketParams, ArithmeticConfig, LoggingConfig

__all__ = ['ConfigManager', 'Config', 'MarketParams', 'ArithmeticConfig', 'LoggingConfig']
