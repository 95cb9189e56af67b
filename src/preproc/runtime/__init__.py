from .config import BuildConfig, ConfigError

__all__ = ['BuildConfig', 'ConfigError']
