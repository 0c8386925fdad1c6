"""YAML configuration loading and the error types raised for bad configuration."""

from .errors import ConfigError, IncludeCycleError, ScreenConfigError, SegmentCountMismatchError
from .loader import LoadedConfig, load_config

__all__ = [
    'ConfigError',
    'IncludeCycleError',
    'ScreenConfigError',
    'SegmentCountMismatchError',
    'LoadedConfig',
    'load_config',
]
