# src/curved_screen/config/errors.py

class ConfigError(Exception):
    """Base class for configuration-related errors."""
    pass


class IncludeCycleError(ConfigError):
    """Raised when config includes form a cycle."""
    pass


class ScreenConfigError(ConfigError, ValueError):
    """Raised when screen parameters cannot produce a valid layout."""
    pass


class SegmentCountMismatchError(ScreenConfigError):
    """Raised when pose and UV sequences disagree on the segment count."""
    pass
