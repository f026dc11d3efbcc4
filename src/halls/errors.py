class HallsError(Exception):
    """Base error for Crystal Halls."""


class ConfigError(HallsError):
    """Raised when a configuration file or override is invalid."""
