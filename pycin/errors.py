class PycinError(Exception):
    """Base class for errors raised outside of the reading operations."""


class ConfigError(PycinError):
    """Exception class for Config related errors."""
