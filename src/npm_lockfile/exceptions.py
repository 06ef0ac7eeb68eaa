"""Exceptions raised while reading npm lockfiles."""

from typing import Optional


class LockfileError(Exception):
    """Base class for all npm-lockfile errors."""


class DecodeError(LockfileError):
    """A JSON value could not be decoded into a lockfile model.

    Attributes:
        path: Dotted path of the offending field (e.g. ``engines.node``).
    """

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}" if path else message)


class ParseError(LockfileError):
    """The lockfile as a whole could not be parsed."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        self.cause = cause
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class ConfigError(LockfileError):
    """The configuration file is malformed."""
