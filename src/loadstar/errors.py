"""Exception types for loadstar."""

from __future__ import annotations


class LoadstarError(Exception):
    """Base class for all loadstar errors."""


class CatalogError(LoadstarError):
    """Catalog data is malformed or an unknown entry was requested."""


class ConfigError(LoadstarError):
    """A configuration file could not be parsed or validated."""


class UnsupportedPlatformError(LoadstarError):
    """The host operating system or architecture is not supported."""


class CommandNotFoundError(LoadstarError):
    """An external program could not be spawned."""

    def __init__(self, message: str, argv: list[str] | None = None) -> None:
        super().__init__(message)
        self.argv = argv or []


class BootstrapError(LoadstarError):
    """The primary package manager could not be installed."""
