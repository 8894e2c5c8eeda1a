"""Error types raised while configuring and rendering templates."""

from __future__ import annotations


class MustacheRenderError(Exception):
    """Base class for every error raised by mustache-render."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class ConfigError(MustacheRenderError):
    """Raised when a task declaration is malformed."""


class InvalidInputError(MustacheRenderError):
    """Raised when a data or template reference cannot be used."""


class UnsupportedDataFileError(MustacheRenderError):
    """Raised for local data files with an unknown suffix."""


class UnrecognizedFormatError(MustacheRenderError):
    """Raised when remote data is neither JSON nor YAML."""


class TransportError(MustacheRenderError):
    """Raised when a remote resource cannot be downloaded."""

    def __init__(self, message: str, *, url: str) -> None:
        super().__init__(message, url=url)


class ConnectionFailedError(TransportError):
    """The HTTP request itself failed."""


class BadStatusError(TransportError):
    """The server answered with something other than 200."""

    def __init__(self, status_code: int, *, url: str) -> None:
        super().__init__(f"Got status {status_code} downloading {url}", url=url)
        self.status_code = status_code


class EmptyBodyError(TransportError):
    """The server answered with an empty or non-text body."""


class DataParseError(MustacheRenderError):
    """Raised when a data document is not valid JSON or YAML."""
