"""
Docker configuration error classes.

Provides a clear taxonomy of the fatal conditions that can occur while
resolving Docker configuration. Optional-but-absent inputs (no config file,
default context, no TLS directory) are never errors and do not appear here.
"""
from __future__ import annotations

from pathlib import Path
from typing import Union


class DockerConfigError(Exception):
    """
    Base class for all Docker configuration resolution errors.

    Resolution is all-or-nothing: any of these aborts the call and no
    partial result is returned.
    """
    pass


class ConfigParseError(DockerConfigError):
    """
    A configuration document could not be parsed.

    Raised when:
    - config.json contains malformed JSON
    - a context meta.json contains malformed JSON
    - a document parses but its fields have the wrong shape
    """

    def __init__(self, message: str, path: Union[str, Path]):
        super().__init__(message)
        self.path = str(path)


class ConfigReadError(DockerConfigError):
    """
    A configuration file exists but could not be read.

    Raised when:
    - permission denied on config.json or meta.json
    - the path is a directory or otherwise unreadable
    """

    def __init__(self, message: str, path: Union[str, Path]):
        super().__init__(message)
        self.path = str(path)


class ContextNotFoundError(DockerConfigError):
    """
    A named, non-default context has no metadata on disk.

    This is a user misconfiguration and is never downgraded to defaults.
    """

    def __init__(self, context_name: str):
        super().__init__(f"Docker context '{context_name}' does not exist")
        self.context_name = context_name


class CredentialHelperError(DockerConfigError):
    """
    A docker-credential-* helper could not be run or returned garbage.

    A helper reporting that it has no credentials for a server is not an
    error; lookups simply fall through.
    """

    def __init__(self, message: str, helper: str):
        super().__init__(message)
        self.helper = helper


__all__ = [
    "DockerConfigError",
    "ConfigParseError",
    "ConfigReadError",
    "ContextNotFoundError",
    "CredentialHelperError",
]
