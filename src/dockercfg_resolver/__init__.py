"""
dockercfg-resolver: Docker engine connectivity and registry credentials
from the Docker CLI's on-disk configuration.
"""
from __future__ import annotations

from .connection import ResolvedDockerHost, resolve_docker_host
from .credentials import CredentialHelper, RegistryCredentials, resolve_credentials
from .errors import (
    ConfigParseError,
    ConfigReadError,
    ContextNotFoundError,
    CredentialHelperError,
    DockerConfigError,
)
from .metadata import DockerConfigurationMetadata
from .models import Credential, DockerConfig, DockerContext
from .settings import Settings, create_settings_from_env

__all__ = [
    "ConfigParseError",
    "ConfigReadError",
    "ContextNotFoundError",
    "Credential",
    "CredentialHelper",
    "CredentialHelperError",
    "DockerConfig",
    "DockerConfigError",
    "DockerConfigurationMetadata",
    "DockerContext",
    "RegistryCredentials",
    "ResolvedDockerHost",
    "Settings",
    "create_settings_from_env",
    "resolve_credentials",
    "resolve_docker_host",
]
