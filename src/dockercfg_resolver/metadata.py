"""
Docker configuration metadata resolution.

Combines the global configuration and the active context into one immutable
result. This is the entry point build/deploy code uses to learn how to reach
the engine and which registry credentials are on disk.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Optional

from .config_loader import load_docker_config
from .contexts import load_docker_context
from .models import DockerConfig, DockerContext
from .settings import Settings, create_settings_from_env

__all__ = ["DockerConfigurationMetadata"]

logger = logging.getLogger(__name__)


class DockerConfigurationMetadata:
    """
    Docker configuration stored in metadata files managed by the Docker CLI.

    Holds one DockerConfig and the DockerContext for its current context.
    Both are value objects owned by this result; nothing is cached across
    resolution runs.

    Example:
        >>> metadata = DockerConfigurationMetadata.from_env()
        >>> metadata.context.docker_host
        'tcp://build-host:2376'
        >>> metadata.for_context("staging").is_tls_verify
        True
    """

    __slots__ = ("_config_dir", "_configuration", "_context")

    def __init__(self, config_dir: Path, configuration: DockerConfig, context: DockerContext):
        self._config_dir = Path(config_dir)
        self._configuration = configuration
        self._context = context

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    @property
    def configuration(self) -> DockerConfig:
        return self._configuration

    @property
    def context(self) -> DockerContext:
        return self._context

    def for_context(self, context_name: Optional[str]) -> DockerContext:
        """
        Resolve a different context against the same config root.

        The held configuration is reused; config.json is not read again and
        this result is left unchanged.

        Args:
            context_name: Context to resolve; None or "default" means engine defaults

        Returns:
            A new DockerContext

        Raises:
            ContextNotFoundError: If the named context has no metadata
            ConfigParseError: If its metadata is malformed
        """
        return load_docker_context(self._config_dir, context_name)

    @classmethod
    def from_config_dir(cls, config_dir: Path) -> DockerConfigurationMetadata:
        """
        Load configuration and current context from a config root.

        Raises:
            ConfigParseError: If config.json or the context metadata is malformed
            ConfigReadError: If a file exists but cannot be read
            ContextNotFoundError: If currentContext names a missing context
        """
        configuration = load_docker_config(config_dir)
        context = load_docker_context(config_dir, configuration.current_context)
        logger.debug(f"Resolved Docker configuration from {config_dir}")
        return cls(config_dir, configuration, context)

    @classmethod
    def from_settings(cls, settings: Settings) -> DockerConfigurationMetadata:
        return cls.from_config_dir(settings.config_dir)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> DockerConfigurationMetadata:
        """Resolve using DOCKER_CONFIG or ~/.docker."""
        return cls.from_settings(create_settings_from_env(environ))

    def __repr__(self) -> str:
        return (
            f"DockerConfigurationMetadata(config_dir={str(self._config_dir)!r}, "
            f"current_context={self._configuration.current_context!r})"
        )
