"""
Effective Docker engine host resolution.

Applies the Docker CLI's precedence between environment overrides and the
configured context to decide which daemon address a client should dial and
whether TLS applies.
"""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Optional

from .contexts import load_docker_context
from .metadata import DockerConfigurationMetadata
from .models import DockerContext
from .settings import Settings

__all__ = ["ResolvedDockerHost", "resolve_docker_host", "default_docker_host"]

logger = logging.getLogger(__name__)

UNIX_SOCKET_HOST = "unix:///var/run/docker.sock"
WINDOWS_PIPE_HOST = "npipe:////./pipe/docker_engine"

LOCAL_SCHEMES = ("unix://", "npipe://")


def default_docker_host(platform: Optional[str] = None) -> str:
    """Engine address used when nothing overrides it."""
    platform = platform or sys.platform
    return WINDOWS_PIPE_HOST if platform.startswith("win") else UNIX_SOCKET_HOST


@dataclass(frozen=True)
class ResolvedDockerHost:
    """
    Daemon address a client should connect to.

    Attributes:
        address: Engine address (unix://, npipe://, tcp://, ssh://)
        secure: Whether TLS verification is on
        cert_path: Directory holding ca.pem/cert.pem/key.pem, if any
        context_name: Context the address came from (None for env or defaults)
    """
    address: str
    secure: bool = False
    cert_path: Optional[str] = None
    context_name: Optional[str] = None

    @property
    def is_local_socket(self) -> bool:
        return self.address.startswith(LOCAL_SCHEMES)


def _from_context(context: DockerContext, context_name: Optional[str]) -> ResolvedDockerHost:
    return ResolvedDockerHost(
        address=context.docker_host or default_docker_host(),
        secure=context.is_tls_verify,
        cert_path=context.tls_path,
        context_name=context_name,
    )


def resolve_docker_host(
    settings: Settings,
    metadata: Optional[DockerConfigurationMetadata] = None,
) -> ResolvedDockerHost:
    """
    Decide which engine to talk to.

    Precedence:
    1. DOCKER_HOST (with DOCKER_TLS_VERIFY / DOCKER_CERT_PATH)
    2. DOCKER_CONTEXT
    3. currentContext from config.json
    4. platform default socket

    Args:
        settings: Environment-derived settings
        metadata: Already-resolved configuration (loaded from settings if None)

    Returns:
        ResolvedDockerHost

    Raises:
        ContextNotFoundError: If DOCKER_CONTEXT or currentContext names a missing context
        ConfigParseError: If configuration files are malformed
    """
    if settings.docker_host:
        logger.debug(f"Using DOCKER_HOST {settings.docker_host}")
        return ResolvedDockerHost(
            address=settings.docker_host,
            secure=settings.docker_tls_verify,
            cert_path=settings.docker_cert_path,
        )

    if settings.docker_context:
        logger.debug(f"Using DOCKER_CONTEXT {settings.docker_context}")
        if metadata is None:
            # currentContext is overridden, so config.json need not resolve
            context = load_docker_context(settings.config_dir, settings.docker_context)
        else:
            context = metadata.for_context(settings.docker_context)
        return _from_context(context, settings.docker_context)

    if metadata is None:
        metadata = DockerConfigurationMetadata.from_settings(settings)

    return _from_context(metadata.context, metadata.configuration.current_context)
