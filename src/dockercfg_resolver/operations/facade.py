"""
Operations Facade - Application service layer.

Provides a clean interface between CLI and the resolution APIs, keeping CLI
commands thin and testable.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ..config_loader import load_docker_config
from ..connection import ResolvedDockerHost, resolve_docker_host
from ..contexts import list_context_names, load_docker_context
from ..credentials import HelperFactory, RegistryCredentials, resolve_credentials
from ..metadata import DockerConfigurationMetadata
from ..models import DockerContext
from ..settings import Settings


@dataclass(frozen=True)
class OpsConfig:
    """
    Configuration for Operations facade.

    Centralizes output policy so commands don't each decide it.
    """
    show_secrets: bool = False    # Print passwords and tokens
    verbose: bool = False         # Show detailed output


class Operations:
    """
    Application service facade for CLI operations.

    One method per CLI verb. Every call resolves afresh from disk, so no
    state carries over between commands. Exceptions bubble up for central
    mapping in run_and_exit.
    """

    def __init__(self, config: OpsConfig, settings: Optional[Settings] = None,
                 helper_factory: Optional[HelperFactory] = None):
        """
        Initialize Operations facade.

        Args:
            config: Output policy
            settings: Optional settings (if None, loaded from environment)
            helper_factory: Credential helper factory override for testing
        """
        self.cfg = config

        if settings is None:
            from ..settings import create_settings_from_env
            settings = create_settings_from_env()
        self.settings = settings
        self.helper_factory = helper_factory

    def show(self) -> DockerConfigurationMetadata:
        """Resolve configuration and current context."""
        return DockerConfigurationMetadata.from_settings(self.settings)

    def context(self, name: Optional[str] = None) -> DockerContext:
        """
        Resolve a context.

        Args:
            name: Context name (None for the current context)
        """
        if name is None:
            return self.show().context
        return load_docker_context(self.settings.config_dir, name)

    def current_context_name(self) -> Optional[str]:
        """currentContext from config.json, without resolving it."""
        return load_docker_config(self.settings.config_dir).current_context

    def contexts(self) -> List[str]:
        """Names of stored contexts."""
        return list_context_names(self.settings.config_dir)

    def host(self) -> ResolvedDockerHost:
        """Effective engine host after environment precedence."""
        return resolve_docker_host(self.settings)

    def credentials(self, registry: str) -> Optional[RegistryCredentials]:
        """
        Credentials Docker would use for a registry.

        Args:
            registry: Registry host or URL
        """
        metadata = self.show()
        return resolve_credentials(
            metadata.configuration,
            registry,
            helper_factory=self.helper_factory,
            timeout=self.settings.helper_timeout_s,
        )
