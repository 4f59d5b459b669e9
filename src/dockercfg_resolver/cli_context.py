"""
CLI Context for managing application dependencies.

Provides a clean way to manage CLI-level dependencies like settings and the
operations facade, avoiding global state and enabling proper dependency
injection.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .operations import Operations, OpsConfig
from .settings import Settings, create_settings_from_env


@dataclass
class CLIContext:
    """
    Shared context for CLI commands.

    Settings are read once per CLI invocation; each command then builds its
    Operations facade with its own output policy.
    """
    settings: Settings
    verbose: bool = False

    @classmethod
    def from_env(cls, config_dir: Optional[Path] = None, verbose: bool = False) -> CLIContext:
        """
        Create CLI context from environment variables.

        Args:
            config_dir: Explicit config root, taking precedence over DOCKER_CONFIG
            verbose: Detailed output for all commands

        Returns:
            CLIContext with settings loaded from environment
        """
        settings = create_settings_from_env()
        if config_dir is not None:
            settings = dataclasses.replace(settings, config_dir=config_dir)
        return cls(settings=settings, verbose=verbose)

    def operations(self, show_secrets: bool = False) -> Operations:
        """Operations facade bound to these settings."""
        config = OpsConfig(show_secrets=show_secrets, verbose=self.verbose)
        return Operations(config, settings=self.settings)
