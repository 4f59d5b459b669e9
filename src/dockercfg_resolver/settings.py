"""
Settings and configuration for dockercfg-resolver.

Centralizes the environment-derived inputs (where the Docker CLI keeps its
configuration, which context or host overrides are in force) and validates
them with fail-fast behavior. Loaded from environment variables at
resolution time.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

__all__ = ["Settings", "create_settings_from_env", "default_config_dir"]

CONFIG_DIR_NAME = ".docker"


@dataclass(frozen=True)
class Settings:
    """
    Configuration settings for Docker configuration resolution.

    Location:
        config_dir: Docker CLI configuration root (DOCKER_CONFIG or ~/.docker)

    Engine overrides:
        docker_context: Context name forced by DOCKER_CONTEXT
        docker_host: Daemon address forced by DOCKER_HOST
        docker_tls_verify: DOCKER_TLS_VERIFY flag, only meaningful with docker_host
        docker_cert_path: DOCKER_CERT_PATH directory, only meaningful with docker_host

    Credential helpers:
        helper_timeout_s: Timeout for docker-credential-* subprocesses
    """
    config_dir: Path
    docker_context: Optional[str] = None
    docker_host: Optional[str] = None
    docker_tls_verify: bool = False
    docker_cert_path: Optional[str] = None
    helper_timeout_s: float = 30.0

    def __post_init__(self):
        """Validate settings on construction."""
        if not self.config_dir:
            raise ValueError("config_dir is required")

        if self.helper_timeout_s <= 0:
            raise ValueError(f"helper_timeout_s must be positive, got {self.helper_timeout_s}")


def default_config_dir() -> Path:
    """Docker CLI's default configuration root for the current user."""
    return Path.home() / CONFIG_DIR_NAME


def create_settings_from_env(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Load settings from environment variables.

    Environment Variables:
        - DOCKER_CONFIG (default: ~/.docker, used verbatim when non-empty)
        - DOCKER_CONTEXT (optional)
        - DOCKER_HOST (optional)
        - DOCKER_TLS_VERIFY (default: false)
        - DOCKER_CERT_PATH (optional)
        - DOCKERCFG_HELPER_TIMEOUT (default: 30.0)

    Args:
        environ: Environment mapping to read (defaults to os.environ)

    Returns:
        Settings object with validated configuration

    Raises:
        ValueError: If a value is malformed

    Note:
        Creates a fresh Settings instance every time (no caching).
        The config directory is not checked for existence; readers
        downstream treat missing files as empty configuration.
    """
    env = os.environ if environ is None else environ

    def str_to_bool(value: str) -> bool:
        return value.lower() in ('true', '1', 'yes', 'on')

    def get_str(key: str) -> Optional[str]:
        # Empty values count as unset, as the docker CLI treats them
        return env.get(key) or None

    def get_float(key: str, default: float) -> float:
        value = env.get(key)
        return float(value) if value else default

    config_override = get_str("DOCKER_CONFIG")
    config_dir = Path(config_override) if config_override else default_config_dir()

    return Settings(
        config_dir=config_dir,
        docker_context=get_str("DOCKER_CONTEXT"),
        docker_host=get_str("DOCKER_HOST"),
        docker_tls_verify=str_to_bool(env.get("DOCKER_TLS_VERIFY", "false")),
        docker_cert_path=get_str("DOCKER_CERT_PATH"),
        helper_timeout_s=get_float("DOCKERCFG_HELPER_TIMEOUT", 30.0),
    )
