"""
Registry credential lookup.

Answers "which credentials does the Docker CLI have for this registry?" using
the same precedence the CLI applies:

1. ``credHelpers`` entry for the registry (per-registry helper)
2. ``credsStore`` (default helper for every registry)
3. inline ``auths`` entry from config.json

Helpers are the ``docker-credential-<name>`` executables; this module runs
their ``get`` verb but never ``store`` or ``erase``.
"""
from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass
from typing import Callable, Iterator, List, Literal, Optional

from pydantic import ValidationError

from .errors import CredentialHelperError
from .models import Credential, DockerConfig

__all__ = [
    "CredentialHelper",
    "RegistryCredentials",
    "registry_keys",
    "resolve_credentials",
    "DOCKER_HUB_INDEX",
]

logger = logging.getLogger(__name__)

DOCKER_HUB_INDEX = "https://index.docker.io/v1/"
DOCKER_HUB_ALIASES = ("docker.io", "index.docker.io", "registry-1.docker.io")

# Username a helper reports when Secret is an identity token
IDENTITY_TOKEN_USERNAME = "<token>"

HELPER_PREFIX = "docker-credential-"

CredentialSource = Literal["helper", "auths"]


def _strip_scheme(registry: str) -> str:
    host = registry
    for scheme in ("https://", "http://"):
        if host.startswith(scheme):
            host = host[len(scheme):]
            break
    return host.rstrip("/")


def registry_keys(registry: str) -> List[str]:
    """
    Candidate config keys for a registry, most specific first.

    Docker writes keys either as bare hosts ("ghcr.io") or as URLs
    ("https://ghcr.io"); Docker Hub is stored under its legacy index URL.

    Examples:
        >>> registry_keys("ghcr.io")
        ['ghcr.io', 'https://ghcr.io']
        >>> registry_keys("docker.io")
        ['docker.io', 'https://docker.io', 'https://index.docker.io/v1/']
    """
    host = _strip_scheme(registry)
    candidates = [registry, host, f"https://{host}"]
    if host.split("/", 1)[0] in DOCKER_HUB_ALIASES:
        candidates.append(DOCKER_HUB_INDEX)

    keys: List[str] = []
    for key in candidates:
        if key and key not in keys:
            keys.append(key)
    return keys


def _server_url(registry: str) -> str:
    """Server URL handed to credential helpers."""
    host = _strip_scheme(registry)
    if host.split("/", 1)[0] in DOCKER_HUB_ALIASES:
        return DOCKER_HUB_INDEX
    return host


@dataclass(frozen=True)
class RegistryCredentials:
    """
    Credentials found for a registry and where they came from.

    Attributes:
        registry: Registry as requested by the caller
        key: Config key or helper server URL that matched
        source: "helper" or "auths"
        credential: The credentials themselves
        helper: Helper name when source is "helper"
    """
    registry: str
    key: str
    source: CredentialSource
    credential: Credential
    helper: Optional[str] = None


class CredentialHelper:
    """
    Runs a ``docker-credential-<name>`` helper.

    Only the read-only ``get`` verb is supported.
    """

    def __init__(self, name: str, timeout: float = 30.0):
        self.name = name
        self.timeout = timeout

    @property
    def executable(self) -> str:
        return f"{HELPER_PREFIX}{self.name}"

    def get(self, server_url: str) -> Optional[Credential]:
        """
        Ask the helper for a server's credentials.

        Args:
            server_url: Registry server URL

        Returns:
            Credential, or None when the helper has none for this server

        Raises:
            CredentialHelperError: If the helper is missing, times out, fails,
                or prints something that is not a credentials document
        """
        try:
            result = subprocess.run(
                [self.executable, "get"],
                input=server_url,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise CredentialHelperError(
                f"Credential helper '{self.executable}' not found on PATH", self.name
            ) from e
        except subprocess.TimeoutExpired as e:
            raise CredentialHelperError(
                f"Credential helper '{self.executable}' timed out after {self.timeout}s", self.name
            ) from e

        output = (result.stdout or "").strip()
        if result.returncode != 0:
            message = output or (result.stderr or "").strip()
            if "credentials not found" in message.lower():
                logger.debug(f"Helper {self.name} has no credentials for {server_url}")
                return None
            raise CredentialHelperError(
                f"Credential helper '{self.executable}' failed for {server_url}: {message}",
                self.name,
            )

        try:
            document = json.loads(output)
        except json.JSONDecodeError as e:
            raise CredentialHelperError(
                f"Credential helper '{self.executable}' returned invalid JSON", self.name
            ) from e
        if not isinstance(document, dict):
            raise CredentialHelperError(
                f"Credential helper '{self.executable}' returned invalid JSON", self.name
            )

        username = document.get("Username")
        secret = document.get("Secret")
        try:
            if username == IDENTITY_TOKEN_USERNAME:
                return Credential(identity_token=secret)
            return Credential(username=username, password=secret)
        except ValidationError as e:
            raise CredentialHelperError(
                f"Credential helper '{self.executable}' returned malformed credentials: {e}",
                self.name,
            ) from e


HelperFactory = Callable[[str], CredentialHelper]


def _helpers_for(config: DockerConfig, registry: str) -> Iterator[str]:
    for key in registry_keys(registry):
        helper = config.cred_helpers.get(key)
        if helper:
            yield helper
            return
    if config.creds_store:
        yield config.creds_store


def resolve_credentials(
    config: DockerConfig,
    registry: str,
    *,
    helper_factory: Optional[HelperFactory] = None,
    timeout: float = 30.0,
) -> Optional[RegistryCredentials]:
    """
    Find the credentials Docker would use for a registry.

    A per-registry helper wins over ``credsStore``; only the first applicable
    helper is consulted. When it has nothing for the server, the inline
    ``auths`` entry is used if it carries credentials.

    Args:
        config: Loaded Docker configuration
        registry: Registry host or URL (e.g. "ghcr.io", "https://index.docker.io/v1/")
        helper_factory: Builds helpers by name (defaults to CredentialHelper)
        timeout: Helper subprocess timeout in seconds

    Returns:
        RegistryCredentials, or None when nothing is configured

    Raises:
        CredentialHelperError: If a configured helper cannot be run
    """
    if helper_factory is None:
        helper_factory = lambda name: CredentialHelper(name, timeout=timeout)  # noqa: E731

    for helper_name in _helpers_for(config, registry):
        server_url = _server_url(registry)
        logger.debug(f"Querying credential helper {helper_name} for {server_url}")
        credential = helper_factory(helper_name).get(server_url)
        if credential is not None and not credential.is_empty:
            return RegistryCredentials(
                registry=registry,
                key=server_url,
                source="helper",
                credential=credential,
                helper=helper_name,
            )

    for key in registry_keys(registry):
        credential = config.auths.get(key)
        if credential is not None and not credential.is_empty:
            logger.debug(f"Using inline auths entry {key!r} for {registry}")
            return RegistryCredentials(
                registry=registry, key=key, source="auths", credential=credential
            )

    logger.debug(f"No credentials configured for {registry}")
    return None
