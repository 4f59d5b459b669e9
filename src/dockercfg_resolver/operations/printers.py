"""
Human-readable output formatting.

Centralizes all CLI output formatting so commands stay thin. Secrets are
masked unless the caller explicitly asks for them.
"""
from __future__ import annotations

from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from ..connection import ResolvedDockerHost
from ..credentials import RegistryCredentials
from ..metadata import DockerConfigurationMetadata
from ..models import DockerContext

MASK = "********"


def _console() -> Console:
    # Built per call so output follows the current sys.stdout
    return Console()


def _or_none(value: Optional[str]) -> str:
    return value if value else "(none)"


def print_configuration(metadata: DockerConfigurationMetadata, verbose: bool = False) -> None:
    """
    Print global configuration and the current context.

    Registry passwords are never shown here; only which registries have
    inline credentials.

    Args:
        metadata: Resolved configuration
        verbose: Also print the current context's endpoint settings
    """
    config = metadata.configuration
    typer.echo(f"Config dir: {metadata.config_dir}")
    typer.echo(f"Current context: {_or_none(config.current_context)}")
    typer.echo(f"Credentials store: {_or_none(config.creds_store)}")

    if config.cred_helpers:
        table = Table(title="Credential helpers")
        table.add_column("Registry", style="cyan")
        table.add_column("Helper", style="yellow")
        for registry, helper in sorted(config.cred_helpers.items()):
            table.add_row(registry, helper)
        _console().print(table)
    else:
        typer.echo("Credential helpers: (none)")

    if config.auths:
        typer.echo("Registries with inline auths:")
        for registry, credential in sorted(config.auths.items()):
            user = credential.username or ("<identity token>" if credential.identity_token else "(no username)")
            typer.echo(f"  {registry}: {user}")
    else:
        typer.echo("Registries with inline auths: (none)")

    if verbose:
        print_context(metadata.context, config.current_context)


def print_context(context: DockerContext, name: Optional[str] = None) -> None:
    """
    Print endpoint settings for a context.

    Args:
        context: Resolved context
        name: Name the context was requested by
    """
    label = name or context.name or "default"
    typer.echo(f"Context: {label}")
    typer.echo(f"Host: {context.docker_host or '(engine default)'}")
    typer.echo(f"TLS verify: {'yes' if context.is_tls_verify else 'no'}")
    typer.echo(f"TLS path: {_or_none(context.tls_path)}")


def print_context_list(names: List[str], current: Optional[str]) -> None:
    """Print stored contexts, marking the current one."""
    current = current or "default"
    for name in ["default", *names]:
        marker = "*" if name == current else " "
        typer.echo(f"{marker} {name}")


def print_docker_host(host: ResolvedDockerHost) -> None:
    typer.echo(f"Host: {host.address}")
    typer.echo(f"Source: {'context ' + host.context_name if host.context_name else 'environment/default'}")
    typer.echo(f"TLS verify: {'yes' if host.secure else 'no'}")
    typer.echo(f"Cert path: {_or_none(host.cert_path)}")


def print_registry_credentials(
    registry: str,
    found: Optional[RegistryCredentials],
    show_secrets: bool = False,
) -> None:
    """
    Print where a registry's credentials come from.

    Args:
        registry: Registry that was looked up
        found: Lookup result (None when nothing is configured)
        show_secrets: Print password/token in clear text
    """
    if found is None:
        typer.echo(f"No credentials configured for {registry}")
        return

    credential = found.credential
    source = f"helper {found.helper}" if found.source == "helper" else f"auths[{found.key}]"
    typer.echo(f"Registry: {registry}")
    typer.echo(f"Source: {source}")

    if credential.identity_token:
        token = credential.identity_token if show_secrets else MASK
        typer.echo(f"Identity token: {token}")
        return

    typer.echo(f"Username: {_or_none(credential.username)}")
    if credential.password is not None:
        typer.echo(f"Password: {credential.password if show_secrets else MASK}")
    if credential.email:
        typer.echo(f"Email: {credential.email}")
