"""
dockercfg CLI

Read-only inspection of the Docker CLI configuration:
- show: Global configuration and current context
- context: Endpoint settings for a context
- contexts: Stored context names
- host: Effective engine host after environment overrides
- credentials: Where a registry's credentials come from
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from .cli_context import CLIContext
from .operations import run_and_exit
from .operations.printers import (
    print_configuration, print_context, print_context_list,
    print_docker_host, print_registry_credentials,
)

app = typer.Typer(name="dockercfg", help="Inspect Docker CLI configuration", no_args_is_help=True)


def _cli(ctx: typer.Context) -> CLIContext:
    return ctx.obj


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None, "--config", help="Docker config directory (overrides DOCKER_CONFIG)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output and debug logs"),
):
    """Inspect Docker CLI configuration."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = run_and_exit(lambda: CLIContext.from_env(config_dir=config, verbose=verbose))


@app.command()
def show(ctx: typer.Context):
    """Show global configuration and the current context."""
    cli = _cli(ctx)
    metadata = run_and_exit(lambda: cli.operations().show())
    print_configuration(metadata, verbose=cli.verbose)


@app.command()
def context(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(None, help="Context name (default: current context)"),
):
    """Show endpoint settings for a context."""
    cli = _cli(ctx)
    ops = cli.operations()
    resolved = run_and_exit(lambda: ops.context(name))
    if name is None:
        name = run_and_exit(ops.current_context_name)
    print_context(resolved, name)


@app.command()
def contexts(ctx: typer.Context):
    """List stored contexts, marking the current one."""
    cli = _cli(ctx)
    ops = cli.operations()
    current = run_and_exit(ops.current_context_name)
    print_context_list(run_and_exit(ops.contexts), current)


@app.command()
def host(ctx: typer.Context):
    """Show the engine host a client would connect to."""
    cli = _cli(ctx)
    print_docker_host(run_and_exit(cli.operations().host))


@app.command()
def credentials(
    ctx: typer.Context,
    registry: str = typer.Argument(..., help="Registry host or URL, e.g. ghcr.io"),
    show_secret: bool = typer.Option(False, "--show-secret", help="Print password or token in clear text"),
):
    """Show where a registry's credentials come from."""
    cli = _cli(ctx)
    ops = cli.operations(show_secrets=show_secret)
    found = run_and_exit(lambda: ops.credentials(registry))
    print_registry_credentials(registry, found, show_secrets=ops.cfg.show_secrets)


if __name__ == "__main__":
    app()
