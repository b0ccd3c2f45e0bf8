"""CLI entry point for gitlab-servers.

Invoked as::

    gitlab-servers [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m gitlab_servers.cli.main

Commands
--------
list        Show the registered servers
items       Show the display label for each server URL
show        Dump one server profile as YAML or JSON
add         Register a new server
update      Change an existing server
remove      Unregister a server
configure   Replace all servers from a YAML or JSON file
version     Show version information
"""
from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table

from gitlab_servers import (
    GITLAB_SERVER_URL,
    FileStore,
    MutationResult,
    PersistenceError,
    ProfileSerializer,
    ServerProfile,
    ServerRegistry,
)

console = Console()
err_console = Console(stderr=True)

DEFAULT_STORE = "~/.config/gitlab-servers/servers.yml"

EXIT_REJECTED = 1
EXIT_PERSISTENCE = 2


def _get_registry(ctx: click.Context) -> ServerRegistry:
    """Return the registry for this invocation, opening the store on first use."""
    state: dict[str, Any] = ctx.ensure_object(dict)
    registry = state.get("registry")
    if registry is None:
        try:
            registry = ServerRegistry(FileStore(state["store_path"]))
        except PersistenceError as exc:
            err_console.print(f"[red]Error:[/red] {exc}")
            sys.exit(EXIT_PERSISTENCE)
        state["registry"] = registry
    return registry


def _mutate(action: Callable[[], MutationResult], success: str) -> None:
    """Run a registry mutation and report it, exiting non-zero on failure."""
    try:
        result = action()
    except PersistenceError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(EXIT_PERSISTENCE)
    if not result:
        err_console.print(f"[red]Error:[/red] {result.error}")
        sys.exit(EXIT_REJECTED)
    console.print(f"[green]{success}[/green]")


def _profile_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the options shared by ``add`` and ``update``."""
    options = [
        click.option("--url", "server_url", default=None, help="Server URL"),
        click.option("--credentials-id", default=None, help="Credentials reference"),
        click.option(
            "--manage-web-hooks/--no-manage-web-hooks",
            default=None,
            help="Manage project web hooks",
        ),
        click.option(
            "--manage-system-hooks/--no-manage-system-hooks",
            default=None,
            help="Manage system hooks",
        ),
        click.option("--hooks-root-url", default=None, help="Root URL for hook callbacks"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _given(**fields: Any) -> dict[str, Any]:
    """Drop options that were not given on the command line."""
    return {key: value for key, value in fields.items() if value is not None}


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="gitlab-servers")
@click.option(
    "--store",
    "store_path",
    envvar="GITLAB_SERVERS_FILE",
    default=DEFAULT_STORE,
    show_default=True,
    help="YAML or JSON file holding the servers",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, store_path: str, verbose: bool) -> None:
    """Manage a registry of named GitLab server connection profiles."""
    ctx.ensure_object(dict).setdefault("store_path", store_path)
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from gitlab_servers import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]gitlab-servers[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# list / items / show commands
# ---------------------------------------------------------------------------


@cli.command(name="list")
@click.pass_context
def list_command(ctx: click.Context) -> None:
    """Show the registered servers."""
    registry = _get_registry(ctx)
    servers = registry.get_servers()
    if not servers:
        console.print("[dim]No servers registered.[/dim]")
        return

    table = Table(title=registry.display_name, show_lines=True)
    table.add_column("Name", style="bold")
    table.add_column("URL")
    table.add_column("Credentials")
    table.add_column("Web hooks", justify="center")
    table.add_column("System hooks", justify="center")

    for server in servers:
        table.add_row(
            server.name or "[dim](blank)[/dim]",
            server.server_url,
            server.credentials_id,
            "yes" if server.manage_web_hooks else "no",
            "yes" if server.manage_system_hooks else "no",
        )
    console.print(table)


@cli.command(name="items")
@click.pass_context
def items_command(ctx: click.Context) -> None:
    """Show the display label for each server URL."""
    registry = _get_registry(ctx)
    table = Table(show_header=True)
    table.add_column("Label", style="bold")
    table.add_column("Value")
    for label, value in registry.lookup_display_items():
        table.add_row(label, value)
    console.print(table)


@cli.command(name="show")
@click.argument("name")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["yaml", "json"], case_sensitive=False),
    default="yaml",
    help="Output format",
)
@click.pass_context
def show_command(ctx: click.Context, name: str, output_format: str) -> None:
    """Dump one server profile.

    NAME is the registered server name.
    """
    registry = _get_registry(ctx)
    server = registry.get_server(name)
    if server is None:
        err_console.print(f"[red]Error:[/red] Server {name!r} is not registered.")
        sys.exit(EXIT_REJECTED)

    serializer = ProfileSerializer()
    if output_format == "json":
        text = serializer.to_json([server])
    else:
        text = serializer.to_yaml([server])
    console.print(Syntax(text, output_format))


# ---------------------------------------------------------------------------
# add / update / remove commands
# ---------------------------------------------------------------------------


@cli.command(name="add")
@click.argument("name")
@_profile_options
@click.pass_context
def add_command(ctx: click.Context, name: str, **options: Any) -> None:
    """Register a new server.

    NAME must not already be registered.
    """
    registry = _get_registry(ctx)
    fields = _given(**options)
    fields.setdefault("server_url", GITLAB_SERVER_URL)
    server = ServerProfile(name=name, **fields)
    _mutate(lambda: registry.add_server(server), f"Added {name} ({server.server_url})")


@cli.command(name="update")
@click.argument("name")
@_profile_options
@click.pass_context
def update_command(ctx: click.Context, name: str, **options: Any) -> None:
    """Change an existing server.

    Options that are not given keep their current value.
    """
    registry = _get_registry(ctx)
    current = registry.get_server(name) or ServerProfile(name=name)
    server = current.with_changes(**_given(**options))
    _mutate(lambda: registry.update_server(server), f"Updated {name}")


@cli.command(name="remove")
@click.argument("name")
@click.pass_context
def remove_command(ctx: click.Context, name: str) -> None:
    """Unregister a server."""
    registry = _get_registry(ctx)
    _mutate(lambda: registry.remove_server(name), f"Removed {name}")


# ---------------------------------------------------------------------------
# configure command
# ---------------------------------------------------------------------------


@cli.command(name="configure")
@click.argument("file", type=click.Path(exists=False))
@click.pass_context
def configure_command(ctx: click.Context, file: str) -> None:
    """Replace all servers with those listed in FILE.

    FILE is a YAML or JSON document with a ``servers`` list.  When two
    entries share a name, the first one is kept.
    """
    path = Path(file)
    serializer = ProfileSerializer()
    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() == ".json":
            incoming = serializer.from_json(text)
        else:
            incoming = serializer.from_yaml(text)
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {file}")
        sys.exit(EXIT_REJECTED)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {file}: {exc}")
        sys.exit(EXIT_REJECTED)

    registry = _get_registry(ctx)
    try:
        servers = registry.configure(incoming)
    except PersistenceError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(EXIT_PERSISTENCE)

    dropped = len(incoming) - len(servers)
    console.print(f"[green]Configured[/green] {len(servers)} server(s)")
    if dropped:
        console.print(f"[yellow]Dropped[/yellow] {dropped} duplicate name(s)")


if __name__ == "__main__":
    cli()
