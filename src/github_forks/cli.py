"""Command line interface for github-forks.

Provides fork, repository and configuration commands, plus ``verify`` which
runs the fork lifecycle scenarios against the live API.
"""

import sys
from typing import Any, Dict, Optional

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .api_clients.fork_client import ForkAPIClient
from .api_clients.repository_uri import resolve_repository_uri
from .cli_utils import format_json_error, format_json_success, handle_api_error
from .config.config_manager import ConfigManager, GitHubConfiguration
from .config.snapshot import load_snapshot, restore_snapshot, save_snapshot, take_snapshot
from .harness.fork_lifecycle import ForkLifecycleHarness
from .harness.scenarios import (
    DEFAULT_SOURCE_OWNER,
    DEFAULT_SOURCE_REPO,
    default_scenarios,
    run_scenarios,
)
from .logging_utils import setup_logging
from .models.fork import ForkSort

console = Console()


def _handle_error(ctx: click.Context, e: Exception, json_output: bool) -> None:
    """Report a command error in the requested format and exit 1."""
    if json_output:
        click.echo(
            format_json_error(
                str(e), type(e).__name__, status_code=getattr(e, "status_code", None)
            )
        )
    else:
        verbose = ctx.obj.get("verbose", False)
        console.print(f"[red]Error: {handle_api_error(e, verbose=verbose)}[/red]")
    sys.exit(1)


def _effective_config(ctx: click.Context) -> GitHubConfiguration:
    config_manager: ConfigManager = ctx.obj["config_manager"]
    config = config_manager.get_effective_config()
    if not ctx.obj.get("verbose"):
        setup_logging(config.log_level)
    return config


def _build_client(ctx: click.Context, config: GitHubConfiguration) -> ForkAPIClient:
    # Tests inject an httpx.MockTransport through the context object
    return ForkAPIClient(config, transport=ctx.obj.get("transport"))


@click.group()
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Configuration directory (default: $GITHUB_FORKS_CONFIG_DIR or ~/.github-forks)",
)
@click.option("--verbose", "-v", is_flag=True, help="Debug logging and error hints")
@click.version_option(__version__, prog_name="gh-forks")
@click.pass_context
def cli(ctx: click.Context, config_dir: Optional[str], verbose: bool):
    """Create, list and clean up GitHub forks, and verify fork behavior."""
    ctx.ensure_object(dict)
    ctx.obj["config_manager"] = ConfigManager(config_dir)
    ctx.obj["verbose"] = verbose
    setup_logging("DEBUG" if verbose else "WARNING")


# Fork commands


@cli.group("fork")
def fork_group():
    """Fork creation and listing."""
    pass


@fork_group.command("create")
@click.argument("owner")
@click.argument("repo")
@click.option("--org", "organization", help="Organization to fork into")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def fork_create(
    ctx: click.Context,
    owner: str,
    repo: str,
    organization: Optional[str],
    json_output: bool,
):
    """Fork OWNER/REPO into your namespace or an organization.

    Examples:
        gh-forks fork create Microsoft PowerShellForGitHub
        gh-forks fork create Microsoft PowerShellForGitHub --org my-org
    """
    try:
        config = _effective_config(ctx)
        with _build_client(ctx, config) as client:
            fork = client.create_fork(owner, repo, organization=organization)

        if json_output:
            click.echo(format_json_success(fork.to_dict()))
        else:
            console.print(f"[green]Created fork {fork.full_name}[/green]")
            console.print(f"[dim]URL:[/dim] {fork.svn_url}")
    except Exception as e:
        _handle_error(ctx, e, json_output)


@fork_group.command("list")
@click.argument("owner")
@click.argument("repo")
@click.option(
    "--sort",
    type=click.Choice([s.value for s in ForkSort]),
    default=ForkSort.NEWEST.value,
    show_default=True,
    help="Listing order",
)
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def fork_list(
    ctx: click.Context, owner: str, repo: str, sort: str, json_output: bool
):
    """List the forks of OWNER/REPO.

    Examples:
        gh-forks fork list Microsoft PowerShellForGitHub
        gh-forks fork list Microsoft PowerShellForGitHub --sort stargazers --json
    """
    try:
        config = _effective_config(ctx)
        with _build_client(ctx, config) as client:
            forks = client.list_forks(owner, repo, sort=ForkSort(sort))

        if json_output:
            click.echo(
                format_json_success(
                    [fork.to_dict() for fork in forks],
                    metadata={"count": len(forks), "sort": sort},
                )
            )
            return

        if not forks:
            console.print(f"[yellow]No forks of {owner}/{repo}[/yellow]")
            return

        table = Table(title=f"Forks of {owner}/{repo} ({sort})")
        table.add_column("Full name", style="cyan", no_wrap=True)
        table.add_column("Created")
        table.add_column("URL", style="dim", overflow="fold")
        for fork in forks:
            created = fork.created_at.strftime("%Y-%m-%d %H:%M") if fork.created_at else "-"
            table.add_row(fork.full_name, created, fork.svn_url)
        console.print(table)
    except Exception as e:
        _handle_error(ctx, e, json_output)


# Repository commands


@cli.group("repo")
def repo_group():
    """Repository maintenance."""
    pass


@repo_group.command("delete")
@click.argument("uri")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def repo_delete(ctx: click.Context, uri: str, yes: bool):
    """Delete the repository at URI (URL or owner/repo).

    Examples:
        gh-forks repo delete https://github.com/octocat/PowerShellForGitHub --yes
    """
    try:
        owner, repo = resolve_repository_uri(uri)
        if not yes and not click.confirm(f"Delete repository {owner}/{repo}?"):
            console.print("[yellow]Aborted[/yellow]")
            return

        config = _effective_config(ctx)
        with _build_client(ctx, config) as client:
            client.delete_repository(uri)
        console.print(f"[green]Deleted {owner}/{repo}[/green]")
    except Exception as e:
        _handle_error(ctx, e, False)


# Configuration commands


@cli.group("config")
def config_group():
    """Show, change, back up and restore configuration."""
    pass


@config_group.command("show")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def config_show(ctx: click.Context, json_output: bool):
    """Show the effective configuration (token masked)."""
    try:
        config_manager: ConfigManager = ctx.obj["config_manager"]
        config = config_manager.get_effective_config()
        data: Dict[str, Any] = config.masked()

        if json_output:
            click.echo(
                format_json_success(
                    data, metadata={"config_file": str(config_manager.config_file_path)}
                )
            )
            return

        table = Table(title=str(config_manager.config_file_path))
        table.add_column("Key", style="cyan")
        table.add_column("Value")
        for key, value in data.items():
            table.add_row(key, "-" if value is None else str(value))
        console.print(table)
    except Exception as e:
        _handle_error(ctx, e, json_output)


@config_group.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def config_set(ctx: click.Context, key: str, value: str):
    """Persist KEY=VALUE (an empty VALUE clears optional keys)."""
    try:
        config_manager: ConfigManager = ctx.obj["config_manager"]
        config_manager.set_value(key, value)
        console.print(f"[green]Set {key}[/green]")
    except Exception as e:
        _handle_error(ctx, e, False)


@config_group.command("backup")
@click.argument("path", type=click.Path(dir_okay=False))
@click.pass_context
def config_backup(ctx: click.Context, path: str):
    """Save the current configuration file state to PATH."""
    try:
        config_manager: ConfigManager = ctx.obj["config_manager"]
        target = save_snapshot(take_snapshot(config_manager.config_file_path), path)
        console.print(f"[green]Configuration backed up to {target}[/green]")
    except Exception as e:
        _handle_error(ctx, e, False)


@config_group.command("restore")
@click.argument("path", type=click.Path(dir_okay=False))
@click.pass_context
def config_restore(ctx: click.Context, path: str):
    """Restore configuration from a backup written by 'config backup'."""
    try:
        snapshot = load_snapshot(path)
        restore_snapshot(snapshot)
        console.print(f"[green]Configuration restored to {snapshot.config_path}[/green]")
    except Exception as e:
        _handle_error(ctx, e, False)


@config_group.command("reset")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def config_reset(ctx: click.Context, yes: bool):
    """Remove the configuration file, returning to defaults."""
    config_manager: ConfigManager = ctx.obj["config_manager"]
    if not yes and not click.confirm(f"Remove {config_manager.config_file_path}?"):
        console.print("[yellow]Aborted[/yellow]")
        return
    try:
        config_manager.reset_config()
        console.print("[green]Configuration reset to defaults[/green]")
    except Exception as e:
        _handle_error(ctx, e, False)


# Verification


@cli.command("verify")
@click.option(
    "--source",
    default=f"{DEFAULT_SOURCE_OWNER}/{DEFAULT_SOURCE_REPO}",
    show_default=True,
    help="Repository to fork (owner/repo or URL)",
)
@click.option(
    "--org",
    "organization",
    help="Organization for the organization scenario "
    "(default: default_organization_name)",
)
@click.option(
    "--strict-teardown",
    is_flag=True,
    help="Fail a scenario when its fork cannot be deleted",
)
@click.option(
    "--backup",
    "backup_path",
    type=click.Path(dir_okay=False),
    help="Keep the configuration snapshot at this path",
)
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def verify(
    ctx: click.Context,
    source: str,
    organization: Optional[str],
    strict_teardown: bool,
    backup_path: Optional[str],
    json_output: bool,
):
    """Fork SOURCE into your namespace (and an organization) and verify.

    Each scenario creates a fork, lists forks newest-first, checks the new
    fork is listed, and deletes it. Configuration is restored afterwards.
    Exits with status 1 if any scenario fails.
    """
    try:
        source_owner, source_repo = resolve_repository_uri(source)
        config_manager: ConfigManager = ctx.obj["config_manager"]
        config = _effective_config(ctx)
        organization = organization or config.default_organization_name

        scenarios = default_scenarios(
            organization, source_owner=source_owner, source_repo=source_repo
        )
        with _build_client(ctx, config) as client:
            harness = ForkLifecycleHarness(client, strict_teardown=strict_teardown)
            results = run_scenarios(
                harness, scenarios, config_manager, backup_path=backup_path
            )
    except Exception as e:
        _handle_error(ctx, e, json_output)
        return

    all_passed = all(result.passed for result in results)

    if json_output:
        click.echo(
            format_json_success(
                [result.to_dict() for result in results],
                metadata={"passed": all_passed, "source": f"{source_owner}/{source_repo}"},
            )
        )
    else:
        table = Table(title=f"Fork scenarios for {source_owner}/{source_repo}")
        table.add_column("Scenario", style="cyan")
        table.add_column("Expected", no_wrap=True)
        table.add_column("Result")
        table.add_column("Teardown")
        for result in results:
            table.add_row(
                result.name,
                result.expected_full_name,
                "[green]pass[/green]" if result.passed else "[red]fail[/red]",
                "ok" if result.teardown_ok else "[yellow]leaked[/yellow]",
            )
        console.print(table)
        for result in results:
            if result.message:
                console.print(f"[red]{result.name}:[/red] {result.message}")

    if not all_passed:
        sys.exit(1)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
