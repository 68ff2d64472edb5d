"""Main CLI interface for scan-git."""

import json
import os
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from scan_git.config import ScanGitConfig, load_config
from scan_git.core.errors import (
    ConfigError,
    ObjectReadError,
    RepositoryNotFoundError,
    ScanGitError,
)
from scan_git.core.locator import locate_git_dir
from scan_git.core.repository import LocalGitRepository
from scan_git.logger import setup_logging
from scan_git.models.commit import CommitView

console = Console()


def _commit_to_dict(commit: Optional[CommitView]) -> Optional[dict]:
    if commit is None:
        return None
    return {
        "sha": commit.sha,
        "author_name": commit.author_name,
        "author_email": commit.author_email,
        "author_date": commit.author_date.isoformat(),
        "message": commit.message,
    }


def open_repository_or_exit(path: str, config: ScanGitConfig) -> LocalGitRepository:
    """Open a LocalGitRepository or exit with an error message."""
    try:
        return LocalGitRepository(path, detect_parents=config.detect_parents)
    except RepositoryNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise click.Abort() from e
    except ScanGitError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to a JSON configuration file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.version_option(package_name="scan-git")
@click.pass_context
def main(ctx: click.Context, config_path: Optional[str], verbose: bool):
    """scan-git - attribute scanned files to the commits that last changed them."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    setup_logging(level="DEBUG" if verbose else config.log_level)
    ctx.obj = config


@main.command()
@click.argument("path", type=click.Path(), default=".")
@click.option(
    "--detect-parents/--no-detect-parents",
    default=None,
    help="Search parent directories for git metadata",
)
@click.pass_obj
def locate(config: ScanGitConfig, path: str, detect_parents: Optional[bool]):
    """Show where the git metadata for PATH lives."""
    if detect_parents is None:
        detect_parents = config.detect_parents

    try:
        location = locate_git_dir(path, detect_parents=detect_parents)
    except (ScanGitError, OSError) as e:
        raise click.ClickException(str(e)) from e

    if location is None:
        console.print(f"[yellow]No git repository found at {path}[/yellow]")
        raise click.Abort()

    console.print(f"[bold]Git dir:[/bold] {location.git_dir}")
    console.print(f"[bold]Work tree:[/bold] {location.work_tree}")
    if location.is_linked:
        console.print("[bold]Linked:[/bold] yes (.git file)")


@main.command(name="last-commit")
@click.argument("files", nargs=-1, required=True)
@click.option(
    "--repo",
    "repo_path",
    type=click.Path(exists=True),
    default=".",
    help="Path inside the repository",
)
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_obj
def last_commit(config: ScanGitConfig, files, repo_path: str, as_json: bool):
    """Show the last commit that changed each of FILES."""
    with open_repository_or_exit(repo_path, config) as repo:
        try:
            # FILES are relative to the shell, not the repository root
            found = repo.last_commits_for([os.path.abspath(f) for f in files])
        except ScanGitError as e:
            raise click.ClickException(str(e)) from e
        results = {f: found[os.path.abspath(f)] for f in files}

    if as_json:
        click.echo(
            json.dumps(
                {path: _commit_to_dict(commit) for path, commit in results.items()},
                indent=2,
            )
        )
        return

    table = Table(title="Last commits")
    table.add_column("File", style="cyan")
    table.add_column("Commit", style="yellow")
    table.add_column("Author")
    table.add_column("Date")
    table.add_column("Message")

    for path, commit in results.items():
        if commit is None:
            table.add_row(path, "unknown", "", "", "")
            continue
        table.add_row(
            path,
            commit.short_sha(config.short_sha_length),
            f"{commit.author_name} <{commit.author_email}>",
            commit.author_date.strftime(config.date_format),
            commit.summary,
        )

    console.print(table)


@main.command()
@click.argument("path", type=click.Path(exists=True), default=".")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_obj
def info(config: ScanGitConfig, path: str, as_json: bool):
    """Show repository details for PATH."""
    with open_repository_or_exit(path, config) as repo:
        try:
            head = None if repo.is_unborn else repo.last_commit()
        except ObjectReadError as e:
            raise click.ClickException(str(e)) from e
        details = {
            "work_tree": str(repo.root_dir),
            "git_dir": str(repo.git_dir),
            "branch": repo.branch_name,
            "remote_url": repo.remote_url,
            "head": _commit_to_dict(head),
        }

    if as_json:
        click.echo(json.dumps(details, indent=2))
        return

    console.print(f"[bold]Work tree:[/bold] {details['work_tree']}")
    console.print(f"[bold]Git dir:[/bold] {details['git_dir']}")
    console.print(f"[bold]Branch:[/bold] {details['branch'] or '(detached)'}")
    console.print(f"[bold]Remote:[/bold] {details['remote_url'] or '(none)'}")
    if head is None:
        console.print("[bold]HEAD:[/bold] (no commits)")
    else:
        console.print(
            f"[bold]HEAD:[/bold] {head.short_sha(config.short_sha_length)} "
            f"{head.summary} ({head.author_name})"
        )


if __name__ == "__main__":
    main()
