"""Command-line interface for gitcentral."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from gitcentral.config import Settings
from gitcentral.exceptions import ConcurrentChangesetError, GitCentralError
from gitcentral.logging_config import configure_logging
from gitcentral.models import CheckinConfig
from gitcentral.remote import create_connector
from gitcentral.replay import ReplayEngine, parse_work_item_option
from gitcentral.repository import GitRepository

app = typer.Typer(
    name="gitcentral",
    help="Replay local git commits as checkins on a centralized version-control server",
    add_completion=False,
)
console = Console()


def build_baseline(
    work_items: Optional[List[str]] = None,
    force_reason: Optional[str] = None,
    generate_comment: bool = True,
    allow_merge: bool = True,
    override_gated_checkin: bool = False,
) -> CheckinConfig:
    """Build the checkin options shared by every replayed commit.

    Raises:
        typer.BadParameter: If a work item value is malformed
    """
    config = CheckinConfig(
        generate_comment=generate_comment,
        allow_merge=allow_merge,
        override_gated_checkin=override_gated_checkin,
    )
    if force_reason and force_reason.strip():
        config = config.model_copy(update={"force": True, "force_reason": force_reason})

    for value in work_items or []:
        try:
            item_id, action = parse_work_item_option(value)
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--work-item") from e
        config = config.with_work_item(item_id, action)

    return config


def describe_commits(count: int) -> str:
    """Count of commits with the matching plural form."""
    return f"{count} commit" if count == 1 else f"{count} commits"


def _print_error(error: GitCentralError) -> None:
    console.print(f"[bold red]Error:[/bold red] {escape(str(error))}")
    for recommendation in error.recommendations:
        console.print(f"[yellow]{escape(recommendation)}[/yellow]")


@app.command()
def checkin(
    quick: bool = typer.Option(
        False,
        "--quick",
        "--no-rebase",
        help="Omit rebases (faster). Can lead to problems if someone checks in while the command runs.",
    ),
    work_items: Optional[List[str]] = typer.Option(
        None, "--work-item", "-w", help="Work item to attach: ID[:associate|resolve]"
    ),
    force: Optional[str] = typer.Option(None, "--force", "-f", help="Override checkin policies with this reason"),
    no_generate_comment: bool = typer.Option(
        False, "--no-generate-comment", help="Do not generate a comment for empty commit messages"
    ),
    no_merge: bool = typer.Option(False, "--no-merge", help="Refuse to check in merge commits"),
    override_gated: bool = typer.Option(False, "--override-gated", help="Bypass gated checkin"),
    connector: Optional[str] = typer.Option(None, "--connector", help="Remote connector to use"),
    repo_path: Optional[Path] = typer.Option(None, "--repo", "-C", help="Path to Git repository"),
    remote_id: Optional[str] = typer.Option(None, "--remote-id", help="Name of the remote"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Check in every commit since the last synchronized changeset, one checkin per commit."""
    settings = Settings()
    configure_logging("DEBUG" if verbose else settings.log_level)

    baseline = build_baseline(
        work_items=work_items,
        force_reason=force,
        generate_comment=not no_generate_comment,
        allow_merge=not no_merge,
        override_gated_checkin=override_gated,
    )

    engine = None
    try:
        repository = GitRepository(repo_path or settings.repo_path)
        cursor = repository.find_last_synced("HEAD", remote_id or settings.remote_id)
        if cursor is None:
            raise GitCentralError("error: No commit mirroring a remote changeset was found.").with_recommendation(
                "Fetch the remote history first so HEAD descends from a synchronized commit."
            )

        remote = create_connector(connector or settings.connector, cursor, repository)
        engine = ReplayEngine(repository, remote, baseline, quick=quick or settings.quick, console=console)
        result = engine.run(cursor)

        console.print(
            f"[bold green]✓[/bold green] Checked in {describe_commits(len(result.changesets))} "
            f"(latest changeset C{result.cursor.remote_changeset_id})"
        )

    except GitCentralError as e:
        _print_error(e)
        if isinstance(e, ConcurrentChangesetError) and engine is not None and engine.changesets:
            console.print(
                f"[dim]{describe_commits(len(engine.changesets))} checked in before the run stopped.[/dim]"
            )
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        if verbose:
            import traceback
            console.print(f"[dim]{escape(traceback.format_exc())}[/dim]")
        raise typer.Exit(1)


@app.command()
def info(
    repo_path: Optional[Path] = typer.Option(None, "--repo", "-C", help="Path to Git repository"),
    remote_id: Optional[str] = typer.Option(None, "--remote-id", help="Name of the remote"),
) -> None:
    """Show version and the remote the current branch is synchronized with."""
    from gitcentral import __version__

    settings = Settings()
    console.print(f"gitcentral version {__version__}", highlight=False)

    try:
        repository = GitRepository(repo_path or settings.repo_path)
        cursor = repository.find_last_synced("HEAD", remote_id or settings.remote_id)
    except (GitCentralError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    if cursor is not None:
        remote = cursor.remote
        console.print(
            f"remote id '{remote.remote_id}' maps to {remote.url} {remote.repository_path}",
            markup=False,
            highlight=False,
        )
        console.print(
            f"last synchronized changeset C{cursor.remote_changeset_id} at {cursor.local_commit_hash[:8]}",
            markup=False,
            highlight=False,
        )


@app.command()
def version() -> None:
    """Show version information."""
    from gitcentral import __version__

    console.print(f"[bold]gitcentral[/bold] version {__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
