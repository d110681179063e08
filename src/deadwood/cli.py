"""Command line interface for deadwood."""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape

from deadwood import __version__
from deadwood.cleanup import CleanupSession
from deadwood.git import GitError, GitRepo
from deadwood.log import setup_logging
from deadwood.prompts import PromptError, Prompter

app = typer.Typer(help="Clean up local git branches whose upstream is missing or gone")
console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    if value:
        console.print(f"deadwood {__version__}")
        raise typer.Exit()


def fail(err: Exception) -> typer.Exit:
    """Report a fatal error on stderr and build the exit to raise."""
    err_console.print(f"[red]Error:[/red] {escape(str(err))}", soft_wrap=True)
    return typer.Exit(code=1)


def get_repo(path: Path) -> GitRepo:
    """Get git repository instance."""
    try:
        return GitRepo(path)
    except GitError as err:
        raise fail(err) from err


@app.command()
def clean(
    path: Annotated[Path, typer.Option(help="Path to git repository")] = Path("."),
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show progress messages")] = False,
    debug: Annotated[bool, typer.Option(help="Show git commands and debug messages")] = False,
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show the version and exit"),
    ] = None,
) -> None:
    """Delete local branches that have no upstream or whose upstream is gone."""
    setup_logging(verbose=verbose, debug=debug)
    repo = get_repo(path)
    session = CleanupSession(repo, Prompter(console), console)
    try:
        session.run()
    except (GitError, PromptError) as err:
        raise fail(err) from err


if __name__ == "__main__":
    app()
