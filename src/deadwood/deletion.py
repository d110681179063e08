"""Branch deletion in safe and forced mode."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from rich.console import Console
from rich.markup import escape

from deadwood.git import BranchDeletionError, GitRepo

logger = logging.getLogger(__name__)

UNMERGED_MARKER = "not fully merged"


class DeletionMode(Enum):
    """How branches are deleted."""

    SAFE = "safe"  # git branch -d
    FORCED = "forced"  # git branch -D


class DeletionResult(Enum):
    """What happened to one branch."""

    DELETED = "deleted"
    SKIPPED_CURRENT = "skipped-current"
    FAILED_UNMERGED = "failed-unmerged"
    FAILED_OTHER = "failed-other"


@dataclass(frozen=True)
class DeletionOutcome:
    """Result of deleting one branch."""

    name: str
    result: DeletionResult
    mode: DeletionMode
    message: str = ""


@dataclass(frozen=True)
class CleanupPlan:
    """Branches to delete, in order, and the mode to delete them in."""

    branches: tuple[str, ...]
    mode: DeletionMode

    def without(self, name: str) -> "CleanupPlan":
        """Return a plan with ``name`` removed, ignoring case."""
        kept = tuple(branch for branch in self.branches if branch.lower() != name.lower())
        return CleanupPlan(kept, self.mode)


def delete_branches(
    repo: GitRepo,
    names: Sequence[str],
    mode: DeletionMode,
    console: Console,
) -> list[DeletionOutcome]:
    """Delete branches one after another.

    A failure on one branch is recorded and the batch moves on. In safe
    mode, branches git refuses to delete because they are not fully merged
    are recorded as ``FAILED_UNMERGED`` so they can be offered for a forced
    retry.

    Args:
        repo: Repository to delete from
        names: Branch names, deleted in this order
        mode: Safe (``-d``) or forced (``-D``) deletion
        console: Where per-branch messages are printed

    Returns:
        One outcome per name, in the same order

    Raises:
        GitEnvironmentError: If the current branch cannot be read; the
            remaining branches are not touched
    """
    outcomes = []
    for name in names:
        # Checked before every branch, the previous step may have switched
        current = repo.get_current_branch_name()
        if name == current:
            console.print(f"[yellow]Skipping current branch: {escape(name)}[/yellow]")
            outcomes.append(DeletionOutcome(name, DeletionResult.SKIPPED_CURRENT, mode))
            continue

        try:
            repo.delete_branch(name, force=mode is DeletionMode.FORCED)
        except BranchDeletionError as err:
            if mode is DeletionMode.SAFE and UNMERGED_MARKER in err.detail:
                console.print(f"[yellow]Unable to delete {escape(name)} as it is not fully merged.[/yellow]")
                outcomes.append(DeletionOutcome(name, DeletionResult.FAILED_UNMERGED, mode, err.detail))
            else:
                console.print(f"[red]Error deleting branch {escape(name)}:[/red] {escape(err.detail)}")
                outcomes.append(DeletionOutcome(name, DeletionResult.FAILED_OTHER, mode, err.detail))
            logger.info("Could not delete %s: %s", name, err.detail)
            continue

        console.print(f"Deleted branch [cyan]{escape(name)}[/cyan]")
        outcomes.append(DeletionOutcome(name, DeletionResult.DELETED, mode))
    return outcomes
