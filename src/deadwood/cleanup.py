"""Interactive cleanup workflow."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from deadwood.branches import list_stale_branches
from deadwood.defaults import resolve_default_branch
from deadwood.deletion import CleanupPlan, DeletionMode, DeletionOutcome, DeletionResult, delete_branches
from deadwood.git import GitRepo
from deadwood.guard import guard
from deadwood.prompts import InvalidAnswer, Prompter

logger = logging.getLogger(__name__)


class CleanupOption(Enum):
    """Choices offered once stale branches are found."""

    DELETE_ALL_SAFE = 1
    DELETE_ALL_FORCED = 2
    DELETE_ALL_EXCEPT_DEFAULT_SAFE = 3
    CANCEL = 4


class RunStatus(Enum):
    """How a cleanup run ended."""

    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NOTHING_TO_DO = "nothing-to-do"


@dataclass
class CleanupReport:
    """Final state of a cleanup run."""

    status: RunStatus
    outcomes: list[DeletionOutcome] = field(default_factory=list)

    def names(self, result: DeletionResult) -> list[str]:
        return [outcome.name for outcome in self.outcomes if outcome.result is result]

    @property
    def deleted(self) -> list[str]:
        return self.names(DeletionResult.DELETED)


def option_label(option: CleanupOption, default_branch: Optional[str]) -> str:
    """Menu text for an option."""
    if option is CleanupOption.DELETE_ALL_SAFE:
        return "Delete all such local branches (safe delete)"
    if option is CleanupOption.DELETE_ALL_FORCED:
        return "Delete all such local branches (forced delete)"
    if option is CleanupOption.DELETE_ALL_EXCEPT_DEFAULT_SAFE:
        excluded = f"'{default_branch}'" if default_branch else "the default branch"
        return f"Delete all such local branches except {excluded} (safe delete)"
    return "Cancel"


class CleanupSession:
    """One run of the cleanup workflow.

    Holds everything scoped to a single invocation: the resolved default
    branch and whether the deletion warning has been acknowledged.
    """

    def __init__(self, repo: GitRepo, prompter: Prompter, console: Console) -> None:
        self.repo = repo
        self.prompter = prompter
        self.console = console
        self.disclaimer_acknowledged = False

    @cached_property
    def default_branch(self) -> Optional[str]:
        """Protected default branch, resolved on first use only."""
        return resolve_default_branch(self.repo, self.prompter, self.console)

    def run(self) -> CleanupReport:
        """Run the workflow from listing to summary.

        Raises:
            GitError: On unrecoverable git failures
            PromptError: If the prompt channel breaks
        """
        stale = list_stale_branches(self.repo)
        if not stale:
            self.console.print("[green]No local branches with missing or gone upstreams were found.[/green]")
            return CleanupReport(RunStatus.NOTHING_TO_DO)

        names = tuple(branch.name for branch in stale)
        self.console.print("The following local branches have no active upstream branch (or their upstream is gone):\n")
        for name in names:
            self.console.print(f"  • [cyan]{escape(name)}[/cyan]")
        self.console.print()

        default_branch = self.default_branch
        option = self._choose_option(default_branch)
        if option is CleanupOption.CANCEL:
            return self._cancel()

        plan = self._plan(option, names, default_branch)
        if not plan.branches:
            self.console.print("No branches available to delete after excluding the default branch.")
            return self._finish(CleanupReport(RunStatus.NOTHING_TO_DO))

        plan = guard(self.repo, self.prompter, self.console, plan, default_branch)
        if not plan.branches:
            self.console.print("No branches left to delete.")
            return self._finish(CleanupReport(RunStatus.NOTHING_TO_DO))

        if not self._acknowledge_disclaimer(plan):
            return self._cancel()

        report = CleanupReport(RunStatus.COMPLETED)
        report.outcomes.extend(delete_branches(self.repo, plan.branches, plan.mode, self.console))

        unmerged = report.names(DeletionResult.FAILED_UNMERGED)
        if plan.mode is DeletionMode.SAFE and unmerged:
            if self._offer_force_retry(unmerged):
                report.outcomes.extend(delete_branches(self.repo, unmerged, DeletionMode.FORCED, self.console))
                self.console.print("Forced deletion completed.")
            else:
                self.console.print("Cleanup operation completed with safe deletion.")
        elif plan.mode is DeletionMode.FORCED:
            self.console.print("Forced deletion completed.")
        else:
            self.console.print("Cleanup operation completed.")
        return self._finish(report)

    def _choose_option(self, default_branch: Optional[str]) -> CleanupOption:
        self.console.print("Choose one of the following options:")
        for option in CleanupOption:
            self.console.print(f"  {option.value}. {escape(option_label(option, default_branch))}")
        choices = [option.value for option in CleanupOption]
        while True:
            try:
                value = self.prompter.ask_number("Enter the number for your option:", choices)
            except InvalidAnswer as err:
                self.console.print(f"[yellow]{escape(str(err))}[/yellow]")
                continue
            logger.info("User chose option %d", value)
            return CleanupOption(value)

    def _plan(self, option: CleanupOption, names: Sequence[str], default_branch: Optional[str]) -> CleanupPlan:
        if option is CleanupOption.DELETE_ALL_FORCED:
            return CleanupPlan(tuple(names), DeletionMode.FORCED)
        plan = CleanupPlan(tuple(names), DeletionMode.SAFE)
        if option is CleanupOption.DELETE_ALL_EXCEPT_DEFAULT_SAFE and default_branch:
            plan = plan.without(default_branch)
        return plan

    def _acknowledge_disclaimer(self, plan: CleanupPlan) -> bool:
        """Show the irreversible-action warning once per run."""
        if self.disclaimer_acknowledged:
            return True
        self.console.print(
            Panel(
                f"Deleting branches cannot be undone. {len(plan.branches)} branch(es) will be deleted "
                f"({plan.mode.value} delete):\n"
                + "\n".join(f"  [cyan]{escape(name)}[/cyan]" for name in plan.branches),
                title="Warning",
                title_align="left",
                style="yellow",
                padding=(0, 2),
                expand=False,
            )
        )
        try:
            confirmed = self.prompter.confirm("Do you want to continue?")
        except InvalidAnswer:
            confirmed = False
        self.disclaimer_acknowledged = confirmed
        return confirmed

    def _offer_force_retry(self, names: Sequence[str]) -> bool:
        self.console.print(
            "The following branches were not fully merged and could not be deleted: "
            + ", ".join(f"[cyan]{escape(name)}[/cyan]" for name in names)
        )
        while True:
            try:
                return self.prompter.confirm("Do you want to force delete them?")
            except InvalidAnswer as err:
                self.console.print(f"[yellow]{escape(str(err))}[/yellow]")

    def _cancel(self) -> CleanupReport:
        self.console.print("\n[yellow]Operation cancelled[/yellow]")
        return CleanupReport(RunStatus.CANCELLED)

    def _finish(self, report: CleanupReport) -> CleanupReport:
        """Print the summary of a run that reached the deletion stage."""
        deleted = report.deleted
        if deleted:
            table = Table(show_header=True, header_style="bold", show_edge=True)
            table.add_column("Branch", style="cyan")
            for name in deleted:
                table.add_row(escape(name))
            self.console.print()
            self.console.print(f"[bold green]Successfully deleted {len(deleted)} branch(es)[/bold green]")
            self.console.print(table)
        else:
            self.console.print("\n[yellow]No branches were deleted[/yellow]")

        skipped = report.names(DeletionResult.SKIPPED_CURRENT)
        if skipped:
            self.console.print(f"Skipped (checked out): {escape(', '.join(skipped))}")
        failed = self._still_failed(report)
        if failed:
            self.console.print(f"[red]Not deleted:[/red] {escape(', '.join(failed))}")
        return report

    @staticmethod
    def _still_failed(report: CleanupReport) -> list[str]:
        """Branches whose last attempt failed, in first-attempt order."""
        last: dict[str, DeletionResult] = {}
        for outcome in report.outcomes:
            last[outcome.name] = outcome.result
        return [
            name for name, result in last.items() if result in (DeletionResult.FAILED_UNMERGED, DeletionResult.FAILED_OTHER)
        ]
