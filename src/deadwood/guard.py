"""Protection of the checked-out branch before cleanup."""

import logging
from typing import Optional

from rich.console import Console
from rich.markup import escape

from deadwood.deletion import CleanupPlan
from deadwood.git import GitRepo
from deadwood.prompts import InvalidAnswer, Prompter

logger = logging.getLogger(__name__)

SWITCH = "switch"
STAY = "stay"


def guard(
    repo: GitRepo,
    prompter: Prompter,
    console: Console,
    plan: CleanupPlan,
    default_branch: Optional[str],
) -> CleanupPlan:
    """Make sure the cleanup cannot touch the checked-out branch.

    When a default branch is known and it is not checked out, the user either
    switches to the default branch or stays, in which case the current
    branch is dropped from the plan.

    Raises:
        GitEnvironmentError: If the current branch cannot be read
        CheckoutError: If switching to the default branch fails
    """
    if default_branch is None:
        return plan

    current = repo.get_current_branch_name()
    if current == default_branch:
        return plan

    console.print(
        f"You are on '{escape(current)}', not on the default branch '{escape(default_branch)}'.\n"
        f"  {SWITCH}: check out '{escape(default_branch)}' before cleaning up\n"
        f"  {STAY}:   stay on '{escape(current)}' and leave it out of the cleanup"
    )
    while True:
        try:
            choice = prompter.ask_word(f"Switch or stay? ({SWITCH}/{STAY})", (SWITCH, STAY))
            break
        except InvalidAnswer as err:
            console.print(f"[yellow]{escape(str(err))}[/yellow]")

    if choice == SWITCH:
        repo.checkout(default_branch)
        console.print(f"Switched to branch '{escape(default_branch)}'")
        logger.info("Checked out %s before cleanup", default_branch)
        return plan

    logger.info("Keeping current branch %s out of the cleanup", current)
    return plan.without(current)
