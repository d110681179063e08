"""Default branch resolution."""

import logging
from typing import Optional

from rich.console import Console
from rich.markup import escape

from deadwood.git import GitRepo
from deadwood.prompts import InvalidAnswer, Prompter

logger = logging.getLogger(__name__)

MAIN_BRANCH = "main"
MASTER_BRANCH = "master"
DEFAULT_BRANCH_NAMES = (MAIN_BRANCH, MASTER_BRANCH)


def resolve_default_branch(repo: GitRepo, prompter: Prompter, console: Console) -> Optional[str]:
    """Work out which local branch is the protected default.

    If both ``main`` and ``master`` exist the user picks one; if only one
    exists it is the default; if neither exists there is no default.
    """
    present = [name for name in DEFAULT_BRANCH_NAMES if repo.branch_exists(name)]
    if not present:
        logger.info("Neither %s nor %s exists locally", MAIN_BRANCH, MASTER_BRANCH)
        return None
    if len(present) == 1:
        logger.info("Default branch is %s", present[0])
        return present[0]

    console.print(f"Both '{MAIN_BRANCH}' and '{MASTER_BRANCH}' exist in this repository.")
    while True:
        try:
            choice = prompter.ask_word(
                f"Which one is your default branch? ({MAIN_BRANCH}/{MASTER_BRANCH})",
                DEFAULT_BRANCH_NAMES,
            )
        except InvalidAnswer as err:
            console.print(f"[yellow]{escape(str(err))}[/yellow]")
            continue
        logger.info("Default branch chosen by user: %s", choice)
        return choice
