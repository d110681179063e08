"""Git repository operations."""

import logging
from pathlib import Path

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

logger = logging.getLogger(__name__)

GIT_MARKER = ".git"


class GitError(Exception):
    """Git operation error."""


class GitEnvironmentError(GitError):
    """The working directory is not a usable git repository."""


class BranchListingError(GitError):
    """Listing local branches failed."""


class CheckoutError(GitError):
    """Switching to another branch failed."""

    def __init__(self, branch: str, detail: str) -> None:
        """Initialize error.

        Args:
            branch: Branch that could not be checked out
            detail: Error output reported by git
        """
        super().__init__(f"Failed to check out '{branch}': {detail}")
        self.branch = branch
        self.detail = detail


class BranchDeletionError(GitError):
    """Deleting a single branch failed."""

    def __init__(self, branch: str, detail: str) -> None:
        """Initialize error.

        Args:
            branch: Branch that could not be deleted
            detail: Error output reported by git
        """
        super().__init__(f"Failed to delete '{branch}': {detail}")
        self.branch = branch
        self.detail = detail


def command_output(err: GitCommandError) -> str:
    """Return the first line of git's stderr from a failed command.

    GitPython wraps stderr as ``"\\n  stderr: '...'"``; this unwraps it. The
    full text is logged at debug level.
    """
    text = str(err.stderr or "").strip()
    if text.startswith("stderr: '") and text.endswith("'"):
        text = text[len("stderr: '") : -1]
    logger.debug("git %s failed with status %s: %s", err.command, err.status, text)
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    return lines[0] if lines else str(err)


class GitRepo:
    """Git commands issued by the cleanup workflow."""

    def __init__(self, path: Path) -> None:
        """Initialize repository.

        Raises:
            GitEnvironmentError: If ``path`` has no git metadata or cannot be opened
        """
        self.path = path
        if not (path / GIT_MARKER).exists():
            raise GitEnvironmentError(
                f"This command must be run inside a git repository (no {GIT_MARKER} found in {path})."
            )
        try:
            self.repo: Repo = Repo(path)
        except (GitCommandError, InvalidGitRepositoryError, NoSuchPathError) as err:
            raise GitEnvironmentError(f"Failed to open repository: {err}") from err
        # The tool matches git's English messages ("gone", "not fully merged")
        self.repo.git.update_environment(LC_ALL="C", LANGUAGE="")

    def get_current_branch_name(self) -> str:
        """Get current branch name, or ``"HEAD"`` when detached."""
        try:
            name = self.repo.git.rev_parse("--abbrev-ref", "HEAD").strip()
        except GitCommandError as err:
            raise GitEnvironmentError(f"Failed to get current branch: {command_output(err)}") from err
        logger.debug("Current branch is %s", name)
        return name

    def list_branches_verbose(self) -> str:
        """Get the raw output of ``git branch -vv``."""
        try:
            return self.repo.git.branch("-vv")
        except GitCommandError as err:
            raise BranchListingError(f"Error running 'git branch -vv': {command_output(err)}") from err

    def branch_exists(self, name: str) -> bool:
        """Check whether a local branch exists.

        A failed query counts as "does not exist".
        """
        try:
            self.repo.git.show_ref("--verify", "--quiet", f"refs/heads/{name}")
        except GitCommandError as err:
            logger.debug("Branch %s not found (exit status %s)", name, err.status)
            return False
        return True

    def delete_branch(self, name: str, force: bool = False) -> None:
        """Delete a local branch with ``-d``, or ``-D`` when forced."""
        flag = "-D" if force else "-d"
        logger.debug("Running git branch %s %s", flag, name)
        try:
            self.repo.git.branch(flag, name)
        except GitCommandError as err:
            raise BranchDeletionError(name, command_output(err)) from err

    def checkout(self, name: str) -> None:
        """Check out a local branch."""
        logger.debug("Running git checkout %s", name)
        try:
            self.repo.git.checkout(name)
        except GitCommandError as err:
            raise CheckoutError(name, command_output(err)) from err
