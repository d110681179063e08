"""Test configuration and fixtures."""

from io import StringIO
from pathlib import Path
from typing import Generator, Iterable

import pytest
from git import Actor, Repo
from rich.console import Console

from deadwood.git import BranchDeletionError, BranchListingError, CheckoutError, GitEnvironmentError
from deadwood.prompts import PromptError, Prompter

AUTHOR = Actor("Test User", "test@example.com")


def init_local_repo(tmp_path: Path) -> tuple[Repo, Repo, Path, Path]:
    """Create a local repository on ``main`` pushed to a bare remote."""
    remote_path = tmp_path / "remote"
    local_path = tmp_path / "local"
    remote_path.mkdir()
    local_path.mkdir()

    remote_repo = Repo.init(remote_path, bare=True)
    local_repo = Repo.init(local_path)
    local_repo.config_writer().set_value("user", "name", AUTHOR.name).release()
    local_repo.config_writer().set_value("user", "email", AUTHOR.email).release()

    readme = local_path / "README.md"
    readme.write_text("# Test Repository")
    local_repo.index.add(["README.md"])
    local_repo.index.commit("Initial commit", author=AUTHOR)
    # Whatever init.defaultBranch says, the only default branch is main
    local_repo.git.branch("-M", "main")

    origin = local_repo.create_remote("origin", url=str(remote_path))
    origin.push("main")
    local_repo.heads.main.set_tracking_branch(origin.refs.main)
    return local_repo, remote_repo, local_path, remote_path


@pytest.fixture
def test_env(tmp_path: Path) -> Generator[tuple[Path, Path], None, None]:
    """Create a test environment with local and remote repositories.

    Local branches:
        main            tracks origin/main, checked out
        feature/active  tracks origin/feature/active
        feature/gone    merged into main, upstream deleted
        bugfix/local    no upstream, merged into main
        experiment      no upstream, one unmerged commit

    Returns:
        Tuple of (local_repo_path, remote_repo_path)
    """
    local_repo, _, local_path, remote_path = init_local_repo(tmp_path)
    origin = local_repo.remote("origin")
    main_branch = local_repo.heads.main

    def commit_on_new_branch(name: str, content: str) -> None:
        main_branch.checkout()
        branch = local_repo.create_head(name)
        branch.checkout()
        test_file = local_path / f"{name}.txt"
        test_file.parent.mkdir(parents=True, exist_ok=True)
        test_file.write_text(content)
        local_repo.index.add([f"{name}.txt"])
        local_repo.index.commit(f"Add {name}", author=AUTHOR)

    def create_tracked_branch(name: str, content: str, merge: bool = False) -> None:
        commit_on_new_branch(name, content)
        origin.push(name)
        local_repo.heads[name].set_tracking_branch(origin.refs[name])
        if merge:
            main_branch.checkout()
            local_repo.git.merge(name, "--no-ff")
            origin.push("main")

    create_tracked_branch("feature/active", "Active branch content")
    create_tracked_branch("feature/gone", "Gone branch content", merge=True)
    origin.push(":feature/gone")  # Delete in remote

    main_branch.checkout()
    local_repo.create_head("bugfix/local", "main")

    commit_on_new_branch("experiment", "Unmerged work")

    main_branch.checkout()

    yield local_path, remote_path


@pytest.fixture
def clean_env(tmp_path: Path) -> Path:
    """Create a repository whose only branch is main, tracking its remote."""
    _, _, local_path, _ = init_local_repo(tmp_path)
    return local_path


@pytest.fixture
def console() -> Console:
    """Console writing to memory; read it with ``console.file.getvalue()``."""
    return Console(file=StringIO(), width=120)


class FakePrompter(Prompter):
    """Prompter answering from a script and recording the questions asked."""

    def __init__(self, console: Console, answers: Iterable[str] = ()) -> None:
        super().__init__(console)
        self.answers = list(answers)
        self.questions: list[str] = []

    def _ask(self, question: str) -> str:
        self.questions.append(question)
        if not self.answers:
            raise PromptError("No answer received from the prompt")
        return self.answers.pop(0).strip()


@pytest.fixture
def make_prompter(console: Console):
    """Build a FakePrompter with scripted answers."""

    def make(*answers: str) -> FakePrompter:
        return FakePrompter(console, answers)

    return make


class FakeGitRepo:
    """In-memory stand-in for GitRepo.

    Args:
        listing: Text returned for ``git branch -vv``
        current: Checked-out branch
        branches: Existing local branch names
        unmerged: Branches ``-d`` refuses to delete
        listing_error: Make the listing fail
        current_error: Make reading the current branch fail
        checkout_error: Make checkout fail
    """

    def __init__(
        self,
        listing: str = "",
        current: str = "main",
        branches: Iterable[str] = ("main",),
        unmerged: Iterable[str] = (),
        listing_error: bool = False,
        current_error: bool = False,
        checkout_error: bool = False,
    ) -> None:
        self.listing = listing
        self.current = current
        self.branches = set(branches)
        self.unmerged = set(unmerged)
        self.listing_error = listing_error
        self.current_error = current_error
        self.checkout_error = checkout_error
        self.deletions: list[tuple[str, bool]] = []
        self.checkouts: list[str] = []
        self.existence_queries: list[str] = []

    def get_current_branch_name(self) -> str:
        if self.current_error:
            raise GitEnvironmentError("Failed to get current branch: fatal: not a git repository")
        return self.current

    def list_branches_verbose(self) -> str:
        if self.listing_error:
            raise BranchListingError("Error running 'git branch -vv': fatal: bad object HEAD")
        return self.listing

    def branch_exists(self, name: str) -> bool:
        self.existence_queries.append(name)
        return name in self.branches

    def delete_branch(self, name: str, force: bool = False) -> None:
        self.deletions.append((name, force))
        if name not in self.branches:
            raise BranchDeletionError(name, f"error: branch '{name}' not found.")
        if name in self.unmerged and not force:
            raise BranchDeletionError(name, f"error: The branch '{name}' is not fully merged.")
        self.branches.discard(name)

    def checkout(self, name: str) -> None:
        if self.checkout_error or name not in self.branches:
            raise CheckoutError(name, "error: Your local changes would be overwritten by checkout.")
        self.checkouts.append(name)
        self.current = name


@pytest.fixture
def fake_repo_factory():
    """Build FakeGitRepo instances."""

    def make(**kwargs) -> FakeGitRepo:
        return FakeGitRepo(**kwargs)

    return make
