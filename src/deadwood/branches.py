"""Stale branch detection from ``git branch -vv`` output.

Each line of the listing is matched against this grammar::

    line      := [marker] ws* name ws+ sha ws+ [worktree ws+] [tracking]
    marker    := "*" (current branch) | "+" (checked out in another worktree)
    name      := non-whitespace run not starting with "("
    sha       := hex digits
    worktree  := "(" path ")"
    tracking  := "[" upstream [": " state] "]"

Lines that do not match are skipped: blank lines, ``(HEAD detached at ...)``
and ``(no branch, rebasing ...)`` entries.

A branch without an upstream whose commit subject starts with ``[`` (for
example ``[WIP] local work``) reads as having a tracking block, so it is
classified as active and never offered for deletion. The text format gives
no way to tell the two apart.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from deadwood.git import GitRepo

logger = logging.getLogger(__name__)

GONE_MARKER = "gone"

BRANCH_LINE = re.compile(
    r"""
    ^[*+]?\s*
    (?P<name>[^\s(]\S*)\s+
    [0-9a-f]+(?:\s+|$)
    (?:\([^)]*\)\s+)?
    (?:\[(?P<tracking>[^\]]+)\])?
    """,
    re.VERBOSE,
)


class TrackingStatus(Enum):
    """Relationship between a local branch and its upstream."""

    NONE = "none"
    ACTIVE = "active"
    GONE = "gone"


@dataclass(frozen=True)
class Branch:
    """A local branch and its tracking status."""

    name: str
    tracking: TrackingStatus

    @property
    def is_stale(self) -> bool:
        return self.tracking in (TrackingStatus.NONE, TrackingStatus.GONE)


def tracking_status(annotation: Optional[str]) -> TrackingStatus:
    """Classify the text between the brackets of a listing line.

    Only the state after ``": "`` is searched for the gone marker, so an
    upstream whose name contains "gone" (``origin/gone-x``) stays active.
    This is deliberately narrower than a substring match over the whole
    block.
    """
    if annotation is None:
        return TrackingStatus.NONE
    _, _, state = annotation.partition(": ")
    if GONE_MARKER in state:
        return TrackingStatus.GONE
    return TrackingStatus.ACTIVE


def parse_branch_line(line: str) -> Optional[Branch]:
    """Parse one listing line, or return None if it is not a branch line."""
    match = BRANCH_LINE.match(line)
    if match is None:
        return None
    return Branch(match.group("name"), tracking_status(match.group("tracking")))


def parse_branch_listing(output: str) -> list[Branch]:
    """Parse the full ``git branch -vv`` output, in listing order."""
    branches = []
    for line in output.splitlines():
        branch = parse_branch_line(line)
        if branch is None:
            if line.strip():
                logger.debug("Skipping unrecognized branch line: %r", line)
            continue
        branches.append(branch)
    return branches


def list_stale_branches(repo: GitRepo) -> list[Branch]:
    """Get local branches with no upstream or a gone upstream.

    Raises:
        BranchListingError: If ``git branch -vv`` fails
    """
    branches = parse_branch_listing(repo.list_branches_verbose())
    stale = [branch for branch in branches if branch.is_stale]
    logger.info("Found %d stale branch(es) out of %d", len(stale), len(branches))
    return stale
