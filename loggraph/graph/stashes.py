from __future__ import annotations

import logging

from loggraph.colors import STASH_COLOR
from loggraph.graph.model import Commit, GitRef, RefType

logger = logging.getLogger(__name__)


def attachStashes(commits: list[Commit], stashData: str) -> int:
    """
    Stashes are queried separately (`git reflog show stash`) but they show up
    as plain commits in the log. Add a stash ref to each of these commits.

    stashData contains lines such as "7c37db63 stash@{11}".
    Stashes that don't match any commit are skipped (they may lie outside the
    range of commits that were queried).

    Return the number of stash refs that were attached.
    """
    commitsByHash: dict[str, Commit] = {}
    for commit in commits:
        commitsByHash.setdefault(commit.hash, commit)

    count = 0
    for line in (stashData or "").split("\n"):
        hash, _, label = line.partition(" ")
        if not hash:
            continue

        commit = commitsByHash.get(hash)
        if commit is None:
            continue

        commit.refs.append(GitRef(id=label, name=label, type=RefType.STASH, color=STASH_COLOR))
        count += 1

    if count:
        logger.debug(f"Attached {count} stashes")
    return count
