from __future__ import annotations

import logging

from loggraph.graph.branchregistry import BranchRegistry
from loggraph.graph.model import Branch, GitRef, RefType

logger = logging.getLogger(__name__)

REFS_CSV_DELIMITER = ", "
TAG_PREFIX = "tag: "
SYMBOLIC_ARROW = " -> "
STASH_REF = "refs/stash"

_REF_TYPE_RANK = {
    RefType.BRANCH: 0,
    RefType.TAG: 1,
    RefType.STASH: 2,
}


def refSortKey(ref: GitRef | Branch):
    """
    Branches before tags before stashes; local branches before remote
    branches; then shallower ref paths first.
    """
    if isinstance(ref, Branch):
        return 0, ref.isRemote, ref.id.count("/")
    return _REF_TYPE_RANK[ref.type], ref.isRemote, ref.id.count("/")


def splitRefsCsv(refsCsv: str) -> list[str]:
    """
    Turn the output of `%D` into a list of ref ids, e.g.:
    "HEAD -> master, origin/master, tag: v1.0" --> ["master", "origin/master", "tag: v1.0"]
    Repeated refs are only kept once.
    """
    tokens = []
    seen = set()
    for token in refsCsv.split(REFS_CSV_DELIMITER):
        # Keep the target of symbolic refs
        _, _, token = token.rpartition(SYMBOLIC_ARROW)
        if not token or token == STASH_REF or token in seen:
            continue
        seen.add(token)
        tokens.append(token)
    return tokens


def resolveRefs(refsCsv: str, registry: BranchRegistry, commitHash: str = "") -> list[GitRef]:
    refs = []

    for token in splitRefsCsv(refsCsv):
        if token.startswith(TAG_PREFIX):
            refs.append(GitRef(id=token, name=token.removeprefix(TAG_PREFIX), type=RefType.TAG))
            continue

        branch = registry.get(token)
        if branch is None:
            # Can happen with grafted history
            logger.warning(f"Could not find ref '{token}' in list of branches for commit '{commitHash}'")
            continue
        refs.append(GitRef.fromBranch(branch))

    refs.sort(key=refSortKey)
    return refs


def branchTip(refs: list[GitRef]) -> Branch | None:
    """Return the branch that authoritatively owns a commit, if any ref names one."""
    return next((r.branch for r in refs if r.type == RefType.BRANCH), None)
