from __future__ import annotations

import logging
import re

from loggraph.graph.model import Branch, HEAD_BRANCH_NAME

logger = logging.getLogger(__name__)

LOCAL_PREFIX = "refs/heads/"
REMOTE_PREFIX = "refs/remotes/"

MERGE_SUBJECT_PATTERN = re.compile(
    r"^Merge (?:(?:remote[ -]tracking )?branch '([^ ']+)'.*|pull request #[0-9]+ from (.+))$")


class BranchRegistry:
    """
    Keeps track of all live branches while the log is being parsed.

    Inferred branches may turn out to be another branch once its tip shows up
    further down the log. Rather than rewriting the commits that were already
    built, the registry remembers an alias from the inferred branch to the
    actual branch (union-find style). Call `resolve` to get the definitive
    identity of any branch handed out by the registry.
    """

    def __init__(self):
        self.branches: dict[str, Branch] = {}
        self.aliases: dict[Branch, Branch] = {}
        self.inferredRows: dict[Branch, list[int]] = {}
        self.numRegistered = 0

    def __len__(self):
        return len(self.branches)

    def __iter__(self):
        return iter(self.branches.values())

    def __contains__(self, branch: Branch):
        return self.branches.get(branch.id) is branch

    def get(self, id: str) -> Branch | None:
        return self.branches.get(id)

    def add(self, branch: Branch) -> Branch:
        existing = self.branches.get(branch.id)
        if existing is not None:
            logger.warning(f"Branch listed twice: {branch.id}")
            return existing
        self.branches[branch.id] = branch
        self.numRegistered += 1
        return branch

    def newBranch(self, name: str, remoteName: str | None = None, trackingRemoteName: str | None = None) -> Branch:
        return self.add(Branch(name, remoteName=remoteName or None, trackingRemoteName=trackingRemoteName or None))

    def newInferredBranch(self, name: str = "", remoteName: str | None = None, stem: str = "") -> Branch:
        """
        Register a branch whose identity is guessed.
        Its id is suffixed with a counter that never repeats within this registry.
        If name is empty, the branch is anonymous: its name is the same as its id (stem + suffix).
        """
        suffix = f"~{self.numRegistered - 1}"
        if not name:
            branch = Branch(name=stem + suffix, inferred=True)
        else:
            branch = Branch(name, remoteName=remoteName or None, inferred=True)
            branch.id += suffix
        assert branch.id not in self.branches, f"inferred branch id already taken: {branch.id}"
        return self.add(branch)

    def newMergedBranch(self, subject: str) -> Branch:
        """
        Infer the identity of a branch that got merged, from a merge commit's subject, e.g.:
        "Merge branch 'feature'", "Merge remote-tracking branch 'origin/feature'",
        "Merge pull request #1 from someone/feature".
        """
        match = MERGE_SUBJECT_PATTERN.match(subject)
        if not match:
            return self.newInferredBranch()

        path = match.group(1) or match.group(2)
        *remoteParts, name = path.split("/")
        return self.newInferredBranch(name, "/".join(remoteParts))

    def noteInferredRow(self, branch: Branch, rowIndex: int):
        """Record that an inferred branch drew a segment in the given commit row."""
        if not branch.inferred:
            return
        rows = self.inferredRows.setdefault(branch, [])
        if not rows or rows[-1] != rowIndex:
            rows.append(rowIndex)

    def merge(self, wrong: Branch, right: Branch, commitRows: list[int]):
        """
        Fold an inferred branch into the branch that it actually is.
        `commitRows` lists the row indices of the commits built so far, in order.
        """
        assert wrong.inferred, "only inferred branches may be merged away"
        assert wrong is not right

        rows = self.inferredRows.pop(wrong, [])
        if rows and commitRows:
            window = commitRows[-len(rows):]
            if rows != window:
                logger.warning(
                    f"Inferred branch {wrong.id} is revealed to be {right.id}, but its segments "
                    f"aren't contiguous up to the latest commit (rows {rows}); repointing all of them")

        del self.branches[wrong.id]
        self.aliases[wrong] = right
        logger.debug(f"Inferred branch {wrong.id} is actually {right.id}")

    def resolve(self, branch: Branch | None) -> Branch | None:
        if branch is None:
            return None

        root = branch
        while root in self.aliases:
            root = self.aliases[root]

        # Path compression
        while branch in self.aliases and self.aliases[branch] is not root:
            self.aliases[branch], branch = root, self.aliases[branch]

        return root

    def checkUniqueIds(self):
        ids = [b.id for b in self.branches.values()]
        assert len(ids) == len(set(ids)), "duplicate branch ids"
        assert all(k == b.id for k, b in self.branches.items()), "branch registry keys out of sync"

    @staticmethod
    def fromBranchData(branchData: str, separator: str) -> BranchRegistry:
        """
        Build the registry from lines such as:
            origin/master{SEP}refs/heads/master
            {SEP}refs/remotes/origin/master
        The first field is the remote branch tracked by a local branch, if any.
        A pseudo-branch for HEAD is registered last.
        """
        registry = BranchRegistry()

        for line in branchData.split("\n"):
            if not line.strip():
                continue

            trackingRemoteName, _, refName = line.rpartition(separator)

            if refName.startswith(LOCAL_PREFIX):
                registry.newBranch(refName.removeprefix(LOCAL_PREFIX), trackingRemoteName=trackingRemoteName)
            elif refName.startswith(REMOTE_PREFIX):
                remoteName, _, remoteBranchName = refName.removeprefix(REMOTE_PREFIX).partition("/")
                registry.newBranch(remoteBranchName, remoteName)
            else:
                logger.warning(f"Skipping unsupported ref in branch list: {refName}")

        # Not actually a branch, but it appears in the log refs, it's neither a stash nor a tag,
        # and checking it out works, so treat it as one.
        registry.newBranch(HEAD_BRANCH_NAME)

        return registry
