from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass

HEAD_BRANCH_NAME = "HEAD"


class RefType(enum.StrEnum):
    BRANCH = "branch"
    TAG = "tag"
    STASH = "stash"


@dataclass(eq=False)
class Branch:
    """
    A named lineage.

    Branches are compared by identity, not by value: two inferred branches
    may look alike but they stand for different lanes in the graph.
    """

    name: str

    id: str = ""
    "`<remote>/<name>` for remote branches, else same as name (plus a counter suffix if inferred)"

    remoteName: str | None = None

    trackingRemoteName: str | None = None
    "For local branches: name of the remote branch that this branch tracks"

    color: str | None = None

    inferred: bool = False
    "True if this branch's identity was guessed from the shape of the graph or a merge subject"

    def __post_init__(self):
        if not self.id:
            self.id = f"{self.remoteName}/{self.name}" if self.remoteName else self.name

    @property
    def isRemote(self) -> bool:
        return bool(self.remoteName)

    def __repr__(self):
        flag = "?" if self.inferred else ""
        return f"Branch({self.id}{flag})"


@dataclass
class GitRef:
    id: str
    name: str
    type: RefType
    color: str | None = None
    branch: Branch | None = dataclasses.field(default=None, repr=False)

    @staticmethod
    def fromBranch(branch: Branch) -> GitRef:
        return GitRef(id=branch.id, name=branch.name, type=RefType.BRANCH, color=branch.color, branch=branch)

    @property
    def isRemote(self) -> bool:
        return self.branch is not None and self.branch.isRemote


@dataclass(eq=False)
class VisLine:
    """
    One connector segment for one branch across one commit row.

    X coordinates are in column space (one unit per glyph column).
    Y coordinates are relative to the commit row (0 = top, 1 = bottom).
    The control points (xcs/ycs at the start, xce/yce at the end) shape the
    cubic curve between (x0, y0) and (xn, yn).
    """

    x0: float
    xn: float
    y0: float | None = None
    yn: float | None = None
    xcs: float | None = None
    ycs: float | None = None
    xce: float | None = None
    yce: float | None = None
    branch: Branch | None = None

    def shift(self, dx: float):
        """Move the segment horizontally (from cell-relative to grid-absolute coordinates)."""
        self.x0 += dx
        self.xn += dx
        if self.xcs is not None:
            self.xcs += dx
        if self.xce is not None:
            self.xce += dx

    def zOrderKey(self) -> float:
        return (self.xcs or 0) + (self.xce or 0)


@dataclass(eq=False)
class Commit:
    rowIndex: int
    hash: str
    longHash: str = ""
    authorName: str = ""
    authorEmail: str = ""
    datetime: str = ""
    subject: str = ""
    refs: list[GitRef] = dataclasses.field(default_factory=list)
    branch: Branch | None = None
    merge: bool = False
    visLines: list[VisLine] = dataclasses.field(default_factory=list)

    def __repr__(self):
        return f"Commit({self.hash} r{self.rowIndex} {self.branch} {self.subject!r})"


@dataclass
class LogGraph:
    commits: list[Commit]
    branches: list[Branch]

    def findCommit(self, hash: str) -> Commit | None:
        return next((c for c in self.commits if c.hash == hash), None)

    def findBranch(self, id: str) -> Branch | None:
        return next((b for b in self.branches if b.id == id), None)
