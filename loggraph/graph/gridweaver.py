# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of LogGraph, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Associates the glyphs drawn by `git log --graph` with branches.

Git has no notion of which branch a line belongs to, so we work it out from
each glyph's neighbors, row by row, top to bottom (newest to oldest). The
flow is generally right-to-left horizontally: for example, a "/" directs
the branch line from the top right to the bottom left of its cell.

Rows are scanned right-to-left because some glyphs ("_", "\\") are resolved
by looking at cells that were already resolved to their right in the same row.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from loggraph import settings
from loggraph.graph.branchregistry import BranchRegistry
from loggraph.graph.densifier import LineDensifier
from loggraph.graph.logrow import LogFormatError
from loggraph.graph.model import Branch, Commit, VisLine

logger = logging.getLogger(__name__)

COMMIT = "*"
STRAIGHT = "|"
JOG = "_"
RISING = "/"
FALLING = "\\"
BLANK = " "
DOT = "."
DASH = "-"

GRAPH_GLYPHS = frozenset([COMMIT, FALLING, RISING, BLANK, JOG, STRAIGHT, DASH, DOT])
"The closed alphabet that git uses to draw the graph"

GLYPH_SHAPES: dict[str, dict[str, float]] = {
    COMMIT:   dict(x0=0.5, xn=0.5),
    STRAIGHT: dict(x0=0.5, xn=0.5, yn=0.5),
    JOG:      dict(x0=1, xn=0),
    RISING:   dict(x0=1, xn=-0.5, xce=0.5),
    FALLING:  dict(x0=-0.5, xn=1),
}
"Cell-relative segment drawn by each glyph that may belong to a branch"

BIRTH_Y0 = 0.5


class UnknownGlyphError(LogFormatError):
    def __init__(self, rowIndex: int, row: str, glyph: str):
        super().__init__(
            f"Could not parse git log output (row {rowIndex}): unexpected graph glyph {glyph!r}. "
            f"Were the log command or its format arguments changed?",
            rowIndex, row)
        self.glyph = glyph


@dataclass(frozen=True)
class Cell:
    glyph: str
    branch: Branch | None = None


EMPTY_CELL = Cell("")


class CellAction(enum.Enum):
    NONE = enum.auto()
    "Owner is final (possibly None)"

    NEW_INFERRED = enum.auto()
    "Commit of unknown origin (e.g. a stash): make up a new branch"

    MERGE_MARKER = enum.auto()
    "The last commit is a merge; infer the identity of the branch that got merged"

    REPAIR = enum.auto()
    "Owner is a branch tip that turns out to be the inferred branch found above-left"


@dataclass(frozen=True)
class CellDecision:
    owner: Branch | None = None
    action: CellAction = CellAction.NONE
    replaces: Branch | None = None
    "For REPAIR: the inferred branch that the owner replaces"


@dataclass(frozen=True)
class Neighborhood:
    """
    Cells surrounding the glyph at `column`.

        nw  n  ne  nee      <-- previous row
        w   ?  e   ee       <-- current row (w: raw glyph only, not resolved yet)
    """

    column: int
    previousRow: list[Cell]
    e: Cell = EMPTY_CELL
    ee: Cell = EMPTY_CELL
    wGlyph: str = ""

    def above(self, dx: int) -> Cell:
        x = self.column + dx
        if 0 <= x < len(self.previousRow):
            return self.previousRow[x]
        return EMPTY_CELL

    @property
    def n(self) -> Cell:
        return self.above(0)

    @property
    def nw(self) -> Cell:
        return self.above(-1)

    @property
    def ne(self) -> Cell:
        return self.above(1)

    @property
    def nee(self) -> Cell:
        return self.above(2)

    def ownerAcrossDashes(self) -> Branch | None:
        """
        Walk left across a run of "-" in the previous row, starting two columns to the left,
        and return the owner found at the far end of that run (typically an octopus merge).
        """
        dx = -2
        while self.above(dx).glyph == DASH:
            dx -= 1
        return self.above(dx).branch


def _inheritedOwner(hood: Neighborhood) -> Branch | None:
    """Owner of a lane that continues from above, directly or diagonally."""
    if hood.n.branch:
        return hood.n.branch
    elif hood.nw.glyph == FALLING and hood.nw.branch:
        return hood.nw.branch
    elif hood.ne.glyph == RISING and hood.ne.branch:
        return hood.ne.branch
    return None


def decideCell(glyph: str, hood: Neighborhood, tip: Branch | None = None) -> CellDecision:
    """
    Decide which branch owns a glyph, given its neighbors.
    `tip` is the branch that authoritatively owns the row's commit, if any ref names one.
    """

    if glyph == COMMIT:
        if tip is not None:
            wrong = hood.nw.branch
            if hood.nw.glyph == FALLING and wrong is not None and wrong.inferred and wrong is not tip:
                # This branch may have been on display above for merging without its actual name known
                return CellDecision(tip, CellAction.REPAIR, replaces=wrong)
            return CellDecision(tip)
        owner = _inheritedOwner(hood)
        if owner is None:
            return CellDecision(action=CellAction.NEW_INFERRED)
        return CellDecision(owner)

    elif glyph == STRAIGHT:
        return CellDecision(_inheritedOwner(hood))

    elif glyph == JOG:
        return CellDecision(hood.ee.branch)

    elif glyph == RISING:
        ne = hood.ne
        if ne.glyph == STRAIGHT:
            if hood.nee.glyph in (RISING, JOG):
                return CellDecision(hood.nee.branch)
            return CellDecision(ne.branch)
        elif ne.glyph in (COMMIT, RISING):
            return CellDecision(ne.branch)
        elif hood.n.glyph in (FALLING, STRAIGHT):
            return CellDecision(hood.n.branch)
        return CellDecision()

    elif glyph == FALLING:
        if hood.e.glyph == STRAIGHT:
            return CellDecision(hood.e.branch)
        elif hood.wGlyph == STRAIGHT:
            # Right below (i.e. chronologically before) a merge commit
            return CellDecision(action=CellAction.MERGE_MARKER)
        elif hood.nw.glyph in (STRAIGHT, FALLING):
            return CellDecision(hood.nw.branch)
        elif hood.nw.glyph in (DOT, DASH):
            return CellDecision(hood.ownerAcrossDashes())
        return CellDecision()

    elif glyph in (BLANK, DOT, DASH):
        return CellDecision()

    raise ValueError(f"unknown graph glyph {glyph!r}")


class GridWeaver:
    """
    Resolves the branch of every glyph in the graph, one row at a time, and
    feeds the resulting segments to a LineDensifier.
    """

    def __init__(self, registry: BranchRegistry, densifier: LineDensifier, commits: list[Commit]):
        self.registry = registry
        self.densifier = densifier
        self.commits = commits
        self.previousRow: list[Cell] = []

    def weaveRow(self, rowIndex: int, glyphs: str, tip: Branch | None = None, row: str = "") -> Branch | None:
        """
        Resolve a row of glyphs. Return the branch of the commit glyph ("*") if the row has one.
        """
        glyphs = glyphs.rstrip()

        for glyph in glyphs:
            if glyph not in GRAPH_GLYPHS:
                raise UnknownGlyphError(rowIndex, row or glyphs, glyph)

        cells: list[Cell] = [EMPTY_CELL] * len(glyphs)
        commitBranch = None

        for column in range(len(glyphs) - 1, -1, -1):
            glyph = glyphs[column]
            hood = Neighborhood(
                column=column,
                previousRow=self.previousRow,
                e=cells[column + 1] if column + 1 < len(cells) else EMPTY_CELL,
                ee=cells[column + 2] if column + 2 < len(cells) else EMPTY_CELL,
                wGlyph=glyphs[column - 1] if column > 0 else "")

            decision = decideCell(glyph, hood, tip)
            owner = self.applyDecision(decision)

            if glyph == COMMIT:
                commitBranch = owner

            cells[column] = Cell(glyph, owner)

            if owner is not None:
                segment = VisLine(branch=owner, **GLYPH_SHAPES[glyph])
                if glyph == COMMIT and hood.n.glyph in ("", BLANK):
                    # Branch starts here visually (ends here logically)
                    segment.y0 = BIRTH_Y0
                segment.shift(column)
                self.densifier.add(segment)

        self.previousRow = cells

        if settings.DEVDEBUG:
            self.registry.checkUniqueIds()

        return commitBranch

    def applyDecision(self, decision: CellDecision) -> Branch | None:
        registry = self.registry
        action = decision.action

        if action == CellAction.NONE:
            # Neighbors may still refer to a branch that has since been repaired
            return registry.resolve(decision.owner)

        elif action == CellAction.NEW_INFERRED:
            return registry.newInferredBranch(stem="inferred")

        elif action == CellAction.MERGE_MARKER:
            # The actual branch name isn't known for sure yet. Either a) its tip will show up
            # in a later row, or b) we can infer it from the merge commit's subject, or c) we
            # make up an anonymous branch. b) and c) are replaced if a) occurs (see REPAIR).
            lastCommit = self.commits[-1] if self.commits else None
            if lastCommit is None:
                return registry.newInferredBranch()
            lastCommit.merge = True
            merged = registry.newMergedBranch(lastCommit.subject)
            logger.debug(f"Merge marker below {lastCommit.hash}: inferred branch {merged.id}")
            return merged

        elif action == CellAction.REPAIR:
            wrong = registry.resolve(decision.replaces)
            right = decision.owner
            if wrong is not right and wrong in registry and wrong.inferred:
                logger.debug(f"Tip of {right.id} found below inferred branch {wrong.id}")
                registry.merge(wrong, right, [c.rowIndex for c in self.commits])
                self.densifier.rekey(wrong, right)
            return right

        raise NotImplementedError(f"unsupported cell action {action}")
