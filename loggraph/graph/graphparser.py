# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of LogGraph, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging

from loggraph import settings
from loggraph.colors import branchColor
from loggraph.graph.branchregistry import BranchRegistry
from loggraph.graph.densifier import LineDensifier
from loggraph.graph.gridweaver import GridWeaver
from loggraph.graph.logrow import LogRow, splitRows
from loggraph.graph.model import Branch, Commit, LogGraph, RefType
from loggraph.graph.refs import branchTip, refSortKey, resolveRefs
from loggraph.graph.stashes import attachStashes
from loggraph.toolbox import Benchmark

logger = logging.getLogger(__name__)

DEFAULT_CURVE_RADIUS = 0.25

MAX_LISTED_BRANCHES = 10000


class GraphParser:
    """
    Turns the output of `git log --graph` into commits, branches, and curved
    branch lines ready to be rendered.

    A GraphParser holds the state of a single parse. Feed it the rows from
    top to bottom with `feedRow`, then call `finish`.
    """

    def __init__(self, branchData: str, separator: str, curveRadius: float = DEFAULT_CURVE_RADIUS):
        if not 0 <= curveRadius <= 1:
            raise ValueError(f"curve radius must be between 0 and 1 (got {curveRadius})")

        self.separator = separator
        self.curveRadius = curveRadius
        self.registry = BranchRegistry.fromBranchData(branchData, separator)
        self.densifier = LineDensifier()
        self.commits: list[Commit] = []
        self.weaver = GridWeaver(self.registry, self.densifier, self.commits)

    def feedRow(self, rowIndex: int, row: str):
        logRow = LogRow.parse(row, self.separator, rowIndex)

        refs = resolveRefs(logRow.refsCsv, self.registry, logRow.hash)
        tip = branchTip(refs)

        commitBranch = self.weaver.weaveRow(rowIndex, logRow.glyphs, tip, row)

        if not logRow.isCommit:
            return

        # After 1-n rows, we have now arrived at what will become one row in the graph.
        visLines = self.densifier.closeCommit(self.curveRadius)

        for line in visLines:
            self.registry.noteInferredRow(line.branch, rowIndex)

        if settings.DEVDEBUG:
            ids = [line.branch.id for line in visLines]
            assert len(ids) == len(set(ids)), f"more than one segment per branch in row {rowIndex}"

        commit = Commit(
            rowIndex=rowIndex,
            hash=logRow.hash,
            longHash=logRow.longHash,
            authorName=logRow.authorName,
            authorEmail=logRow.authorEmail,
            datetime=logRow.datetime,
            subject=logRow.subject,
            refs=refs,
            branch=commitBranch,
            visLines=visLines)
        self.commits.append(commit)

    def finish(self) -> LogGraph:
        """
        Settle branch identities, assign colors, and list the branches.
        This can only happen once all rows are in, because inferred branches may
        have been replaced by actual branches along the way.
        """
        registry = self.registry

        for commit in self.commits:
            commit.branch = registry.resolve(commit.branch)
            for line in commit.visLines:
                line.branch = registry.resolve(line.branch)

        for branch in registry:
            branch.color = branchColor(branch.name)

        for commit in self.commits:
            for ref in commit.refs:
                if ref.type == RefType.BRANCH:
                    ref.color = ref.branch.color

        # Inferred branches remain linked to their lines (with colors), but we don't list them
        branches: list[Branch] = [b for b in registry if not b.inferred]
        branches.sort(key=refSortKey)
        del branches[MAX_LISTED_BRANCHES:]

        return LogGraph(self.commits, branches)


def parseLog(
        logData: str,
        branchData: str,
        stashData: str,
        separator: str,
        curveRadius: float = DEFAULT_CURVE_RADIUS,
) -> LogGraph:
    """
    Reconstruct the commit graph from the output of `git log --graph`.

    - logData: rows as produced with `logrow.logFormatArgument(separator)`
    - branchData: `<tracking remote or empty><separator><ref path>` per line
    - stashData: `<short hash> <label>` per line
    - curveRadius: how strongly adjacent lines bend into each other (0 to 1)

    Raises LogFormatError if the text doesn't follow the expected format.
    """
    with Benchmark("parseLog") as bench:
        parser = GraphParser(branchData, separator, curveRadius)

        bench.enter("rows")
        for rowIndex, row in splitRows(logData):
            parser.feedRow(rowIndex, row)

        bench.enter("finish")
        graph = parser.finish()
        attachStashes(graph.commits, stashData)

    logger.debug(f"Parsed {len(graph.commits)} commits, {len(graph.branches)} branches")
    return graph
