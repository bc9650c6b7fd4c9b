# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of LogGraph, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from loggraph.graph.model import (
    Branch,
    Commit,
    GitRef,
    LogGraph,
    RefType,
    VisLine,
)
from loggraph.graph.logrow import (
    LogFormatError,
    LogRow,
    logFormatArgument,
    splitRows,
)
from loggraph.graph.branchregistry import BranchRegistry
from loggraph.graph.refs import resolveRefs, refSortKey
from loggraph.graph.gridweaver import (
    Cell,
    CellAction,
    CellDecision,
    GridWeaver,
    Neighborhood,
    UnknownGlyphError,
    decideCell,
)
from loggraph.graph.densifier import LineDensifier
from loggraph.graph.stashes import attachStashes
from loggraph.graph.graphparser import GraphParser, parseLog, DEFAULT_CURVE_RADIUS
from loggraph.graph.graphdiagram import GraphDiagram
