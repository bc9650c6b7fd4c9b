import json
import math
from itertools import zip_longest

from loggraph.graph.model import Branch, Commit, GitRef, LogGraph, VisLine

COMMIT_GLYPH = "●"
MERGE_GLYPH = "◆"


def column(x: float) -> int:
    return max(0, math.floor(x))


class GraphDiagram:
    """
    Text rendition of a parsed LogGraph, one line per commit.
    Handy to eyeball what the parser made of a log.
    """

    @staticmethod
    def diagram(graph: LogGraph, maxRows=-1, verbose=False) -> str:
        diagram = GraphDiagram()
        for commit in graph.commits:
            if maxRows == 0:
                break
            diagram.newCommit(commit, verbose)
            maxRows -= 1
        return diagram.bake()

    @staticmethod
    def toJson(graph: LogGraph, indent=None) -> str:
        def branchId(branch: Branch | None):
            return branch.id if branch is not None else None

        def encodeBranch(branch: Branch):
            return {
                "id": branch.id,
                "name": branch.name,
                "remoteName": branch.remoteName,
                "trackingRemoteName": branch.trackingRemoteName,
                "color": branch.color,
                "inferred": branch.inferred,
            }

        def encodeRef(ref: GitRef):
            return {"id": ref.id, "name": ref.name, "type": str(ref.type), "color": ref.color}

        def encodeLine(line: VisLine):
            return {
                "x0": line.x0, "xn": line.xn, "y0": line.y0, "yn": line.yn,
                "xcs": line.xcs, "ycs": line.ycs, "xce": line.xce, "yce": line.yce,
                "branch": branchId(line.branch),
                "color": line.branch.color if line.branch else None,
            }

        def encodeCommit(commit: Commit):
            return {
                "rowIndex": commit.rowIndex,
                "hash": commit.hash,
                "longHash": commit.longHash,
                "authorName": commit.authorName,
                "authorEmail": commit.authorEmail,
                "datetime": commit.datetime,
                "subject": commit.subject,
                "refs": [encodeRef(r) for r in commit.refs],
                "branch": branchId(commit.branch),
                "merge": commit.merge,
                "visLines": [encodeLine(v) for v in commit.visLines],
            }

        # Inferred branches aren't listed, but commits and lines may still refer to them
        inferred: dict[str, Branch] = {}
        for commit in graph.commits:
            for branch in [commit.branch] + [v.branch for v in commit.visLines]:
                if branch is not None and branch.inferred:
                    inferred.setdefault(branch.id, branch)

        blob = {
            "commits": [encodeCommit(c) for c in graph.commits],
            "branches": [encodeBranch(b) for b in graph.branches],
            "inferredBranches": [encodeBranch(b) for b in inferred.values()],
        }
        return json.dumps(blob, indent=indent, ensure_ascii=False)

    # -----------------------------------------------------------------

    def __init__(self):
        self.scanlines = []
        self.margins = []
        self.captions = []

    def reserve(self, x, y, fill=" "):
        assert len(fill) == 1
        for j in range(len(self.scanlines), y + 1):
            self.scanlines.append([])
            self.margins.append([])
            self.captions.append("")
        scanline = self.scanlines[y]
        for i in range(len(scanline), x + 1):
            scanline.append(fill)
        return scanline

    def plot(self, x, y, c):
        assert len(c) == 1
        scanline = self.reserve(x, y)
        if scanline[x] in (COMMIT_GLYPH, MERGE_GLYPH):
            return
        scanline[x] = c

    def addMarginText(self, y, text):
        self.reserve(0, y)
        self.margins[y].append(text)

    def bake(self):
        if self.margins:
            numMargins = max(len(rowMargins) for rowMargins in self.margins)
        else:
            numMargins = 0
        marginWidths = [0] * numMargins
        for margins in self.margins:
            for i, mText in enumerate(margins):
                marginWidths[i] = max(marginWidths[i], len(mText))

        graphWidth = max((len(s) for s in self.scanlines), default=0)

        text = ""
        for margins, scanline, caption in zip(self.margins, self.scanlines, self.captions):
            for mWidth, mText in zip_longest(marginWidths, margins, fillvalue=""):
                text += mText.ljust(mWidth) + " "
            text += ''.join(scanline).ljust(graphWidth)
            text += (" " + caption if caption else "")
            text = text.rstrip() + "\n"
        return text.removesuffix("\n")

    def newCommit(self, commit: Commit, verbose: bool):
        y = len(self.scanlines)
        self.reserve(0, y)

        for line in commit.visLines:
            top, bottom = column(line.x0), column(line.xn)
            if top == bottom:
                self.plot(top, y, "│")
            elif bottom < top:
                self.plot((top + bottom) // 2, y, "╱")
            else:
                self.plot((top + bottom) // 2, y, "╲")

        homeLine = next((v for v in commit.visLines if v.branch is commit.branch), None)
        if homeLine is not None:
            self.plot(column(homeLine.xn), y, MERGE_GLYPH if commit.merge else COMMIT_GLYPH)

        self.addMarginText(y, commit.hash)
        if verbose:
            self.addMarginText(y, str(commit.rowIndex))

        caption = commit.subject
        refNames = [r.name for r in commit.refs]
        if refNames:
            caption = f"({', '.join(refNames)}) {caption}"
        if verbose and commit.branch is not None:
            caption = f"[{commit.branch.id}] {caption}"
        self.captions[y] = caption
