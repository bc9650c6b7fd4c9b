from __future__ import annotations

import logging

from loggraph.graph.model import Branch, VisLine

logger = logging.getLogger(__name__)


class LineDensifier:
    """
    Collapses the segments of 1-n log rows into a single row per commit.

    Git draws connector rows between commits; we only show commit rows. So,
    segments are accumulated per branch until a commit row is reached, at
    which point each branch ends up with a single segment spanning all the
    rows that were collected ("densening").

    When a commit is closed, its segments are curved so that they join the
    previous (more recent) commit's segments for the same branch smoothly:

        previous commit     ...│
                               ╰╮   <-- junction, between last.xce and this.xcs
        this commit             │...
    """

    def __init__(self):
        self.pending: dict[str, VisLine] = {}
        "Segments collected since the last commit, keyed by branch id"

        self.previous: dict[str, VisLine] = {}
        "Segments of the last commit that was closed, keyed by branch id"

    def add(self, segment: VisLine):
        """
        Merge a segment (in grid-absolute coordinates) into the accumulator.
        If the branch already has a segment in progress, the new one only
        moves its end point (last cell wins).
        """
        assert segment.branch is not None
        key = segment.branch.id
        try:
            existing = self.pending[key]
        except KeyError:
            self.pending[key] = segment
        else:
            existing.xn = segment.xn
            existing.xce = segment.xce

    def rekey(self, wrong: Branch, right: Branch):
        """Repoint the accumulator and the previous commit's snapshot from one branch to another."""
        for table in (self.pending, self.previous):
            segment = table.pop(wrong.id, None)
            if segment is None:
                continue
            segment.branch = right
            existing = table.get(right.id)
            if existing is None:
                table[right.id] = segment
            else:
                # Both segments were collected for the same commit; extend the older one
                logger.debug(f"Joining segments of {wrong.id} and {right.id}")
                segment.xn = existing.xn
                segment.xce = existing.xce
                table[right.id] = segment

    def closeCommit(self, curveRadius: float) -> list[VisLine]:
        """
        Finalize the collected segments for the commit that's being closed.
        Return them in painting order (leftmost branches last, so they are on top).
        """
        r = curveRadius

        for key, line in self.pending.items():
            if line.y0 is None:
                line.y0 = 0
            if line.yn is None:
                line.yn = 1
            if line.xce is None:
                # We don't know yet whether more rows will follow for this branch. If this is its
                # last one (i.e. its birth spot), add a slight downwards angle by pulling the end
                # control point up, which draws a splitting effect from the parent branch.
                line.xce = line.xn
            if line.yce is None:
                line.yce = 1 - r / 2

            last = self.previous.get(key)
            if last is not None:
                # Fix the control points near the junction, then move the junction
                # itself to the average of both control points.
                lastXce = last.x0 + (last.xn - last.x0) * (1 - r)
                xcs = line.x0 + (line.xn - line.x0) * r
                middle = (xcs + lastXce) / 2
                last.xn = middle
                last.xce = lastXce
                last.yce = 1 - r
                last.yn = 1
                line.x0 = middle
                line.xcs = xcs
                line.ycs = r
            else:
                if line.xcs is None:
                    # First time this branch appears
                    if line.xn > line.x0:
                        line.xcs = line.x0 + 1
                    else:
                        line.xcs = line.x0
                line.ycs = r

        lines = sorted(self.pending.values(), key=VisLine.zOrderKey, reverse=True)

        self.previous = self.pending
        self.pending = {}
        return lines
