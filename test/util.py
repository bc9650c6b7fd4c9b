from loggraph.graph import LogGraph, parseLog

SEP = "\x01"
DATE = "2021-03-02 15:59:43 +0100"


def commitRow(glyphs: str, hash: str, subject: str, refs: str = "",
              author: str = "Alice", email: str = "a@x.com", date: str = DATE) -> str:
    return SEP.join([glyphs, hash + "1234567", hash, author, email, date, refs, subject])


def branchData(*refNames: str, tracking: dict[str, str] | None = None) -> str:
    tracking = tracking or {}
    return "\n".join(tracking.get(refName, "") + SEP + refName for refName in refNames)


def parseRows(rows: list[str], branches: str = "", stashes: str = "", curveRadius: float = 0.25) -> LogGraph:
    return parseLog("\n".join(rows), branches, stashes, SEP, curveRadius)


def linesOf(commit, branchId: str):
    return [v for v in commit.visLines if v.branch is not None and v.branch.id == branchId]


def lineOf(commit, branchId: str):
    lines = linesOf(commit, branchId)
    assert len(lines) == 1, f"expected exactly one line for {branchId} in {commit}, got {len(lines)}"
    return lines[0]
