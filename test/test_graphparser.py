import json
import logging

import pytest

from loggraph.graph import GraphDiagram, LogFormatError, UnknownGlyphError, parseLog
from .util import *


def testScenarioSingleCommit():
    logData = "* \x01aaaaaaa1234567\x01aaaaaaa\x01Alice\x01a@x.com\x012021-03-02 15:59:43 +0100\x01HEAD -> master\x01Initial commit"
    graph = parseLog(logData, "\x01refs/heads/master", "", "\x01", 0.25)

    assert len(graph.commits) == 1
    commit = graph.commits[0]
    assert commit.hash == "aaaaaaa"
    assert commit.longHash == "aaaaaaa1234567"
    assert commit.authorName == "Alice"
    assert commit.authorEmail == "a@x.com"
    assert commit.datetime == "2021-03-02 15:59:43"
    assert commit.subject == "Initial commit"
    assert commit.branch.name == "master"
    assert not commit.merge

    assert len(commit.visLines) == 1
    line = commit.visLines[0]
    assert (line.x0, line.xn, line.y0) == (0.5, 0.5, 0.5)
    assert line.branch is commit.branch

    assert [b.id for b in graph.branches] == ["master", "HEAD"]
    assert graph.findBranch("master").color == "#ff3333"
    assert graph.findBranch("HEAD").color

    assert [r.id for r in commit.refs] == ["master"]
    assert commit.refs[0].color == "#ff3333"


def makeMergeLog(featureRefs=""):
    r"""
    *   Merge branch 'feature'   (HEAD -> master)
    |\
    | * Feature 2                (feature?)
    | * Feature 1
    * | Master 2
    |/
    * Initial
    """
    return [
        commitRow("*   ", "m000000", "Merge branch 'feature'", refs="HEAD -> master"),
        "|\\  ",
        commitRow("| * ", "f200000", "Feature 2", refs=featureRefs),
        commitRow("| * ", "f100000", "Feature 1"),
        commitRow("* | ", "a200000", "Master 2"),
        "|/  ",
        commitRow("* ", "a100000", "Initial"),
    ]


def testScenarioMergeWithInferredBranch():
    graph = parseRows(makeMergeLog(), branchData("refs/heads/master"))
    m, f2, f1, a2, a1 = graph.commits

    assert m.merge
    assert not any(c.merge for c in (f2, f1, a2, a1))

    feature = f2.branch
    assert feature.inferred
    assert feature.name == "feature"
    assert f1.branch is feature
    assert a2.branch.name == "master"
    assert a1.branch.name == "master"

    # Inferred branches keep their lines and colors but aren't listed
    assert [b.id for b in graph.branches] == ["master", "HEAD"]
    assert feature.color
    assert lineOf(f2, feature.id).branch is feature
    assert lineOf(a1, feature.id).xn == 0.5


def testMergedBranchRevealedByTip():
    graph = parseRows(makeMergeLog(featureRefs="feature"), branchData("refs/heads/master", "refs/heads/feature"))
    m, f2, f1, a2, a1 = graph.commits
    feature = graph.findBranch("feature")

    assert m.merge
    assert f2.branch is feature
    assert f1.branch is feature

    # The "\" drawn before the tip was known now belongs to the actual branch,
    # and it's been joined with the tip's segment
    line = lineOf(f2, "feature")
    assert line.x0 == 0.5
    assert line.y0 == 0

    for commit in graph.commits:
        assert not any(v.branch.inferred for v in commit.visLines)

    assert [b.id for b in graph.branches] == ["master", "feature", "HEAD"]


@pytest.mark.parametrize("featureRefs", ["", "feature"])
def testSegmentContinuity(featureRefs):
    graph = parseRows(makeMergeLog(featureRefs), branchData("refs/heads/master", "refs/heads/feature"))

    for newer, older in zip(graph.commits, graph.commits[1:]):
        for newerLine in newer.visLines:
            olderLines = [v for v in older.visLines if v.branch is newerLine.branch]
            if not olderLines:
                continue
            olderLine, = olderLines
            assert newerLine.yn == 1
            assert newerLine.xn == pytest.approx(olderLine.x0)
            assert olderLine.y0 == 0


def testOneLinePerBranchPerCommit():
    graph = parseRows(makeMergeLog("feature"), branchData("refs/heads/master", "refs/heads/feature"))
    for commit in graph.commits:
        ids = [v.branch.id for v in commit.visLines]
        assert len(ids) == len(set(ids))


def testZOrder():
    graph = parseRows(makeMergeLog(), branchData("refs/heads/master"))
    for commit in graph.commits:
        keys = [(v.xcs or 0) + (v.xce or 0) for v in commit.visLines]
        assert keys == sorted(keys, reverse=True)
    f2 = graph.commits[1]
    assert f2.visLines[-1].branch.name == "master"


def testDeterminism():
    rows = makeMergeLog()
    branches = branchData("refs/heads/master", "refs/remotes/origin/master")
    dumps = [GraphDiagram.toJson(parseRows(rows, branches, "f100000 stash@{0}")) for _ in range(3)]
    assert dumps[0] == dumps[1] == dumps[2]


def testScenarioUnknownGlyph():
    rows = [
        commitRow("* ", "a200000", "Second"),
        commitRow("*# ", "a100000", "First"),
    ]
    with pytest.raises(UnknownGlyphError) as excInfo:
        parseRows(rows)
    assert excInfo.value.rowIndex == 1
    assert excInfo.value.glyph == "#"
    assert isinstance(excInfo.value, LogFormatError)


def testFilteredHistoryMarkerIgnored():
    rows = [
        commitRow("* ", "a200000", "Second", refs="master"),
        "... ",
        commitRow("* ", "a100000", "First"),
    ]
    graph = parseRows(rows, branchData("refs/heads/master"))
    assert [c.rowIndex for c in graph.commits] == [0, 2]


def testStashes():
    r"""
    * Stash          <-- no refs, nothing above: inferred branch
    |\
    * | Work
    |/
    * Base
    """
    rows = [
        commitRow("*   ", "s000000", "WIP on master: Work"),
        "|\\  ",
        commitRow("| * ", "i000000", "index on master: Work"),
        "|/  ",
        commitRow("* ", "w000000", "Work", refs="HEAD -> master"),
    ]
    graph = parseRows(rows, branchData("refs/heads/master"), "s000000 stash@{0}\nzzzzzzz stash@{1}\n")
    stash = graph.findCommit("s000000")
    assert stash.branch.inferred
    assert stash.branch.id.startswith("inferred~")
    assert stash.refs[-1].type == "stash"
    assert stash.refs[-1].name == "stash@{0}"
    assert stash.refs[-1].color == "#ffffff"
    assert sum(len(c.refs) for c in graph.commits) == 2  # master + stash@{0}


def testUnknownRefIsWarned(caplog):
    rows = [commitRow("* ", "a100000", "First", refs="grafted")]
    with caplog.at_level(logging.WARNING):
        graph = parseRows(rows)
    assert graph.commits[0].refs == []
    assert "grafted" in caplog.text


def testBranchListCapped(monkeypatch):
    from loggraph.graph import graphparser
    monkeypatch.setattr(graphparser, "MAX_LISTED_BRANCHES", 2)
    branches = branchData("refs/heads/a", "refs/heads/b", "refs/heads/c")
    graph = parseRows([commitRow("* ", "a100000", "First", refs="a")], branches)
    assert [b.id for b in graph.branches] == ["a", "b"]


def testBranchListSorted():
    branches = branchData("refs/remotes/origin/main", "refs/heads/feature/x", "refs/heads/main")
    graph = parseRows([commitRow("* ", "a100000", "First", refs="main")], branches)
    assert [b.id for b in graph.branches] == ["main", "HEAD", "feature/x", "origin/main"]


def testCurveRadiusValidated():
    with pytest.raises(ValueError):
        parseRows([], curveRadius=1.5)


def testEmptyLog():
    graph = parseRows([])
    assert graph.commits == []
    assert [b.id for b in graph.branches] == ["HEAD"]


def testDiagram():
    graph = parseRows(makeMergeLog(), branchData("refs/heads/master"))
    text = GraphDiagram.diagram(graph)
    lines = text.splitlines()
    assert len(lines) == 5
    assert lines[0].startswith("m000000")
    assert "◆" in lines[0]
    assert "(master) Merge branch 'feature'" in lines[0]
    assert "●" in lines[1]


def testJsonFlagsInferredBranches():
    graph = parseRows(makeMergeLog(), branchData("refs/heads/master"))
    blob = json.loads(GraphDiagram.toJson(graph))

    assert [(b["id"], b["inferred"]) for b in blob["branches"]] == [("master", False), ("HEAD", False)]

    inferred, = blob["inferredBranches"]
    assert inferred["id"] == graph.commits[1].branch.id
    assert inferred["name"] == "feature"
    assert inferred["inferred"]
    assert inferred["color"]

    # Every branch that a line refers to can be looked up
    knownIds = {b["id"] for b in blob["branches"] + blob["inferredBranches"]}
    for commit in blob["commits"]:
        assert {line["branch"] for line in commit["visLines"]} <= knownIds


def testJsonWithoutInferredBranches():
    graph = parseRows(makeMergeLog(featureRefs="feature"), branchData("refs/heads/master", "refs/heads/feature"))
    blob = json.loads(GraphDiagram.toJson(graph))
    assert blob["inferredBranches"] == []
