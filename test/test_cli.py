import json

import pytest

from loggraph import settings
from loggraph.__main__ import main
from .util import *


@pytest.fixture(autouse=True)
def resetPrefs():
    yield
    settings.prefs.reset()


@pytest.fixture
def logFiles(tmp_path):
    rows = [
        commitRow("* ", "a200000", "Second", refs="HEAD -> master"),
        commitRow("* ", "a100000", "First"),
    ]
    logPath = tmp_path / "log.txt"
    logPath.write_text("\n".join(rows), encoding="utf-8")
    branchPath = tmp_path / "branches.txt"
    branchPath.write_text(branchData("refs/heads/master"), encoding="utf-8")
    stashPath = tmp_path / "stashes.txt"
    stashPath.write_text("a100000 stash@{0}\n", encoding="utf-8")
    return str(logPath), str(branchPath), str(stashPath)


def testPrintFormat(capsys):
    assert main(["--print-format", "--separator", "#"]) == 0
    out = capsys.readouterr().out
    assert out == "--format=#%H#%h#%an#%ae#%ad#%D#%s\n"


def testPrintFormatUsesPrefsSeparator(capsys, tmp_path):
    prefsPath = tmp_path / "prefs.json"
    prefsPath.write_text(json.dumps({"separator": "@"}))
    assert main(["--print-format", "--prefs", str(prefsPath)]) == 0
    assert capsys.readouterr().out == "--format=@%H@%h@%an@%ae@%ad@%D@%s\n"


def testDiagram(capsys, logFiles):
    logPath, branchPath, stashPath = logFiles
    assert main([logPath, "-b", branchPath, "-s", stashPath, "--separator", SEP]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("a200000")
    assert lines[0].endswith("(master) Second")
    assert lines[1].endswith("(stash@{0}) First")


def testMaxRows(capsys, logFiles):
    logPath, branchPath, _ = logFiles
    assert main([logPath, "-b", branchPath, "--separator", SEP, "-n", "1"]) == 0
    assert len(capsys.readouterr().out.splitlines()) == 1


def testJson(capsys, logFiles):
    logPath, branchPath, stashPath = logFiles
    assert main([logPath, "-b", branchPath, "-s", stashPath, "--separator", SEP, "--json", "--curve-radius", "5"]) == 0
    blob = json.loads(capsys.readouterr().out)

    assert [c["hash"] for c in blob["commits"]] == ["a200000", "a100000"]
    assert [b["id"] for b in blob["branches"]] == ["master", "HEAD"]

    second, first = blob["commits"]
    assert second["branch"] == "master"
    assert second["refs"] == [{"id": "master", "name": "master", "type": "branch", "color": "#ff3333"}]
    assert first["refs"][0]["type"] == "stash"

    # Curve radius clamped to 1
    assert first["visLines"][0]["ycs"] == 1


def testBadLogExitCode(capsys, tmp_path):
    logPath = tmp_path / "log.txt"
    logPath.write_text(SEP.join(["* ", "a", "b"]), encoding="utf-8")
    assert main([str(logPath), "--separator", SEP]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "expected 8 fields" in captured.err
    assert "LogFormatError" in captured.err
    assert "Traceback" not in captured.err


def testUnknownGlyphExitCode(capsys, tmp_path):
    logPath = tmp_path / "log.txt"
    logPath.write_text(commitRow("*# ", "a100000", "First"), encoding="utf-8")
    assert main([str(logPath), "--separator", SEP]) == 1
    err = capsys.readouterr().err
    assert err.startswith("loggraph.graph.gridweaver.UnknownGlyphError:")
    assert "'#'" in err


@pytest.mark.parametrize("option", ["", "--print-format"])
def testEmptySeparatorExitCode(capsys, logFiles, option):
    logPath, _, _ = logFiles
    argv = [logPath, "--separator", ""] + ([option] if option else [])
    assert main(argv) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "separator must not be empty" in captured.err


def testEmptySeparatorFromPrefs(capsys, logFiles, tmp_path):
    logPath, _, _ = logFiles
    prefsPath = tmp_path / "prefs.json"
    prefsPath.write_text(json.dumps({"separator": ""}))
    assert main([logPath, "--prefs", str(prefsPath)]) == 1
    assert "separator must not be empty" in capsys.readouterr().err
