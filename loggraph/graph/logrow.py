"""
Splits the output of `git log --graph --format=...` into rows and fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

FILTERED_HISTORY_ROW = "... "
"""
With `--follow -- pathname`, git may emit this row even though we're
specifying a strict --format. It carries no information.
"""

LOG_FORMAT_FIELDS = ["%H", "%h", "%an", "%ae", "%ad", "%D", "%s"]
"""
Placeholders for `git log --format`, in the order LogRow expects them after
the graph glyphs: long hash, short hash, author name, author email,
author date (use with --date=iso-local), ref names, subject.
"""

NUM_RECORD_FIELDS = 1 + len(LOG_FORMAT_FIELDS)


def logFormatArgument(separator: str) -> str:
    """
    Return the `--format` argument that makes `git log --graph` produce rows
    that LogRow can parse. The separator precedes the first field so that it
    divides the graph glyphs from the long hash.
    """
    return "--format=" + separator + separator.join(LOG_FORMAT_FIELDS)


class LogFormatError(ValueError):
    """The log text doesn't follow the expected format. This is fatal."""

    def __init__(self, message: str, rowIndex: int = -1, row: str = ""):
        super().__init__(message)
        self.rowIndex = rowIndex
        self.row = row


@dataclass(frozen=True)
class LogRow:
    glyphs: str
    longHash: str = ""
    hash: str = ""
    authorName: str = ""
    authorEmail: str = ""
    isoDatetime: str = ""
    refsCsv: str = ""
    subject: str = ""

    @property
    def isCommit(self) -> bool:
        """Rows that lack a subject are pure connector rows."""
        return bool(self.subject)

    @property
    def datetime(self) -> str:
        # --date=iso-local gives something like "2021-03-02 15:59:43 +0100"; keep second precision
        return self.isoDatetime[:19]

    @staticmethod
    def parse(row: str, separator: str, rowIndex: int = -1) -> LogRow:
        if not separator:
            raise ValueError("separator must not be empty")

        fields = row.split(separator)

        if len(fields) == 1:
            return LogRow(glyphs=row)

        if len(fields) != NUM_RECORD_FIELDS:
            raise LogFormatError(
                f"Could not parse git log output (row {rowIndex}): "
                f"expected {NUM_RECORD_FIELDS} fields, got {len(fields)}",
                rowIndex, row)

        return LogRow(*fields)


def splitRows(logData: str) -> Iterator[tuple[int, str]]:
    for rowIndex, row in enumerate(logData.split("\n")):
        if row == FILTERED_HISTORY_ROW:
            continue
        yield rowIndex, row
