# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of LogGraph, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import dataclasses
import enum
import logging
import sys

from loggraph.prefsfile import PrefsFile
from loggraph.toolbox.benchmark import BENCHMARK_LOGGING_LEVEL

TEST_MODE = "pytest" in sys.modules
"""
Unit testing mode (don't touch real user prefs, etc.).
"""

DEVDEBUG = TEST_MODE
"""
Enable expensive assertions and debugging features.
Can be forced with command-line switch "--debug".
"""

DEFAULT_SEPARATOR = "\x1f"
"ASCII unit separator: unlikely to appear in commit metadata"


class LoggingLevel(enum.IntEnum):
    BENCHMARK = BENCHMARK_LOGGING_LEVEL
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING


@dataclasses.dataclass
class Prefs(PrefsFile):
    _filename = "prefs.json"

    separator                   : str                   = DEFAULT_SEPARATOR
    curveRadius                 : float                 = 0.25
    verbosity                   : LoggingLevel          = LoggingLevel.WARNING

    def clampedCurveRadius(self) -> float:
        return min(1.0, max(0.0, self.curveRadius))


prefs = Prefs()
