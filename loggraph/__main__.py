import logging
import sys
import traceback
from argparse import ArgumentParser

from loggraph import settings
from loggraph.graph import GraphDiagram, logFormatArgument, parseLog
from loggraph.settings import LoggingLevel

logger = logging.getLogger(__name__)


def readText(path: str) -> str:
    if not path:
        return ""
    if path == "-":
        return sys.stdin.read()
    with open(path, "rt", encoding="utf-8") as f:
        return f.read()


def makeArgParser() -> ArgumentParser:
    parser = ArgumentParser(prog="loggraph", description="Reconstruct branch lines from git log --graph output")
    parser.add_argument("log", nargs="?", default="-", help="File containing git log --graph output (default: stdin)")
    parser.add_argument("-b", "--branches", default="", help="File listing branches (<tracked remote>{SEP}<full ref name> per line)")
    parser.add_argument("-s", "--stashes", default="", help="File listing stashes (<short hash> <label> per line)")
    parser.add_argument("--separator", default=None, help="Field separator used in the log and branch list")
    parser.add_argument("--curve-radius", type=float, default=None, help="Curve tightness between 0 and 1")
    parser.add_argument("--prefs", default="", help="Load preferences from this JSON file")
    parser.add_argument("--json", action="store_true", help="Dump the parsed graph as JSON")
    parser.add_argument("--print-format", action="store_true", help="Print the --format argument to pass to git log, and exit")
    parser.add_argument("-n", "--max-rows", type=int, default=-1, help="Maximum number of commits to draw")
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--debug", action="store_true", help="Enable expensive assertions")
    return parser


def main(argv=None) -> int:
    args = makeArgParser().parse_args(argv)

    prefs = settings.prefs
    prefs.load(args.prefs)

    verbosity = LoggingLevel.BENCHMARK if args.verbose else prefs.verbosity
    if args.debug:
        settings.DEVDEBUG = True

    logging.basicConfig(
        stream=sys.stderr,
        level=verbosity.value,
        format='%(levelname).1s %(asctime)s %(filename)-16s | %(message)s',
        datefmt="%H:%M:%S")
    logging.addLevelName(LoggingLevel.BENCHMARK, "BENCHMARK")

    separator = args.separator if args.separator is not None else prefs.separator
    if not separator:
        print("loggraph: the field separator must not be empty", file=sys.stderr)
        return 1

    if args.curve_radius is not None:
        curveRadius = min(1.0, max(0.0, args.curve_radius))
    else:
        curveRadius = prefs.clampedCurveRadius()

    if args.print_format:
        print(logFormatArgument(separator))
        return 0

    try:
        graph = parseLog(
            readText(args.log),
            readText(args.branches),
            readText(args.stashes),
            separator,
            curveRadius)
    except ValueError as exc:  # including LogFormatError
        logger.debug("Parsing failed", exc_info=True)
        print(''.join(traceback.format_exception_only(exc)).strip(), file=sys.stderr)
        return 1

    if args.json:
        print(GraphDiagram.toJson(graph, indent=1))
    else:
        print(GraphDiagram.diagram(graph, maxRows=args.max_rows, verbose=args.verbose))

    return 0


if __name__ == "__main__":
    sys.exit(main())
