"""
Command line interface.

Usage:
    cat gtfs-rt-feed.pbf | print-gtfs-rt
    curl 'https://example.org/gtfs-rt.pbf' | print-gtfs-rt --json
    print-gtfs-rt --url 'https://example.org/gtfs-rt.pbf' --single-json
"""

import argparse
import logging
import os
import sys
from typing import BinaryIO, List, Mapping, Optional, TextIO

from . import __version__
from .config import Config, get_config
from .errors import PrintGtfsRtError, UsageError
from .pipeline import run_pipeline

logger = logging.getLogger(__name__)

EPILOG = """\
examples:
    cat gtfs-rt-feed.pbf | print-gtfs-rt
    curl 'https://example.org/gtfs-rt.pbf' | print-gtfs-rt
    cat feeds.ldpbf | print-gtfs-rt --length-prefixed --json
"""


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="print-gtfs-rt",
        description="Decode a GTFS-Realtime feed from stdin and print it.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"print-gtfs-rt v{__version__}",
    )
    parser.add_argument(
        "-l", "--length-prefixed",
        action="store_true",
        help="Read input as a sequence of varint length-prefixed feed messages",
    )
    parser.add_argument(
        "-j", "--json",
        action="store_true",
        help="Output newline-delimited JSON (http://ndjson.org)",
    )
    parser.add_argument(
        "-s", "--single-json",
        action="store_true",
        help="Output a single JSON array",
    )
    parser.add_argument(
        "-a", "--include-all",
        action="store_true",
        help="Print the entire message, including FeedMessage.header and "
             "FeedMessage.entity. Implies not newline-delimited JSON",
    )
    parser.add_argument(
        "-d", "--depth",
        type=non_negative_int,
        default=None,
        help="Number of nested levels to print. Default: infinite",
    )
    parser.add_argument(
        "--gtfs-rt-bindings",
        default=None,
        help="Module name or path of GTFS-RT bindings to decode with. Must "
             "provide decode()/to_object() or a protobuf FeedMessage class",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="Fetch the feed from this URL instead of reading stdin",
    )
    parser.add_argument(
        "--max-frame-size",
        type=non_negative_int,
        default=None,
        help="Reject length-prefixed frames larger than this many bytes",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output and full tracebacks to stderr",
    )
    return parser


def setup_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            stream=sys.stderr,
            force=True,
        )
    else:
        logging.basicConfig(level=logging.WARNING, format="%(message)s",
                            stream=sys.stderr, force=True)


def _isatty(stream) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _silence_stdout() -> None:
    # The reader went away. Point stdout at devnull so the interpreter's
    # final flush does not raise BrokenPipeError again.
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, sys.stdout.fileno())


def report(error: Exception, config: Config) -> None:
    message = str(error) or repr(error)
    if config.verbose:
        logger.exception(message)
    else:
        logger.error(message)


def main(
    argv: Optional[List[str]] = None,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[TextIO] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> int:
    """Run print-gtfs-rt and return the process exit code."""
    args = build_parser().parse_args(argv)

    if stdin is None and sys.stdin is not None:
        stdin = sys.stdin.buffer
    stdout = stdout if stdout is not None else sys.stdout
    config = get_config(args, environ, colorize=_isatty(stdout))
    setup_logging(config.verbose)

    try:
        if not config.url and (stdin is None or _isatty(stdin)):
            # stdin is None when the descriptor was closed (<&-)
            raise UsageError("You must pipe into print-gtfs-rt.")
        run_pipeline(config, stdin, stdout)
    except BrokenPipeError:
        if stdout is sys.stdout:
            _silence_stdout()
        return 0
    except PrintGtfsRtError as e:
        report(e, config)
        return e.exit_code
    except OSError as e:
        report(e, config)
        return 1
    return 0


def run() -> None:
    sys.exit(main())
