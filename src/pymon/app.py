"""pymon - command line entry point."""

import argparse
import logging
import sys

from pymon.monitor import Sampler
from pymon.readers import DEFAULT_DISK_PATH
from pymon.recorder import CsvRecorder

logger = logging.getLogger("pymon")

EXIT_OK = 0
EXIT_STARTUP_FAILURE = 1
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pymon",
        description="Monitor CPU, memory and disk usage of the local host.",
    )
    parser.add_argument(
        "-i",
        "--interval",
        type=float,
        default=1.0,
        metavar="N",
        help="Set monitoring interval in seconds (default: 1)",
    )
    parser.add_argument(
        "-c",
        "--count",
        type=int,
        default=None,
        metavar="N",
        help="Run for N iterations (default: infinite)",
    )
    parser.add_argument(
        "-l",
        "--log",
        default=None,
        metavar="FILE",
        help="Log results to CSV file",
    )
    parser.add_argument(
        "--disk-path",
        default=DEFAULT_DISK_PATH,
        metavar="PATH",
        help=f"Filesystem to report disk usage for (default: {DEFAULT_DISK_PATH})",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print debug diagnostics to stderr",
    )
    return parser


def configure_logging(verbose: bool = False) -> None:
    """Send diagnostics to stderr so stdout only carries samples."""
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    """Entry point for the pymon command."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    recorder = None
    if args.log:
        try:
            recorder = CsvRecorder(args.log)
        except OSError as e:
            logger.error("Cannot create log file %s: %s", args.log, e)
            return EXIT_STARTUP_FAILURE

    sampler = Sampler(recorder, disk_path=args.disk_path)
    try:
        sampler.run(args.interval, args.count)
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
