"""Argument parsing functionality for resolve-version."""

import argparse
from constants import Constants

def parse_args(argv=None):
    """Parses the arguments passed to the program.

    Positionals are optional at the parser level so the entrypoint can print
    the one-line usage and exit cleanly when they are missing.
    """
    parser = argparse.ArgumentParser(
        prog="resolve-version",
        description=(
            "Resolve a node or yarn release from the binary bucket"
        ),
        add_help=True,
    )

    parser.add_argument("BINARY",
                        help="Binary to resolve, i.e: node, yarn",
                        nargs="?")
    parser.add_argument("REQUIREMENT",
                        help="Version requirement, i.e: ^18, >=16 <17",
                        nargs="?")

    parser.add_argument("--bucket",
                        dest="BUCKET",
                        help=f"Bucket to list (default: {Constants.DEFAULT_BUCKET})",
                        action="store",
                        type=str)
    parser.add_argument("--platform",
                        dest="PLATFORM",
                        help="Platform identifier override, i.e: linux-x64, darwin-x64",
                        action="store",
                        type=str)
    parser.add_argument("--include-staging",
                        dest="INCLUDE_STAGING",
                        help="Also consider runtime builds from the staging stage.",
                        action="store_true",
                        default=None)
    parser.add_argument("--max-pages",
                        dest="MAX_PAGES",
                        help=f"Maximum listing pages to fetch (default: {Constants.LISTING_MAX_PAGES})",
                        action="store",
                        type=int)
    parser.add_argument("--lenient-decode",
                        dest="LENIENT_DECODE",
                        help="Treat undecodable listing pages as empty instead of failing.",
                        action="store_true",
                        default=None)

    # Config file (general)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("--buildinfo",
                        dest="BUILDINFO",
                        help="Append timing and resolved version to this build-info file",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
