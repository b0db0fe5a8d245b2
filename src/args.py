"""Argument parsing functionality for ltspin."""

import argparse
from constants import Constants

def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="ltspin",
        description=(
            "ltspin - Pin npm dependencies to mature, policy-selected versions"
        ),
        add_help=True,
    )

    parser.add_argument("TARGET_DIR",
                        help="Project directory containing package.json (default: current directory)",
                        nargs="?",
                        default=None)

    parser.add_argument("--pin-style",
                        dest="PIN_STYLE",
                        help="Range syntax for direct dependencies (default: below-next-major)",
                        action="store",
                        type=str.lower,
                        choices=Constants.PIN_STYLES)
    parser.add_argument("--no-install",
                        dest="NO_INSTALL",
                        help="Rewrite package.json without running the package manager.",
                        action="store_true")
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML or YML). "
                             "Defaults to .ltspin.yml in the target directory when present.",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level (default: $LTSPIN_LOG_LEVEL, else INFO)",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
