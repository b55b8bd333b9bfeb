"""Argument parsing functionality for devrange."""

import argparse


def _add_common_options(parser):
    """Options shared by every subcommand."""
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='WARNING')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML or JSON)",
                        action="store",
                        type=str)


def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="devrange",
        description=(
            "devrange - rewrite Composer version constraints into dev-branch constraints"
        ),
        add_help=True,
    )
    subparsers = parser.add_subparsers(dest="COMMAND", metavar="COMMAND")
    subparsers.required = True

    convert = subparsers.add_parser(
        "convert",
        help="Convert constraints to their dev form, e.g. '^8.5.3 || ^8.6.1'",
    )
    _add_common_options(convert)
    convert.add_argument("CONSTRAINTS",
                         help="Constraint(s) to convert",
                         nargs="+")
    convert.add_argument("-m", "--mode",
                         dest="MODE",
                         help="core keeps all but the last digit group, lightning keeps the first (default: core)",
                         action="store",
                         type=str.lower,
                         choices=["core", "lightning", "trailing", "leading"],
                         default="core")

    manifest = subparsers.add_parser(
        "manifest",
        help="Compute dev constraints for the requirements of a composer.json",
    )
    _add_common_options(manifest)
    manifest.add_argument("-d", "--directory",
                          dest="MANIFEST",
                          help="Project directory or composer.json path (default: current directory)",
                          action="store",
                          type=str,
                          default=".")
    manifest.add_argument("-f", "--format",
                          dest="OUTPUT_FORMAT",
                          help="Output format (text or json)",
                          action="store",
                          type=str.lower,
                          choices=["text", "json"],
                          default="text")
    manifest.add_argument("-r", "--rule",
                          dest="RULES",
                          help="Selection rule PATTERN=MODE, e.g. 'drupal/lightning_*=lightning' (repeatable; replaces configured rules)",
                          action="append",
                          type=str,
                          default=[])
    manifest.add_argument("-w", "--write",
                          dest="WRITE",
                          help="Write the dev constraints back into the manifest",
                          action="store_true")

    latest = subparsers.add_parser(
        "latest",
        help="Find the latest published release within a dev range",
    )
    _add_common_options(latest)
    latest.add_argument("PROJECT",
                        help="Project name, e.g. lightning_core")
    latest.add_argument("RANGE",
                        help="Dev range, e.g. 3.x-dev")
    latest.add_argument("--base-url",
                        dest="BASE_URL",
                        help="Release history feed root URL",
                        action="store",
                        type=str)
    latest.add_argument("--api",
                        dest="API_VERSION",
                        help="Core API version segment of the feed URL (default: 8.x)",
                        action="store",
                        type=str)
    latest.add_argument("--prefix",
                        dest="PREFIX",
                        help="Release channel prefix stripped from versions (default: 8.x-)",
                        action="store",
                        type=str)
    latest.add_argument("--timeout",
                        dest="TIMEOUT",
                        help="HTTP timeout in seconds",
                        action="store",
                        type=int)
    latest.add_argument("--include-unstable",
                        dest="INCLUDE_UNSTABLE",
                        help="Also consider alpha, beta, rc and dev releases",
                        action="store_true")

    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
