"""site-inspector — diagnostic reports for a WordPress installation."""

import logging
import sys
from argparse import ArgumentParser

from site_inspector.config import load_config, load_yaml_config
from site_inspector.registry import load_inspectors
from site_inspector.runner import Runner
from site_inspector.sink import Console
from site_inspector.site import SiteContext


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser."""
    parser = ArgumentParser(
        prog="site-inspector",
        description="Run a diagnostic inspection against a WordPress site.",
    )
    parser.add_argument(
        "command",
        help="Inspection to run (see 'site-inspector commands')",
    )
    parser.add_argument(
        "args",
        nargs="*",
        help="Positional arguments for the inspection (e.g. a number of days)",
    )
    parser.add_argument(
        "--csv",
        metavar="PATH",
        help="Save the table as CSV, relative to the content directory",
    )
    parser.add_argument(
        "--path",
        help="Path to the WordPress installation (passed to WP-CLI)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log WP-CLI calls and decisions to stderr",
    )
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args, load_yaml_config(args.config))
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        stream=sys.stderr,
    )

    load_inspectors()
    site = SiteContext.from_config(config)
    try:
        return Runner(site, Console()).run(args.command, args.args, csv=args.csv)
    finally:
        site.close()


def run() -> None:
    """Console-script entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(0)
    except BrokenPipeError:
        sys.exit(0)
