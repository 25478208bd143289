"""Argument parser helpers for the CLI."""

from __future__ import annotations

import argparse
import functools
import logging
import time

from .. import __version__
from .parsing import _parse_depth, _parse_positive_float


def _setup_logging(verbosity: int) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbosity (int): Verbosity count from CLI flags.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.Formatter.converter = time.gmtime  # UTC timestamps
    logging.basicConfig(
        level=level,
        format="%(asctime)sZ [%(levelname)s] %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    parser = argparse.ArgumentParser(
        prog="spf-check",
        description="Check whether an IP address is a permitted sender for a domain's SPF policy",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    target_group = parser.add_argument_group("Target")
    output_group = parser.add_argument_group("Output")
    dns_group = parser.add_argument_group("DNS")
    resolution_group = parser.add_argument_group("Resolution")
    logging_group = parser.add_argument_group("Logging")
    misc_group = parser.add_argument_group("Misc")

    target_group.add_argument("domain", help="Domain whose SPF policy is evaluated")
    target_group.add_argument("ip", help="Sending IP address to validate")
    misc_group.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Show version and exit",
    )
    misc_group.add_argument(
        "--config",
        dest="config",
        default=None,
        help="YAML configuration file (default: first config.yaml in the config directories)",
    )
    output_group.add_argument(
        "--output",
        choices=["text", "json", "human"],
        default="text",
        help="Output format",
    )
    output_group.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default="auto",
        help="Colorize human output (disabled when NO_COLOR is set)",
    )
    output_group.add_argument(
        "--no-color",
        dest="color",
        action="store_const",
        const="never",
        help="Disable colorized output",
    )
    dns_group.add_argument(
        "--dns-server",
        dest="dns_servers",
        action="append",
        default=[],
        help="DNS server to use for lookups (repeatable; IP or IP:port)",
    )
    dns_group.add_argument(
        "--dns-timeout",
        dest="dns_timeout",
        type=functools.partial(_parse_positive_float, label="DNS timeout"),
        default=None,
        help="Per-query DNS timeout in seconds",
    )
    dns_group.add_argument(
        "--dns-lifetime",
        dest="dns_lifetime",
        type=functools.partial(_parse_positive_float, label="DNS lifetime"),
        default=None,
        help="Total DNS query lifetime in seconds",
    )
    dns_group.add_argument(
        "--dns-tcp",
        dest="dns_tcp",
        action="store_true",
        help="Use TCP for DNS lookups",
    )
    resolution_group.add_argument(
        "--max-depth",
        dest="max_depth",
        type=_parse_depth,
        default=None,
        help="Maximum include nesting below the domain (default: configuration or 10)",
    )
    logging_group.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (use -vv for debug)",
    )
    return parser
