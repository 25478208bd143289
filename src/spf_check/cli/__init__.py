"""Command-line interface for SPF sender validation."""

from __future__ import annotations

import dataclasses
import logging
import sys
from datetime import datetime, timezone
from typing import List

from ..api import get
from ..config import Settings, load_settings
from ..dns_resolver import DnsLookupError
from ..errors import SpfError
from ..output import make_verdict_colorizer, resolve_color_enabled, to_human, to_json, to_text
from ..status import ExitCodes
from .parser import _setup_logging, build_parser

LOGGER = logging.getLogger(__name__)

__all__ = ["_apply_overrides", "_setup_logging", "build_parser", "main", "run"]


def _apply_overrides(settings: Settings, args: object) -> Settings:
    """Apply command-line options on top of file settings.

    Args:
        settings (Settings): Settings loaded from configuration.
        args (object): Parsed CLI arguments.

    Returns:
        Settings: Effective settings.
    """
    overrides = {}
    if args.dns_servers:
        overrides["dns_servers"] = list(args.dns_servers)
    if args.dns_timeout is not None:
        overrides["dns_timeout"] = args.dns_timeout
    if args.dns_lifetime is not None:
        overrides["dns_lifetime"] = args.dns_lifetime
    if args.dns_tcp:
        overrides["dns_tcp"] = True
    if args.max_depth is not None:
        overrides["max_depth"] = args.max_depth
    return dataclasses.replace(settings, **overrides)


def main(argv: List[str] | None = None) -> int:
    """Run the CLI entrypoint.

    Args:
        argv (List[str] | None): Optional argument list for parsing.

    Returns:
        int: Exit code (0=verdict printed, 1=resolution or validation error).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)
    LOGGER.debug("Parsed arguments: %s", args)

    try:
        settings = _apply_overrides(load_settings(args.config), args)
        resolver = settings.build_resolver()
    except ValueError as exc:
        parser.error(str(exc))

    LOGGER.info("Checking %s for %s (max depth %d)", args.ip, args.domain, settings.max_depth)
    try:
        node = get(args.domain, resolver, max_depth=settings.max_depth)
        verdict, matched = node.validate(args.ip, strict=True)
    except (SpfError, DnsLookupError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return ExitCodes.ERROR

    for error in node.all_errors():
        LOGGER.warning("%s", error)

    report_time = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M")
    if args.output == "json":
        print(to_json(node, args.ip, verdict, matched, report_time))
    elif args.output == "human":
        colorize = make_verdict_colorizer(resolve_color_enabled(args.color, sys.stdout))
        print(to_human(node, args.ip, verdict, matched, report_time, colorize))
    else:
        print(to_text(node, args.ip, verdict, matched))
    return ExitCodes.OK


def run() -> None:  # pragma: no cover
    """Console script entrypoint."""
    sys.exit(main())


if __name__ == "__main__":  # pragma: no cover
    run()
