"""SPF policy parsing, include resolution and validation."""

from __future__ import annotations

from .allowlist import aggregate_allowlist
from .builder import DEFAULT_MAX_DEPTH, build_tree, normalize_domain
from .models import NetworkRangeEntry, PolicyNode
from .parser import Mechanism, ParsedRecord, parse_record
from .validator import validate_address

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "Mechanism",
    "NetworkRangeEntry",
    "ParsedRecord",
    "PolicyNode",
    "aggregate_allowlist",
    "build_tree",
    "normalize_domain",
    "parse_record",
    "validate_address",
]
