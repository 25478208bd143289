"""Stable public API for programmatic usage."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from .dns_resolver import DnsLookupError, DnsResolver, SpfResolver
from .errors import (
    InvalidResolver,
    SpfError,
    SpfIncludeLoop,
    SpfLookupLimitExceeded,
    SpfMechanismInvalid,
    SpfRecordInvalid,
    SpfRecordNotFound,
    SpfValidationFailed,
)
from .policy import DEFAULT_MAX_DEPTH, NetworkRangeEntry, PolicyNode, aggregate_allowlist, build_tree
from .status import Verdict

LOGGER = logging.getLogger(__name__)

_RESOLVER_LOCK = threading.Lock()
_default_resolver: Optional[SpfResolver] = None


def set_resolver(endpoint: str) -> SpfResolver:
    """Send all later lookups that use the default resolver to one endpoint.

    Lookups already in progress keep the resolver they started with.

    Args:
        endpoint (str): Resolver endpoint (``ip``, ``ip:port`` or ``[ipv6]:port``).

    Returns:
        SpfResolver: The new default resolver.

    Raises:
        InvalidResolver: If the endpoint does not name an IP address.
    """
    global _default_resolver
    resolver = DnsResolver.from_endpoint(endpoint)
    with _RESOLVER_LOCK:
        _default_resolver = resolver
    LOGGER.info("Default resolver set to %s", endpoint)
    return resolver


def reset_resolver() -> None:
    """Return to the system-configured resolver."""
    global _default_resolver
    with _RESOLVER_LOCK:
        _default_resolver = None


def get_default_resolver() -> SpfResolver:
    """Return the process-wide default resolver, creating it on first use.

    Returns:
        SpfResolver: Default resolver.
    """
    global _default_resolver
    with _RESOLVER_LOCK:
        if _default_resolver is None:
            _default_resolver = DnsResolver()
        return _default_resolver


def get(
    domain: str,
    resolver: Optional[SpfResolver] = None,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> PolicyNode:
    """Resolve a domain's SPF policy and flatten its allowlist.

    Args:
        domain (str): Domain to resolve.
        resolver (Optional[SpfResolver]): Resolver to use instead of the default.
        max_depth (int): Maximum include nesting below the root.

    Returns:
        PolicyNode: Root policy with ``allowlist`` populated.

    Raises:
        SpfRecordNotFound: If the domain has no SPF record.
        SpfRecordInvalid: If the domain's record is malformed.
        DnsLookupError: If the domain's TXT lookup fails.
    """
    if resolver is None:
        resolver = get_default_resolver()
    node = build_tree(domain, resolver, max_depth=max_depth)
    node.allowlist = aggregate_allowlist(node)
    LOGGER.info("%s allows %d entries", domain, len(node.allowlist))
    return node


__all__ = [
    "DnsLookupError",
    "DnsResolver",
    "InvalidResolver",
    "NetworkRangeEntry",
    "PolicyNode",
    "SpfError",
    "SpfIncludeLoop",
    "SpfLookupLimitExceeded",
    "SpfMechanismInvalid",
    "SpfRecordInvalid",
    "SpfRecordNotFound",
    "SpfResolver",
    "SpfValidationFailed",
    "Verdict",
    "get",
    "get_default_resolver",
    "reset_resolver",
    "set_resolver",
]
