"""Build the include tree of SPF policies for a domain."""

from __future__ import annotations

import ipaddress
import logging
from typing import List, Optional, Sequence

from ..dns_resolver import DnsLookupError, SpfResolver
from ..errors import SpfError, SpfIncludeLoop, SpfLookupLimitExceeded, SpfRecordNotFound
from .models import IPNetwork, NetworkRangeEntry, PolicyNode
from .parser import Mechanism, is_spf_record, parse_record

LOGGER = logging.getLogger(__name__)

# Maximum nesting of include: chains below the root domain.
DEFAULT_MAX_DEPTH = 10

# Failures of an included policy that are recorded on the parent instead of raised.
CHILD_ERRORS = (SpfError, DnsLookupError)


def normalize_domain(domain: str) -> str:
    """Normalize a domain for comparisons.

    Args:
        domain (str): Domain name.

    Returns:
        str: Lower-cased domain without a trailing dot.
    """
    return domain.strip().lower().rstrip(".")


def _host_network(address: str) -> IPNetwork:
    """Build a single-host network for a resolved address.

    Args:
        address (str): IPv4 or IPv6 address text.

    Returns:
        IPNetwork: ``/32`` or ``/128`` network.
    """
    return ipaddress.ip_network(address)


def _resolve_host(node: PolicyNode, resolver: SpfResolver, host: str) -> List[IPNetwork]:
    """Resolve the A and AAAA addresses of a host.

    Each record type is looked up on its own, so a failing AAAA lookup does
    not discard the A answers. Failures are recorded on the node.

    Args:
        node (PolicyNode): Node being built; lookup failures land in its errors.
        resolver (SpfResolver): Resolver used for lookups.
        host (str): Host name.

    Returns:
        List[IPNetwork]: Single-host networks for the A then AAAA records.
    """
    networks: List[IPNetwork] = []
    for lookup in (resolver.get_a, resolver.get_aaaa):
        try:
            addresses = lookup(host)
        except DnsLookupError as err:
            LOGGER.warning("Could not resolve %s for %s: %s", host, node.domain, err)
            node.errors.append(err)
            continue
        LOGGER.debug("Resolved %s to %s", host, addresses)
        networks.extend(_host_network(address) for address in addresses)
    return networks


def _expand_a(node: PolicyNode, mechanism: Mechanism, resolver: SpfResolver) -> NetworkRangeEntry:
    """Expand the ``a`` mechanism against the node's own domain.

    Args:
        node (PolicyNode): Node being built; lookup failures land in its errors.
        mechanism (Mechanism): The ``a`` mechanism.
        resolver (SpfResolver): Resolver used for lookups.

    Returns:
        NetworkRangeEntry: Entry with zero or more host networks.
    """
    return NetworkRangeEntry(mechanism.token, _resolve_host(node, resolver, node.domain))


def _expand_mx(node: PolicyNode, mechanism: Mechanism, resolver: SpfResolver) -> NetworkRangeEntry:
    """Expand the ``mx`` mechanism to the addresses of the domain's mail exchangers.

    Args:
        node (PolicyNode): Node being built; lookup failures land in its errors.
        mechanism (Mechanism): The ``mx`` mechanism.
        resolver (SpfResolver): Resolver used for lookups.

    Returns:
        NetworkRangeEntry: Entry with zero or more host networks.
    """
    entry = NetworkRangeEntry(mechanism.token)
    try:
        exchangers = sorted(resolver.get_mx(node.domain), key=lambda item: (item[1], item[0]))
    except DnsLookupError as err:
        LOGGER.warning("Could not expand %s for %s: %s", mechanism.token, node.domain, err)
        node.errors.append(err)
        return entry

    for host, _priority in exchangers:
        entry.networks.extend(_resolve_host(node, resolver, host))
    return entry


def _select_record(domain: str, txt_records: Sequence[str]) -> str:
    """Pick the SPF record among a domain's TXT values.

    Args:
        domain (str): Domain that was queried.
        txt_records (Sequence[str]): TXT values.

    Returns:
        str: First value carrying the SPF version tag.

    Raises:
        SpfRecordNotFound: If no value carries the tag.
    """
    candidates = [value for value in txt_records if is_spf_record(value)]
    if not candidates:
        raise SpfRecordNotFound(domain)
    if len(candidates) > 1:
        LOGGER.info("%s publishes %d SPF records; using the first", domain, len(candidates))
    return candidates[0]


def build_tree(
    domain: str,
    resolver: SpfResolver,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    path: Optional[Sequence[str]] = None,
) -> PolicyNode:
    """Resolve a domain's SPF policy and, recursively, its includes.

    Network and host mechanisms are expanded in record order as the record is
    walked; each include is resolved completely before the next one. A failing
    include is recorded on this node's errors and contributes nothing.

    Args:
        domain (str): Domain to resolve.
        resolver (SpfResolver): Resolver used for lookups.
        max_depth (int): Maximum include nesting below the root.
        path (Optional[Sequence[str]]): Normalized domains from the root to the parent.

    Returns:
        PolicyNode: Policy tree rooted at the domain.

    Raises:
        SpfIncludeLoop: If the domain is already on the include path.
        SpfLookupLimitExceeded: If the include path is deeper than ``max_depth``.
        SpfRecordNotFound: If the domain has no SPF record.
        SpfRecordInvalid: If the record is malformed.
        DnsLookupError: If the TXT lookup fails.
    """
    ancestors = list(path or [])
    key = normalize_domain(domain)
    if key in ancestors:
        raise SpfIncludeLoop(domain, [*ancestors, key])
    if len(ancestors) > max_depth:
        raise SpfLookupLimitExceeded(domain, max_depth)
    ancestors.append(key)

    LOGGER.debug("Looking up SPF record for %s (depth %d)", domain, len(ancestors) - 1)
    node = PolicyNode(domain)
    node.record = _select_record(domain, resolver.get_txt(domain))
    parsed = parse_record(node.record, domain)
    node.version = parsed.version
    node.policy = parsed.policy
    node.errors.extend(parsed.errors)

    for mechanism in parsed.mechanisms:
        if mechanism.kind == "a":
            node.ranges.append(_expand_a(node, mechanism, resolver))
        elif mechanism.kind == "mx":
            node.ranges.append(_expand_mx(node, mechanism, resolver))
        elif mechanism.kind != "include":
            node.ranges.append(mechanism.to_entry())

    for child_domain in parsed.includes:
        try:
            child = build_tree(child_domain, resolver, max_depth=max_depth, path=ancestors)
        except CHILD_ERRORS as err:
            LOGGER.warning("Include %s of %s failed: %s", child_domain, domain, err)
            node.errors.append(err)
            continue
        node.include(child)

    LOGGER.info(
        "Resolved %s: %d ranges, %d includes, %d errors",
        domain,
        len(node.ranges),
        len(node.includes),
        len(node.errors),
    )
    return node


__all__ = ["CHILD_ERRORS", "DEFAULT_MAX_DEPTH", "build_tree", "normalize_domain"]
