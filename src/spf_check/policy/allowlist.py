"""Flatten a policy tree into the allowlist used for validation."""

from __future__ import annotations

from typing import List

from .models import NetworkRangeEntry, PolicyNode


def aggregate_allowlist(node: PolicyNode) -> List[NetworkRangeEntry]:
    """Collect the entries of a policy tree, includes first.

    Each include is flattened in record order, then the node's own entries
    follow. The tree is not modified.

    Args:
        node (PolicyNode): Root of the (sub)tree.

    Returns:
        List[NetworkRangeEntry]: Entries authorized by the subtree.
    """
    entries: List[NetworkRangeEntry] = []
    for child in node.includes:
        entries.extend(aggregate_allowlist(child))
    entries.extend(node.ranges)
    return entries


__all__ = ["aggregate_allowlist"]
