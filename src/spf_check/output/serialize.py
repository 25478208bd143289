"""Serialization helpers for output."""

from __future__ import annotations

from typing import List

from ..policy import NetworkRangeEntry, PolicyNode


def _serialize_entry(entry: NetworkRangeEntry) -> dict:
    """Serialize an allowlist entry.

    Args:
        entry (NetworkRangeEntry): Entry to serialize.

    Returns:
        dict: Mechanism token and network strings.
    """
    return {"entry": entry.entry, "networks": [str(network) for network in entry.networks]}


def _serialize_error(error: Exception) -> dict:
    """Serialize a recorded resolution error.

    Args:
        error (Exception): Recorded error.

    Returns:
        dict: Error type name and message.
    """
    return {"type": type(error).__name__, "message": str(error)}


def _serialize_node(node: PolicyNode) -> dict:
    """Serialize a policy node and its includes.

    Args:
        node (PolicyNode): Node to serialize.

    Returns:
        dict: JSON-serializable mapping of the subtree.
    """
    return {
        "domain": node.domain,
        "version": node.version,
        "policy": node.policy,
        "record": node.record,
        "ranges": [_serialize_entry(entry) for entry in node.ranges],
        "errors": [_serialize_error(error) for error in node.errors],
        "includes": [_serialize_node(child) for child in node.includes],
    }


def _tree_rows(node: PolicyNode, depth: int = 0) -> List[dict]:
    """Flatten a policy tree into indented report rows.

    Args:
        node (PolicyNode): Root of the subtree.
        depth (int): Include depth of the node.

    Returns:
        List[dict]: One row per node in pre-order with its depth.
    """
    rows = [
        {
            "depth": depth,
            "domain": node.domain,
            "policy": node.policy,
            "record": node.record,
            "ranges": [_serialize_entry(entry) for entry in node.ranges],
            "errors": [str(error) for error in node.errors],
        }
    ]
    for child in node.includes:
        rows.extend(_tree_rows(child, depth + 1))
    return rows
