"""Policy tree models."""

from __future__ import annotations

import dataclasses
import ipaddress
from typing import Iterator, List, Union

from ..status import Verdict
from .validator import validate_address

IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]

# Terminal policy used until a record supplies one.
DEFAULT_POLICY = Verdict.NEUTRAL.value

_IPV4_MAPPED = ipaddress.IPv6Network("::ffff:0:0/96")


def _unmap_network(network: IPNetwork) -> IPNetwork:
    """Return an IPv4-mapped IPv6 network as the IPv4 network it covers.

    Args:
        network (IPNetwork): Authorized network.

    Returns:
        IPNetwork: IPv4 network for ranges inside ``::ffff:0:0/96``, else the input.
    """
    if network.version != 6 or network.prefixlen < 96 or not network.subnet_of(_IPV4_MAPPED):
        return network
    address = network.network_address.ipv4_mapped
    return ipaddress.IPv4Network(f"{address}/{network.prefixlen - 96}")


@dataclasses.dataclass
class NetworkRangeEntry:
    """Networks authorized by one mechanism token.

    Attributes:
        entry (str): Mechanism token that produced the networks (e.g. ``ip4:192.0.2.0/24``).
        networks (List[IPNetwork]): Authorized networks; ``a``/``mx`` may yield none.
    """

    entry: str
    networks: List[IPNetwork] = dataclasses.field(default_factory=list)

    def contains(self, address: Union[ipaddress.IPv4Address, ipaddress.IPv6Address]) -> bool:
        """Return whether any network of the entry contains an address.

        IPv4-mapped IPv6 networks are compared as the IPv4 range they cover.

        Args:
            address (IPv4Address | IPv6Address): Parsed candidate address.

        Returns:
            bool: True when the address falls inside one of the networks.
        """
        return any(
            network.version == address.version and address in network
            for network in map(_unmap_network, self.networks)
        )


@dataclasses.dataclass
class PolicyNode:
    """SPF policy of one domain and the includes it pulled in.

    Attributes:
        domain (str): Domain the policy was published for.
        version (str): Version tag found in the record.
        policy (str): Last term of the record, usually the ``all`` directive.
        record (str): TXT value selected as the SPF record.
        includes (List[PolicyNode]): Successfully resolved ``include:`` targets, in record order.
        ranges (List[NetworkRangeEntry]): Entries declared directly by this record.
        allowlist (List[NetworkRangeEntry]): Flattened entries of the whole subtree.
        errors (List[Exception]): Recoverable failures met while resolving this node.
    """

    domain: str
    version: str = ""
    policy: str = DEFAULT_POLICY
    record: str = ""
    includes: List["PolicyNode"] = dataclasses.field(default_factory=list)
    ranges: List[NetworkRangeEntry] = dataclasses.field(default_factory=list)
    allowlist: List[NetworkRangeEntry] = dataclasses.field(default_factory=list)
    errors: List[Exception] = dataclasses.field(default_factory=list)

    def include(self, node: "PolicyNode") -> None:
        """Attach a resolved include.

        Args:
            node (PolicyNode): Policy of the included domain.
        """
        self.includes.append(node)

    def walk(self) -> Iterator["PolicyNode"]:
        """Iterate the tree depth-first, this node first.

        Yields:
            PolicyNode: Nodes of the subtree.
        """
        yield self
        for child in self.includes:
            yield from child.walk()

    def all_errors(self) -> List[Exception]:
        """Collect recoverable errors recorded anywhere in the subtree.

        Returns:
            List[Exception]: Errors in walk order.
        """
        return [error for node in self.walk() for error in node.errors]

    def validate(self, ip: str, *, strict: bool = False) -> tuple[Verdict, bool]:
        """Decide whether an address may send mail for this domain.

        Args:
            ip (str): Candidate sender address.
            strict (bool): Raise instead of reporting no match for malformed addresses.

        Returns:
            tuple[Verdict, bool]: Verdict and whether an allowlist entry matched.
        """
        return validate_address(self.allowlist, self.policy, ip, domain=self.domain, strict=strict)


__all__ = ["DEFAULT_POLICY", "IPNetwork", "NetworkRangeEntry", "PolicyNode"]
