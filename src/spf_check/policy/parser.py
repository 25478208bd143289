"""Split one SPF record into its version, terminal policy and mechanisms."""

from __future__ import annotations

import dataclasses
import ipaddress
import logging
from typing import List, Optional

from ..errors import SpfMechanismInvalid, SpfRecordInvalid
from .models import DEFAULT_POLICY, IPNetwork, NetworkRangeEntry

LOGGER = logging.getLogger(__name__)

SPF_VERSION_TAG = "v=spf1"
SPF_QUALIFIERS = {"+", "-", "~", "?"}
# A version tag, at least one mechanism and a terminal directive.
MIN_RECORD_TERMS = 3

_NETWORK_BITS = {"ip4": 32, "ip6": 128}
_NETWORK_VERSIONS = {"ip4": 4, "ip6": 6}


@dataclasses.dataclass
class Mechanism:
    """One mechanism the builder acts on.

    Attributes:
        kind (str): ``ip4``, ``ip6``, ``include``, ``a`` or ``mx``.
        token (str): Token as written in the record.
        value (str): Mechanism argument (include target, network text) or empty.
        networks (List[IPNetwork]): Parsed networks for ``ip4``/``ip6``.
    """

    kind: str
    token: str
    value: str = ""
    networks: List[IPNetwork] = dataclasses.field(default_factory=list)

    def to_entry(self) -> NetworkRangeEntry:
        """Build the allowlist entry for a network mechanism.

        Returns:
            NetworkRangeEntry: Entry carrying the parsed networks.
        """
        return NetworkRangeEntry(self.token, list(self.networks))


@dataclasses.dataclass
class ParsedRecord:
    """Result of parsing one SPF record.

    Attributes:
        version (str): First term containing ``v=``.
        policy (str): Last term of the record.
        mechanisms (List[Mechanism]): Supported mechanisms in record order.
        errors (List[Exception]): Mechanisms that were dropped as malformed.
    """

    version: str = ""
    policy: str = DEFAULT_POLICY
    mechanisms: List[Mechanism] = dataclasses.field(default_factory=list)
    errors: List[Exception] = dataclasses.field(default_factory=list)

    @property
    def includes(self) -> List[str]:
        """Include targets in record order."""
        return [mechanism.value for mechanism in self.mechanisms if mechanism.kind == "include"]


def is_spf_record(value: str) -> bool:
    """Return whether a TXT value carries the SPF version tag."""
    return SPF_VERSION_TAG in value


def _parse_network(kind: str, value: str) -> Optional[IPNetwork]:
    """Parse the argument of an ``ip4:``/``ip6:`` mechanism.

    Host bits are masked off, so ``127.0.0.1/16`` yields ``127.0.0.0/16``.

    Args:
        kind (str): ``ip4`` or ``ip6``.
        value (str): Address with an optional ``/prefix``.

    Returns:
        IPNetwork | None: Parsed network, or None when malformed.
    """
    address_text, sep, prefix_text = value.partition("/")
    try:
        address = ipaddress.ip_address(address_text)
    except ValueError:
        return None
    if address.version != _NETWORK_VERSIONS[kind]:
        return None
    max_bits = _NETWORK_BITS[kind]
    prefix = max_bits
    if sep:
        if not prefix_text.isdigit() or int(prefix_text) > max_bits:
            return None
        prefix = int(prefix_text)
    return ipaddress.ip_network(f"{address}/{prefix}", strict=False)


def _parse_term(token: str, domain: str, parsed: ParsedRecord) -> None:
    """Classify one record term and append what it contributes.

    Args:
        token (str): Record term.
        domain (str): Domain that published the record.
        parsed (ParsedRecord): Parse result to extend.
    """
    if token[0] in SPF_QUALIFIERS:
        if token[1:].lower() != "all":
            LOGGER.debug("Ignoring qualified mechanism %s for %s", token, domain)
        return

    name, sep, value = token.partition(":")
    name = name.lower()
    if sep and name in _NETWORK_BITS:
        network = _parse_network(name, value)
        if network is None:
            LOGGER.warning("Dropping malformed mechanism %s for %s", token, domain)
            parsed.errors.append(SpfMechanismInvalid(domain, token))
            return
        parsed.mechanisms.append(Mechanism(name, token, value, [network]))
    elif sep and name == "include" and value:
        parsed.mechanisms.append(Mechanism("include", token, value))
    elif not sep and name in {"a", "mx"}:
        parsed.mechanisms.append(Mechanism(name, token))
    else:
        LOGGER.debug("Ignoring unsupported term %s for %s", token, domain)


def parse_record(record: str, domain: str) -> ParsedRecord:
    """Parse an SPF record into its mechanisms.

    Args:
        record (str): SPF record text.
        domain (str): Domain that published the record.

    Returns:
        ParsedRecord: Version, terminal policy and mechanisms in record order.

    Raises:
        SpfRecordInvalid: If the record has fewer than three terms.
    """
    tokens = record.split()
    if len(tokens) < MIN_RECORD_TERMS:
        raise SpfRecordInvalid(domain, record)

    parsed = ParsedRecord(policy=tokens[-1])
    for token in tokens:
        if not parsed.version and "v=" in token:
            parsed.version = token
            continue
        _parse_term(token, domain, parsed)

    LOGGER.debug(
        "Parsed %s: version=%s policy=%s mechanisms=%d",
        domain,
        parsed.version,
        parsed.policy,
        len(parsed.mechanisms),
    )
    return parsed


__all__ = [
    "MIN_RECORD_TERMS",
    "Mechanism",
    "ParsedRecord",
    "SPF_VERSION_TAG",
    "is_spf_record",
    "parse_record",
]
