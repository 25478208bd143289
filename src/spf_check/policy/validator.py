"""Match candidate sender addresses against a flattened allowlist."""

from __future__ import annotations

import ipaddress
import logging
from typing import TYPE_CHECKING, Iterable, Optional, Union

from ..errors import SpfValidationFailed
from ..status import Verdict, verdict_for_policy

if TYPE_CHECKING:
    from .models import NetworkRangeEntry

LOGGER = logging.getLogger(__name__)


def _parse_address(ip: str) -> Optional[Union[ipaddress.IPv4Address, ipaddress.IPv6Address]]:
    """Parse a candidate address, returning None when it is malformed.

    IPv4-mapped IPv6 addresses are unwrapped so they match ``ip4:`` ranges.

    Args:
        ip (str): Candidate address text.

    Returns:
        IPv4Address | IPv6Address | None: Parsed address.
    """
    try:
        address = ipaddress.ip_address(str(ip).strip())
    except ValueError:
        return None
    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped is not None:
        return address.ipv4_mapped
    return address


def validate_address(
    allowlist: Iterable["NetworkRangeEntry"],
    policy: str,
    ip: str,
    *,
    domain: str = "",
    strict: bool = False,
) -> tuple[Verdict, bool]:
    """Evaluate a candidate address against allowlist entries.

    The first containing network yields ``Verdict.PASS``. Otherwise the terminal
    policy decides: ``~all`` is a softfail, ``-all`` a fail and anything else
    neutral. A malformed address never matches unless ``strict`` is set.

    Args:
        allowlist (Iterable[NetworkRangeEntry]): Flattened allowlist entries.
        policy (str): Terminal policy token of the root record.
        ip (str): Candidate sender address.
        domain (str): Domain being evaluated, used in error messages.
        strict (bool): Raise for malformed addresses instead of reporting no match.

    Returns:
        tuple[Verdict, bool]: Verdict and whether an entry matched.

    Raises:
        SpfValidationFailed: If ``strict`` is set and the address is malformed.
    """
    address = _parse_address(ip)
    if address is None:
        if strict:
            raise SpfValidationFailed(domain, ip)
        LOGGER.debug("Candidate address %r is not an IP address; nothing can match", ip)
    else:
        for entry in allowlist:
            if entry.contains(address):
                LOGGER.debug("%s matched %s", address, entry.entry)
                return Verdict.PASS, True

    verdict = verdict_for_policy(policy)
    LOGGER.debug("%s matched no entry; policy %r gives %s", ip, policy, verdict.value)
    return verdict, False


__all__ = ["validate_address"]
