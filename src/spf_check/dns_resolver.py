"""DNS resolver wrapper used to fetch SPF records and expand hosts.

The resolver is intentionally thin so it can be replaced in tests. Anything
implementing :class:`SpfResolver` can be handed to the policy builder.
"""

from __future__ import annotations

import ipaddress
import logging
from typing import Iterable, List, Optional, Protocol, Tuple, Union

try:
    import dns.exception
    import dns.nameserver
    import dns.resolver
except ImportError as exc:  # pragma: no cover - handled at runtime
    raise SystemExit("dnspython is required. Install with `pip install dnspython`.") from exc

from .errors import InvalidResolver

LOGGER = logging.getLogger(__name__)

DEFAULT_DNS_PORT = 53
# Per-exchange timeout applied when a resolver endpoint is pinned explicitly.
ENDPOINT_TIMEOUT = 1.5


class SpfResolver(Protocol):
    """Lookups the policy builder needs from a resolver."""

    def get_txt(self, domain: str) -> List[str]:
        """Return TXT values for a name."""

    def get_a(self, name: str) -> List[str]:
        """Return IPv4 addresses for a name."""

    def get_aaaa(self, name: str) -> List[str]:
        """Return IPv6 addresses for a name."""

    def get_mx(self, domain: str) -> List[Tuple[str, int]]:
        """Return (host, priority) MX pairs for a name."""


def _is_ip_address(value: str) -> bool:
    """Check whether a string is a valid IP address.

    Args:
        value (str): Input string to validate.

    Returns:
        bool: True if the value is a valid IPv4 or IPv6 address.
    """
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def parse_resolver_endpoint(endpoint: str) -> Tuple[str, int]:
    """Split a resolver endpoint into an IP address and port.

    Accepted forms are ``192.0.2.53``, ``192.0.2.53:5353``, ``2001:db8::53``
    and ``[2001:db8::53]:5353``.

    Args:
        endpoint (str): Resolver endpoint text.

    Returns:
        Tuple[str, int]: Normalized IP address and port.

    Raises:
        InvalidResolver: If the host portion is not an IP address or the port is invalid.
    """
    text = str(endpoint or "").strip()
    host = text
    port_text = ""
    if text.startswith("["):
        host, sep, rest = text[1:].partition("]")
        if not sep or (rest and not rest.startswith(":")):
            raise InvalidResolver(endpoint)
        port_text = rest[1:]
    elif text.count(":") == 1:
        host, port_text = text.split(":", 1)

    if not _is_ip_address(host):
        raise InvalidResolver(endpoint)

    port = DEFAULT_DNS_PORT
    if port_text:
        if not port_text.isdigit() or not 0 < int(port_text) < 65536:
            raise InvalidResolver(endpoint)
        port = int(port_text)
    return str(ipaddress.ip_address(host)), port


class DnsLookupError(RuntimeError):
    """Raised when a DNS lookup fails."""

    def __init__(self, record_type: str, name: str, error: Exception) -> None:
        """Initialize a DNS lookup error.

        Args:
            record_type (str): DNS record type being queried.
            name (str): DNS name that failed to resolve.
            error (Exception): Underlying exception.
        """
        super().__init__(f"{record_type} lookup failed for {name}: {error}")
        self.record_type = record_type
        self.name = name
        self.error = error


class DnsResolver:
    """Perform DNS lookups using dnspython."""

    def __init__(
        self,
        nameservers: Optional[Iterable[str]] = None,
        timeout: Optional[float] = None,
        lifetime: Optional[float] = None,
        use_tcp: bool = False,
    ) -> None:
        """Initialize the DNS resolver.

        Args:
            nameservers (Optional[Iterable[str]]): Optional nameserver endpoints (``ip[:port]``).
            timeout (Optional[float]): Per-query timeout in seconds.
            lifetime (Optional[float]): Total timeout across retries in seconds.
            use_tcp (bool): Whether to force TCP for DNS lookups.

        Raises:
            ValueError: If a timeout is not positive.
            InvalidResolver: If a nameserver endpoint is malformed.
        """
        self._resolver = dns.resolver.Resolver()
        if timeout is not None:
            if timeout <= 0:
                raise ValueError("DNS timeout must be a positive number")
            self._resolver.timeout = timeout
        if lifetime is not None:
            if lifetime <= 0:
                raise ValueError("DNS lifetime must be a positive number")
            self._resolver.lifetime = lifetime
        self._resolver.use_tcp = bool(use_tcp)
        if nameservers:
            self._resolver.nameservers = self._normalize_nameservers(nameservers)

    @classmethod
    def from_endpoint(
        cls,
        endpoint: str,
        *,
        timeout: float = ENDPOINT_TIMEOUT,
        lifetime: Optional[float] = None,
        use_tcp: bool = False,
    ) -> "DnsResolver":
        """Build a resolver that sends every query to one endpoint.

        Args:
            endpoint (str): Resolver endpoint (``ip`` or ``ip:port``).
            timeout (float): Per-exchange timeout in seconds.
            lifetime (Optional[float]): Total timeout across retries in seconds.
            use_tcp (bool): Whether to force TCP for DNS lookups.

        Returns:
            DnsResolver: Resolver pinned to the endpoint.

        Raises:
            InvalidResolver: If the endpoint is malformed.
        """
        LOGGER.debug("Using resolver %s", endpoint)
        return cls([endpoint], timeout=timeout, lifetime=lifetime, use_tcp=use_tcp)

    def _normalize_nameservers(
        self, nameservers: Iterable[str]
    ) -> List[Union[str, dns.nameserver.Nameserver]]:
        """Validate nameserver endpoints and drop duplicates.

        Endpoints on the standard port stay plain addresses; others become
        nameserver objects carrying their port.

        Args:
            nameservers (Iterable[str]): Nameserver endpoints (``ip[:port]``).

        Returns:
            List[Union[str, dns.nameserver.Nameserver]]: Nameservers in input order.

        Raises:
            InvalidResolver: If an entry is malformed.
        """
        seen: List[Tuple[str, int]] = []
        resolved: List[Union[str, dns.nameserver.Nameserver]] = []
        for server in nameservers:
            host, port = parse_resolver_endpoint(str(server).strip())
            if (host, port) in seen:
                continue
            seen.append((host, port))
            if port == DEFAULT_DNS_PORT:
                resolved.append(host)
            else:
                resolved.append(dns.nameserver.Do53Nameserver(host, port))
        return resolved

    def get_mx(self, domain: str) -> List[tuple[str, int]]:
        """Resolve MX records for a domain.

        Args:
            domain (str): Domain name to query.

        Returns:
            List[tuple[str, int]]: List of (host, priority) tuples.

        Raises:
            DnsLookupError: If a DNS error occurs during lookup.
        """
        try:
            answers = self._resolver.resolve(domain, "MX")
            records: List[tuple[str, int]] = []
            for rdata in answers:
                host = str(rdata.exchange).lower().rstrip(".") + "."
                records.append((host, int(rdata.preference)))
            return records
        except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer):
            return []
        except dns.exception.DNSException as err:
            LOGGER.warning("MX lookup failed for %s: %s", domain, err)
            raise DnsLookupError("MX", domain, err) from err

    def get_txt(self, domain: str) -> List[str]:
        """Resolve TXT records for a domain.

        Args:
            domain (str): Domain name to query.

        Returns:
            List[str]: TXT record strings.

        Raises:
            DnsLookupError: If a DNS error occurs during lookup.
        """
        try:
            answers = self._resolver.resolve(domain, "TXT")
            records: List[str] = []
            for rdata in answers:
                record = "".join(
                    part.decode(errors="replace") if isinstance(part, bytes) else str(part)
                    for part in rdata.strings
                )
                records.append(record)
            return records
        except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer):
            return []
        except dns.exception.DNSException as err:
            LOGGER.warning("TXT lookup failed for %s: %s", domain, err)
            raise DnsLookupError("TXT", domain, err) from err

    def get_a(self, name: str) -> List[str]:
        """Resolve A records for a DNS name.

        Args:
            name (str): DNS name to query.

        Returns:
            List[str]: IPv4 address strings.

        Raises:
            DnsLookupError: If a DNS error occurs during lookup.
        """
        try:
            answers = self._resolver.resolve(name, "A")
            return [str(rdata.address) for rdata in answers]
        except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer):
            return []
        except dns.exception.DNSException as err:
            LOGGER.warning("A lookup failed for %s: %s", name, err)
            raise DnsLookupError("A", name, err) from err

    def get_aaaa(self, name: str) -> List[str]:
        """Resolve AAAA records for a DNS name.

        Args:
            name (str): DNS name to query.

        Returns:
            List[str]: IPv6 address strings.

        Raises:
            DnsLookupError: If a DNS error occurs during lookup.
        """
        try:
            answers = self._resolver.resolve(name, "AAAA")
            return [str(rdata.address) for rdata in answers]
        except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer):
            return []
        except dns.exception.DNSException as err:
            LOGGER.warning("AAAA lookup failed for %s: %s", name, err)
            raise DnsLookupError("AAAA", name, err) from err


__all__ = [
    "DEFAULT_DNS_PORT",
    "DnsLookupError",
    "DnsResolver",
    "ENDPOINT_TIMEOUT",
    "SpfResolver",
    "parse_resolver_endpoint",
]
