"""Error types raised while resolving and validating SPF policies."""

from __future__ import annotations

from typing import Iterable


class SpfError(Exception):
    """Base class for SPF resolution failures.

    Attributes:
        domain (str): Domain whose policy was being resolved.
    """

    def __init__(self, message: str, domain: str = "") -> None:
        """Initialize an SPF error.

        Args:
            message (str): Human-readable error message.
            domain (str): Domain whose policy was being resolved.
        """
        super().__init__(message)
        self.domain = domain


class SpfRecordNotFound(SpfError):
    """Raised when no TXT value for a domain carries the SPF version tag."""

    def __init__(self, domain: str) -> None:
        """Initialize a missing record error.

        Args:
            domain (str): Domain that was queried.
        """
        super().__init__(f"could not find SPF record for {domain}", domain)


class SpfRecordInvalid(SpfError):
    """Raised when an SPF record has too few terms to be evaluated.

    Attributes:
        record (str): Offending record text.
    """

    def __init__(self, domain: str, record: str) -> None:
        """Initialize an invalid record error.

        Args:
            domain (str): Domain that published the record.
            record (str): Offending record text.
        """
        super().__init__(f"'{domain}' returned an invalid spf record, '{record}'", domain)
        self.record = record


class SpfMechanismInvalid(SpfError):
    """Raised when an ``ip4:``/``ip6:`` mechanism does not describe a network.

    Attributes:
        entry (str): Offending mechanism token.
    """

    def __init__(self, domain: str, entry: str) -> None:
        """Initialize an invalid mechanism error.

        Args:
            domain (str): Domain that published the record.
            entry (str): Offending mechanism token.
        """
        super().__init__(f"'{domain}' has an invalid network mechanism, '{entry}'", domain)
        self.entry = entry


class SpfValidationFailed(SpfError):
    """Raised when a candidate sender address cannot be validated.

    Attributes:
        ip (str): Candidate address that failed to parse.
    """

    def __init__(self, domain: str, ip: str = "") -> None:
        """Initialize a validation error.

        Args:
            domain (str): Domain whose policy was evaluated.
            ip (str): Candidate address that failed to parse.
        """
        message = f"could not validate SPF record for {domain}"
        if ip:
            message = f"{message}: '{ip}' is not an IP address"
        super().__init__(message, domain)
        self.ip = ip


class SpfIncludeLoop(SpfError):
    """Raised when an include chain leads back to a domain already on the path.

    Attributes:
        path (list[str]): Include chain ending with the repeated domain.
    """

    def __init__(self, domain: str, path: Iterable[str]) -> None:
        """Initialize an include loop error.

        Args:
            domain (str): Domain that was reached a second time.
            path (Iterable[str]): Include chain from the root to the repeated domain.
        """
        self.path = list(path)
        super().__init__(f"Include loop: {' -> '.join(self.path)}", domain)


class SpfLookupLimitExceeded(SpfError):
    """Raised when include nesting exceeds the configured depth.

    Attributes:
        max_depth (int): Configured maximum include depth.
    """

    def __init__(self, domain: str, max_depth: int) -> None:
        """Initialize a depth limit error.

        Args:
            domain (str): Domain that would have exceeded the limit.
            max_depth (int): Configured maximum include depth.
        """
        super().__init__(
            f"include of {domain} exceeds the maximum include depth of {max_depth}", domain
        )
        self.max_depth = max_depth


class InvalidResolver(ValueError):
    """Raised when a resolver endpoint does not name an IP address.

    Attributes:
        resolver (str): Rejected endpoint value.
    """

    def __init__(self, resolver: str) -> None:
        """Initialize an invalid resolver error.

        Args:
            resolver (str): Rejected endpoint value.
        """
        super().__init__(f"'{resolver}' is an invalid resolver")
        self.resolver = resolver


__all__ = [
    "InvalidResolver",
    "SpfError",
    "SpfIncludeLoop",
    "SpfLookupLimitExceeded",
    "SpfMechanismInvalid",
    "SpfRecordInvalid",
    "SpfRecordNotFound",
    "SpfValidationFailed",
]
