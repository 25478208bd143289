"""Shared test doubles for SPF resolution tests."""

from __future__ import annotations

from spf_check.dns_resolver import DnsLookupError


def lookup_error(record_type: str, name: str) -> DnsLookupError:
    """Build a transport failure for a lookup."""
    return DnsLookupError(record_type, name, TimeoutError("timed out"))


class FakeResolver:
    """Resolver answering from dictionaries keyed by name.

    A value that is an exception is raised instead of returned. Every lookup
    is recorded in ``queries`` as a ``(record_type, name)`` tuple.
    """

    def __init__(self, txt=None, a=None, aaaa=None, mx=None):
        self.txt = txt or {}
        self.a = a or {}
        self.aaaa = aaaa or {}
        self.mx = mx or {}
        self.queries = []

    def _answer(self, table, record_type, name):
        self.queries.append((record_type, name))
        result = table.get(name, [])
        if isinstance(result, Exception):
            raise result
        return list(result)

    def get_txt(self, domain: str):
        return self._answer(self.txt, "TXT", domain)

    def get_a(self, name: str):
        return self._answer(self.a, "A", name)

    def get_aaaa(self, name: str):
        return self._answer(self.aaaa, "AAAA", name)

    def get_mx(self, domain: str):
        return self._answer(self.mx, "MX", domain)


def scenario_resolver() -> FakeResolver:
    """Zone data shared by the end-to-end tests."""
    return FakeResolver(
        txt={
            "example.org": ["v=spf1 include:_spf.example.net ~all"],
            "_spf.example.net": ["v=spf1 ip4:127.0.0.1/16 ~all"],
            "single.example": [
                "google-site-verification=abc123",
                "v=spf1 ip4:203.0.113.5 -all",
            ],
            "bare.example": ["v=spf1 -all"],
        }
    )
