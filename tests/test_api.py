import threading

import pytest

import spf_check
from spf_check import api
from spf_check.dns_resolver import DnsLookupError
from spf_check.errors import InvalidResolver, SpfRecordInvalid, SpfRecordNotFound
from spf_check.status import Verdict

from tests.dns_resolver_support import make_dummy_resolver
from tests.support import FakeResolver, lookup_error, scenario_resolver


@pytest.fixture(autouse=True)
def _reset_default_resolver():
    api.reset_resolver()
    yield
    api.reset_resolver()


def test_package_exports_public_api() -> None:
    assert spf_check.get is api.get
    assert spf_check.set_resolver is api.set_resolver
    assert spf_check.Verdict is Verdict
    for name in ("get", "set_resolver", "reset_resolver", "PolicyNode", "SpfRecordNotFound"):
        assert name in api.__all__


def test_include_scenario_passes_contained_address() -> None:
    node = api.get("example.org", scenario_resolver())

    assert [child.domain for child in node.includes] == ["_spf.example.net"]
    assert [entry.entry for entry in node.allowlist] == ["ip4:127.0.0.1/16"]
    assert node.validate("127.0.0.16") == (Verdict.PASS, True)
    assert node.validate("10.1.1.1") == (Verdict.SOFTFAIL, False)


def test_minimal_record_is_invalid() -> None:
    with pytest.raises(SpfRecordInvalid):
        api.get("bare.example", scenario_resolver())


def test_spf_record_is_selected_among_other_txt_values() -> None:
    node = api.get("single.example", scenario_resolver())

    assert node.record == "v=spf1 ip4:203.0.113.5 -all"
    assert node.validate("203.0.113.5") == (Verdict.PASS, True)
    assert node.validate("203.0.113.6") == (Verdict.FAIL, False)


def test_missing_record_raises_not_found() -> None:
    with pytest.raises(SpfRecordNotFound):
        api.get("nothing.example", scenario_resolver())


def test_root_transport_failure_is_fatal() -> None:
    resolver = FakeResolver(txt={"example.org": lookup_error("TXT", "example.org")})

    with pytest.raises(DnsLookupError):
        api.get("example.org", resolver)


def test_broken_include_only_shows_in_errors() -> None:
    resolver = FakeResolver(
        txt={
            "example.org": ["v=spf1 include:gone.example include:ok.example ip4:192.0.2.1 -all"],
            "ok.example": ["v=spf1 ip4:198.51.100.0/24 -all"],
        }
    )

    node = api.get("example.org", resolver)

    assert [entry.entry for entry in node.allowlist] == ["ip4:198.51.100.0/24", "ip4:192.0.2.1"]
    assert [type(error) for error in node.errors] == [SpfRecordNotFound]
    assert node.validate("198.51.100.7") == (Verdict.PASS, True)


def test_get_uses_default_resolver(monkeypatch) -> None:
    resolver = scenario_resolver()
    monkeypatch.setattr(api, "_default_resolver", resolver)

    node = api.get("example.org")

    assert node.validate("127.0.0.16") == (Verdict.PASS, True)
    assert resolver.queries[0] == ("TXT", "example.org")


def test_get_passes_max_depth() -> None:
    resolver = scenario_resolver()

    node = api.get("example.org", resolver, max_depth=0)

    assert node.includes == []
    assert node.allowlist == []
    assert node.validate("127.0.0.16") == (Verdict.SOFTFAIL, False)


def test_set_resolver_replaces_default(monkeypatch) -> None:
    dummy = make_dummy_resolver(monkeypatch)

    resolver = api.set_resolver("127.0.0.1:53")

    assert api.get_default_resolver() is resolver
    assert dummy.nameservers == ["127.0.0.1"]
    assert dummy.timeout == 1.5


def test_set_resolver_rejects_invalid_endpoint_without_changes(monkeypatch) -> None:
    make_dummy_resolver(monkeypatch)
    current = api.set_resolver("127.0.0.1")

    with pytest.raises(InvalidResolver) as exc:
        api.set_resolver("resolver.example:53")

    assert str(exc.value) == "'resolver.example:53' is an invalid resolver"
    assert api.get_default_resolver() is current


def test_default_resolver_is_shared_between_threads(monkeypatch) -> None:
    make_dummy_resolver(monkeypatch)
    seen = []

    def _worker():
        seen.append(api.get_default_resolver())

    threads = [threading.Thread(target=_worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len({id(resolver) for resolver in seen}) == 1


def test_a_answers_authorize_sender_when_aaaa_lookup_fails() -> None:
    resolver = FakeResolver(
        txt={"example.org": ["v=spf1 a -all"]},
        a={"example.org": ["192.0.2.10"]},
        aaaa={"example.org": lookup_error("AAAA", "example.org")},
    )

    node = api.get("example.org", resolver)

    assert node.validate("192.0.2.10") == (Verdict.PASS, True)
    assert [type(error) for error in node.all_errors()] == [DnsLookupError]
