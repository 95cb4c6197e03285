import dns.exception
import dns.resolver
import pytest

from netprobe import dns_check
from netprobe.error_kinds import DNS_OK, DNS_NXDOMAIN, DNS_TIMEOUT, DNS_TEMP_FAILURE


class _RR:
    def __init__(self, text):
        self._text = text

    def to_text(self):
        return self._text


def _fake_resolver(answers):
    """answers: {rdtype: list of str or an exception instance}"""

    class FakeResolver:
        queries = []

        def __init__(self, *a, **k):
            pass

        def resolve(self, qname, rdtype="A", lifetime=None, **kwargs):
            FakeResolver.queries.append((qname, rdtype, lifetime))
            ans = answers[rdtype]
            if isinstance(ans, Exception):
                raise ans
            return [_RR(a) for a in ans]

    return FakeResolver


def test_success_returns_ordered_addresses(monkeypatch):
    fake = _fake_resolver({"A": ["192.0.2.10", "192.0.2.11", "192.0.2.10"]})
    monkeypatch.setattr(dns_check.dns.resolver, "Resolver", fake)
    r = dns_check.run_dns("www.example.test", timeout=1.5)
    assert r.success is True
    assert r.addresses == ("192.0.2.10", "192.0.2.11")
    assert r.error_message == ""
    assert r.error_kind == DNS_OK
    assert fake.queries == [("www.example.test", "A", 1.5)]
    assert isinstance(r.elapsed_ms, int)


def test_nxdomain(monkeypatch):
    monkeypatch.setattr(dns_check.dns.resolver, "Resolver", _fake_resolver({"A": dns.resolver.NXDOMAIN()}))
    r = dns_check.run_dns("nonexistent.invalid")
    assert r.success is False
    assert r.addresses == ()
    assert r.error_message
    assert r.error_kind == DNS_NXDOMAIN


def test_timeout(monkeypatch):
    monkeypatch.setattr(dns_check.dns.resolver, "Resolver", _fake_resolver({"A": dns.exception.Timeout()}))
    r = dns_check.run_dns("slow.example.test", timeout=0.1)
    assert r.success is False
    assert r.error_kind == DNS_TIMEOUT
    assert r.error_message


def test_no_nameservers(monkeypatch):
    monkeypatch.setattr(dns_check.dns.resolver, "Resolver", _fake_resolver({"A": dns.resolver.NoNameservers()}))
    r = dns_check.run_dns("example.test")
    assert r.success is False
    assert r.error_kind == DNS_TEMP_FAILURE


def test_aaaa_used_when_no_a_records(monkeypatch):
    fake = _fake_resolver({"A": dns.resolver.NoAnswer(), "AAAA": ["2001:db8::1"]})
    monkeypatch.setattr(dns_check.dns.resolver, "Resolver", fake)
    r = dns_check.run_dns("v6only.example.test")
    assert r.success is True
    assert r.addresses == ("2001:db8::1",)


@pytest.mark.parametrize("ip", ["10.0.0.1", "2001:db8::53"])
def test_ip_literal_is_not_looked_up(monkeypatch, ip):
    def boom(*a, **k):
        raise AssertionError("resolver must not be used for an IP literal")

    monkeypatch.setattr(dns_check.dns.resolver, "Resolver", boom)
    r = dns_check.run_dns(ip)
    assert r.success is True
    assert r.addresses == (ip,)


def test_unexpected_error_is_captured(monkeypatch):
    monkeypatch.setattr(dns_check.dns.resolver, "Resolver", _fake_resolver({"A": RuntimeError("resolver exploded")}))
    r = dns_check.run_dns("example.test")
    assert r.success is False
    assert r.error_message == "resolver exploded"
