"""
Runner tests with all three probes replaced by fakes; no network traffic.
"""

import pytest

from netprobe import runner
from netprobe.classify import Thresholds
from netprobe.config import ProbeConfig
from netprobe.models import DnsResult, HttpResult, NetworkSnapshot, PingResult, Severity, TargetKind
from netprobe.targets import GATEWAY_NAME, DNS_SERVER_NAME, make_target


def _ok_ping(address):
    return PingResult(target=address, reachable=True, sent=4, received=4, loss_pct=0,
                      avg_ms=10.0, min_ms=9.0, max_ms=11.0, jitter_ms=1.0, samples_ms=(9.0, 10.0, 11.0, 10.0))


def _dead_ping(address):
    return PingResult(target=address, reachable=False, sent=4, received=0, loss_pct=100,
                      error="no response", error_kind="ping_timeout")


class FakeProbes:
    def __init__(self, dead=(), failing_urls=(), failing_names=()):
        self.calls = []
        self.dead = set(dead)
        self.failing_urls = set(failing_urls)
        self.failing_names = set(failing_names)

    def ping(self, address, count=4, timeout_ms=1000):
        self.calls.append(("ping", address))
        return _dead_ping(address) if address in self.dead else _ok_ping(address)

    def dns(self, hostname, timeout=2.0):
        self.calls.append(("dns", hostname))
        if hostname in self.failing_names:
            return DnsResult(hostname=hostname, success=False, error_message="NXDOMAIN", error_kind="dns_nxdomain")
        return DnsResult(hostname=hostname, success=True, addresses=("192.0.2.80",))

    def http(self, url, timeout=5.0):
        self.calls.append(("web", url))
        if url in self.failing_urls:
            return HttpResult(url=url, success=False, status_code=0, elapsed_ms=5000,
                              error_message="timed out", error_kind="http_timeout")
        return HttpResult(url=url, success=True, status_code=200, elapsed_ms=80)


@pytest.fixture
def probes(monkeypatch):
    fake = FakeProbes()
    monkeypatch.setattr(runner.ping_check, "run_ping", fake.ping)
    monkeypatch.setattr(runner.dns_check, "run_dns", fake.dns)
    monkeypatch.setattr(runner.http_check, "run_http", fake.http)
    return fake


def _config():
    return ProbeConfig(
        ping_count=4,
        ping_timeout_ms=500,
        web_timeout_s=2.0,
        dns_test_domain="www.example.test",
        thresholds=Thresholds(),
        internal_web=[
            make_target("Intranet", "https://intranet.corp.test/", TargetKind.WEB),
            make_target("Printer UI", "http://10.0.0.50/", TargetKind.WEB),
        ],
        external_web=[
            make_target("Example", "https://www.example.test/", TargetKind.WEB),
        ],
        internal_ping=[
            make_target("File server", "fs.corp.test", TargetKind.PING),
        ],
        external_ping=[
            make_target("Cloudflare DNS", "1.1.1.1", TargetKind.PING),
            make_target("Google DNS", "8.8.8.8", TargetKind.PING),
        ],
    )


FULL = NetworkSnapshot(default_gateway="10.0.0.1", primary_dns_server="10.0.0.53")


def test_fixed_category_and_declaration_order(probes):
    runner.run_diagnostics(_config(), FULL)
    assert probes.calls == [
        ("ping", "10.0.0.1"),
        ("ping", "10.0.0.53"),
        ("dns", "www.example.test"),
        ("web", "https://intranet.corp.test/"),
        ("dns", "intranet.corp.test"),
        ("web", "http://10.0.0.50/"),  # literal IP: no DNS probe
        ("web", "https://www.example.test/"),
        ("ping", "fs.corp.test"),
        ("ping", "1.1.1.1"),
        ("ping", "8.8.8.8"),
    ]


def test_result_set_namespaces(probes):
    run = runner.run_diagnostics(_config(), FULL)
    res = run.results
    assert list(res.local) == [GATEWAY_NAME, DNS_SERVER_NAME, "DNS Resolution (www.example.test)"]
    assert list(res.internal_web) == ["Intranet", "Printer UI"]
    assert list(res.internal_dns) == ["Intranet"]
    assert list(res.external_web) == ["Example"]
    assert list(res.internal_ping) == ["File server"]
    assert list(res.external_ping) == ["Cloudflare DNS", "Google DNS"]
    assert len(run.local_checks) == 3
    assert all(c.classification.severity is Severity.OK for c in run.results.all_checks())


def test_all_rollups_true_when_healthy(probes):
    run = runner.run_diagnostics(_config(), FULL)
    assert run.local_network_ok is True
    assert run.internal_services_ok is True
    assert run.internet_services_ok is True
    assert run.skipped == []
    assert run.any_failed is False
    assert run.started_at <= run.finished_at


def test_unresolved_dns_server_is_skipped(probes):
    progress = []
    run = runner.run_diagnostics(
        _config(),
        NetworkSnapshot(default_gateway="10.0.0.1"),
        progress=lambda done, total, label: progress.append((done, total)),
    )
    assert ("ping", "auto:dns-server") not in probes.calls
    assert DNS_SERVER_NAME not in run.results.local
    assert run.skipped == [DNS_SERVER_NAME]
    # skipped target is not a failure
    assert run.results.count(Severity.FAIL) == 0
    # but the local network check cannot pass without it
    assert run.local_network_ok is False
    # 9 probes instead of 10, reported in order
    assert progress == [(i, 9) for i in range(1, 10)]


def test_unreachable_target_does_not_stop_the_run(probes):
    probes.dead.add("10.0.0.1")
    run = runner.run_diagnostics(_config(), FULL)
    assert run.results.local[GATEWAY_NAME].classification.severity is Severity.FAIL
    assert len(probes.calls) == 10
    assert run.local_network_ok is False
    assert run.any_failed is True


def test_internet_rollup_only_counts_external_web(probes):
    probes.failing_urls.add("https://www.example.test/")
    run = runner.run_diagnostics(_config(), FULL)
    assert run.internet_services_ok is False
    # external pings still answer, which does not count
    assert run.results.external_ping["Google DNS"].success is True


def test_internal_rollup_web_or_ping(probes):
    probes.failing_urls.update({"https://intranet.corp.test/", "http://10.0.0.50/"})
    probes.failing_names.add("intranet.corp.test")
    run = runner.run_diagnostics(_config(), FULL)
    # file server ping still works
    assert run.internal_services_ok is True

    probes.dead.add("fs.corp.test")
    run = runner.run_diagnostics(_config(), FULL)
    assert run.internal_services_ok is False


def test_internal_dns_alone_does_not_make_internal_ok(probes):
    cfg = _config()
    cfg.internal_ping = []
    probes.failing_urls.update({"https://intranet.corp.test/", "http://10.0.0.50/"})
    run = runner.run_diagnostics(cfg, FULL)
    # intranet.corp.test still resolves
    assert run.results.internal_dns["Intranet"].success is True
    assert run.internal_services_ok is False


def test_same_name_in_two_groups_keeps_both_results(probes):
    cfg = _config()
    cfg.internal_web = [make_target("Portal", "https://portal.corp.test/", TargetKind.WEB)]
    cfg.external_web = [make_target("Portal", "https://portal.example.test/", TargetKind.WEB)]
    probes.failing_urls.add("https://portal.corp.test/")
    run = runner.run_diagnostics(cfg, FULL)

    assert run.results.internal_web["Portal"].classification.severity is Severity.FAIL
    assert run.results.external_web["Portal"].classification.severity is Severity.OK
    assert run.results.internal_dns["Portal"].result.hostname == "portal.corp.test"
    assert run.results.count(Severity.FAIL) == 1
    assert run.any_failed is True


def test_no_internal_targets_means_internal_not_ok(probes):
    cfg = _config()
    cfg.internal_web = []
    cfg.internal_ping = []
    run = runner.run_diagnostics(cfg, FULL)
    assert run.internal_services_ok is False


def test_config_is_not_mutated_by_resolution(probes):
    cfg = _config()
    runner.run_diagnostics(cfg, FULL)
    assert [t.address for t in cfg.local] == ["auto:gateway", "auto:dns-server"]
