# netprobe/runner.py
"""
netprobe test runner.

Runs one full, sequential pass over the configured targets and returns a
RunResult for the report renderer.

Order (fixed; within a category the configured order is kept):
  1. local network: gateway ping, DNS server ping, DNS lookup smoke test
  2. internal web targets: HTTP probe + DNS lookup of the URL host
  3. external web targets: HTTP probe
  4. internal ping targets
  5. external ping targets

Targets whose placeholder could not be resolved are skipped and do not
count towards the progress total.
"""

import logging
from datetime import datetime, timezone

from . import ping_check
from . import dns_check
from . import http_check
from .classify import classify_dns, classify_ping, classify_web
from .models import CheckResult, ResultSet, RunResult, Target, TargetKind
from .targets import is_ip_literal, resolve_targets, url_hostname

logger = logging.getLogger(__name__)

DNS_SMOKE_PREFIX = "DNS Resolution"


def _plan(config, snapshot):
    """
    Build the ordered list of steps as (category, probe_type, target, internal).

    Returns (steps, skipped_names).
    """
    steps = []
    skipped = []

    local = resolve_targets(config.local, snapshot)
    for t in local:
        if t.resolved:
            steps.append(("local", "ping", t, None))
        else:
            skipped.append(t.name)
    smoke = Target(
        name=f"{DNS_SMOKE_PREFIX} ({config.dns_test_domain})",
        address=config.dns_test_domain,
        kind=TargetKind.PING,
    )
    steps.append(("local", "dns", smoke, None))

    groups = (
        ("internal_web", "web", True),
        ("external_web", "web", False),
        ("internal_ping", "ping", True),
        ("external_ping", "ping", False),
    )
    for group, probe_type, internal in groups:
        for t in resolve_targets(getattr(config, group), snapshot):
            if not t.resolved:
                skipped.append(t.name)
                continue
            steps.append((group, probe_type, t, internal))
            if group == "internal_web":
                host = url_hostname(t.address)
                if host and not is_ip_literal(host):
                    steps.append((group, "dns", Target(name=t.name, address=host, kind=TargetKind.WEB), internal))

    return steps, skipped


def _run_step(probe_type, target, config):
    if probe_type == "ping":
        res = ping_check.run_ping(target.address, count=config.ping_count, timeout_ms=config.ping_timeout_ms)
        return CheckResult(target, res, classify_ping(res, config.thresholds))
    if probe_type == "dns":
        res = dns_check.run_dns(target.address, timeout=config.web_timeout_s)
        return CheckResult(target, res, classify_dns(res))
    res = http_check.run_http(target.address, timeout=config.web_timeout_s)
    return CheckResult(target, res, classify_web(res, config.thresholds))


def run_diagnostics(config, snapshot, progress=None):
    """
    Run every probe once, in order, and return the RunResult.

    `progress`, if given, is called as progress(completed, total, label)
    after each probe.
    """
    started = datetime.now(timezone.utc)
    steps, skipped = _plan(config, snapshot)
    total = len(steps)

    for name in skipped:
        logger.warning("Skipping %s: no address discovered for it", name)

    results = ResultSet()
    local_checks = []
    internal_ok = False
    internet_ok = False

    logger.info("Running %d checks", total)
    for i, (category, probe_type, target, internal) in enumerate(steps, start=1):
        label = f"{probe_type} {target.name}"
        check = _run_step(probe_type, target, config)

        namespace = "internal_dns" if (category == "internal_web" and probe_type == "dns") else category
        getattr(results, namespace)[target.name] = check
        if category == "local":
            local_checks.append(check)
        elif internal and probe_type in ("web", "ping") and check.success:
            internal_ok = True
        elif category == "external_web" and probe_type == "web" and check.success:
            internet_ok = True

        logger.info(
            "[%3d%%] %s: %s (%s)",
            int(i * 100 / total),
            label,
            check.classification.severity.value,
            check.classification.reason,
        )
        if progress is not None:
            progress(i, total, label)

    # an unresolved gateway or DNS server means the local network is not ok
    local_ok = len(local_checks) == len(config.local) + 1 and all(c.success for c in local_checks)

    return RunResult(
        results=results,
        local_checks=local_checks,
        local_network_ok=local_ok,
        internal_services_ok=internal_ok,
        internet_services_ok=internet_ok,
        snapshot=snapshot,
        skipped=skipped,
        started_at=started,
        finished_at=datetime.now(timezone.utc),
    )
