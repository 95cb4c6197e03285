# netprobe/report.py
"""
Text report for a netprobe run.

render_report() is a pure function of the RunResult; write_report() is the
only place that touches the filesystem.
"""
from __future__ import annotations

import socket
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .config import ProbeConfig
from .models import CheckResult, DnsResult, HttpResult, PingResult, RunResult, Severity

WIDTH = 60


def _section(title: str) -> List[str]:
    return ["", "=" * WIDTH, title, "=" * WIDTH]


def _fmt_time(ts: Optional[datetime]) -> str:
    if ts is None:
        return "-"
    return ts.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


def _ms(v) -> str:
    return "-" if v is None else f"{v} ms"


def _yes_no(ok: bool, good: str, bad: str) -> str:
    return good if ok else bad


def _end_user(run: RunResult) -> List[str]:
    lines = _section("Summary")
    lines.append(_yes_no(
        run.local_network_ok,
        "Local network: OK - your computer is connected to the network.",
        "Local network: PROBLEM - the router or DNS server is not responding properly.",
    ))
    lines.append(_yes_no(
        run.internal_services_ok,
        "Company services: OK - at least one internal service is reachable.",
        "Company services: PROBLEM - no internal service could be reached.",
    ))
    lines.append(_yes_no(
        run.internet_services_ok,
        "Internet: OK - at least one public web site is reachable.",
        "Internet: PROBLEM - no public web site could be reached.",
    ))
    return lines


def _check_line(kind: str, check: CheckResult) -> str:
    c = check.classification
    return f"  [{c.severity.value:<4}] {kind:<4} {check.target.name}: {c.reason}"


def _ordered_checks(run: RunResult):
    """(kind, check) in run order: local, internal web + dns, external web, pings."""
    res = run.results
    out = []
    for c in run.local_checks:
        out.append(("dns" if isinstance(c.result, DnsResult) else "ping", c))
    for name, c in res.internal_web.items():
        out.append(("web", c))
        dns = res.internal_dns.get(name)
        if dns is not None:
            out.append(("dns", dns))
    out.extend(("web", c) for c in res.external_web.values())
    out.extend(("ping", c) for c in res.internal_ping.values())
    out.extend(("ping", c) for c in res.external_ping.values())
    return out


def _helpdesk(run: RunResult) -> List[str]:
    lines = _section("Helpdesk summary")
    for kind, check in _ordered_checks(run):
        lines.append(_check_line(kind, check))
    lines.append("")
    lines.append(
        f"  Totals: {run.results.count(Severity.OK)} OK, "
        f"{run.results.count(Severity.WARN)} WARN, "
        f"{run.results.count(Severity.FAIL)} FAIL"
    )
    if run.skipped:
        lines.append(f"  Not tested (address unknown): {', '.join(run.skipped)}")
    return lines


def _detail(check: CheckResult) -> List[str]:
    r = check.result
    head = f"{check.target.name} [{check.classification.severity.value}]"
    if isinstance(r, PingResult):
        lines = [
            f"{head} ping {r.target}",
            f"    sent={r.sent} received={r.received} loss={r.loss_pct}%",
            f"    min={_ms(r.min_ms)} avg={_ms(r.avg_ms)} max={_ms(r.max_ms)} jitter={_ms(r.jitter_ms)}",
        ]
        if r.samples_ms:
            lines.append("    samples=" + "|".join(f"{x:.1f}" for x in r.samples_ms))
        if r.error:
            lines.append(f"    error={r.error_kind}: {r.error}")
        return lines
    if isinstance(r, DnsResult):
        lines = [f"{head} dns {r.hostname} ({r.elapsed_ms} ms)"]
        if r.success:
            lines.append("    addresses=" + ", ".join(r.addresses))
        else:
            lines.append(f"    error={r.error_kind}: {r.error_message}")
        return lines
    if isinstance(r, HttpResult):
        lines = [
            f"{head} web {r.url}",
            f"    status={r.status_code or 'no response'} elapsed={r.elapsed_ms} ms",
        ]
        if r.error_message:
            lines.append(f"    error={r.error_kind}: {r.error_message}")
        return lines
    return [head]


def _engineer(run: RunResult, config: ProbeConfig) -> List[str]:
    lines = _section("Network engineer detail")
    snap = run.snapshot
    lines.append(f"Default gateway   : {snap.default_gateway or 'not found'}")
    lines.append(f"Primary DNS server: {snap.primary_dns_server or 'not found'}")
    lines.append(
        f"Ping: count={config.ping_count} timeout={config.ping_timeout_ms} ms; "
        f"web timeout={config.web_timeout_s} s"
    )
    lines.append("Thresholds (0 = disabled):")
    for k, v in asdict(config.thresholds).items():
        lines.append(f"  {k}: {v}")
    lines.append("")
    for _, check in _ordered_checks(run):
        lines.extend(_detail(check))
    return lines


def render_report(run: RunResult, config: ProbeConfig, hostname: Optional[str] = None) -> str:
    host = hostname or socket.gethostname()
    lines = [
        f"Network diagnostics for {host}",
        f"Started : {_fmt_time(run.started_at)}",
        f"Finished: {_fmt_time(run.finished_at)}",
    ]
    lines += _end_user(run)
    lines += _helpdesk(run)
    lines += _engineer(run, config)
    return "\n".join(lines) + "\n"


def write_report(text: str, directory: str, hostname: Optional[str] = None, when: Optional[datetime] = None) -> Path:
    """Write the report as netprobe-<host>-<YYYYmmdd-HHMMSS>.txt and return its path."""
    host = hostname or socket.gethostname()
    when = when or datetime.now()
    out_dir = Path(directory).expanduser()
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / f"netprobe-{host}-{when.strftime('%Y%m%d-%H%M%S')}.txt"
    path.write_text(text, encoding="utf-8")
    return path
