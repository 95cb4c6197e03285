# netprobe/classify.py
"""
Threshold classification of probe results.

classify_ping(), classify_web() and classify_dns() are pure functions: given
a result and the thresholds they return a Classification(severity, reason).

Ping checks are evaluated in a fixed order and the first match wins:

    unreachable
    avg latency >= fail, loss >= fail, jitter >= fail      -> FAIL
    avg latency >= warn, loss >= warn, jitter >= warn      -> WARN
    otherwise                                              -> OK

A threshold of 0 disables its check, as does a metric that was not measured.
"""

from dataclasses import dataclass

from .models import Classification, Severity


@dataclass(frozen=True)
class Thresholds:
    ping_avg_warn_ms: float = 50
    ping_avg_fail_ms: float = 150
    ping_loss_warn_pct: float = 1
    ping_loss_fail_pct: float = 10
    ping_jitter_warn_ms: float = 10
    ping_jitter_fail_ms: float = 30
    web_warn_ms: float = 1000
    web_fail_ms: float = 3000


def _fmt(value):
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _crossed(value, limit):
    return limit > 0 and value is not None and value >= limit


def _ping_checks(result, t, level):
    if level is Severity.FAIL:
        return (
            ("avg latency", result.avg_ms, t.ping_avg_fail_ms, " ms"),
            ("packet loss", result.loss_pct, t.ping_loss_fail_pct, "%"),
            ("jitter", result.jitter_ms, t.ping_jitter_fail_ms, " ms"),
        )
    return (
        ("avg latency", result.avg_ms, t.ping_avg_warn_ms, " ms"),
        ("packet loss", result.loss_pct, t.ping_loss_warn_pct, "%"),
        ("jitter", result.jitter_ms, t.ping_jitter_warn_ms, " ms"),
    )


def classify_ping(result, thresholds):
    if result is None or not result.reachable:
        return Classification(Severity.FAIL, "unreachable")

    for level in (Severity.FAIL, Severity.WARN):
        for metric, value, limit, unit in _ping_checks(result, thresholds, level):
            if _crossed(value, limit):
                return Classification(
                    level,
                    f"{metric} {_fmt(value)}{unit} >= {level.value.lower()} threshold {_fmt(limit)}{unit}",
                )

    return Classification(
        Severity.OK,
        f"avg latency {_fmt(result.avg_ms)} ms, packet loss {result.loss_pct}%, jitter {_fmt(result.jitter_ms)} ms",
    )


def classify_web(result, thresholds):
    if result is None:
        return Classification(Severity.FAIL, "no result")
    if not result.success:
        if result.status_code:
            return Classification(Severity.FAIL, f"HTTP status {result.status_code}")
        return Classification(Severity.FAIL, f"no response ({result.error_message or result.error_kind})")

    elapsed = result.elapsed_ms
    if _crossed(elapsed, thresholds.web_fail_ms):
        return Classification(
            Severity.FAIL,
            f"response time {elapsed} ms >= fail threshold {_fmt(thresholds.web_fail_ms)} ms",
        )
    if _crossed(elapsed, thresholds.web_warn_ms):
        return Classification(
            Severity.WARN,
            f"response time {elapsed} ms >= warn threshold {_fmt(thresholds.web_warn_ms)} ms",
        )
    return Classification(Severity.OK, f"HTTP status {result.status_code} in {elapsed} ms")


def classify_dns(result):
    if result is None:
        return Classification(Severity.FAIL, "no result")
    if not result.success:
        return Classification(Severity.FAIL, f"lookup failed: {result.error_message}")
    return Classification(Severity.OK, "resolved to " + ", ".join(result.addresses))
