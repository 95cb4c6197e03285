# netprobe/ping_check.py
"""
Ping probe for netprobe.

Behavior:
 - Sends `count` sequential ICMP echo requests with ping3, one at a time,
   each bounded by the per-packet timeout.
 - A lost packet (timeout, unreachable, name failure, socket error) is
   counted and the loop moves on; nothing is raised to the caller.
 - If ICMP sockets are not permitted for this process, the remaining
   packets are sent with the system `ping` command instead.
 - Round-trip samples go through stats.summarize_samples().
"""

import logging
import platform
import re
import subprocess
import time

import ping3

from .error_kinds import (
    PING_OK,
    PING_TIMEOUT,
    PING_DNS_FAILURE,
    PING_TOOL_MISSING,
    PING_NO_PERMISSION,
    PING_UNREACHABLE,
    PING_UNKNOWN_ERROR,
)
from .models import PingResult
from .stats import summarize_samples

logger = logging.getLogger(__name__)

_TIME_RE = re.compile(r"time[=<]\s*([\d.]+)\s*ms", re.IGNORECASE)


def _is_permission_error(exc):
    if isinstance(exc, PermissionError):
        return True
    msg = str(exc).lower()
    return "permission" in msg or "operation not permitted" in msg or "errno 1" in msg


def _ping3_once(address, timeout_s):
    """Return (rtt_ms, error_text). rtt_ms is None when the packet was lost."""
    r = ping3.ping(address, timeout=timeout_s, unit="ms")
    if r is None:
        return None, "no response"
    if r is False:
        # ping3 returns False when the name cannot be resolved or the host is unreachable
        return None, "dns failure or host unreachable"
    return float(r), None


def _system_ping_cmd(address, timeout_ms):
    if platform.system().lower().startswith("windows"):
        return ["ping", "-n", "1", "-w", str(max(1, int(timeout_ms))), address]
    w = max(1, int(round(timeout_ms / 1000.0)))
    return ["ping", "-c", "1", "-W", str(w), address]


def _system_ping_once(address, timeout_ms):
    """Return (rtt_ms, error_text) using one invocation of the system ping binary."""
    cmd = _system_ping_cmd(address, timeout_ms)
    start = time.monotonic()
    try:
        completed = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            check=False,
        )
    except FileNotFoundError as e:
        return None, f"ping command not found: {e}"
    except OSError as e:
        return None, str(e)

    elapsed_ms = (time.monotonic() - start) * 1000.0
    stdout = completed.stdout or ""
    stderr = completed.stderr or ""
    low_out = stdout.lower()
    low_err = stderr.lower()

    if completed.returncode == 0 and "destination host unreachable" not in low_out:
        m = _TIME_RE.search(stdout)
        return (float(m.group(1)) if m else elapsed_ms), None

    if "name or service not known" in low_err or "temporary failure in name resolution" in low_err:
        return None, "dns failure"
    if "network is unreachable" in low_err or "destination host unreachable" in low_out:
        return None, "network unreachable"
    if "permission denied" in low_err or "operation not permitted" in low_err:
        return None, "permission denied"
    return None, stderr.strip() or f"ping exited with code {completed.returncode}"


def _error_kind(err):
    err = err.lower()
    if "permission" in err:
        return PING_NO_PERMISSION
    if "dns" in err:
        return PING_DNS_FAILURE
    if "unreachable" in err:
        return PING_UNREACHABLE
    if "not found" in err or "no such file or directory" in err:
        return PING_TOOL_MISSING
    if "timed out" in err or "timeout" in err or "no response" in err:
        return PING_TIMEOUT
    return PING_UNKNOWN_ERROR


def run_ping(address, count=4, timeout_ms=1000):
    """
    Send `count` echo requests to `address`, waiting up to `timeout_ms` for each.

    Always returns a PingResult; only total loss shows up, as reachable=False.
    """
    if count < 1:
        raise ValueError(f"ping count must be >= 1, got {count}")

    timeout_s = timeout_ms / 1000.0
    samples = []
    errors = []
    use_system_ping = False

    for seq in range(count):
        rtt = None
        err = None
        if not use_system_ping:
            try:
                rtt, err = _ping3_once(address, timeout_s)
            except OSError as e:
                if _is_permission_error(e):
                    logger.debug("ICMP socket not permitted (%s); using system ping for %s", e, address)
                    use_system_ping = True
                else:
                    err = str(e)
            except Exception as e:
                # ping3 raises its own error types when EXCEPTIONS is enabled
                err = str(e) or e.__class__.__name__
        if use_system_ping:
            rtt, err = _system_ping_once(address, timeout_ms)

        if rtt is not None:
            samples.append(rtt)
        else:
            logger.debug("ping %s seq=%d lost: %s", address, seq, err)
            errors.append(err or "no response")

    stats = summarize_samples(samples, sent=count)

    error = None
    error_kind = PING_OK
    if not stats.reachable:
        error = errors[0] if errors else "all pings failed"
        error_kind = _error_kind(error)

    return PingResult(
        target=address,
        reachable=stats.reachable,
        sent=stats.sent,
        received=stats.received,
        loss_pct=stats.loss_pct,
        avg_ms=stats.avg_ms,
        min_ms=stats.min_ms,
        max_ms=stats.max_ms,
        jitter_ms=stats.jitter_ms,
        samples_ms=tuple(samples),
        error=error,
        error_kind=error_kind,
    )
