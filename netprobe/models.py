# netprobe/models.py
"""
Typed records shared by the probes, the classifier, the runner and the report.

All records are frozen dataclasses; the resolver and the runner build new
instances instead of mutating existing ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union


class TargetKind(Enum):
    PING = "ping"
    WEB = "web"


class Severity(Enum):
    OK = "OK"
    WARN = "WARN"
    FAIL = "FAIL"


@dataclass(frozen=True)
class Target:
    """A named host / IP / URL to probe."""
    name: str
    address: str
    kind: TargetKind
    placeholder: Optional[str] = None  # auto:gateway / auto:dns-server
    resolved: bool = True


@dataclass(frozen=True)
class NetworkSnapshot:
    default_gateway: Optional[str] = None
    primary_dns_server: Optional[str] = None


@dataclass(frozen=True)
class PingStats:
    """Output of the stats aggregator."""
    reachable: bool
    sent: int
    received: int
    loss_pct: int
    avg_ms: Optional[float] = None
    min_ms: Optional[float] = None
    max_ms: Optional[float] = None
    jitter_ms: Optional[float] = None


@dataclass(frozen=True)
class PingResult:
    target: str
    reachable: bool
    sent: int
    received: int
    loss_pct: int
    avg_ms: Optional[float] = None
    min_ms: Optional[float] = None
    max_ms: Optional[float] = None
    jitter_ms: Optional[float] = None
    samples_ms: Tuple[float, ...] = ()
    error: Optional[str] = None
    error_kind: str = "ok"

    @property
    def success(self) -> bool:
        return self.reachable


@dataclass(frozen=True)
class DnsResult:
    hostname: str
    success: bool
    addresses: Tuple[str, ...] = ()
    error_message: str = ""
    error_kind: str = "ok"
    elapsed_ms: int = 0


@dataclass(frozen=True)
class HttpResult:
    url: str
    success: bool
    status_code: int = 0
    elapsed_ms: int = 0
    error_message: str = ""
    error_kind: str = "ok"


ProbeResult = Union[PingResult, DnsResult, HttpResult]


@dataclass(frozen=True)
class Classification:
    severity: Severity
    reason: str


@dataclass(frozen=True)
class CheckResult:
    """A probe result together with the target it ran against and its verdict."""
    target: Target
    result: ProbeResult
    classification: Classification

    @property
    def success(self) -> bool:
        return self.result.success


RESULT_GROUPS = ("local", "internal_web", "internal_dns", "external_web", "internal_ping", "external_ping")


@dataclass
class ResultSet:
    """
    Results keyed by target name, one namespace per target group.

    Names are only unique within a group, so every group (and the DNS
    lookups paired with internal web targets) gets its own dict. Dict order
    is the run order.
    """
    local: Dict[str, CheckResult] = field(default_factory=dict)
    internal_web: Dict[str, CheckResult] = field(default_factory=dict)
    internal_dns: Dict[str, CheckResult] = field(default_factory=dict)
    external_web: Dict[str, CheckResult] = field(default_factory=dict)
    internal_ping: Dict[str, CheckResult] = field(default_factory=dict)
    external_ping: Dict[str, CheckResult] = field(default_factory=dict)

    def all_checks(self) -> List[CheckResult]:
        out: List[CheckResult] = []
        for group in RESULT_GROUPS:
            out.extend(getattr(self, group).values())
        return out

    def count(self, severity: Severity) -> int:
        return sum(1 for c in self.all_checks() if c.classification.severity == severity)


@dataclass
class RunResult:
    results: ResultSet
    local_checks: List[CheckResult]
    local_network_ok: bool
    internal_services_ok: bool
    internet_services_ok: bool
    snapshot: NetworkSnapshot
    skipped: List[str] = field(default_factory=list)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def any_failed(self) -> bool:
        return self.results.count(Severity.FAIL) > 0
