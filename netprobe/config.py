# netprobe/config.py
"""
Configuration for a netprobe run.

The built-in defaults live in targets_config. A JSON file can override any
part of them:

    {
      "ping": {"count": 4, "timeout_ms": 1000},
      "web": {"timeout_s": 5.0},
      "dns_test_domain": "www.google.com",
      "thresholds": {"ping_avg_warn_ms": 50, ...},
      "targets": {
        "internal_web":  [{"name": "Intranet", "address": "https://intranet.example/"}],
        "internal_ping": [...],
        "external_web":  [...],
        "external_ping": [...]
      }
    }

Everything is validated here, so a run never starts on a bad config.
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import targets_config
from .classify import Thresholds
from .models import Target, TargetKind
from .targets import local_targets, make_target

logger = logging.getLogger(__name__)

GROUP_KINDS = {
    "internal_ping": TargetKind.PING,
    "external_ping": TargetKind.PING,
    "internal_web": TargetKind.WEB,
    "external_web": TargetKind.WEB,
}

TOP_LEVEL_KEYS = {"ping", "web", "dns_test_domain", "thresholds", "targets"}


class ConfigError(ValueError):
    """Raised when a configuration cannot be used for a run."""


@dataclass
class ProbeConfig:
    ping_count: int = targets_config.PING_COUNT
    ping_timeout_ms: int = targets_config.PING_TIMEOUT_MS
    web_timeout_s: float = targets_config.WEB_TIMEOUT_S
    dns_test_domain: str = targets_config.DNS_TEST_DOMAIN
    thresholds: Thresholds = field(default_factory=Thresholds)
    internal_ping: List[Target] = field(default_factory=list)
    external_ping: List[Target] = field(default_factory=list)
    internal_web: List[Target] = field(default_factory=list)
    external_web: List[Target] = field(default_factory=list)
    local: List[Target] = field(default_factory=local_targets)

    def to_dict(self) -> Dict[str, Any]:
        def _targets(items):
            return [{"name": t.name, "address": t.address} for t in items]

        return {
            "ping": {"count": self.ping_count, "timeout_ms": self.ping_timeout_ms},
            "web": {"timeout_s": self.web_timeout_s},
            "dns_test_domain": self.dns_test_domain,
            "thresholds": asdict(self.thresholds),
            "targets": {group: _targets(getattr(self, group)) for group in GROUP_KINDS},
        }


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


def _defaults_dict() -> Dict[str, Any]:
    return {
        "ping": {"count": targets_config.PING_COUNT, "timeout_ms": targets_config.PING_TIMEOUT_MS},
        "web": {"timeout_s": targets_config.WEB_TIMEOUT_S},
        "dns_test_domain": targets_config.DNS_TEST_DOMAIN,
        "thresholds": dict(targets_config.THRESHOLDS),
        "targets": copy.deepcopy(targets_config.TARGETS),
    }


def _number(value, what, allow_zero=True):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{what} must be a number, got {value!r}")
    if value < 0 or (value == 0 and not allow_zero):
        raise ConfigError(f"{what} must be {'>= 0' if allow_zero else '> 0'}, got {value!r}")
    return value


def _build_thresholds(raw: Dict[str, Any]) -> Thresholds:
    known = {f.name for f in fields(Thresholds)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"unknown threshold(s): {', '.join(unknown)}")

    values = {k: _number(v, f"thresholds.{k}") for k, v in raw.items()}
    t = Thresholds(**values)

    pairs = (
        ("ping_avg_warn_ms", "ping_avg_fail_ms"),
        ("ping_loss_warn_pct", "ping_loss_fail_pct"),
        ("ping_jitter_warn_ms", "ping_jitter_fail_ms"),
        ("web_warn_ms", "web_fail_ms"),
    )
    for warn_key, fail_key in pairs:
        warn, fail = getattr(t, warn_key), getattr(t, fail_key)
        if warn > 0 and fail > 0 and warn > fail:
            raise ConfigError(f"thresholds.{warn_key} ({warn}) is above thresholds.{fail_key} ({fail})")
    if t.ping_loss_fail_pct > 100 or t.ping_loss_warn_pct > 100:
        raise ConfigError("packet loss thresholds must be within 0..100")
    return t


def _build_group(group: str, raw: Any) -> List[Target]:
    if not isinstance(raw, list):
        raise ConfigError(f"targets.{group} must be a list")
    kind = GROUP_KINDS[group]
    seen = set()
    out = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ConfigError(f"targets.{group}[{i}] must be an object with name and address")
        name = str(item.get("name") or "").strip()
        address = str(item.get("address") or "").strip()
        if not name or not address:
            raise ConfigError(f"targets.{group}[{i}] needs a non-empty name and address")
        if name in seen:
            raise ConfigError(f"duplicate target name {name!r} in targets.{group}")
        seen.add(name)
        out.append(make_target(name, address, kind))
    return out


def build_config(raw: Dict[str, Any]) -> ProbeConfig:
    """Validate a config dict (already merged over the defaults)."""
    unknown = sorted(set(raw) - TOP_LEVEL_KEYS)
    if unknown:
        raise ConfigError(f"unknown config key(s): {', '.join(unknown)}")

    ping = raw.get("ping") or {}
    web = raw.get("web") or {}
    count = ping.get("count")
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise ConfigError(f"ping.count must be an integer >= 1, got {count!r}")
    timeout_ms = _number(ping.get("timeout_ms"), "ping.timeout_ms", allow_zero=False)
    web_timeout = _number(web.get("timeout_s"), "web.timeout_s", allow_zero=False)

    domain = str(raw.get("dns_test_domain") or "").strip()
    if not domain:
        raise ConfigError("dns_test_domain must not be empty")

    targets = raw.get("targets") or {}
    unknown_groups = sorted(set(targets) - set(GROUP_KINDS))
    if unknown_groups:
        raise ConfigError(f"unknown target group(s): {', '.join(unknown_groups)}")

    return ProbeConfig(
        ping_count=count,
        ping_timeout_ms=int(timeout_ms),
        web_timeout_s=float(web_timeout),
        dns_test_domain=domain,
        thresholds=_build_thresholds(raw.get("thresholds") or {}),
        **{group: _build_group(group, targets.get(group, [])) for group in GROUP_KINDS},
    )


def default_config() -> ProbeConfig:
    return build_config(_defaults_dict())


def load_config(path: Optional[str] = None) -> ProbeConfig:
    """
    Load a JSON config file and merge it over the built-in defaults.
    With no path, the defaults are returned.
    """
    if path is None:
        return default_config()

    p = Path(path).expanduser()
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"cannot read config file {p}: {e}") from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid JSON in {p}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config file {p} must contain a JSON object")

    logger.debug("Loaded config from %s", p)
    return build_config(_merge(_defaults_dict(), data))
