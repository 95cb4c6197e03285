# netprobe/targets.py
"""
Placeholder resolution for the target list.

Some targets are not known until run time: the default gateway and the
primary DNS server are taken from a NetworkSnapshot. Such targets carry a
placeholder token instead of an address; resolve_targets() returns a new
list with the tokens replaced and never touches the list it was given.
"""

import ipaddress
import logging
from dataclasses import replace
from urllib.parse import urlsplit

from .models import Target, TargetKind

LOG = logging.getLogger("netprobe.targets")

GATEWAY_PLACEHOLDER = "auto:gateway"
DNS_SERVER_PLACEHOLDER = "auto:dns-server"
PLACEHOLDERS = (GATEWAY_PLACEHOLDER, DNS_SERVER_PLACEHOLDER)

GATEWAY_NAME = "Default Gateway"
DNS_SERVER_NAME = "Primary DNS Server"


def make_target(name, address, kind):
    """Build a Target, binding it to a placeholder when address is a token."""
    address = (address or "").strip()
    if address in PLACEHOLDERS:
        return Target(name=name, address=address, kind=kind, placeholder=address, resolved=False)
    return Target(name=name, address=address, kind=kind)


def local_targets():
    """The two local-network targets filled in from the snapshot."""
    return [
        make_target(GATEWAY_NAME, GATEWAY_PLACEHOLDER, TargetKind.PING),
        make_target(DNS_SERVER_NAME, DNS_SERVER_PLACEHOLDER, TargetKind.PING),
    ]


def _snapshot_value(snapshot, placeholder):
    if snapshot is None:
        return None
    if placeholder == GATEWAY_PLACEHOLDER:
        value = snapshot.default_gateway
    else:
        value = snapshot.primary_dns_server
    value = (value or "").strip()
    return value or None


def resolve_target(target, snapshot):
    if target.placeholder is None:
        return target

    value = _snapshot_value(snapshot, target.placeholder)
    if value is not None:
        if target.resolved and target.address == value:
            return target
        LOG.debug("%s resolved to %s", target.name, value)
        return replace(target, address=value, resolved=True)

    if target.address == target.placeholder:
        LOG.debug("%s has no value in the network snapshot; leaving unresolved", target.name)
        return replace(target, resolved=False)
    # already resolved by an earlier snapshot; keep that address
    return target


def resolve_targets(targets, snapshot):
    """Return a new list with every placeholder target resolved against snapshot."""
    return [resolve_target(t, snapshot) for t in targets]


def is_ip_literal(address):
    try:
        ipaddress.ip_address((address or "").strip("[]"))
        return True
    except ValueError:
        return False


def url_hostname(url):
    """Host part of a URL ('' if there is none). Bare host names are accepted too."""
    if "://" not in url:
        url = "//" + url
    try:
        return urlsplit(url).hostname or ""
    except ValueError:
        return ""
