"""
netprobe/net_utils.py

Network-state discovery: default gateway and primary DNS server.

Gateway, first hit wins:
 1) explicit argument / NETPROBE_GATEWAY_IP env var
 2) macOS: `route get default` -> `netstat -rn`
 3) Linux kernel default route: /proc/net/route
 4) `ip route show default`
 5) `route -n`
 6) Windows: `route print -4`

DNS server:
 1) explicit argument / NETPROBE_DNS_SERVER env var
 2) first nameserver from the system resolver config (dnspython reads
    /etc/resolv.conf or the Windows registry)

Nothing here raises; a value that cannot be found is None.
"""
import ipaddress
import logging
import os
import platform
import socket
import struct
import subprocess

import dns.resolver

from .models import NetworkSnapshot

LOG = logging.getLogger("netprobe.net_utils")


def _valid_ipv4(candidate):
    try:
        return ipaddress.IPv4Address(candidate) != ipaddress.IPv4Address("0.0.0.0")
    except ValueError:
        return False


def _run(cmd):
    try:
        return subprocess.check_output(cmd, stderr=subprocess.STDOUT, text=True)
    except (OSError, subprocess.CalledProcessError):
        return None


def _parse_proc_net_route(path="/proc/net/route"):
    """
    Parse /proc/net/route and return gateway IP (string) or None.
    Kernel's default route (Destination 00000000) contains gateway in hex.
    """
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            lines = f.read().splitlines()
    except OSError:
        LOG.debug("Error reading %s", path, exc_info=True)
        return None
    for line in lines[1:]:
        parts = line.strip().split()
        if len(parts) < 3 or parts[1] != "00000000":
            continue
        try:
            gw_ip = socket.inet_ntoa(struct.pack("<L", int(parts[2], 16)))
        except (ValueError, struct.error):
            continue
        if _valid_ipv4(gw_ip):
            return gw_ip
    return None


def _parse_ip_route_default(out):
    """'default via 192.168.1.1 dev eth0 ...' -> '192.168.1.1'"""
    for line in (out or "").splitlines():
        parts = line.strip().split()
        if parts[:1] == ["default"] and "via" in parts:
            idx = parts.index("via")
            if idx + 1 < len(parts) and _valid_ipv4(parts[idx + 1]):
                return parts[idx + 1]
    return None


def _parse_route_n(out):
    for line in (out or "").splitlines():
        cols = line.strip().split()
        if len(cols) < 4 or cols[0] in ("Kernel", "Destination"):
            continue
        if cols[0] == "0.0.0.0" and "G" in cols[3] and _valid_ipv4(cols[1]):
            return cols[1]
    return None


def _parse_darwin_route_get(out):
    """macOS `route get default`: a line like 'gateway: 192.168.1.1'."""
    for line in (out or "").splitlines():
        line = line.strip()
        if line.startswith("gateway:"):
            parts = line.split()
            if len(parts) >= 2 and _valid_ipv4(parts[1]):
                return parts[1]
    return None


def _parse_netstat_rn(out):
    """`netstat -rn` row: 'default  192.168.1.1  UGSc  en0'."""
    for line in (out or "").splitlines():
        cols = line.strip().split()
        if len(cols) >= 2 and cols[0] == "default" and _valid_ipv4(cols[1]):
            return cols[1]
    return None


def _parse_windows_route_print(out):
    """Windows `route print -4`: '0.0.0.0  0.0.0.0  <gateway> ...'."""
    for line in (out or "").splitlines():
        parts = line.strip().split()
        if len(parts) >= 3 and parts[0] == "0.0.0.0" and parts[1] == "0.0.0.0" and _valid_ipv4(parts[2]):
            return parts[2]
    return None


def get_default_gateway_ip():
    """
    Return the default gateway IP (IPv4 dotted string) or None if not found.
    """
    env = os.environ.get("NETPROBE_GATEWAY_IP")
    if env and env.strip():
        LOG.debug("Using NETPROBE_GATEWAY_IP=%s", env)
        return env.strip()

    system = platform.system().lower()

    if system.startswith("darwin"):
        gw = _parse_darwin_route_get(_run(["route", "-n", "get", "default"])) or _parse_netstat_rn(_run(["netstat", "-rn"]))
        if gw:
            LOG.debug("macOS default gateway candidate: %s", gw)
            return gw

    if system.startswith("win"):
        gw = _parse_windows_route_print(_run(["route", "print", "-4"]))
        if gw:
            LOG.debug("Windows default gateway candidate: %s", gw)
        return gw

    gw = _parse_proc_net_route()
    if gw:
        LOG.debug("Kernel default gateway (from /proc/net/route): %s", gw)
        return gw

    gw = _parse_ip_route_default(_run(["ip", "route", "show", "default"]))
    if gw:
        LOG.debug("'ip route show default' candidate: %s", gw)
        return gw

    gw = _parse_route_n(_run(["route", "-n"]))
    if gw:
        LOG.debug("'route -n' candidate: %s", gw)
        return gw

    LOG.debug("No default gateway detected")
    return None


def get_primary_dns_server():
    """Return the first configured DNS server or None."""
    env = os.environ.get("NETPROBE_DNS_SERVER")
    if env and env.strip():
        LOG.debug("Using NETPROBE_DNS_SERVER=%s", env)
        return env.strip()

    try:
        resolver = dns.resolver.Resolver(configure=True)
    except (dns.resolver.NoResolverConfiguration, OSError):
        LOG.debug("No system resolver configuration", exc_info=True)
        return None

    for ns in resolver.nameservers:
        ns = str(ns)
        if ns:
            LOG.debug("Primary DNS server from system config: %s", ns)
            return ns
    return None


def discover_snapshot(gateway=None, dns_server=None):
    """Build a NetworkSnapshot, preferring explicitly given values."""
    return NetworkSnapshot(
        default_gateway=gateway or get_default_gateway_ip(),
        primary_dns_server=dns_server or get_primary_dns_server(),
    )
