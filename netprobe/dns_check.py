# netprobe/dns_check.py
"""
DNS probe for netprobe.

Uses dnspython for per-call timeouts and precise exceptions. A and AAAA
answers are returned in resolver order, A records first.
"""

import ipaddress
import logging
import time

import dns.exception
import dns.name
import dns.resolver

from .error_kinds import (
    DNS_OK,
    DNS_TEMP_FAILURE,
    DNS_NXDOMAIN,
    DNS_NO_ANSWER,
    DNS_TIMEOUT,
    DNS_BAD_NAME,
    DNS_OTHER,
)
from .models import DnsResult

logger = logging.getLogger(__name__)


def _is_ip(value):
    try:
        ipaddress.ip_address(value)
        return True
    except ValueError:
        return False


def _resolve_addresses(resolver, hostname, timeout):
    """A records, falling back to AAAA when the name has no A records."""
    try:
        answer = resolver.resolve(hostname, "A", lifetime=timeout)
    except dns.resolver.NoAnswer:
        logger.debug("no A records for %s, trying AAAA", hostname)
        answer = resolver.resolve(hostname, "AAAA", lifetime=timeout)
    addresses = []
    for rr in answer:
        text = rr.to_text()
        if text not in addresses:
            addresses.append(text)
    return addresses


def run_dns(hostname, timeout=2.0):
    """
    Resolve `hostname`. Never raises; failures come back with the resolver's
    error text in error_message.

    A literal IP is returned as its own single address without a lookup.
    """
    start = time.monotonic()

    if _is_ip(hostname):
        return DnsResult(hostname=hostname, success=True, addresses=(hostname,))

    addresses = []
    error = ""
    error_kind = DNS_OK
    try:
        resolver = dns.resolver.Resolver()
        addresses = _resolve_addresses(resolver, hostname, timeout)
    except dns.resolver.NXDOMAIN as e:
        error, error_kind = str(e), DNS_NXDOMAIN
    except dns.resolver.NoAnswer as e:
        error, error_kind = str(e), DNS_NO_ANSWER
    except dns.exception.Timeout as e:
        error, error_kind = str(e), DNS_TIMEOUT
    except dns.resolver.NoNameservers as e:
        error, error_kind = str(e), DNS_TEMP_FAILURE
    except (dns.name.EmptyLabel, dns.name.LabelTooLong, dns.name.NameTooLong) as e:
        error, error_kind = str(e), DNS_BAD_NAME
    except Exception as e:
        error, error_kind = str(e) or e.__class__.__name__, DNS_OTHER

    dns_ms = int(round((time.monotonic() - start) * 1000.0))

    if error_kind == DNS_OK and not addresses:
        error, error_kind = f"no addresses returned for {hostname}", DNS_NO_ANSWER

    if error_kind != DNS_OK:
        logger.debug("dns %s failed (%s): %s", hostname, error_kind, error)
        return DnsResult(
            hostname=hostname,
            success=False,
            error_message=error or error_kind,
            error_kind=error_kind,
            elapsed_ms=dns_ms,
        )

    return DnsResult(
        hostname=hostname,
        success=True,
        addresses=tuple(addresses),
        elapsed_ms=dns_ms,
    )
