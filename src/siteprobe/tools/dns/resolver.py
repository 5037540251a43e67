"""Hostname resolution and record lookups."""

import asyncio
import ipaddress
import socket

import dns.asyncresolver
import dns.exception
import dns.resolver

RESOLVER_TIMEOUT = 5.0


def is_ip_address(host: str) -> bool:
    try:
        ipaddress.ip_address(host.strip("[]"))
    except ValueError:
        return False
    return True


def domain_candidates(hostname: str) -> list[str]:
    """Return the hostname and its parents, stopping at two labels.

    ``www.shop.example.com`` -> ``[www.shop.example.com, shop.example.com, example.com]``
    """
    labels = [label for label in hostname.lower().rstrip(".").split(".") if label]
    if len(labels) < 2:
        return [".".join(labels)] if labels else []
    return [".".join(labels[i:]) for i in range(len(labels) - 1)]


async def resolve_host(hostname: str) -> str:
    """Resolve a hostname to its first address.

    Raises ``socket.gaierror`` (an ``OSError``) when resolution fails.
    """
    loop = asyncio.get_running_loop()
    infos = await loop.getaddrinfo(hostname, None, type=socket.SOCK_STREAM)
    if not infos:
        raise socket.gaierror(socket.EAI_NONAME, f"No address for {hostname}")
    return infos[0][4][0]


def _make_resolver(timeout: float) -> dns.asyncresolver.Resolver:
    r = dns.asyncresolver.Resolver()
    r.timeout = timeout
    r.lifetime = timeout
    return r


async def lookup_txt(name: str, timeout: float = RESOLVER_TIMEOUT) -> list[str]:
    """Return all TXT strings for a name; an empty list when none exist.

    Timeouts and resolver failures propagate as ``dns.exception.DNSException``.
    """
    try:
        answers = await _make_resolver(timeout).resolve(name, "TXT")
    except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer):
        return []
    results = []
    for rdata in answers:
        txt = b"".join(rdata.strings).decode("utf-8", errors="replace")
        results.append(txt)
    return results


async def lookup_ns(hostname: str, timeout: float = RESOLVER_TIMEOUT) -> list[str]:
    """Return nameservers for the closest zone that has NS records."""
    resolver = _make_resolver(timeout)
    for candidate in domain_candidates(hostname):
        try:
            answers = await resolver.resolve(candidate, "NS")
        except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer):
            continue
        return sorted(str(rdata.target).rstrip(".").lower() for rdata in answers)
    return []


def mail_domain(hostname: str) -> str:
    """Domain that would publish SPF/DMARC records for a web host."""
    host = hostname.lower().rstrip(".")
    if host.startswith("www.") and host.count(".") >= 2:
        return host[4:]
    return host
