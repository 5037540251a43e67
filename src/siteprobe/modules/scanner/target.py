"""Target validation and resolution."""

import logging
from urllib.parse import urlparse

from siteprobe.exceptions import InvalidInput, UnresolvableTarget
from siteprobe.tools.dns import resolve_host

from .models import Target

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("http", "https")


def parse_target(url: str) -> Target:
    """Validate an absolute http(s) URL without touching the network."""
    if not isinstance(url, str) or not url.strip():
        raise InvalidInput("A URL is required.")
    url = url.strip()
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
        port = parsed.port
    except ValueError as e:
        raise InvalidInput(f"Invalid URL: {e}") from e

    scheme = parsed.scheme.lower()
    if not scheme or not parsed.netloc:
        raise InvalidInput("Please enter a valid absolute URL (e.g. https://example.com).")
    if scheme not in ALLOWED_SCHEMES:
        raise InvalidInput(f"Unsupported URL scheme '{scheme}'; use http or https.")
    if not hostname or any(ch.isspace() for ch in url):
        raise InvalidInput("Please enter a valid absolute URL (e.g. https://example.com).")

    host = f"[{hostname}]" if ":" in hostname else hostname
    return Target(
        url=url,
        scheme=scheme,
        hostname=hostname,
        origin=f"{scheme}://{host}" + (f":{port}" if port else ""),
    )


async def resolve_target(url: str) -> Target:
    """Validate the URL and resolve its hostname; the only fatal scan step."""
    target = parse_target(url)
    try:
        ip = await resolve_host(target.hostname)
    except (OSError, UnicodeError) as e:
        logger.info("DNS resolution failed for %s: %s", target.hostname, e)
        raise UnresolvableTarget(f"Could not resolve host '{target.hostname}'.") from e
    return Target(
        url=target.url,
        scheme=target.scheme,
        hostname=target.hostname,
        origin=target.origin,
        ip=ip,
    )
