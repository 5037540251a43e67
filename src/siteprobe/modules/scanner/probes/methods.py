"""HTTP method enumeration and TRACE reflection (XST) check."""

import logging
import re
import secrets

import httpx

from siteprobe.config import ScanSettings
from siteprobe.tools.http import HTTPClient

from ..models import Finding, Severity
from ..signals import SignalBag
from .base import probe

logger = logging.getLogger(__name__)

DANGEROUS_METHODS = frozenset({"PUT", "DELETE", "TRACE", "CONNECT"})
TRACE_MARKER_HEADER = "X-Siteprobe-Trace"

_TRACE_REQUEST_LINE = re.compile(r"^TRACE\s+\S+\s+HTTP/\d", re.MULTILINE)


def parse_methods(*values: str) -> set[str]:
    """Split ``Allow`` style header values into upper-case method names."""
    methods: set[str] = set()
    for value in values:
        for item in value.split(","):
            item = item.strip().upper()
            if item:
                methods.add(item)
    return methods


def is_trace_reflected(body: str, hostname: str, marker: str) -> bool:
    """True when a TRACE response body echoes the request or the target host back."""
    if not body:
        return False
    if marker in body or _TRACE_REQUEST_LINE.search(body):
        return True
    return bool(hostname) and hostname.lower() in body.lower()


@probe("http_methods")
async def enumerate_methods(
    client: HTTPClient, bag: SignalBag, settings: ScanSettings
) -> list[Finding]:
    """OPTIONS for the advertised methods, then a dedicated TRACE request."""
    url = bag.target.url
    try:
        response = await client.request("OPTIONS", url, timeout=settings.method_timeout)
        bag.allowed_methods = parse_methods(
            response.headers.get("allow", ""),
            response.headers.get("access-control-allow-methods", ""),
        )
    except httpx.HTTPError as e:
        logger.debug("OPTIONS %s failed: %s", url, e)

    marker = secrets.token_hex(8)
    try:
        response = await client.request(
            "TRACE",
            url,
            headers={TRACE_MARKER_HEADER: marker},
            timeout=settings.method_timeout,
            follow_redirects=False,
        )
        bag.trace_reflected = 200 <= response.status_code < 300 and is_trace_reflected(
            response.body, bag.target.hostname, marker
        )
    except httpx.HTTPError as e:
        logger.debug("TRACE %s failed: %s", url, e)

    dangerous = (bag.allowed_methods & DANGEROUS_METHODS) - {"TRACE"}
    if bag.trace_reflected:
        dangerous.add("TRACE")
    bag.dangerous_http_methods = dangerous

    findings: list[Finding] = []
    if dangerous:
        methods = ", ".join(sorted(dangerous))
        detail = f"The server accepts potentially dangerous methods: {methods}."
        if "TRACE" in dangerous:
            detail += (
                " TRACE requests are echoed back verbatim, which enables Cross-Site Tracing "
                "(XST) attacks that can expose cookies and authorization headers."
            )
        findings.append(
            Finding(
                severity=Severity.HIGH,
                category="HTTP Methods",
                title="Dangerous HTTP methods enabled",
                detail=detail,
            )
        )
    if "TRACE" in bag.allowed_methods and not bag.trace_reflected:
        findings.append(
            Finding(
                severity=Severity.INFO,
                category="HTTP Methods",
                title="TRACE advertised but not reflected",
                detail="The Allow header lists TRACE, but a TRACE request was not echoed back.",
            )
        )
    return findings
