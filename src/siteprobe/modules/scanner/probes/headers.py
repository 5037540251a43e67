"""Security response header audit."""

from siteprobe.config import ScanSettings

from ..models import Finding, Severity
from ..signals import SignalBag
from .base import probe

SECURITY_HEADERS: tuple[tuple[str, Severity, str], ...] = (
    (
        "Strict-Transport-Security",
        Severity.HIGH,
        "Enable HSTS to prevent SSL stripping attacks.",
    ),
    (
        "Content-Security-Policy",
        Severity.MEDIUM,
        "Define a CSP to prevent cross-site scripting (XSS) and data injection.",
    ),
    (
        "X-Frame-Options",
        Severity.MEDIUM,
        "Add 'X-Frame-Options: DENY' or 'SAMEORIGIN' to prevent clickjacking.",
    ),
    (
        "X-Content-Type-Options",
        Severity.LOW,
        "Add 'X-Content-Type-Options: nosniff' to prevent MIME-type sniffing.",
    ),
    (
        "Referrer-Policy",
        Severity.LOW,
        "Set a 'Referrer-Policy' (e.g., 'strict-origin-when-cross-origin') to control "
        "how much referrer information is shared.",
    ),
    (
        "Permissions-Policy",
        Severity.LOW,
        "Implement a 'Permissions-Policy' to restrict browser features like camera, "
        "microphone, or geolocation.",
    ),
)


@probe("security_headers")
async def audit_security_headers(client, bag: SignalBag, settings: ScanSettings) -> list[Finding]:
    """One finding per missing security header."""
    return [
        Finding(
            severity=severity,
            category="Security Headers",
            title=f"Missing {header}",
            detail=advice,
        )
        for header, severity, advice in SECURITY_HEADERS
        if not bag.header(header)
    ]
