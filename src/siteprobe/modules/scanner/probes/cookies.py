"""Cookie attribute audit."""

from siteprobe.config import ScanSettings

from ..models import Finding, Severity
from ..signals import SignalBag
from .base import probe

REQUIRED_ATTRIBUTES = ("HttpOnly", "Secure", "SameSite")


def parse_set_cookie(raw: str) -> tuple[str, set[str]]:
    """Return the cookie name and its lower-case attribute names."""
    parts = [part.strip() for part in raw.split(";")]
    name = parts[0].split("=", 1)[0].strip() if parts else ""
    attributes = {part.split("=", 1)[0].strip().lower() for part in parts[1:] if part}
    return name, attributes


def missing_attributes(raw: str) -> tuple[str, list[str]]:
    name, attributes = parse_set_cookie(raw)
    return name, [attr for attr in REQUIRED_ATTRIBUTES if attr.lower() not in attributes]


@probe("cookies")
async def audit_cookies(client, bag: SignalBag, settings: ScanSettings) -> list[Finding]:
    """One MEDIUM finding per cookie missing HttpOnly, Secure or SameSite."""
    findings: list[Finding] = []
    for raw in bag.set_cookies:
        name, missing = missing_attributes(raw)
        if not name or not missing:
            continue
        findings.append(
            Finding(
                severity=Severity.MEDIUM,
                category="Cookies",
                title=f"Cookie '{name}' missing security attributes",
                detail=f"Cookie '{name}' is set without: {', '.join(missing)}.",
            )
        )
    return findings
