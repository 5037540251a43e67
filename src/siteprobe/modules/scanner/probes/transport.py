"""HTTPS redirect behaviour and session transport cross-check."""

from siteprobe.config import ScanSettings
from siteprobe.tools.http import HTTPClient

from ..models import Finding, Severity
from ..signals import SignalBag
from .base import probe
from .cookies import parse_set_cookie


def downgraded_url(url: str) -> str:
    """The same URL over plain HTTP."""
    return "http://" + url.split("://", 1)[1]


@probe("https_redirect")
async def probe_https_redirect(
    client: HTTPClient, bag: SignalBag, settings: ScanSettings
) -> list[Finding]:
    """For HTTPS targets, check what the plain-HTTP URL does."""
    if not bag.target.is_https:
        return []

    response = await client.head(
        downgraded_url(bag.target.url),
        timeout=settings.redirect_timeout,
        follow_redirects=False,
    )
    if response.is_redirect and response.location.lower().startswith("https://"):
        bag.http_downgrade = "redirects"
        return [
            Finding(
                severity=Severity.INFO,
                category="Transport Security",
                title="HTTP redirects to HTTPS",
                detail=f"Plain HTTP requests are redirected to {response.location}.",
            )
        ]
    if response.status_code == 200:
        bag.http_downgrade = "plain_http"
        return [
            Finding(
                severity=Severity.HIGH,
                category="Transport Security",
                title="Site served over plain HTTP",
                detail=(
                    "The site answers 200 over unencrypted HTTP instead of redirecting to "
                    "HTTPS, exposing visitors to interception and SSL stripping."
                ),
            )
        ]
    bag.http_downgrade = "other"
    return []


@probe("session_transport")
async def check_session_transport(client, bag: SignalBag, settings: ScanSettings) -> list[Finding]:
    """Compounding transport risks once an authentication surface exists."""
    session_cookies = bag.set_cookies + bag.auth_set_cookies
    if not bag.auth_surface_detected or not session_cookies:
        return []

    findings: list[Finding] = []
    if not bag.header("strict-transport-security"):
        findings.append(
            Finding(
                severity=Severity.HIGH,
                category="Session Security",
                title="Session cookies without HSTS",
                detail=(
                    "The site sets session cookies behind a login surface but sends no "
                    "Strict-Transport-Security header, so sessions can be hijacked via SSL "
                    "stripping."
                ),
            )
        )

    insecure: list[str] = []
    for raw in session_cookies:
        name, attributes = parse_set_cookie(raw)
        if name and "secure" not in attributes and name not in insecure:
            insecure.append(name)
    if insecure:
        findings.append(
            Finding(
                severity=Severity.HIGH,
                category="Session Security",
                title="Session cookies without Secure flag",
                detail=(
                    f"Cookies set alongside the login surface lack the Secure flag: "
                    f"{', '.join(insecure)}. They can leak over plain HTTP."
                ),
            )
        )
    return findings
