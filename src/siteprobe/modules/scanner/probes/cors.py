"""CORS policy probe with a foreign Origin."""

from siteprobe.config import ScanSettings
from siteprobe.tools.http import HTTPClient

from ..models import Finding, Severity
from ..signals import SignalBag
from .base import probe

PROBE_ORIGIN = "https://cors-probe.siteprobe-check.invalid"


def classify_cors(allow_origin: str | None, allow_credentials: bool) -> Finding | None:
    """Turn CORS response headers into at most one finding."""
    if not allow_origin:
        return None
    allow_origin = allow_origin.strip()
    if allow_origin == "*" and allow_credentials:
        return Finding(
            severity=Severity.CRITICAL,
            category="CORS",
            title="Wildcard CORS with credentials",
            detail=(
                "Access-Control-Allow-Origin is '*' while Access-Control-Allow-Credentials is "
                "true; any site may issue credentialed cross-origin requests."
            ),
        )
    if allow_origin == "*":
        return Finding(
            severity=Severity.LOW,
            category="CORS",
            title="Wildcard CORS policy",
            detail="Access-Control-Allow-Origin is '*'; any origin may read public responses.",
        )
    if allow_origin.rstrip("/") == PROBE_ORIGIN:
        credentials = " together with credentials" if allow_credentials else ""
        return Finding(
            severity=Severity.HIGH,
            category="CORS",
            title="Arbitrary origin reflected",
            detail=(
                f"The server reflected the untrusted Origin {PROBE_ORIGIN}{credentials}, "
                "allowing any site to read responses cross-origin."
            ),
        )
    return None


@probe("cors")
async def probe_cors(
    client: HTTPClient, bag: SignalBag, settings: ScanSettings
) -> list[Finding]:
    """Send a request with a foreign Origin and classify the CORS answer."""
    response = await client.get(
        bag.target.url,
        headers={"Origin": PROBE_ORIGIN},
        timeout=settings.cors_timeout,
    )
    bag.cors_allow_origin = response.headers.get("access-control-allow-origin")
    bag.cors_allow_credentials = (
        response.headers.get("access-control-allow-credentials", "").strip().lower() == "true"
    )
    finding = classify_cors(bag.cors_allow_origin, bag.cors_allow_credentials)
    return [finding] if finding else []
