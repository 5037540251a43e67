"""Baseline fetch: the primary browser-like request every other probe builds on."""

from siteprobe.config import ScanSettings
from siteprobe.tools.http import HTTPClient

from ..models import Finding, ProbeError, Severity
from ..signals import SignalBag
from .base import probe


def browser_headers(settings: ScanSettings) -> dict[str, str]:
    return {
        "User-Agent": settings.user_agent,
        "Accept": (
            "text/html,application/xhtml+xml,application/xml;q=0.9,"
            "image/avif,image/webp,image/apng,*/*;q=0.8"
        ),
        "Accept-Language": "en-US,en;q=0.9",
    }


@probe("baseline")
async def fetch_baseline(
    client: HTTPClient, bag: SignalBag, settings: ScanSettings
) -> list[Finding]:
    """GET the target like a browser and record status, headers and body."""
    response = await client.get(
        bag.target.url,
        headers=browser_headers(settings),
        timeout=settings.baseline_timeout,
    )
    bag.baseline_ok = True
    bag.status_code = response.status_code
    bag.headers = dict(response.headers)
    bag.set_cookies = list(response.set_cookies)
    bag.body = response.body or ""
    return []


def connectivity_finding(error: ProbeError | None) -> Finding:
    """The single finding emitted when the baseline fetch fails."""
    reason = f" ({error.kind}: {error.message})" if error else ""
    return Finding(
        severity=Severity.CRITICAL,
        category="Connectivity",
        title="Target unreachable",
        detail=(
            f"The baseline request failed{reason}. Ensure the site is reachable and has "
            "a valid SSL certificate; dependent probes were skipped."
        ),
    )
