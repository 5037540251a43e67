"""robots.txt fetch; informational only."""

import re

from siteprobe.config import ScanSettings
from siteprobe.tools.http import HTTPClient

from ..models import Finding, Severity
from ..signals import SignalBag
from .base import probe

_DISALLOW = re.compile(r"^\s*disallow:\s*/\S*", re.IGNORECASE | re.MULTILINE)


@probe("robots")
async def fetch_robots(
    client: HTTPClient, bag: SignalBag, settings: ScanSettings
) -> list[Finding]:
    """Record whether robots.txt exists and whether it restricts crawling."""
    content = await client.check_robots_txt(bag.target.origin, timeout=settings.robots_timeout)
    bag.robots_present = content is not None
    bag.robots_restrictive = bool(content and _DISALLOW.search(content))
    if not bag.robots_restrictive:
        return []
    return [
        Finding(
            severity=Severity.INFO,
            category="Crawling Policy",
            title="Restrictive robots.txt",
            detail=(
                "robots.txt detected with restrictive directives, though this is only a "
                "'polite' request and doesn't stop malicious scrapers."
            ),
        )
    ]
