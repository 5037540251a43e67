"""Rate-limit burst probe."""

import asyncio

from siteprobe.config import ScanSettings
from siteprobe.tools.http import HTTPClient

from ..models import Finding, Severity
from ..signals import SignalBag
from .base import probe, raise_if_all_failed

THROTTLE_STATUSES = frozenset({429, 503})


@probe("rate_limit")
async def probe_rate_limit(
    client: HTTPClient, bag: SignalBag, settings: ScanSettings
) -> list[Finding]:
    """Fire a fixed burst of HEAD requests and look for throttling."""
    outcomes = await asyncio.gather(
        *(
            client.head(bag.target.url, timeout=settings.rate_limit_timeout)
            for _ in range(settings.rate_limit_burst)
        ),
        return_exceptions=True,
    )
    raise_if_all_failed(outcomes)
    bag.rate_limit_statuses = [
        outcome.status_code for outcome in outcomes if not isinstance(outcome, BaseException)
    ]
    if any(status in THROTTLE_STATUSES for status in bag.rate_limit_statuses):
        return []
    return [
        Finding(
            severity=Severity.MEDIUM,
            category="Rate Limiting",
            title="No rate limiting detected",
            detail=(
                f"{len(bag.rate_limit_statuses)} of {settings.rate_limit_burst} rapid requests "
                "were answered without a 429 or 503; the site may be open to brute force "
                "and request floods."
            ),
        )
    ]
