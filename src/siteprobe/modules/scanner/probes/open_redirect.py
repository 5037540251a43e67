"""Open-redirect probe."""

import logging

import httpx

from siteprobe.config import ScanSettings
from siteprobe.tools.http import HTTPClient

from ..models import Finding, Severity
from ..signals import SignalBag
from .base import probe

logger = logging.getLogger(__name__)

REDIRECT_DOMAIN = "redirect-probe.siteprobe-check.invalid"
REDIRECT_PARAMS = ("redirect", "url", "next", "return", "returnUrl", "redirect_uri", "goto", "dest")


def redirect_candidates(origin: str) -> list[tuple[str, str]]:
    """(label, url) pairs pointing the target at the probe domain."""
    external = f"https://{REDIRECT_DOMAIN}/"
    candidates = [(f"?{param}=", f"{origin}/?{param}={external}") for param in REDIRECT_PARAMS]
    candidates.append(("//host path", f"{origin}//{REDIRECT_DOMAIN}/"))
    return candidates


@probe("open_redirect")
async def probe_open_redirect(
    client: HTTPClient, bag: SignalBag, settings: ScanSettings
) -> list[Finding]:
    """Stop at the first parameter whose Location points at the probe domain."""
    errors: list[Exception] = []
    candidates = redirect_candidates(bag.target.origin)
    for label, url in candidates:
        try:
            response = await client.get(
                url, timeout=settings.open_redirect_timeout, follow_redirects=False
            )
        except httpx.HTTPError as e:
            logger.debug("Open-redirect request %s failed: %s", url, e)
            errors.append(e)
            continue
        if REDIRECT_DOMAIN in response.location.lower():
            return [
                Finding(
                    severity=Severity.HIGH,
                    category="Open Redirect",
                    title="Open redirect",
                    detail=(
                        f"The target redirects to an arbitrary external domain via {label} "
                        f"(Location: {response.location})."
                    ),
                )
            ]
    if len(errors) == len(candidates):
        raise errors[0]
    return []
