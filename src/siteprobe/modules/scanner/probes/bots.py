"""Bot fan-out: does the target treat automated clients differently?"""

import asyncio
import logging

import httpx

from siteprobe.config import ScanSettings
from siteprobe.tools.http import HTTPClient

from ..models import Finding, Severity
from ..signals import SignalBag
from .base import probe

logger = logging.getLogger(__name__)

BOT_AGENTS: tuple[tuple[str, str], ...] = (
    ("Googlebot", "Googlebot/2.1 (+http://www.google.com/bot.html)"),
    ("Bingbot", "Mozilla/5.0 (compatible; bingbot/2.0; +http://www.bing.com/bingbot.htm)"),
    ("python-requests", "python-requests/2.31.0"),
    ("curl", "curl/8.4.0"),
    ("Scrapy", "Scrapy/2.11.0 (+https://scrapy.org)"),
    ("Go-http-client", "Go-http-client/1.1"),
)

BLOCK_STATUSES = frozenset({403, 429, 503})


async def _is_blocked(
    client: HTTPClient, url: str, user_agent: str, timeout: float
) -> bool:
    try:
        response = await client.get(url, headers={"User-Agent": user_agent}, timeout=timeout)
    except httpx.HTTPError as e:
        logger.debug("Bot request with %r failed: %s", user_agent, e)
        return True
    return response.status_code in BLOCK_STATUSES


@probe("bots")
async def probe_bots(
    client: HTTPClient, bag: SignalBag, settings: ScanSettings
) -> list[Finding]:
    """Repeat the request with known bot agents and count how many are blocked."""
    verdicts = await asyncio.gather(
        *(
            _is_blocked(client, bag.target.url, agent, settings.bot_timeout)
            for _, agent in BOT_AGENTS
        )
    )
    bag.bot_agents_tested = [name for name, _ in BOT_AGENTS]
    bag.blocked_bots = [name for (name, _), blocked in zip(BOT_AGENTS, verdicts) if blocked]
    bag.passed_bots = [name for (name, _), blocked in zip(BOT_AGENTS, verdicts) if not blocked]

    if not bag.blocked_bots:
        return [
            Finding(
                severity=Severity.CRITICAL,
                category="Bot Protection",
                title="No bot protection detected",
                detail=(
                    f"All {len(BOT_AGENTS)} known bot user agents received normal responses. "
                    "The site lacks technical scraping protection; consider TLS fingerprinting "
                    "checks or a JS-based challenge (e.g., Turnstile)."
                ),
            )
        ]
    if bag.passed_bots:
        return [
            Finding(
                severity=Severity.MEDIUM,
                category="Bot Protection",
                title="Partial bot protection",
                detail=(
                    f"{len(bag.blocked_bots)} of {len(BOT_AGENTS)} bot user agents were blocked; "
                    f"these passed: {', '.join(bag.passed_bots)}."
                ),
            )
        ]
    return [
        Finding(
            severity=Severity.INFO,
            category="Bot Protection",
            title="Automated clients blocked",
            detail=f"All {len(BOT_AGENTS)} known bot user agents were blocked or refused.",
        )
    ]
