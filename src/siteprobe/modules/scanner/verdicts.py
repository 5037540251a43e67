"""Summary verdicts and the legacy recommendation list."""

from collections.abc import Iterable

from .models import Finding, ScanResult, Severity
from .probes.bots import BOT_AGENTS
from .probes.cdn import match_cdn_headers, match_server_tokens
from .signals import SignalBag

LEGACY_CATEGORIES = frozenset(
    {"Bot Protection", "DDoS Protection", "Security Headers", "Crawling Policy", "Connectivity"}
)
# Recommended even at INFO severity.
ALWAYS_RECOMMENDED = frozenset({"Crawling Policy"})


def is_scrapable(bag: SignalBag) -> bool:
    """Scrapable unless every known bot agent was blocked."""
    return bag.blocked_bot_count < len(BOT_AGENTS)


def ddos_protected(bag: SignalBag) -> bool:
    """Protected when any CDN/WAF header or Server token was observed."""
    return bool(match_cdn_headers(bag.headers) or match_server_tokens(bag.headers))


def derive_recommendations(findings: Iterable[Finding]) -> list[str]:
    """Legacy free-text recommendations, one per actionable finding.

    INFO findings are dropped except for the crawling-policy note, which the
    legacy list always carried.
    """
    return [
        f"{finding.severity.value}: {finding.detail}"
        for finding in findings
        if finding.category in LEGACY_CATEGORIES
        and (finding.severity is not Severity.INFO or finding.category in ALWAYS_RECOMMENDED)
    ]


def is_risky(result: ScanResult) -> bool:
    """Coarse classification used by list views."""
    return result.is_scrapable or not result.ddos_protected
