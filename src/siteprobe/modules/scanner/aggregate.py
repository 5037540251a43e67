"""Finding ordering and result assembly."""

from collections.abc import Iterable

from .models import Finding, ScanResult
from .signals import SignalBag
from .verdicts import ddos_protected, derive_recommendations, is_scrapable


def sort_findings(findings: Iterable[Finding]) -> list[Finding]:
    """Most severe first; equal severities keep their insertion order."""
    return sorted(findings, key=lambda finding: finding.severity.rank)


def build_result(bag: SignalBag, findings: Iterable[Finding]) -> ScanResult:
    """Reduce a completed signal bag and its findings to the immutable result."""
    ordered = sort_findings(findings)
    return ScanResult(
        url=bag.target.url,
        target_ip=bag.target.ip,
        server=bag.header("server") or "Unknown",
        is_scrapable=is_scrapable(bag),
        ddos_protected=ddos_protected(bag),
        headers=dict(bag.headers),
        recommendations=tuple(derive_recommendations(ordered)),
        findings=tuple(ordered),
    )
