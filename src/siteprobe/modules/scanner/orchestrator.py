"""Probe orchestration: runs the pipeline and assembles the scan result."""

import logging

from siteprobe.config import ScanSettings, load_settings
from siteprobe.tools.http import HTTPClient

from .aggregate import build_result
from .models import Finding, ProbeResult, ScanResult, Severity, Target
from .probes import (
    audit_cookies,
    audit_login_forms,
    audit_registration_forms,
    audit_security_headers,
    check_session_transport,
    connectivity_finding,
    discover_auth_surface,
    enumerate_methods,
    fetch_baseline,
    fetch_robots,
    fingerprint_technology,
    match_cdn_signals,
    probe_bots,
    probe_cors,
    probe_dns_records,
    probe_https_redirect,
    probe_login_credentials,
    probe_open_redirect,
    probe_rate_limit,
    scan_leakage,
)
from .signals import SignalBag
from .target import resolve_target

logger = logging.getLogger(__name__)

# Runs after a successful baseline fetch, in this order. Later probes read
# what earlier ones stored in the signal bag.
PIPELINE = (
    audit_security_headers,
    probe_bots,
    match_cdn_signals,
    fetch_robots,
    enumerate_methods,
    probe_cors,
    audit_cookies,
    scan_leakage,
    probe_https_redirect,
    probe_dns_records,
    probe_rate_limit,
    probe_open_redirect,
    fingerprint_technology,
    discover_auth_surface,
    audit_login_forms,
    audit_registration_forms,
    probe_login_credentials,
    check_session_transport,
)

# Probes that do not depend on the baseline response.
INDEPENDENT_PROBES = (probe_dns_records,)


def probe_failure_finding(result: ProbeResult) -> Finding:
    error = result.error
    return Finding(
        severity=Severity.INFO,
        category="Scan Coverage",
        title=f"Probe '{result.probe}' incomplete",
        detail=f"The {result.probe} probe could not finish ({error.kind}: {error.message}).",
    )


class ProbeOrchestrator:
    """Runs one scan. Each instance owns the signal bag of the scan it runs."""

    def __init__(self, settings: ScanSettings | None = None):
        self.settings = settings or load_settings()
        self.outcomes: list[ProbeResult] = []

    async def run(self, target: Target) -> ScanResult:
        bag = SignalBag(target=target)
        findings: list[Finding] = []
        self.outcomes = []

        async with HTTPClient(
            timeout=self.settings.baseline_timeout,
            follow_redirects=True,
            verify_ssl=self.settings.verify_tls,
            user_agent=self.settings.user_agent,
        ) as client:
            baseline = await fetch_baseline(client, bag, self.settings)
            self.outcomes.append(baseline)
            if baseline.ok:
                probes = PIPELINE
            else:
                logger.warning(
                    "Baseline fetch of %s failed; running independent probes only", target.url
                )
                findings.append(connectivity_finding(baseline.error))
                probes = INDEPENDENT_PROBES

            for run_probe in probes:
                result = await run_probe(client, bag, self.settings)
                self.outcomes.append(result)
                findings.extend(result.findings)
                if not result.ok:
                    findings.append(probe_failure_finding(result))

        scan = build_result(bag, findings)
        logger.info(
            "Scan of %s finished: %d findings, scrapable=%s, ddos_protected=%s",
            target.url,
            len(scan.findings),
            scan.is_scrapable,
            scan.ddos_protected,
        )
        return scan


async def scan_url(url: str, settings: ScanSettings | None = None) -> ScanResult:
    """Validate, resolve and scan a URL.

    Raises ``ScanInputError`` for malformed, unsupported or unresolvable
    targets; every other failure ends up as a finding.
    """
    target = await resolve_target(url)
    return await ProbeOrchestrator(settings).run(target)
