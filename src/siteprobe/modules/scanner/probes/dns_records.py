"""DNS infrastructure probes: nameservers, DMARC and SPF."""

import asyncio
import logging

from siteprobe.config import ScanSettings
from siteprobe.tools.dns import is_ip_address, lookup_ns, lookup_txt, mail_domain

from ..models import Finding, Severity
from ..signals import SignalBag
from .base import probe, raise_if_all_failed

logger = logging.getLogger(__name__)

CLOUDFLARE_NS_SUFFIX = ".ns.cloudflare.com"


@probe("dns_records")
async def probe_dns_records(client, bag: SignalBag, settings: ScanSettings) -> list[Finding]:
    """Look up NS, _dmarc TXT and SPF TXT in parallel."""
    hostname = bag.target.hostname
    if is_ip_address(hostname):
        return []

    domain = mail_domain(hostname)
    outcomes = await asyncio.gather(
        lookup_ns(hostname, timeout=settings.dns_timeout),
        lookup_txt(f"_dmarc.{domain}", timeout=settings.dns_timeout),
        lookup_txt(domain, timeout=settings.dns_timeout),
        return_exceptions=True,
    )
    raise_if_all_failed(outcomes)
    nameservers, dmarc, spf = outcomes
    findings: list[Finding] = []

    if isinstance(nameservers, BaseException):
        logger.info("NS lookup for %s failed: %s", hostname, nameservers)
    else:
        bag.nameservers = nameservers
        on_cloudflare = any(ns.endswith(CLOUDFLARE_NS_SUFFIX) for ns in nameservers)
        if on_cloudflare and bag.baseline_ok and "Cloudflare" not in bag.detected_cdn_providers:
            findings.append(
                Finding(
                    severity=Severity.HIGH,
                    category="DNS",
                    title="Cloudflare DNS without proxy",
                    detail=(
                        "The domain uses Cloudflare nameservers but responses carry no Cloudflare "
                        f"proxy signals, so the origin ({bag.target.ip or 'unknown'}) is exposed "
                        "and DDoS protection is bypassed."
                    ),
                )
            )

    if isinstance(dmarc, BaseException):
        logger.info("DMARC lookup for %s failed: %s", domain, dmarc)
    else:
        bag.has_dmarc = any(record.lower().startswith("v=dmarc1") for record in dmarc)
        if not bag.has_dmarc:
            findings.append(
                Finding(
                    severity=Severity.LOW,
                    category="Email Security",
                    title="No DMARC record",
                    detail=(
                        f"_dmarc.{domain} publishes no DMARC policy; spoofed mail is not rejected."
                    ),
                )
            )

    if isinstance(spf, BaseException):
        logger.info("SPF lookup for %s failed: %s", domain, spf)
    else:
        bag.has_spf = any(record.lower().startswith("v=spf1") for record in spf)
        if not bag.has_spf:
            findings.append(
                Finding(
                    severity=Severity.LOW,
                    category="Email Security",
                    title="No SPF record",
                    detail=(
                        f"{domain} publishes no SPF record; anyone can send mail as this domain."
                    ),
                )
            )
    return findings
