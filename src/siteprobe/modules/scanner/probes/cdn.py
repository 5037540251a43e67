"""CDN / WAF detection from response headers and the Server token."""

from collections.abc import Mapping

from siteprobe.config import ScanSettings

from ..models import Finding, Severity
from ..signals import SignalBag
from .base import probe

CDN_HEADERS: dict[str, str] = {
    "cf-ray": "Cloudflare",
    "cf-cache-status": "Cloudflare",
    "x-cloudflare-status": "Cloudflare",
    "x-akamai-transformed": "Akamai",
    "akamai-grn": "Akamai",
    "x-sucuri-id": "Sucuri",
    "x-sucuri-cache": "Sucuri",
    "x-amz-cf-id": "Amazon CloudFront",
    "x-amz-cf-pop": "Amazon CloudFront",
    "x-iinfo": "Imperva",
    "x-cdn": "Imperva",
    "x-goog-generation": "Google Cloud CDN",
    "x-fastly-request-id": "Fastly",
    "x-azure-ref": "Azure Front Door",
    "x-vercel-id": "Vercel",
}

SERVER_TOKENS: dict[str, str] = {
    "cloudflare": "Cloudflare",
    "sucuri": "Sucuri",
    "imperva": "Imperva",
    "incapsula": "Imperva",
    "akamai": "Akamai",
    "cloudfront": "Amazon CloudFront",
    "ddos-guard": "DDoS-Guard",
}


def match_cdn_headers(headers: Mapping[str, str]) -> list[str]:
    """Names of known CDN/WAF headers present in a lowercase header map."""
    return [name for name in CDN_HEADERS if headers.get(name)]


def match_server_tokens(headers: Mapping[str, str]) -> list[str]:
    """Known CDN/WAF vendor tokens found in the Server header."""
    server = headers.get("server", "").lower()
    return [token for token in SERVER_TOKENS if token in server]


@probe("cdn")
async def match_cdn_signals(client, bag: SignalBag, settings: ScanSettings) -> list[Finding]:
    """Record CDN/WAF signals and report whether the origin looks shielded."""
    bag.cdn_header_matches = match_cdn_headers(bag.headers)
    bag.cdn_server_matches = match_server_tokens(bag.headers)
    for name in bag.cdn_header_matches:
        bag.add_provider(CDN_HEADERS[name])
    for token in bag.cdn_server_matches:
        bag.add_provider(SERVER_TOKENS[token])

    if bag.detected_cdn_providers:
        return [
            Finding(
                severity=Severity.INFO,
                category="DDoS Protection",
                title="CDN/WAF detected",
                detail=f"Traffic is fronted by: {', '.join(bag.detected_cdn_providers)}.",
            )
        ]
    return [
        Finding(
            severity=Severity.HIGH,
            category="DDoS Protection",
            title="Origin directly reachable",
            detail=(
                f"Origin IP ({bag.target.ip or 'unknown'}) is directly reachable. Implement a "
                "proxy-based WAF to mitigate Layer 7 DDoS floods."
            ),
        )
    ]
