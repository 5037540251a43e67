"""Technology fingerprinting; informational only."""

from siteprobe.config import ScanSettings

from ..models import Finding, Severity
from ..rules import DetectionRule, evaluate_rules, rule
from ..signals import SignalBag
from .base import probe


def _tech(name: str, pattern: str, signal: str = "body") -> DetectionRule:
    return rule(
        signal,
        pattern,
        Severity.INFO,
        "Technology",
        f"{name} detected",
        f"{name} signature found: {{match}}",
    )


TECHNOLOGY_RULES: tuple[DetectionRule, ...] = (
    _tech("WordPress", r"/wp-content/|/wp-includes/"),
    _tech("Drupal", r"Drupal\.settings|data-drupal-|/sites/default/files/"),
    _tech("Joomla", r"/media/jui/|content=\"Joomla!"),
    _tech("Shopify", r"cdn\.shopify\.com|Shopify\.theme"),
    _tech("Next.js", r"__NEXT_DATA__|/_next/static/"),
    _tech("Nuxt", r"__NUXT__|/_nuxt/"),
    _tech("React", r"data-reactroot|react-dom(?:\.production)?(?:\.min)?\.js"),
    _tech("Angular", r"ng-version=\"[\d.]+\""),
    _tech("Vue.js", r"data-v-[0-9a-f]{8}|vue(?:\.runtime)?(?:\.global)?(?:\.min)?\.js"),
    _tech("jQuery", r"jquery[.\-]?(?:\d+\.\d+(?:\.\d+)?)?(?:\.min)?\.js"),
    _tech("Bootstrap", r"bootstrap(?:\.bundle)?(?:\.min)?\.(?:css|js)"),
    _tech("Google Tag Manager", r"googletagmanager\.com|google-analytics\.com"),
    _tech("Django", r"csrfmiddlewaretoken"),
    _tech("ASP.NET", r"__VIEWSTATE|__EVENTVALIDATION"),
    _tech("Laravel", r"laravel_session", signal="cookies"),
    _tech("PHP", r"PHPSESSID", signal="cookies"),
)


@probe("technology")
async def fingerprint_technology(client, bag: SignalBag, settings: ScanSettings) -> list[Finding]:
    """Report each technology whose signature appears in the page or cookies."""
    return evaluate_rules(TECHNOLOGY_RULES, bag)
