"""Information-leakage patterns over response headers and body."""

import re

from siteprobe.config import ScanSettings

from ..models import Finding, Severity
from ..rules import DetectionRule, evaluate_rules, rule
from ..signals import SignalBag
from .base import probe

CATEGORY = "Information Leakage"

LEAKAGE_RULES: tuple[DetectionRule, ...] = (
    rule(
        "header:x-powered-by",
        r".+",
        Severity.LOW,
        CATEGORY,
        "X-Powered-By header discloses technology",
        "X-Powered-By: {value}",
    ),
    rule(
        "header:server",
        r"[a-z][\w.\-]*/\s*\d[\w.\-]*",
        Severity.LOW,
        CATEGORY,
        "Server version disclosed",
        "The Server header reveals version information: {value}",
    ),
    rule(
        "header:x-aspnet-version",
        r".+",
        Severity.LOW,
        CATEGORY,
        "ASP.NET version disclosed",
        "X-AspNet-Version: {value}",
    ),
    rule(
        "header:x-aspnetmvc-version",
        r".+",
        Severity.LOW,
        CATEGORY,
        "ASP.NET MVC version disclosed",
        "X-AspNetMvc-Version: {value}",
    ),
    rule(
        "body",
        r"Traceback \(most recent call last\)|Exception in thread \"|"
        r"at [\w$.]+\([\w$]+\.java:\d+\)|Fatal error:.{0,200}? on line \d+|"
        r"System\.[\w.]+Exception:|Stack trace:",
        Severity.MEDIUM,
        CATEGORY,
        "Stack trace in response",
        "The page exposes internal error details: {match}",
    ),
    rule(
        "body",
        r"You have an error in your SQL syntax|mysql_fetch_\w+|ORA-\d{5}|SQLSTATE\[\w+\]|"
        r"PG::\w+Error|Unclosed quotation mark after the character string|"
        r"Microsoft OLE DB Provider for SQL Server|SQLite3?::\w+Exception|"
        r"near \".{1,40}\": syntax error",
        Severity.HIGH,
        CATEGORY,
        "Database error disclosed",
        "A database error message is reflected in the page: {match}",
    ),
    rule(
        "body",
        r"(?:/var/www/|/home/\w+/|/usr/share/nginx/|/srv/\w+/)[\w./\-]+|"
        r"[A-Z]:\\(?:inetpub|wamp\w*|xampp|Users)\\[\w.\\\-]+",
        Severity.MEDIUM,
        CATEGORY,
        "Server file path disclosed",
        "An absolute server-side path appears in the page: {match}",
    ),
    DetectionRule(
        "body",
        re.compile(
            r"<!--(?:(?!-->).){0,300}?\b(?:todo|fixme|hack|password|passwd|secret|"
            r"api[_-]?key|debug|admin)\b(?:(?!-->).){0,300}?-->",
            re.IGNORECASE | re.DOTALL,
        ),
        Severity.LOW,
        CATEGORY,
        "Suspicious HTML comment",
        "An HTML comment mentions sensitive material: {match}",
    ),
    rule(
        "body",
        r"AKIA[0-9A-Z]{16}",
        Severity.HIGH,
        CATEGORY,
        "Potential AWS Access Key exposure",
        "An AWS access key id appears in the page: {match}",
        flags=0,
    ),
    rule(
        "body",
        r"-----BEGIN (?:RSA |DSA |EC |OPENSSH )?PRIVATE KEY-----",
        Severity.HIGH,
        CATEGORY,
        "Potential Private Key exposure",
        "A private key block appears in the page.",
        flags=0,
    ),
    rule(
        "body",
        r"[\"']?api[_-]?key[\"']?\s*[:=]\s*[\"'][a-zA-Z0-9_\-]{16,}[\"']",
        Severity.HIGH,
        CATEGORY,
        "Potential API Key exposure",
        "An API key assignment appears in the page: {match}",
    ),
)


@probe("leakage")
async def scan_leakage(client, bag: SignalBag, settings: ScanSettings) -> list[Finding]:
    """Evaluate the leakage table; every matching rule is its own finding."""
    return evaluate_rules(LEAKAGE_RULES, bag)
