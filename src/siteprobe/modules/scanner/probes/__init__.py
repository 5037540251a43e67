"""Network probes. Every probe returns a ProbeResult and never raises on network failure."""

from .auth import (
    audit_login_forms,
    audit_registration_forms,
    discover_auth_surface,
    probe_login_credentials,
)
from .base import PROBE_ERRORS, classify_error, probe
from .baseline import connectivity_finding, fetch_baseline
from .bots import BOT_AGENTS, probe_bots
from .cdn import match_cdn_headers, match_cdn_signals, match_server_tokens
from .cookies import audit_cookies
from .cors import probe_cors
from .dns_records import probe_dns_records
from .headers import audit_security_headers
from .leakage import scan_leakage
from .methods import enumerate_methods
from .open_redirect import probe_open_redirect
from .rate_limit import probe_rate_limit
from .robots import fetch_robots
from .technology import fingerprint_technology
from .transport import check_session_transport, probe_https_redirect

__all__ = [
    "BOT_AGENTS",
    "PROBE_ERRORS",
    "audit_cookies",
    "audit_login_forms",
    "audit_registration_forms",
    "audit_security_headers",
    "check_session_transport",
    "classify_error",
    "connectivity_finding",
    "discover_auth_surface",
    "enumerate_methods",
    "fetch_baseline",
    "fetch_robots",
    "fingerprint_technology",
    "match_cdn_headers",
    "match_cdn_signals",
    "match_server_tokens",
    "probe",
    "probe_bots",
    "probe_cors",
    "probe_dns_records",
    "probe_https_redirect",
    "probe_login_credentials",
    "probe_open_redirect",
    "probe_rate_limit",
    "scan_leakage",
]
