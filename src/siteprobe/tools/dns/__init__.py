"""DNS helpers for siteprobe."""

from .resolver import (
    domain_candidates,
    is_ip_address,
    lookup_ns,
    lookup_txt,
    mail_domain,
    resolve_host,
)

__all__ = [
    "domain_candidates",
    "is_ip_address",
    "lookup_ns",
    "lookup_txt",
    "mail_domain",
    "resolve_host",
]
