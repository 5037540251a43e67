"""HTTP helpers for siteprobe."""

from .client import HTTPClient, HTTPResponse, normalize_headers

__all__ = [
    "HTTPClient",
    "HTTPResponse",
    "normalize_headers",
]
