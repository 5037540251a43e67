"""Async HTTP client shared by the network probes."""

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urljoin

import httpx


def normalize_headers(headers: httpx.Headers) -> dict[str, str]:
    """Lowercase header names; a repeated header keeps its last value."""
    normalized: dict[str, str] = {}
    for key, value in headers.multi_items():
        normalized[key.lower()] = value
    return normalized


@dataclass
class HTTPResponse:
    """Represents an HTTP response."""

    url: str
    status_code: int
    headers: dict[str, str]
    body: str
    set_cookies: list[str] = field(default_factory=list)

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "HTTPResponse":
        # Raw Set-Cookie lines only: a cookie jar rejects repeated names.
        return cls(
            url=str(response.url),
            status_code=response.status_code,
            headers=normalize_headers(response.headers),
            body=response.text,
            set_cookies=response.headers.get_list("set-cookie"),
        )

    @property
    def location(self) -> str:
        return self.headers.get("location", "")

    @property
    def is_redirect(self) -> bool:
        return 300 <= self.status_code < 400 and bool(self.location)


class HTTPClient:
    """Async HTTP client for probing operations."""

    def __init__(
        self,
        timeout: float = 10.0,
        follow_redirects: bool = True,
        verify_ssl: bool = True,
        user_agent: str | None = None,
    ):
        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self.verify_ssl = verify_ssl
        self.user_agent = user_agent
        self.client: httpx.AsyncClient | None = None

    async def __aenter__(self):
        self.client = httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=self.follow_redirects,
            verify=self.verify_ssl,
            headers={"User-Agent": self.user_agent} if self.user_agent else None,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.client:
            await self.client.aclose()
            self.client = None

    def _session(self) -> httpx.AsyncClient:
        if self.client is None:
            raise RuntimeError("HTTPClient used outside 'async with'")
        return self.client

    async def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        data: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
        follow_redirects: bool | None = None,
    ) -> HTTPResponse:
        """Make an HTTP request.

        Transport failures surface as ``httpx.HTTPError`` subclasses; callers
        decide whether a failure is fatal for their probe. ``timeout`` and
        ``follow_redirects`` override the client defaults for this call only.
        """
        session = self._session()
        overrides = {
            name: value
            for name, value in (("timeout", timeout), ("follow_redirects", follow_redirects))
            if value is not None
        }

        response = await session.request(
            method, url, headers=headers, data=data, params=params, **overrides
        )
        return HTTPResponse.from_httpx(response)

    async def get(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        follow_redirects: bool | None = None,
    ) -> HTTPResponse:
        """Make a GET request."""
        return await self.request(
            "GET", url, headers=headers, timeout=timeout, follow_redirects=follow_redirects
        )

    async def head(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        follow_redirects: bool | None = None,
    ) -> HTTPResponse:
        """Make a HEAD request."""
        return await self.request(
            "HEAD", url, headers=headers, timeout=timeout, follow_redirects=follow_redirects
        )

    async def post(
        self,
        url: str,
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        follow_redirects: bool | None = None,
    ) -> HTTPResponse:
        """Make a POST request."""
        return await self.request(
            "POST",
            url,
            headers=headers,
            data=data,
            timeout=timeout,
            follow_redirects=follow_redirects,
        )

    async def check_robots_txt(self, base_url: str, timeout: float | None = None) -> str | None:
        """Return robots.txt content, or None when it is absent."""
        url = urljoin(base_url, "/robots.txt")
        response = await self.get(url, timeout=timeout)
        if response.status_code == 200:
            return response.body
        return None
