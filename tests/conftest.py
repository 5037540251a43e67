"""Test configuration and fixtures for siteprobe."""

import tempfile
from collections.abc import Callable, Generator, Iterable
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from httpx import Request, Response

from siteprobe.config import ENV_KEYS, ScanSettings
from siteprobe.modules.scanner import SignalBag, Target
from siteprobe.modules.scanner.probes import BOT_AGENTS
from siteprobe.modules.store import ScanStore

HARDENED_HEADERS = {
    "Strict-Transport-Security": "max-age=63072000; includeSubDomains",
    "Content-Security-Policy": "default-src 'self'",
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(), microphone=()",
}

PLAIN_PAGE = "<html><head><title>Example</title></head><body>Welcome</body></html>"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, temp_dir: Path) -> None:
    """Keep tests away from the real ~/.siteprobe and any SITEPROBE_* variables."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(Path, "home", lambda: temp_dir / "home")


@pytest.fixture
def db_path(temp_dir: Path) -> Path:
    return temp_dir / "data" / "scans.db"


@pytest.fixture
def store(db_path: Path) -> Generator[ScanStore, None, None]:
    scan_store = ScanStore(db_path)
    yield scan_store
    scan_store.dispose()


@pytest.fixture
def settings() -> ScanSettings:
    return ScanSettings()


@pytest.fixture
def target() -> Target:
    return Target(
        url="https://example.com/",
        scheme="https",
        hostname="example.com",
        origin="https://example.com",
        ip="93.184.216.34",
    )


@pytest.fixture
def make_bag(target: Target) -> Callable[..., SignalBag]:
    """Build a synthetic signal bag; keyword arguments set bag fields."""

    def _make(**fields) -> SignalBag:
        bag = SignalBag(target=fields.pop("target", target))
        for name, value in fields.items():
            setattr(bag, name, value)
        return bag

    return _make


@pytest.fixture
def dns_records() -> Generator[tuple[AsyncMock, AsyncMock], None, None]:
    """Patch DNS lookups with a healthy zone: ordinary NS, DMARC and SPF."""

    async def txt(name: str, timeout: float | None = None) -> list[str]:
        if name.startswith("_dmarc."):
            return ["v=DMARC1; p=reject"]
        return ["v=spf1 -all"]

    with (
        patch(
            "siteprobe.modules.scanner.probes.dns_records.lookup_ns",
            AsyncMock(return_value=["ns1.example.net", "ns2.example.net"]),
        ) as ns_mock,
        patch(
            "siteprobe.modules.scanner.probes.dns_records.lookup_txt",
            AsyncMock(side_effect=txt),
        ) as txt_mock,
    ):
        yield ns_mock, txt_mock


def mock_site(
    router,
    *,
    headers: dict[str, str] | None = None,
    body: str = PLAIN_PAGE,
    cookies: Iterable[str] = (),
    blocked_bots: Iterable[str] = (),
    allow: str = "GET, HEAD, OPTIONS",
    trace_body: str | None = None,
    pages: dict[str, str] | None = None,
) -> None:
    """Route every request a scan of https://example.com/ makes.

    ``blocked_bots`` names entries of BOT_AGENTS that receive a 403.
    ``pages`` maps extra paths to HTML served with a 200. Anything not
    routed answers 404.
    """
    blocked_agents = {agent for name, agent in BOT_AGENTS if name in set(blocked_bots)}
    response_headers = list((headers or {}).items())
    response_headers += [("set-cookie", cookie) for cookie in cookies]

    def page(request: Request) -> Response:
        if request.headers.get("user-agent") in blocked_agents:
            return Response(403, text="Forbidden")
        return Response(200, headers=response_headers, text=body)

    router.route(method="GET", host="example.com", path="/").mock(side_effect=page)
    for path, html in (pages or {}).items():
        router.route(method="GET", host="example.com", path=path).mock(
            return_value=Response(200, text=html)
        )
    router.route(method="HEAD", scheme="http", host="example.com").mock(
        return_value=Response(301, headers={"Location": "https://example.com/"})
    )
    router.route(method="HEAD", scheme="https", host="example.com").mock(
        return_value=Response(200)
    )
    router.route(method="OPTIONS", host="example.com").mock(
        return_value=Response(200, headers={"Allow": allow})
    )
    if trace_body is None:
        router.route(method="TRACE", host="example.com").mock(return_value=Response(405))
    else:
        router.route(method="TRACE", host="example.com").mock(
            return_value=Response(200, text=trace_body)
        )
    router.route().mock(return_value=Response(404))


@pytest.fixture
def site() -> Callable[..., None]:
    """The mock_site helper, for tests that configure their own respx router."""
    return mock_site


@pytest.fixture
def hardened_headers() -> dict[str, str]:
    return dict(HARDENED_HEADERS)
