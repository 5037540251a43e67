"""Tests for individual probes against synthetic signal bags."""

from unittest.mock import AsyncMock, patch

import dns.exception
import httpx
import respx
from httpx import Request, Response

from siteprobe.config import ScanSettings
from siteprobe.modules.scanner import Severity, Target, derive_recommendations
from siteprobe.modules.scanner.probes import (
    BOT_AGENTS,
    audit_cookies,
    audit_security_headers,
    check_session_transport,
    enumerate_methods,
    fetch_baseline,
    fetch_robots,
    match_cdn_signals,
    probe_bots,
    probe_cors,
    probe_dns_records,
    probe_https_redirect,
    probe_open_redirect,
    probe_rate_limit,
)
from siteprobe.modules.scanner.probes.cookies import parse_set_cookie
from siteprobe.modules.scanner.probes.cors import PROBE_ORIGIN, classify_cors
from siteprobe.modules.scanner.probes.methods import is_trace_reflected, parse_methods
from siteprobe.tools.http import HTTPClient

DNS_PROBE = "siteprobe.modules.scanner.probes.dns_records"


def _titles(result):
    return [finding.title for finding in result.findings]


class TestBaseline:
    @respx.mock
    async def test_records_response(self, make_bag, settings):
        respx.get("https://example.com/").mock(
            return_value=Response(
                200,
                headers=[("Server", "nginx"), ("Set-Cookie", "sid=1")],
                text="<html>hi</html>",
            )
        )
        bag = make_bag()
        async with HTTPClient() as client:
            result = await fetch_baseline(client, bag, settings)

        assert result.ok
        assert bag.baseline_ok
        assert bag.status_code == 200
        assert bag.header("Server") == "nginx"
        assert bag.set_cookies == ["sid=1"]
        assert bag.body == "<html>hi</html>"

    @respx.mock
    async def test_tls_failure_is_an_error_result(self, make_bag, settings):
        respx.get("https://example.com/").mock(
            side_effect=httpx.ConnectError("[SSL: CERTIFICATE_VERIFY_FAILED] certificate expired")
        )
        bag = make_bag()
        async with HTTPClient() as client:
            result = await fetch_baseline(client, bag, settings)

        assert result.error.kind == "tls"
        assert not bag.baseline_ok


class TestSecurityHeaders:
    async def test_hardened_site_has_no_findings(self, make_bag, settings, hardened_headers):
        headers = {name.lower(): value for name, value in hardened_headers.items()}
        result = await audit_security_headers(None, make_bag(headers=headers), settings)
        assert result.findings == []

    async def test_one_finding_per_missing_header(self, make_bag, settings):
        result = await audit_security_headers(None, make_bag(headers={}), settings)
        severities = {f.title: f.severity for f in result.findings}
        assert severities == {
            "Missing Strict-Transport-Security": Severity.HIGH,
            "Missing Content-Security-Policy": Severity.MEDIUM,
            "Missing X-Frame-Options": Severity.MEDIUM,
            "Missing X-Content-Type-Options": Severity.LOW,
            "Missing Referrer-Policy": Severity.LOW,
            "Missing Permissions-Policy": Severity.LOW,
        }


class TestCookies:
    def test_parse_set_cookie(self):
        name, attributes = parse_set_cookie("sid=abc=def; Path=/; HttpOnly; SameSite=Lax")
        assert name == "sid"
        assert attributes == {"path", "httponly", "samesite"}

    async def test_flags_missing_attributes(self, make_bag, settings):
        bag = make_bag(
            set_cookies=[
                "sid=abc; Path=/",
                "prefs=1; HttpOnly; Secure; SameSite=Strict",
            ]
        )
        result = await audit_cookies(None, bag, settings)
        assert len(result.findings) == 1
        finding = result.findings[0]
        assert finding.severity is Severity.MEDIUM
        assert finding.category == "Cookies"
        assert "HttpOnly, Secure, SameSite" in finding.detail


class TestCdn:
    async def test_cdn_header(self, make_bag, settings):
        bag = make_bag(headers={"cf-ray": "abc123", "server": "cloudflare"})
        result = await match_cdn_signals(None, bag, settings)
        assert _titles(result) == ["CDN/WAF detected"]
        assert bag.detected_cdn_providers == ["Cloudflare"]
        assert bag.cdn_header_matches == ["cf-ray"]
        assert bag.cdn_server_matches == ["cloudflare"]

    async def test_unshielded_origin(self, make_bag, settings):
        result = await match_cdn_signals(None, make_bag(headers={"server": "nginx"}), settings)
        assert result.findings[0].severity is Severity.HIGH
        assert "93.184.216.34" in result.findings[0].detail


class TestBots:
    @respx.mock
    async def test_no_bot_blocked(self, make_bag, settings):
        respx.get("https://example.com/").mock(return_value=Response(200))
        bag = make_bag()
        async with HTTPClient() as client:
            result = await probe_bots(client, bag, settings)

        assert _titles(result) == ["No bot protection detected"]
        assert result.findings[0].severity is Severity.CRITICAL
        assert bag.passed_bots == [name for name, _ in BOT_AGENTS]

    @respx.mock
    async def test_partial_protection_names_passing_agents(self, make_bag, settings):
        blocked = {agent for name, agent in BOT_AGENTS if name != "Googlebot"}

        def handler(request: Request) -> Response:
            return Response(403 if request.headers["user-agent"] in blocked else 200)

        respx.get("https://example.com/").mock(side_effect=handler)
        bag = make_bag()
        async with HTTPClient() as client:
            result = await probe_bots(client, bag, settings)

        assert _titles(result) == ["Partial bot protection"]
        assert result.findings[0].severity is Severity.MEDIUM
        assert "Googlebot" in result.findings[0].detail
        assert bag.blocked_bot_count == len(BOT_AGENTS) - 1

    @respx.mock
    async def test_transport_errors_count_as_blocked(self, make_bag, settings):
        respx.get("https://example.com/").mock(side_effect=httpx.ConnectError("reset"))
        bag = make_bag()
        async with HTTPClient() as client:
            result = await probe_bots(client, bag, settings)

        assert result.ok
        assert _titles(result) == ["Automated clients blocked"]
        assert result.findings[0].severity is Severity.INFO


class TestRobots:
    @respx.mock
    async def test_restrictive_robots(self, make_bag, settings):
        respx.get("https://example.com/robots.txt").mock(
            return_value=Response(200, text="User-agent: *\nDisallow: /\n")
        )
        bag = make_bag()
        async with HTTPClient() as client:
            result = await fetch_robots(client, bag, settings)

        assert _titles(result) == ["Restrictive robots.txt"]
        assert bag.robots_present and bag.robots_restrictive
        assert derive_recommendations(result.findings)[0].startswith("INFO: robots.txt detected")

    @respx.mock
    async def test_missing_robots(self, make_bag, settings):
        respx.get("https://example.com/robots.txt").mock(return_value=Response(404))
        bag = make_bag()
        async with HTTPClient() as client:
            result = await fetch_robots(client, bag, settings)

        assert result.findings == []
        assert bag.robots_present is False


class TestMethods:
    def test_parse_methods(self):
        assert parse_methods("get, Post", "", "OPTIONS,") == {"GET", "POST", "OPTIONS"}

    def test_is_trace_reflected(self):
        marker = "5f3a9c0e1b7d2468"
        assert is_trace_reflected("TRACE / HTTP/1.1\r\nHost: x\r\n", "example.com", marker)
        assert is_trace_reflected("host: example.com\r\n", "example.com", marker)
        assert is_trace_reflected("echo from EXAMPLE.com", "example.com", marker)
        assert is_trace_reflected(f"x-siteprobe-trace: {marker}", "example.com", marker)
        assert not is_trace_reflected("<html>Method Not Allowed</html>", "example.com", marker)
        assert not is_trace_reflected("", "example.com", marker)

    @respx.mock
    async def test_hostname_echo_counts_as_reflection(self, make_bag, settings):
        respx.options("https://example.com/").mock(
            return_value=Response(200, headers={"Allow": "GET, TRACE"})
        )
        respx.route(method="TRACE", url="https://example.com/").mock(
            return_value=Response(200, text="echo from example.com")
        )
        bag = make_bag()
        async with HTTPClient() as client:
            result = await enumerate_methods(client, bag, settings)

        assert [(f.severity, f.title) for f in result.findings] == [
            (Severity.HIGH, "Dangerous HTTP methods enabled")
        ]
        assert "XST" in result.findings[0].detail
        assert bag.trace_reflected

    @respx.mock
    async def test_dangerous_methods_without_trace(self, make_bag, settings):
        respx.options("https://example.com/").mock(
            return_value=Response(200, headers={"Allow": "GET, PUT, DELETE"})
        )
        respx.route(method="TRACE", url="https://example.com/").mock(return_value=Response(405))
        bag = make_bag()
        async with HTTPClient() as client:
            result = await enumerate_methods(client, bag, settings)

        assert _titles(result) == ["Dangerous HTTP methods enabled"]
        assert "DELETE, PUT" in result.findings[0].detail
        assert "XST" not in result.findings[0].detail
        assert bag.dangerous_http_methods == {"PUT", "DELETE"}

    @respx.mock
    async def test_reflected_trace_mentions_xst(self, make_bag, settings):
        respx.options("https://example.com/").mock(
            return_value=Response(200, headers={"Allow": "GET, HEAD, TRACE"})
        )
        respx.route(method="TRACE", url="https://example.com/").mock(
            return_value=Response(200, text="TRACE / HTTP/1.1\r\nHost: example.com\r\n")
        )
        bag = make_bag()
        async with HTTPClient() as client:
            result = await enumerate_methods(client, bag, settings)

        high = [f for f in result.findings if f.severity is Severity.HIGH]
        assert len(high) == 1
        assert "TRACE" in high[0].detail
        assert "Cross-Site Tracing (XST)" in high[0].detail
        assert bag.trace_reflected

    @respx.mock
    async def test_advertised_trace_that_is_not_echoed(self, make_bag, settings):
        respx.options("https://example.com/").mock(
            return_value=Response(200, headers={"Allow": "GET, TRACE"})
        )
        respx.route(method="TRACE", url="https://example.com/").mock(return_value=Response(405))
        bag = make_bag()
        async with HTTPClient() as client:
            result = await enumerate_methods(client, bag, settings)

        assert _titles(result) == ["TRACE advertised but not reflected"]
        assert result.findings[0].severity is Severity.INFO

    @respx.mock
    async def test_method_errors_stay_local(self, make_bag, settings):
        respx.options("https://example.com/").mock(side_effect=httpx.ConnectError("refused"))
        respx.route(method="TRACE", url="https://example.com/").mock(
            side_effect=httpx.ReadTimeout("slow")
        )
        async with HTTPClient() as client:
            result = await enumerate_methods(client, make_bag(), settings)

        assert result.ok
        assert result.findings == []


class TestCors:
    def test_classify_cors(self):
        assert classify_cors(None, True) is None
        assert classify_cors("https://example.com", False) is None
        assert classify_cors("*", True).severity is Severity.CRITICAL
        assert classify_cors("*", False).severity is Severity.LOW
        assert classify_cors(PROBE_ORIGIN, False).severity is Severity.HIGH

    @respx.mock
    async def test_reflected_origin(self, make_bag, settings):
        def handler(request: Request) -> Response:
            return Response(
                200,
                headers={
                    "Access-Control-Allow-Origin": request.headers["origin"],
                    "Access-Control-Allow-Credentials": "true",
                },
            )

        respx.get("https://example.com/").mock(side_effect=handler)
        bag = make_bag()
        async with HTTPClient() as client:
            result = await probe_cors(client, bag, settings)

        assert _titles(result) == ["Arbitrary origin reflected"]
        assert bag.cors_allow_credentials is True
        assert "credentials" in result.findings[0].detail


class TestHttpsRedirect:
    @respx.mock
    async def test_redirects_to_https(self, make_bag, settings):
        route = respx.head("http://example.com/").mock(
            return_value=Response(301, headers={"Location": "https://example.com/"})
        )
        bag = make_bag()
        async with HTTPClient() as client:
            result = await probe_https_redirect(client, bag, settings)

        assert route.called
        assert _titles(result) == ["HTTP redirects to HTTPS"]
        assert bag.http_downgrade == "redirects"

    @respx.mock
    async def test_plain_http_is_high(self, make_bag, settings):
        respx.head("http://example.com/").mock(return_value=Response(200))
        bag = make_bag()
        async with HTTPClient() as client:
            result = await probe_https_redirect(client, bag, settings)

        assert result.findings[0].severity is Severity.HIGH
        assert bag.http_downgrade == "plain_http"

    async def test_http_target_is_skipped(self, make_bag, settings):
        http_target = Target(
            url="http://example.com/",
            scheme="http",
            hostname="example.com",
            origin="http://example.com",
        )
        with respx.mock(assert_all_called=False) as router:
            async with HTTPClient() as client:
                result = await probe_https_redirect(client, make_bag(target=http_target), settings)

        assert result.findings == []
        assert router.calls.call_count == 0


class TestRateLimit:
    @respx.mock
    async def test_no_throttling(self, make_bag, settings):
        respx.head("https://example.com/").mock(return_value=Response(200))
        bag = make_bag()
        async with HTTPClient() as client:
            result = await probe_rate_limit(client, bag, settings)

        assert _titles(result) == ["No rate limiting detected"]
        assert bag.rate_limit_statuses == [200] * settings.rate_limit_burst

    @respx.mock
    async def test_throttled(self, make_bag):
        settings = ScanSettings(rate_limit_burst=4)
        respx.head("https://example.com/").mock(
            side_effect=[Response(200), Response(200), Response(200), Response(429)]
        )
        async with HTTPClient() as client:
            result = await probe_rate_limit(client, make_bag(), settings)

        assert result.findings == []

    @respx.mock
    async def test_every_request_failing_is_a_probe_error(self, make_bag, settings):
        respx.head("https://example.com/").mock(side_effect=httpx.ConnectError("refused"))
        async with HTTPClient() as client:
            result = await probe_rate_limit(client, make_bag(), settings)

        assert result.error.kind == "network"


class TestOpenRedirect:
    @respx.mock
    async def test_first_vulnerable_parameter(self, make_bag, settings):
        def handler(request: Request) -> Response:
            destination = request.url.params.get("next")
            if destination:
                return Response(302, headers={"Location": destination})
            return Response(200)

        respx.route(host="example.com").mock(side_effect=handler)
        async with HTTPClient() as client:
            result = await probe_open_redirect(client, make_bag(), settings)

        assert _titles(result) == ["Open redirect"]
        assert "?next=" in result.findings[0].detail
        assert result.findings[0].severity is Severity.HIGH

    @respx.mock
    async def test_safe_target(self, make_bag, settings):
        respx.route(host="example.com").mock(return_value=Response(200))
        async with HTTPClient() as client:
            result = await probe_open_redirect(client, make_bag(), settings)

        assert result.ok
        assert result.findings == []


class TestDnsRecords:
    async def test_cloudflare_nameservers_without_proxy(self, make_bag, settings):
        with (
            patch(
                f"{DNS_PROBE}.lookup_ns",
                AsyncMock(return_value=["ada.ns.cloudflare.com", "bob.ns.cloudflare.com"]),
            ),
            patch(f"{DNS_PROBE}.lookup_txt", AsyncMock(return_value=[])),
        ):
            bag = make_bag(baseline_ok=True)
            result = await probe_dns_records(None, bag, settings)

        by_title = {f.title: f for f in result.findings}
        assert by_title["Cloudflare DNS without proxy"].severity is Severity.HIGH
        assert by_title["No DMARC record"].severity is Severity.LOW
        assert by_title["No SPF record"].severity is Severity.LOW
        assert bag.has_dmarc is False and bag.has_spf is False

    async def test_proxied_cloudflare_is_fine(self, make_bag, settings, dns_records):
        ns_mock, _ = dns_records
        ns_mock.return_value = ["ada.ns.cloudflare.com"]
        bag = make_bag(baseline_ok=True, detected_cdn_providers=["Cloudflare"])
        result = await probe_dns_records(None, bag, settings)

        assert result.findings == []
        assert bag.has_dmarc and bag.has_spf

    async def test_www_host_uses_mail_domain(self, make_bag, settings, dns_records):
        _, txt_mock = dns_records
        www = Target(
            url="https://www.example.com/",
            scheme="https",
            hostname="www.example.com",
            origin="https://www.example.com",
        )
        await probe_dns_records(None, make_bag(target=www), settings)

        looked_up = sorted(call.args[0] for call in txt_mock.await_args_list)
        assert looked_up == ["_dmarc.example.com", "example.com"]

    async def test_ip_target_is_skipped(self, make_bag, settings, dns_records):
        ns_mock, txt_mock = dns_records
        ip_target = Target(
            url="http://93.184.216.34/",
            scheme="http",
            hostname="93.184.216.34",
            origin="http://93.184.216.34",
        )
        result = await probe_dns_records(None, make_bag(target=ip_target), settings)

        assert result.findings == []
        ns_mock.assert_not_awaited()
        txt_mock.assert_not_awaited()

    async def test_partial_failure_keeps_other_lookups(self, make_bag, settings):
        with (
            patch(f"{DNS_PROBE}.lookup_ns", AsyncMock(side_effect=dns.exception.Timeout())),
            patch(f"{DNS_PROBE}.lookup_txt", AsyncMock(return_value=["v=spf1 -all"])),
        ):
            bag = make_bag(baseline_ok=True)
            result = await probe_dns_records(None, bag, settings)

        assert result.ok
        assert [f.title for f in result.findings] == ["No DMARC record"]

    async def test_total_failure_is_a_probe_error(self, make_bag, settings):
        with (
            patch(f"{DNS_PROBE}.lookup_ns", AsyncMock(side_effect=dns.exception.Timeout())),
            patch(f"{DNS_PROBE}.lookup_txt", AsyncMock(side_effect=dns.exception.Timeout())),
        ):
            result = await probe_dns_records(None, make_bag(), settings)

        assert result.error.kind == "timeout"


class TestSessionTransport:
    async def test_session_cookies_behind_login(self, make_bag, settings):
        bag = make_bag(accessible_login_paths=["/login"], set_cookies=["sid=1; HttpOnly"])
        result = await check_session_transport(None, bag, settings)
        assert _titles(result) == [
            "Session cookies without HSTS",
            "Session cookies without Secure flag",
        ]
        assert all(f.severity is Severity.HIGH for f in result.findings)
        assert "sid" in result.findings[1].detail

    async def test_hardened_session(self, make_bag, settings):
        bag = make_bag(
            accessible_login_paths=["/login"],
            headers={"strict-transport-security": "max-age=31536000"},
            auth_set_cookies=["sid=1; Secure; HttpOnly"],
        )
        result = await check_session_transport(None, bag, settings)
        assert result.findings == []

    async def test_no_auth_surface(self, make_bag, settings):
        result = await check_session_transport(None, make_bag(set_cookies=["sid=1"]), settings)
        assert result.findings == []
