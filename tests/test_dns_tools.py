"""Tests for DNS helpers."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import dns.exception
import dns.resolver
import pytest

from siteprobe.tools.dns import (
    domain_candidates,
    is_ip_address,
    lookup_ns,
    lookup_txt,
    mail_domain,
)


def _resolver(**resolve_kwargs) -> MagicMock:
    resolver = MagicMock()
    resolver.resolve = AsyncMock(**resolve_kwargs)
    return resolver


class TestHostHelpers:
    @pytest.mark.parametrize(
        ("host", "expected"),
        [("93.184.216.34", True), ("::1", True), ("[2001:db8::1]", True), ("example.com", False)],
    )
    def test_is_ip_address(self, host, expected):
        assert is_ip_address(host) is expected

    def test_domain_candidates_walk_up_to_two_labels(self):
        assert domain_candidates("www.shop.example.com.") == [
            "www.shop.example.com",
            "shop.example.com",
            "example.com",
        ]

    def test_domain_candidates_single_label(self):
        assert domain_candidates("localhost") == ["localhost"]

    def test_mail_domain_strips_www(self):
        assert mail_domain("WWW.Example.com") == "example.com"
        assert mail_domain("www.com") == "www.com"
        assert mail_domain("shop.example.com") == "shop.example.com"


class TestLookups:
    async def test_lookup_txt_joins_strings(self):
        answers = [SimpleNamespace(strings=(b"v=spf1 ", b"include:_spf.example.net -all"))]
        with patch(
            "siteprobe.tools.dns.resolver._make_resolver",
            return_value=_resolver(return_value=answers),
        ):
            records = await lookup_txt("example.com")

        assert records == ["v=spf1 include:_spf.example.net -all"]

    @pytest.mark.parametrize("error", [dns.resolver.NXDOMAIN, dns.resolver.NoAnswer])
    async def test_lookup_txt_missing_name_is_empty(self, error):
        with patch(
            "siteprobe.tools.dns.resolver._make_resolver",
            return_value=_resolver(side_effect=error()),
        ):
            assert await lookup_txt("_dmarc.example.com") == []

    async def test_lookup_txt_timeout_propagates(self):
        with patch(
            "siteprobe.tools.dns.resolver._make_resolver",
            return_value=_resolver(side_effect=dns.exception.Timeout()),
        ):
            with pytest.raises(dns.exception.Timeout):
                await lookup_txt("example.com", timeout=0.1)

    async def test_lookup_ns_walks_to_zone_apex(self):
        answers = [
            SimpleNamespace(target="Bob.NS.Cloudflare.com."),
            SimpleNamespace(target="ada.ns.cloudflare.com."),
        ]
        resolver = _resolver(side_effect=[dns.resolver.NoAnswer(), answers])
        with patch("siteprobe.tools.dns.resolver._make_resolver", return_value=resolver):
            nameservers = await lookup_ns("www.example.com")

        assert nameservers == ["ada.ns.cloudflare.com", "bob.ns.cloudflare.com"]
        assert [call.args[0] for call in resolver.resolve.await_args_list] == [
            "www.example.com",
            "example.com",
        ]
