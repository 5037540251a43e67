"""The signal bag: raw observations accumulated during one scan."""

from dataclasses import dataclass, field

from .models import Target


@dataclass
class SignalBag:
    """Everything the probes observed about one target.

    Probes read their inputs from here and write their outputs back, so a
    test can hand any probe a synthetic bag.
    """

    target: Target

    # baseline fetch
    baseline_ok: bool = False
    status_code: int | None = None
    headers: dict[str, str] = field(default_factory=dict)
    set_cookies: list[str] = field(default_factory=list)
    body: str = ""

    # bot fan-out
    bot_agents_tested: list[str] = field(default_factory=list)
    blocked_bots: list[str] = field(default_factory=list)
    passed_bots: list[str] = field(default_factory=list)

    # CDN / WAF
    cdn_header_matches: list[str] = field(default_factory=list)
    cdn_server_matches: list[str] = field(default_factory=list)
    detected_cdn_providers: list[str] = field(default_factory=list)

    # robots.txt
    robots_present: bool | None = None
    robots_restrictive: bool = False

    # HTTP methods
    allowed_methods: set[str] = field(default_factory=set)
    dangerous_http_methods: set[str] = field(default_factory=set)
    trace_reflected: bool = False

    # CORS
    cors_allow_origin: str | None = None
    cors_allow_credentials: bool = False

    # HTTPS redirect: "redirects", "plain_http", "other" or None when not run
    http_downgrade: str | None = None

    # DNS infrastructure
    nameservers: list[str] = field(default_factory=list)
    has_dmarc: bool | None = None
    has_spf: bool | None = None

    # rate limiting
    rate_limit_statuses: list[int] = field(default_factory=list)

    # authentication surface
    login_surface_detected: bool = False
    registration_surface_detected: bool = False
    accessible_login_paths: list[str] = field(default_factory=list)
    accessible_registration_paths: list[str] = field(default_factory=list)
    page_bodies: dict[str, str] = field(default_factory=dict)
    auth_set_cookies: list[str] = field(default_factory=list)

    @property
    def blocked_bot_count(self) -> int:
        return len(self.blocked_bots)

    @property
    def auth_surface_detected(self) -> bool:
        return bool(self.accessible_login_paths or self.accessible_registration_paths)

    def add_provider(self, provider: str) -> None:
        if provider not in self.detected_cdn_providers:
            self.detected_cdn_providers.append(provider)

    def header(self, name: str, default: str = "") -> str:
        return self.headers.get(name.lower(), default)

    def lookup(self, signal: str) -> str | None:
        """Resolve a declarative signal name to text.

        ``body`` is the baseline body, ``header:<name>`` a response header,
        ``cookies`` all ``Set-Cookie`` values joined by newlines. Unknown or
        absent signals resolve to None.
        """
        if signal == "body":
            return self.body or None
        if signal == "cookies":
            return "\n".join(self.set_cookies) or None
        if signal.startswith("header:"):
            return self.headers.get(signal.split(":", 1)[1].lower())
        return None
