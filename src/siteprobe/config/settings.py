"""Scan settings resolved from configuration."""

from dataclasses import dataclass, replace
from pathlib import Path

from .getters import get_bool, get_float

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


@dataclass(frozen=True)
class ScanSettings:
    """Per-scan knobs. Timeouts are in seconds."""

    verify_tls: bool = True
    allow_active_auth_probes: bool = False
    user_agent: str = BROWSER_USER_AGENT
    baseline_timeout: float = 10.0
    bot_timeout: float = 5.0
    robots_timeout: float = 3.0
    method_timeout: float = 5.0
    cors_timeout: float = 5.0
    redirect_timeout: float = 5.0
    dns_timeout: float = 5.0
    rate_limit_timeout: float = 2.0
    open_redirect_timeout: float = 5.0
    auth_get_timeout: float = 6.0
    auth_post_timeout: float = 8.0
    rate_limit_burst: int = 10
    max_login_paths: int = 2

    def scaled(self, factor: float) -> "ScanSettings":
        """Return a copy with every timeout multiplied by factor."""
        if factor <= 0 or factor == 1.0:
            return self
        return replace(
            self,
            **{
                name: getattr(self, name) * factor
                for name in self.__dataclass_fields__
                if name.endswith("_timeout")
            },
        )


def load_settings(data_dir: Path | None = None, **overrides) -> ScanSettings:
    """Build ScanSettings from the config layers plus explicit overrides."""
    settings = ScanSettings(
        verify_tls=get_bool("SITEPROBE_VERIFY_TLS", data_dir, default=True),
        allow_active_auth_probes=get_bool("SITEPROBE_ALLOW_ACTIVE_AUTH", data_dir, default=False),
    )
    settings = settings.scaled(get_float("SITEPROBE_TIMEOUT_SCALE", data_dir, default=1.0))
    if overrides:
        settings = replace(settings, **overrides)
    return settings
