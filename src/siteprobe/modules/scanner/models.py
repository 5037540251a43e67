"""Data models for targets, findings, probe outcomes and scan results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Severity(str, Enum):
    """Finding severity, ordered from most to least severe."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    INFO = "INFO"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.CRITICAL: 0,
    Severity.HIGH: 1,
    Severity.MEDIUM: 2,
    Severity.LOW: 3,
    Severity.INFO: 4,
}


@dataclass(frozen=True)
class Finding:
    """A severity-tagged observation produced by a probe."""

    severity: Severity
    category: str
    title: str
    detail: str

    def to_dict(self) -> dict[str, str]:
        return {
            "severity": self.severity.value,
            "category": self.category,
            "title": self.title,
            "detail": self.detail,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Finding":
        return cls(
            severity=Severity(data["severity"]),
            category=data["category"],
            title=data["title"],
            detail=data["detail"],
        )


@dataclass(frozen=True)
class Target:
    """A validated scan target."""

    url: str
    scheme: str
    hostname: str
    origin: str
    ip: str | None = None

    @property
    def is_https(self) -> bool:
        return self.scheme == "https"


@dataclass(frozen=True)
class ProbeError:
    """Why a probe could not produce its signal."""

    probe: str
    kind: str  # timeout, network, tls, parse, dns
    message: str


@dataclass
class ProbeResult:
    """Uniform outcome of one probe: findings on success, an error otherwise."""

    probe: str
    findings: list[Finding] = field(default_factory=list)
    error: ProbeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class ScanResult:
    """Immutable outcome of one scan."""

    url: str
    target_ip: str | None
    server: str
    is_scrapable: bool
    ddos_protected: bool
    headers: dict[str, str]
    recommendations: tuple[str, ...]
    findings: tuple[Finding, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "targetIp": self.target_ip,
            "server": self.server,
            "isScrapable": self.is_scrapable,
            "ddosProtected": self.ddos_protected,
            "headers": dict(self.headers),
            "recommendations": list(self.recommendations),
            "findings": [finding.to_dict() for finding in self.findings],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScanResult":
        return cls(
            url=data["url"],
            target_ip=data.get("targetIp"),
            server=data.get("server") or "Unknown",
            is_scrapable=bool(data["isScrapable"]),
            ddos_protected=bool(data["ddosProtected"]),
            headers=dict(data.get("headers") or {}),
            recommendations=tuple(data.get("recommendations") or ()),
            findings=tuple(Finding.from_dict(item) for item in data.get("findings") or ()),
        )
