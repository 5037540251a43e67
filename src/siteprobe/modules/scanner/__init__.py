"""Scanner module for siteprobe - security-posture probing of a single URL."""

from .aggregate import build_result, sort_findings
from .models import Finding, ProbeError, ProbeResult, ScanResult, Severity, Target
from .orchestrator import ProbeOrchestrator, scan_url
from .rules import DetectionRule, evaluate_rules
from .service import ScanService
from .signals import SignalBag
from .target import parse_target, resolve_target
from .verdicts import ddos_protected, derive_recommendations, is_risky, is_scrapable

__all__ = [
    "DetectionRule",
    "Finding",
    "ProbeError",
    "ProbeOrchestrator",
    "ProbeResult",
    "ScanResult",
    "ScanService",
    "Severity",
    "SignalBag",
    "Target",
    "build_result",
    "ddos_protected",
    "derive_recommendations",
    "evaluate_rules",
    "is_risky",
    "is_scrapable",
    "parse_target",
    "resolve_target",
    "scan_url",
    "sort_findings",
]
