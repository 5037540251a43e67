"""Declarative detection rules evaluated against a signal bag."""

import re
from collections.abc import Iterable
from dataclasses import dataclass

from .models import Finding, Severity
from .signals import SignalBag

_SNIPPET_LIMIT = 120


@dataclass(frozen=True)
class DetectionRule:
    """One ``signal -> pattern -> finding template`` entry.

    ``detail`` may reference ``{match}`` (the matched text) and ``{value}``
    (the whole signal value), both truncated.
    """

    signal: str
    pattern: re.Pattern[str]
    severity: Severity
    category: str
    title: str
    detail: str

    def evaluate(self, bag: SignalBag) -> Finding | None:
        value = bag.lookup(self.signal)
        if not value:
            return None
        match = self.pattern.search(value)
        if not match:
            return None
        return Finding(
            severity=self.severity,
            category=self.category,
            title=self.title,
            detail=self.detail.format(
                match=_snippet(match.group(0)),
                value=_snippet(value),
            ),
        )


def rule(
    signal: str,
    pattern: str,
    severity: Severity,
    category: str,
    title: str,
    detail: str,
    flags: int = re.IGNORECASE,
) -> DetectionRule:
    return DetectionRule(signal, re.compile(pattern, flags), severity, category, title, detail)


def evaluate_rules(rules: Iterable[DetectionRule], bag: SignalBag) -> list[Finding]:
    """Evaluate rules in table order; each independent match is one finding."""
    findings: list[Finding] = []
    for entry in rules:
        finding = entry.evaluate(bag)
        if finding is not None:
            findings.append(finding)
    return findings


def _snippet(text: str) -> str:
    text = " ".join(text.split())
    if len(text) > _SNIPPET_LIMIT:
        return f"{text[:_SNIPPET_LIMIT]}..."
    return text
