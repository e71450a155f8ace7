"""Score aggregation and decision policy.

The verdict is DETERMINISTIC: same store state + same clock = same result.

Aggregation:
  - Outcomes are folded in detector evaluation order; flags keep that order.
  - Each signal's weight counts once. A signal raised by two detectors
    (a pending duplicate and a shared phone are both SUSPICIOUS_PATTERN)
    keeps both flags but adds its weight a single time.
  - The total is clamped to [0, 100].

Severity bands on the clamped score:
    score >= 80 -> CRITICAL
    score >= 50 -> HIGH
    score >= 30 -> MEDIUM
    otherwise   -> LOW

Decision policy, a pure function of severity:
    passed                     = LOW or MEDIUM
    requires_supervisor_review = HIGH or CRITICAL
    requires_manual_review     = anything above LOW
"""

from typing import Any

from permit_screening.models import (
    DetectorOutcome,
    ScreeningDetails,
    ScreeningResult,
    Severity,
    Signal,
)

MIN_SCORE = 0
MAX_SCORE = 100

# Descending priority, first match wins
SEVERITY_BANDS: list[tuple[int, Severity]] = [
    (80, Severity.CRITICAL),
    (50, Severity.HIGH),
    (30, Severity.MEDIUM),
]


def clamp_score(score: int) -> int:
    return max(MIN_SCORE, min(score, MAX_SCORE))


def severity_for_score(score: int) -> Severity:
    """Map a clamped risk score to its severity tier."""
    for threshold, severity in SEVERITY_BANDS:
        if score >= threshold:
            return severity
    return Severity.LOW


def decide(severity: Severity) -> tuple[bool, bool, bool]:
    """Return (passed, requires_supervisor_review, requires_manual_review)."""
    passed = severity <= Severity.MEDIUM
    requires_supervisor_review = severity >= Severity.HIGH
    requires_manual_review = severity != Severity.LOW
    return passed, requires_supervisor_review, requires_manual_review


def aggregate_results(outcomes: list[DetectorOutcome]) -> ScreeningResult:
    """Combine detector outcomes into a single screening verdict.

    Args:
        outcomes: Triggered signals from every detector, in evaluation order.

    Returns:
        ScreeningResult with clamped score, banded severity and decision.
    """
    total_score = 0
    flags: list[str] = []
    details: dict[str, Any] = {}
    seen: set[Signal] = set()

    for outcome in outcomes:
        flags.append(outcome.flag)
        for key, value in outcome.details.items():
            details.setdefault(key, value)
        if outcome.signal not in seen:
            seen.add(outcome.signal)
            total_score += outcome.weight

    risk_score = clamp_score(total_score)
    severity = severity_for_score(risk_score)
    passed, supervisor, manual = decide(severity)

    return ScreeningResult(
        risk_score=risk_score,
        severity=severity,
        passed=passed,
        requires_supervisor_review=supervisor,
        requires_manual_review=manual,
        flags=flags,
        details=ScreeningDetails(**details),
    )
