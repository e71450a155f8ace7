"""Tests for the score aggregation and decision policy."""

import pytest
from pydantic import ValidationError

from permit_screening.models import DetectorOutcome, Severity, Signal
from permit_screening.screening.scorer import (
    aggregate_results,
    clamp_score,
    decide,
    severity_for_score,
)


def _outcome(signal, weight, flag=None, **details):
    return DetectorOutcome(
        signal=signal,
        flag=flag or f"{signal.value.upper()}: test",
        weight=weight,
        details={signal.value: True, **details},
    )


class TestSeverityForScore:
    def test_bands(self):
        assert severity_for_score(0) == Severity.LOW
        assert severity_for_score(29) == Severity.LOW
        assert severity_for_score(30) == Severity.MEDIUM
        assert severity_for_score(49) == Severity.MEDIUM
        assert severity_for_score(50) == Severity.HIGH
        assert severity_for_score(79) == Severity.HIGH
        assert severity_for_score(80) == Severity.CRITICAL
        assert severity_for_score(100) == Severity.CRITICAL


class TestSeverityOrdering:
    def test_total_order(self):
        assert Severity.LOW < Severity.MEDIUM < Severity.HIGH < Severity.CRITICAL

    def test_not_lexical(self):
        # Lexically "CRITICAL" < "HIGH"
        assert Severity.CRITICAL > Severity.HIGH
        assert max([Severity.HIGH, Severity.CRITICAL, Severity.LOW]) == Severity.CRITICAL


class TestClampScore:
    def test_cap_at_100(self):
        assert clamp_score(215) == 100

    def test_floor_at_0(self):
        assert clamp_score(-10) == 0

    def test_in_range_unchanged(self):
        assert clamp_score(42) == 42


class TestDecide:
    def test_low(self):
        assert decide(Severity.LOW) == (True, False, False)

    def test_medium(self):
        assert decide(Severity.MEDIUM) == (True, False, True)

    def test_high(self):
        assert decide(Severity.HIGH) == (False, True, True)

    def test_critical(self):
        assert decide(Severity.CRITICAL) == (False, True, True)


class TestAggregateResults:
    def test_empty_results_clean(self):
        result = aggregate_results([])
        assert result.risk_score == 0
        assert result.severity == Severity.LOW
        assert result.passed is True
        assert result.requires_supervisor_review is False
        assert result.requires_manual_review is False
        assert result.flags == []
        assert result.details.model_dump(exclude_none=True) == {}

    def test_weights_summed(self):
        result = aggregate_results([
            _outcome(Signal.RECENT_REJECTION, 25),
            _outcome(Signal.OVERSTAY_HISTORY, 35),
        ])
        assert result.risk_score == 60
        assert result.severity == Severity.HIGH

    def test_score_capped_at_100(self):
        result = aggregate_results([
            _outcome(Signal.WATCHLIST_MATCH, 80),
            _outcome(Signal.DUPLICATE_APPLICATION, 40),
            _outcome(Signal.OVERSTAY_HISTORY, 35),
        ])
        assert result.risk_score == 100
        assert result.severity == Severity.CRITICAL

    def test_negative_total_floored(self):
        result = aggregate_results([_outcome(Signal.WATCHLIST_MATCH, -20)])
        assert result.risk_score == 0

    def test_flags_keep_order(self):
        result = aggregate_results([
            _outcome(Signal.WATCHLIST_MATCH, 15, flag="a"),
            _outcome(Signal.DUPLICATE_APPLICATION, 40, flag="b"),
            _outcome(Signal.SUSPICIOUS_PATTERN, 30, flag="c"),
        ])
        assert result.flags == ["a", "b", "c"]

    def test_repeated_signal_weight_counted_once(self):
        result = aggregate_results([
            _outcome(Signal.SUSPICIOUS_PATTERN, 30, flag="pending duplicate"),
            _outcome(Signal.SUSPICIOUS_PATTERN, 30, flag="shared phone", shared_phone_identities=4),
        ])
        assert result.risk_score == 30
        assert result.flags == ["pending duplicate", "shared phone"]
        assert result.details.suspicious_pattern is True
        assert result.details.shared_phone_identities == 4

    def test_details_only_for_fired_signals(self):
        result = aggregate_results([_outcome(Signal.OVERSTAY_HISTORY, 35, overstay_days=9)])
        assert result.details.overstay_history is True
        assert result.details.overstay_days == 9
        assert result.details.watchlist_match is None
        assert result.details.duplicate_application is None

    def test_unknown_detail_key_rejected(self):
        with pytest.raises(ValidationError):
            aggregate_results([_outcome(Signal.OVERSTAY_HISTORY, 35, overstay_dayz=9)])
