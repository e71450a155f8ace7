"""Tests for the watchlist detector."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from permit_screening.models import ScreeningConfig, Severity, Signal
from permit_screening.screening.rules.watchlist import (
    _normalize_name,
    check_watchlist_match,
    name_similarity,
)
from tests.conftest import NATIONAL_ID, NOW, make_entry

WEIGHTS = ScreeningConfig().watchlist_weights


def _check(store, full_name="Ahmad Hassan"):
    return check_watchlist_match(NATIONAL_ID, full_name, store, NOW, WEIGHTS)


class TestNormalizeName:
    def test_lowercase_and_collapse(self):
        assert _normalize_name("  AHMAD   HASSAN ") == "ahmad hassan"

    def test_reordered_names_similar(self):
        assert name_similarity("Hassan Ahmad", "Ahmad Hassan") == 100


class TestCheckWatchlistMatch:
    def test_no_entry_no_flag(self, store):
        assert _check(store) == []

    def test_active_entry_fires(self, store):
        store.create_watchlist_entry(make_entry())
        outcomes = _check(store)
        assert len(outcomes) == 1
        assert outcomes[0].signal == Signal.WATCHLIST_MATCH
        assert outcomes[0].flag == "WATCHLIST: SECURITY_CONCERN - Previous fraud attempt"
        assert outcomes[0].details["watchlist_match"] is True

    def test_weights_by_severity(self, store):
        expected = {
            Severity.LOW: 15,
            Severity.MEDIUM: 30,
            Severity.HIGH: 50,
            Severity.CRITICAL: 80,
        }
        for severity, weight in expected.items():
            s = type(store)()
            s.create_watchlist_entry(make_entry(severity=severity))
            assert _check(s)[0].weight == weight, f"Failed for {severity}"

    def test_expired_entry_ignored(self, store):
        store.create_watchlist_entry(make_entry(expires_at=NOW - timedelta(days=1)))
        assert _check(store) == []

    def test_future_expiry_still_active(self, store):
        store.create_watchlist_entry(make_entry(expires_at=NOW + timedelta(days=1)))
        assert len(_check(store)) == 1

    def test_inactive_entry_ignored(self, store):
        store.create_watchlist_entry(make_entry(is_active=False))
        assert _check(store) == []

    def test_first_active_match_wins(self, store):
        store.create_watchlist_entry(make_entry(entry_id="a", is_active=False, severity=Severity.CRITICAL))
        store.create_watchlist_entry(make_entry(entry_id="b", severity=Severity.LOW, reason="first"))
        store.create_watchlist_entry(make_entry(entry_id="c", severity=Severity.HIGH, reason="second"))
        outcomes = _check(store)
        assert outcomes[0].weight == 15
        assert outcomes[0].flag.endswith("first")

    def test_name_similarity_reported(self, store):
        store.create_watchlist_entry(make_entry(full_name="Ahmad Hassan"))
        outcome = _check(store, full_name="Ahmed Hassan")[0]
        assert 80 <= outcome.details["watchlist_name_similarity"] < 100

    def test_blank_name_no_similarity(self, store):
        store.create_watchlist_entry(make_entry())
        assert _check(store, full_name="  ")[0].details["watchlist_name_similarity"] is None


class TestWatchlistWeightsConfig:
    def test_partial_weights_rejected(self):
        with pytest.raises(ValidationError, match="LOW, MEDIUM, CRITICAL"):
            ScreeningConfig(watchlist_weights={Severity.HIGH: 50})

    def test_full_weights_accepted(self, store):
        config = ScreeningConfig(watchlist_weights={"LOW": 5, "MEDIUM": 10, "HIGH": 20, "CRITICAL": 40})
        store.create_watchlist_entry(make_entry(severity=Severity.LOW))
        outcomes = check_watchlist_match(NATIONAL_ID, "Ahmad Hassan", store, NOW, config.watchlist_weights)
        assert outcomes[0].weight == 5
