"""Shared fixtures for the test suite."""

import pytest
from datetime import datetime, timedelta, timezone
from fastapi.testclient import TestClient

from permit_screening.errors import StoreUnavailable
from permit_screening.main import app
from permit_screening.models import (
    ApplicationRecord,
    ApplicationStatus,
    ScreeningConfig,
    Severity,
    WatchlistEntry,
)
from permit_screening.screening.engine import ScreeningEngine
from permit_screening.storage.memory import MemoryStore
from permit_screening.watchlist import WatchlistService


NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
NATIONAL_ID = "123456789"
PHONE = "+9647501234567"


@pytest.fixture
def config():
    return ScreeningConfig()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def engine(store, config):
    return ScreeningEngine(store=store, config=config)


@pytest.fixture
def watchlist(store, config):
    return WatchlistService(store=store, config=config)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def make_entry(
    national_id=NATIONAL_ID,
    full_name="Ahmad Hassan",
    reason="Previous fraud attempt",
    flag_type="SECURITY_CONCERN",
    severity=Severity.HIGH,
    is_active=True,
    expires_at=None,
    created_at=NOW - timedelta(days=10),
    entry_id="wl-1",
) -> WatchlistEntry:
    return WatchlistEntry(
        id=entry_id,
        national_id=national_id,
        full_name=full_name,
        reason=reason,
        flag_type=flag_type,
        severity=severity,
        is_active=is_active,
        expires_at=expires_at,
        created_at=created_at,
    )


def make_application(
    app_id="app-1",
    national_id=NATIONAL_ID,
    phone=PHONE,
    reference="KRG-2025-000001",
    status=ApplicationStatus.APPROVED,
    created_at=NOW - timedelta(days=3),
    rejection_date=None,
    overstay_days=None,
) -> ApplicationRecord:
    return ApplicationRecord(
        id=app_id,
        national_id=national_id,
        phone_number=phone,
        reference_number=reference,
        status=status,
        created_at=created_at,
        rejection_date=rejection_date,
        overstay_days=overstay_days,
    )


class FailingStore(MemoryStore):
    """Store whose reads fail, to check that errors reach the caller."""

    def __init__(self, error: Exception, fail_on: str = "find_active_watchlist_entry") -> None:
        super().__init__()
        self.error = error
        self.fail_on = fail_on

    def _maybe_fail(self, method: str) -> None:
        if method == self.fail_on:
            raise self.error

    def find_active_watchlist_entry(self, national_id, now=None):
        self._maybe_fail("find_active_watchlist_entry")
        return super().find_active_watchlist_entry(national_id, now=now)

    def find_application_by_national_id(self, national_id, exclude_id=None):
        self._maybe_fail("find_application_by_national_id")
        return super().find_application_by_national_id(national_id, exclude_id=exclude_id)

    def find_latest_rejection(self, national_id):
        self._maybe_fail("find_latest_rejection")
        return super().find_latest_rejection(national_id)

    def find_overstay_record(self, national_id):
        self._maybe_fail("find_overstay_record")
        return super().find_overstay_record(national_id)

    def find_applications_by_shared_phone(self, phone_number):
        self._maybe_fail("find_applications_by_shared_phone")
        return super().find_applications_by_shared_phone(phone_number)

    def deactivate_watchlist_entries(self, national_id, flag_type=None):
        self._maybe_fail("deactivate_watchlist_entries")
        return super().deactivate_watchlist_entries(national_id, flag_type)


@pytest.fixture
def unavailable_error():
    return StoreUnavailable("connection refused")
