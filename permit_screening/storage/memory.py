"""In-memory record store for watchlist entries and applications.

Implements the RecordStore contract with dicts keyed by national id
(and by phone number for shared-phone lookups). Reads and writes go
through one lock; reads copy the rows they need before filtering. All
data lives in memory and is lost on restart, which suits tests and
single-process demos.
"""

import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from permit_screening.models import ApplicationRecord, ApplicationStatus, WatchlistEntry


def _normalize_key(value: str) -> str:
    """Normalize an identifier to a consistent dict key (stripped, uppercase)."""
    return value.strip().upper()


def _normalize_phone(phone_number: str) -> str:
    """Drop spaces and dashes so '+964 750-123' matches '+964750123'."""
    return "".join(ch for ch in phone_number if ch not in " -()")


def _latest(records: List[ApplicationRecord]) -> Optional[ApplicationRecord]:
    if not records:
        return None
    return max(records, key=lambda r: r.created_at)


class MemoryStore:
    """Thread-safe in-memory store for watchlist entries and applications."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        # Watchlist entries indexed by national id, in insertion order
        self._watchlist: Dict[str, List[WatchlistEntry]] = {}
        # Applications indexed by national id and by phone number
        self._applications: Dict[str, List[ApplicationRecord]] = {}
        self._by_phone: Dict[str, List[ApplicationRecord]] = {}

    def _watchlist_rows(self, national_id: str) -> List[WatchlistEntry]:
        with self._lock:
            return list(self._watchlist.get(_normalize_key(national_id), []))

    def _application_rows(self, national_id: str) -> List[ApplicationRecord]:
        with self._lock:
            return list(self._applications.get(_normalize_key(national_id), []))

    # ------------------------------------------------------------------
    # Watchlist
    # ------------------------------------------------------------------

    def create_watchlist_entry(self, entry: WatchlistEntry) -> None:
        """Append an entry. Existing entries for the same id are kept."""
        key = _normalize_key(entry.national_id)
        with self._lock:
            self._watchlist.setdefault(key, []).append(entry)

    def find_active_watchlist_entry(
        self,
        national_id: str,
        now: Optional[datetime] = None,
    ) -> Optional[WatchlistEntry]:
        """Return the first effectively active entry for the id."""
        now = now or datetime.now(timezone.utc)
        for entry in self._watchlist_rows(national_id):
            if entry.is_effectively_active(now):
                return entry
        return None

    def deactivate_watchlist_entries(
        self,
        national_id: str,
        flag_type: Optional[str] = None,
    ) -> int:
        """Flip is_active off for active rows, optionally for one flag type."""
        key = _normalize_key(national_id)
        count = 0
        with self._lock:
            entries = self._watchlist.get(key, [])
            for i, entry in enumerate(entries):
                if not entry.is_active:
                    continue
                if flag_type is not None and entry.flag_type != flag_type:
                    continue
                entries[i] = entry.model_copy(update={"is_active": False})
                count += 1
        return count

    def update_watchlist_entry(
        self, entry_id: str, changes: Dict[str, Any]
    ) -> Optional[WatchlistEntry]:
        """Apply changes to the entry with this id. None if no such entry."""
        with self._lock:
            for entries in self._watchlist.values():
                for i, entry in enumerate(entries):
                    if entry.id == entry_id:
                        entries[i] = entry.model_copy(update=changes)
                        return entries[i]
        return None

    def list_watchlist_entries(self) -> List[WatchlistEntry]:
        """Return every entry, newest first."""
        with self._lock:
            entries = [e for rows in self._watchlist.values() for e in rows]
        return sorted(entries, key=lambda e: e.created_at, reverse=True)

    # ------------------------------------------------------------------
    # Applications
    # ------------------------------------------------------------------

    def add_application(self, record: ApplicationRecord) -> None:
        """Store an application, indexed by national id and phone number."""
        with self._lock:
            self._applications.setdefault(
                _normalize_key(record.national_id), []
            ).append(record)
            self._by_phone.setdefault(
                _normalize_phone(record.phone_number), []
            ).append(record)

    def get_applications(self, national_id: str) -> List[ApplicationRecord]:
        """Return all applications for an id, in insertion order."""
        return self._application_rows(national_id)

    def find_application_by_national_id(
        self,
        national_id: str,
        exclude_id: Optional[str] = None,
    ) -> Optional[ApplicationRecord]:
        """Most recent application for the id other than exclude_id."""
        records = [
            r for r in self._application_rows(national_id)
            if exclude_id is None or r.id != exclude_id
        ]
        return _latest(records)

    def find_latest_rejection(self, national_id: str) -> Optional[ApplicationRecord]:
        """Most recent REJECTED application, ordered by rejection date."""
        records = [
            r for r in self._application_rows(national_id)
            if r.status == ApplicationStatus.REJECTED
        ]
        if not records:
            return None
        return max(records, key=lambda r: r.rejection_date or r.created_at)

    def find_overstay_record(self, national_id: str) -> Optional[ApplicationRecord]:
        """Most recent application with a positive overstay."""
        records = [
            r for r in self._application_rows(national_id)
            if r.overstay_days is not None and r.overstay_days > 0
        ]
        return _latest(records)

    def find_applications_by_shared_phone(
        self, phone_number: str
    ) -> List[ApplicationRecord]:
        """All applications registered with the phone number."""
        with self._lock:
            return list(self._by_phone.get(_normalize_phone(phone_number), []))
