"""Watchlist management API.

Add, update, soft-remove and query watchlist entries. Used by admin tooling and
by the watchlist detector's callers. Entries are never hard-deleted:
removal flips is_active off so the audit history is preserved. Adding
does not deduplicate; several active entries for one id are allowed and
the first effectively active one wins during screening.
"""

import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from permit_screening.errors import EntryNotFound
from permit_screening.log import get_logger
from permit_screening.models import (
    ScreeningConfig,
    Severity,
    WatchlistEntry,
    WatchlistStats,
    as_utc,
)
from permit_screening.screening.rules.watchlist import name_similarity
from permit_screening.storage.base import RecordStore
from permit_screening.validators import require_text, validate_national_id

logger = get_logger(__name__)


class WatchlistService:
    """Watchlist operations over a record store."""

    def __init__(self, store: RecordStore, config: ScreeningConfig) -> None:
        self.store = store
        self.config = config

    def _validate_id(self, national_id: str) -> str:
        return validate_national_id(national_id, self.config.national_id_pattern)

    def check_watchlist(
        self, national_id: str, now: Optional[datetime] = None
    ) -> bool:
        """True iff an effectively active entry exists for the id."""
        return self.get_active_entry(national_id, now=now) is not None

    def get_active_entry(
        self, national_id: str, now: Optional[datetime] = None
    ) -> Optional[WatchlistEntry]:
        national_id = self._validate_id(national_id)
        now = now or datetime.now(timezone.utc)
        entry = self.store.find_active_watchlist_entry(national_id, now=now)
        if entry is None or not entry.is_effectively_active(now):
            return None
        return entry

    def add_to_watchlist(
        self,
        national_id: str,
        full_name: str,
        reason: str,
        flag_type: str,
        severity: Severity,
        expires_at: Optional[datetime] = None,
        created_by: Optional[str] = None,
    ) -> WatchlistEntry:
        """Insert a new active entry and return it."""
        entry = WatchlistEntry(
            id=str(uuid.uuid4()),
            national_id=self._validate_id(national_id),
            full_name=require_text(full_name, "full_name"),
            reason=require_text(reason, "reason"),
            flag_type=require_text(flag_type, "flag_type"),
            severity=Severity(severity),
            is_active=True,
            expires_at=expires_at,
            created_by=created_by,
            created_at=datetime.now(timezone.utc),
        )
        self.store.create_watchlist_entry(entry)
        logger.info(
            "watchlist.added",
            national_id=entry.national_id,
            flag_type=entry.flag_type,
            severity=entry.severity.value,
            expires_at=entry.expires_at.isoformat() if entry.expires_at else None,
            created_by=created_by,
        )
        return entry

    def remove_from_watchlist(
        self, national_id: str, flag_type: Optional[str] = None
    ) -> int:
        """Deactivate active entries for the id, optionally one flag type only.

        Returns the number of rows deactivated. Zero is not an error.
        """
        national_id = self._validate_id(national_id)
        if flag_type is not None:
            flag_type = require_text(flag_type, "flag_type")
        count = self.store.deactivate_watchlist_entries(national_id, flag_type)
        logger.info(
            "watchlist.deactivated",
            national_id=national_id,
            flag_type=flag_type,
            count=count,
        )
        return count

    def update_entry(
        self,
        entry_id: str,
        full_name: Optional[str] = None,
        reason: Optional[str] = None,
        flag_type: Optional[str] = None,
        severity: Optional[Severity] = None,
        is_active: Optional[bool] = None,
        expires_at: Optional[datetime] = None,
        clear_expiry: bool = False,
    ) -> WatchlistEntry:
        """Change fields of one entry in place and return the updated entry.

        Arguments left as None are not touched. clear_expiry removes the
        expiry so the entry no longer lapses on its own.
        """
        changes: Dict[str, Any] = {}
        if full_name is not None:
            changes["full_name"] = require_text(full_name, "full_name")
        if reason is not None:
            changes["reason"] = require_text(reason, "reason")
        if flag_type is not None:
            changes["flag_type"] = require_text(flag_type, "flag_type")
        if severity is not None:
            changes["severity"] = Severity(severity)
        if is_active is not None:
            changes["is_active"] = is_active
        if clear_expiry:
            changes["expires_at"] = None
        elif expires_at is not None:
            changes["expires_at"] = as_utc(expires_at)

        entry = self.store.update_watchlist_entry(entry_id, changes)
        if entry is None:
            raise EntryNotFound(f"Watchlist entry {entry_id} not found")
        logger.info(
            "watchlist.updated",
            entry_id=entry_id,
            national_id=entry.national_id,
            fields=sorted(changes),
        )
        return entry

    def list_entries(
        self,
        is_active: Optional[bool] = None,
        flag_type: Optional[str] = None,
        severity: Optional[Severity] = None,
        name: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> List[WatchlistEntry]:
        """List entries newest first with optional filters.

        is_active compares against effective activity, so an expired entry
        counts as inactive. name is a fuzzy match on the entry's full name.
        """
        now = now or datetime.now(timezone.utc)
        results: List[WatchlistEntry] = []
        for entry in self.store.list_watchlist_entries():
            if is_active is not None and entry.is_effectively_active(now) != is_active:
                continue
            if flag_type is not None and entry.flag_type != flag_type:
                continue
            if severity is not None and entry.severity != severity:
                continue
            if name and name_similarity(name, entry.full_name) < self.config.fuzzy_match_threshold:
                continue
            results.append(entry)
        return results

    def stats(self, now: Optional[datetime] = None) -> WatchlistStats:
        """Counts of effectively active entries, by flag type and severity."""
        active = self.list_entries(is_active=True, now=now)
        return WatchlistStats(
            total=len(active),
            by_flag_type=dict(Counter(e.flag_type for e in active)),
            by_severity=dict(Counter(e.severity.value for e in active)),
        )
