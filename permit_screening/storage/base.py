"""Record store contract consumed by the screening engine.

Any adapter (SQL, document store, the in-memory store) implements this
protocol. Adapters signal an unreachable backend by raising
StoreUnavailable; the engine propagates it to the caller untouched.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol

from permit_screening.models import ApplicationRecord, WatchlistEntry


class RecordStore(Protocol):
    def find_active_watchlist_entry(
        self,
        national_id: str,
        now: Optional[datetime] = None,
    ) -> Optional[WatchlistEntry]:
        """First effectively active entry for the id, in insertion order."""
        ...

    def find_application_by_national_id(
        self,
        national_id: str,
        exclude_id: Optional[str] = None,
    ) -> Optional[ApplicationRecord]:
        """Most recent application for the id, skipping exclude_id."""
        ...

    def find_latest_rejection(self, national_id: str) -> Optional[ApplicationRecord]:
        """Most recently rejected application for the id."""
        ...

    def find_overstay_record(self, national_id: str) -> Optional[ApplicationRecord]:
        """Most recent application for the id with a recorded overstay."""
        ...

    def find_applications_by_shared_phone(
        self, phone_number: str
    ) -> List[ApplicationRecord]:
        """All applications registered with the phone number."""
        ...

    def create_watchlist_entry(self, entry: WatchlistEntry) -> None:
        ...

    def deactivate_watchlist_entries(
        self,
        national_id: str,
        flag_type: Optional[str] = None,
    ) -> int:
        """Set is_active=False on active rows; return the number changed."""
        ...

    def update_watchlist_entry(
        self, entry_id: str, changes: Dict[str, Any]
    ) -> Optional[WatchlistEntry]:
        """Apply field changes to one entry; None if the id is unknown."""
        ...

    def list_watchlist_entries(self) -> List[WatchlistEntry]:
        """Every entry, active or not, newest first."""
        ...
