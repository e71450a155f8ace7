"""Recent rejection rule.

An applicant rejected within the lookback window (30 days by default)
is re-applying before the underlying issue could reasonably be fixed.
"""

from datetime import datetime, timedelta

from permit_screening.models import DetectorOutcome, Signal
from permit_screening.storage.base import RecordStore


def check_recent_rejection(
    national_id: str,
    store: RecordStore,
    now: datetime,
    lookback_days: int = 30,
    weight: int = 25,
) -> list[DetectorOutcome]:
    """Fire RECENT_REJECTION if the latest rejection falls in the window."""
    rejection = store.find_latest_rejection(national_id)
    if rejection is None or rejection.rejection_date is None:
        return []

    window_start = now - timedelta(days=lookback_days)
    if rejection.rejection_date < window_start:
        return []

    days_ago = max((now - rejection.rejection_date).days, 0)
    return [
        DetectorOutcome(
            signal=Signal.RECENT_REJECTION,
            flag=(
                f"RECENT_REJECTION: Application {rejection.reference_number} "
                f"rejected on {rejection.rejection_date:%Y-%m-%d} ({days_ago} days ago)"
            ),
            weight=weight,
            details={"recent_rejection": True},
        )
    ]
