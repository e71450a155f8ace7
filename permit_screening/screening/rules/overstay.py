"""Overstay history rule.

Any recorded overstay on a previous permit contributes a fixed weight,
whatever the number of days.
"""

from permit_screening.models import DetectorOutcome, Signal
from permit_screening.storage.base import RecordStore


def check_overstay(
    national_id: str,
    store: RecordStore,
    weight: int = 35,
) -> list[DetectorOutcome]:
    """Fire OVERSTAY_HISTORY for a prior record with overstay_days > 0."""
    record = store.find_overstay_record(national_id)
    if record is None or not record.overstay_days or record.overstay_days <= 0:
        return []

    return [
        DetectorOutcome(
            signal=Signal.OVERSTAY_HISTORY,
            flag=f"OVERSTAY_HISTORY: {record.overstay_days} days overstay",
            weight=weight,
            details={
                "overstay_history": True,
                "overstay_days": record.overstay_days,
            },
        )
    ]
