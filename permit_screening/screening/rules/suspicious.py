"""Shared phone number rule.

One phone number registered by several distinct identities points to an
agent or fraud ring filing applications on others' behalf. Fires when
at least `min_identities` (3 by default) distinct national ids have used
the applicant's phone number.
"""

from permit_screening.models import DetectorOutcome, Signal
from permit_screening.storage.base import RecordStore


def check_shared_phone(
    phone_number: str,
    store: RecordStore,
    min_identities: int = 3,
    weight: int = 30,
) -> list[DetectorOutcome]:
    """Fire SUSPICIOUS_PATTERN when a phone is shared across identities."""
    if not phone_number or not phone_number.strip():
        return []

    records = store.find_applications_by_shared_phone(phone_number)
    identities = {r.national_id.strip().upper() for r in records}

    if len(identities) < min_identities:
        return []

    return [
        DetectorOutcome(
            signal=Signal.SUSPICIOUS_PATTERN,
            flag=(
                f"SUSPICIOUS: Phone number {phone_number} shared by "
                f"{len(identities)} different identities"
            ),
            weight=weight,
            details={
                "suspicious_pattern": True,
                "shared_phone_identities": len(identities),
            },
        )
    ]
