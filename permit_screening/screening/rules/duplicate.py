"""Duplicate application rule.

A second application for the same national identity is a duplicate. The
application currently being screened is excluded so it never flags
itself. When the existing application is still pending (SUBMITTED or
UNDER_REVIEW) the identity has more than one live submission, which is
also reported as a suspicious pattern.
"""

from typing import Optional

from permit_screening.models import DetectorOutcome, Signal
from permit_screening.storage.base import RecordStore


def check_duplicate(
    national_id: str,
    store: RecordStore,
    current_application_id: Optional[str] = None,
    duplicate_weight: int = 40,
    suspicious_weight: int = 30,
) -> list[DetectorOutcome]:
    """Fire DUPLICATE_APPLICATION, plus SUSPICIOUS_PATTERN if it is pending."""
    existing = store.find_application_by_national_id(
        national_id, exclude_id=current_application_id
    )
    if existing is None:
        return []

    outcomes = [
        DetectorOutcome(
            signal=Signal.DUPLICATE_APPLICATION,
            flag=f"DUPLICATE: Application {existing.reference_number} already exists",
            weight=duplicate_weight,
            details={
                "duplicate_application": True,
                "duplicate_reference": existing.reference_number,
            },
        )
    ]

    if existing.status.is_pending:
        outcomes.append(
            DetectorOutcome(
                signal=Signal.SUSPICIOUS_PATTERN,
                flag=(
                    f"SUSPICIOUS: Multiple live applications for the same identity "
                    f"({existing.reference_number} is {existing.status.value})"
                ),
                weight=suspicious_weight,
                details={"suspicious_pattern": True},
            )
        )

    return outcomes
