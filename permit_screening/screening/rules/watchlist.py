"""Watchlist rule.

Looks up the first effectively active watchlist entry for the applicant's
national id. The score contribution is keyed on the entry's severity
(LOW 15, MEDIUM 30, HIGH 50, CRITICAL 80 by default). The entry's own
severity never becomes the verdict severity; that is recomputed from the
total score by the scorer.

The applicant's full name is compared to the entry's name with thefuzz
and reported as an informational similarity, so reviewers can spot an
id collision or a typo in the watchlist row. It does not affect the score.
"""

import re
from datetime import datetime
from typing import Optional

from thefuzz import fuzz

from permit_screening.models import DetectorOutcome, Severity, Signal
from permit_screening.storage.base import RecordStore


def _normalize_name(name: str) -> str:
    """Lowercase, strip, and collapse multiple spaces."""
    return re.sub(r"\s+", " ", name.strip().lower())


def name_similarity(a: str, b: str) -> int:
    """Higher of character-level and token-sorted similarity, 0-100."""
    a, b = _normalize_name(a), _normalize_name(b)
    return max(fuzz.ratio(a, b), fuzz.token_sort_ratio(a, b))


def check_watchlist_match(
    national_id: str,
    full_name: str,
    store: RecordStore,
    now: datetime,
    weights: dict[Severity, int],
) -> list[DetectorOutcome]:
    """Fire WATCHLIST_MATCH for an effectively active entry."""
    entry = store.find_active_watchlist_entry(national_id, now=now)

    # Adapters are expected to filter expired rows; re-check anyway
    if entry is None or not entry.is_effectively_active(now):
        return []

    similarity: Optional[int] = None
    if full_name and full_name.strip():
        similarity = name_similarity(full_name, entry.full_name)

    return [
        DetectorOutcome(
            signal=Signal.WATCHLIST_MATCH,
            flag=f"WATCHLIST: {entry.flag_type} - {entry.reason}",
            weight=weights[entry.severity],
            details={
                "watchlist_match": True,
                "watchlist_severity": entry.severity,
                "watchlist_name_similarity": similarity,
            },
        )
    ]
